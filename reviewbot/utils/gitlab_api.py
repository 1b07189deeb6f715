import logging
from collections.abc import Iterable
from typing import (
    Any,
    Self,
    cast,
)

from gitlab import (
    Gitlab,
    GitlabGetError,
)
from gitlab.const import (
    DEVELOPER_ACCESS,
    MAINTAINER_ACCESS,
)
from gitlab.v4.objects import (
    Project,
    ProjectMergeRequest,
    User,
)

from reviewbot.utils.platform import PlatformApiError

MAX_PER_PAGE = 100

DEFAULT_LABEL_COLOR = "#ededed"


class GitLabApi:
    """
    GitLab client implementing the PlatformClient protocol. The org is
    the project namespace and the pull request number the merge request iid.
    """

    platform = "gitlab"
    dry_run = False

    def __init__(
        self,
        url: str,
        token: str,
        ssl_verify: bool = True,
        timeout: float = 30,
        gl: Gitlab | None = None,
    ):
        self.gl = gl or Gitlab(
            url,
            private_token=token,
            ssl_verify=ssl_verify,
            timeout=timeout,
            per_page=MAX_PER_PAGE,
        )
        self._projects: dict[str, Project] = {}

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        self.gl.session.close()

    def _project(self, org: str, repo: str) -> Project:
        name_with_namespace = f"{org}/{repo}"
        if name_with_namespace not in self._projects:
            self._projects[name_with_namespace] = self.gl.projects.get(
                name_with_namespace
            )
        return self._projects[name_with_namespace]

    def _merge_request(self, org: str, repo: str, number: int) -> ProjectMergeRequest:
        return self._project(org, repo).mergerequests.get(number)

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        users = cast(list[User], self.gl.users.list(username=login, get_all=False))
        if not users:
            return "none"
        try:
            member = self._project(org, repo).members_all.get(users[0].id)
        except GitlabGetError as e:
            if e.response_code == 404:
                return "none"
            raise
        if member.access_level >= MAINTAINER_ACCESS:
            return "admin"
        if member.access_level >= DEVELOPER_ACCESS:
            return "write"
        return "read"

    def get_path_content(self, org: str, repo: str, path: str, ref: str) -> str:
        f = self._project(org, repo).files.get(file_path=path.lstrip("/"), ref=ref)
        if f.encoding != "base64":
            raise PlatformApiError(f"unexpected encoding {f.encoding} of {path}")
        return f.content

    def get_pull_request_changes(self, org: str, repo: str, number: int) -> list[str]:
        result = self._merge_request(org, repo, number).changes()
        changes = cast(dict, result)["changes"]
        changed_paths = set()
        for change in changes:
            changed_paths.add(change["old_path"])
            changed_paths.add(change["new_path"])
        return sorted(changed_paths)

    def get_repo_labels(self, org: str, repo: str) -> list[str]:
        return [
            label.name
            for label in self._project(org, repo).labels.list(iterator=True)
        ]

    def create_repo_label(
        self, org: str, repo: str, label: str, color: str = ""
    ) -> None:
        self._project(org, repo).labels.create({
            "name": label,
            "color": color or DEFAULT_LABEL_COLOR,
        })

    def add_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.add_pr_labels(org, repo, number, [label])

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        # labels are read right before saving
        mr = self._merge_request(org, repo, number)
        new_labels = set(labels) - set(mr.labels)
        if not new_labels:
            return
        mr.labels.extend(sorted(new_labels))
        mr.save()

    def remove_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.remove_pr_labels(org, repo, number, [label])

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        mr = self._merge_request(org, repo, number)
        current_labels = set(mr.labels)
        to_be_removed = set(labels) & current_labels
        if not to_be_removed:
            return
        mr.labels = sorted(current_labels - to_be_removed)
        mr.save()

    def create_pr_comment(
        self, org: str, repo: str, number: int, comment: str
    ) -> None:
        self._merge_request(org, repo, number).notes.create({"body": comment})

    def update_pull_request(
        self,
        org: str,
        repo: str,
        number: int,
        assignees_number: int | None = None,
        testers_number: int | None = None,
    ) -> None:
        """
        GitLab merges are not gated by reviewer or tester counts.
        """
        logging.debug(["nothing to update", org, repo, number])

    def merge_pull_request(
        self, org: str, repo: str, number: int, merge_method: str
    ) -> None:
        self._merge_request(org, repo, number).merge(
            squash=merge_method == "squash"
        )
