import logging
import os
from collections.abc import Iterable
from types import TracebackType

from github import (
    Github,
    UnknownObjectException,
)
from github.PullRequest import PullRequest
from github.Repository import Repository

from reviewbot.utils.platform import PlatformApiError

GH_BASE_URL = os.environ.get("GITHUB_API", "https://api.github.com")

MAX_FILE_CONTENT_SIZE = 1024**2  # 1MB

DEFAULT_LABEL_COLOR = "ededed"


class GithubApi:
    """
    Github client implementing the PlatformClient protocol.

    :param token: auth token for Github
    :param base_url: API root, GITHUB_API or api.github.com by default
    :type token: str
    :type base_url: str
    """

    platform = "github"
    dry_run = False

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: int = 30,
        github: Github | None = None,
    ):
        self._gh = github or Github(
            token, base_url=base_url or GH_BASE_URL, timeout=timeout
        )
        self._repos: dict[str, Repository] = {}

    def __enter__(self) -> "GithubApi":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        self._gh.close()

    def _repo(self, org: str, repo: str) -> Repository:
        full_name = f"{org}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self._gh.get_repo(full_name)
        return self._repos[full_name]

    def _pull(self, org: str, repo: str, number: int) -> PullRequest:
        return self._repo(org, repo).get_pull(number)

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        return self._repo(org, repo).get_collaborator_permission(login)

    def get_path_content(self, org: str, repo: str, path: str, ref: str) -> str:
        repository = self._repo(org, repo)
        content = repository.get_contents(path=path, ref=ref)
        if isinstance(content, list):
            raise PlatformApiError(
                f"Path {path} of ref {ref} in repo {repository.full_name} is a directory!"
            )
        if content.size < MAX_FILE_CONTENT_SIZE:
            return content.content
        # the contents API leaves large files empty, read them as blobs
        blob = repository.get_git_blob(content.sha)
        return blob.content

    def get_pull_request_changes(self, org: str, repo: str, number: int) -> list[str]:
        return [f.filename for f in self._pull(org, repo, number).get_files()]

    def get_repo_labels(self, org: str, repo: str) -> list[str]:
        return [label.name for label in self._repo(org, repo).get_labels()]

    def create_repo_label(
        self, org: str, repo: str, label: str, color: str = ""
    ) -> None:
        self._repo(org, repo).create_label(name=label, color=color or DEFAULT_LABEL_COLOR)

    def add_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.add_pr_labels(org, repo, number, [label])

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        self._pull(org, repo, number).add_to_labels(*labels)

    def remove_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.remove_pr_labels(org, repo, number, [label])

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        pull = self._pull(org, repo, number)
        for label in labels:
            try:
                pull.remove_from_labels(label)
            except UnknownObjectException:
                logging.debug(["label not on pull request", pull.html_url, label])

    def create_pr_comment(
        self, org: str, repo: str, number: int, comment: str
    ) -> None:
        self._pull(org, repo, number).create_issue_comment(comment)

    def update_pull_request(
        self,
        org: str,
        repo: str,
        number: int,
        assignees_number: int | None = None,
        testers_number: int | None = None,
    ) -> None:
        """
        Github has no reviewer or tester counts that gate merges.
        """
        logging.debug(["nothing to update", org, repo, number])

    def merge_pull_request(
        self, org: str, repo: str, number: int, merge_method: str
    ) -> None:
        self._pull(org, repo, number).merge(merge_method=merge_method)
