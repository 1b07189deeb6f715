from collections.abc import Iterable
from typing import Any, Self
from urllib.parse import quote

import requests

from reviewbot.utils.platform import PlatformApiError

GITEE_API_URL = "https://gitee.com/api/v5"


class GiteeApi:
    """
    Gitee v5 REST client implementing the PlatformClient protocol.

    :param token: personal access token of the bot account
    :param host: API root, defaults to the public gitee instance
    """

    platform = "gitee"
    dry_run = False

    def __init__(
        self,
        token: str,
        host: str | None = None,
        read_timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.host = (host or GITEE_API_URL).rstrip("/")
        self.read_timeout = read_timeout
        self.session = session or requests.Session()
        self.session.params = {"access_token": token}
        self.session.headers.update({
            "Content-Type": "application/json",
        })

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        self.session.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            response = self.session.request(
                method,
                f"{self.host}{path}",
                params=params,
                json=json,
                timeout=self.read_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise PlatformApiError(f"{method} {path}: {e}") from e

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _repo_path(org: str, repo: str) -> str:
        return f"/repos/{quote(org, safe='')}/{quote(repo, safe='')}"

    def _pr_path(self, org: str, repo: str, number: int) -> str:
        return f"{self._repo_path(org, repo)}/pulls/{number}"

    def get_user_permission(self, org: str, repo: str, login: str) -> str:
        data = self._request(
            "GET",
            f"{self._repo_path(org, repo)}/collaborators/{quote(login, safe='')}/permission",
        )
        return data.get("permission", "")

    def get_path_content(self, org: str, repo: str, path: str, ref: str) -> str:
        data = self._request(
            "GET",
            f"{self._repo_path(org, repo)}/contents/{quote(path.lstrip('/'))}",
            params={"ref": ref},
        )
        if not isinstance(data, dict):
            raise PlatformApiError(f"{path} of ref {ref} is not a file")
        return data.get("content") or ""

    def get_pull_request_changes(self, org: str, repo: str, number: int) -> list[str]:
        files = self._request("GET", f"{self._pr_path(org, repo, number)}/files")
        return [f["filename"] for f in files or []]

    def get_repo_labels(self, org: str, repo: str) -> list[str]:
        labels = self._request("GET", f"{self._repo_path(org, repo)}/labels")
        return [label["name"] for label in labels or []]

    def create_repo_label(
        self, org: str, repo: str, label: str, color: str = ""
    ) -> None:
        self._request(
            "POST",
            f"{self._repo_path(org, repo)}/labels",
            json={"name": label, "color": color or "0052cc"},
        )

    def add_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.add_pr_labels(org, repo, number, [label])

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        self._request(
            "POST", f"{self._pr_path(org, repo, number)}/labels", json=list(labels)
        )

    def remove_pr_label(self, org: str, repo: str, number: int, label: str) -> None:
        self.remove_pr_labels(org, repo, number, [label])

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None:
        names = ",".join(quote(label, safe="") for label in labels)
        if not names:
            return
        self._request("DELETE", f"{self._pr_path(org, repo, number)}/labels/{names}")

    def create_pr_comment(
        self, org: str, repo: str, number: int, comment: str
    ) -> None:
        self._request(
            "POST",
            f"{self._pr_path(org, repo, number)}/comments",
            json={"body": comment},
        )

    def update_pull_request(
        self,
        org: str,
        repo: str,
        number: int,
        assignees_number: int | None = None,
        testers_number: int | None = None,
    ) -> None:
        data = {}
        if assignees_number is not None:
            data["assignees_number"] = assignees_number
        if testers_number is not None:
            data["testers_number"] = testers_number
        self._request("PATCH", self._pr_path(org, repo, number), json=data)

    def merge_pull_request(
        self, org: str, repo: str, number: int, merge_method: str
    ) -> None:
        self._request(
            "PUT",
            f"{self._pr_path(org, repo, number)}/merge",
            json={"merge_method": merge_method},
        )
