import base64
import logging
from collections.abc import (
    Iterable,
    Mapping,
)
from typing import (
    Any,
    Protocol,
)


class PlatformApiError(Exception):
    pass


class UnsupportedPlatformError(Exception):
    pass


def decode_content(content: str) -> bytes:
    """
    Decodes the base64 file content returned by a platform. Platforms wrap
    it in newlines; any other character outside the alphabet raises
    binascii.Error.
    """
    return base64.b64decode("".join(content.split()), validate=True)


class PlatformClient(Protocol):
    """
    The operations the bot needs from a code hosting platform. Every
    method is a blocking call that raises on failure; nothing is retried.
    """

    platform: str
    dry_run: bool

    def get_user_permission(self, org: str, repo: str, login: str) -> str: ...

    def get_path_content(self, org: str, repo: str, path: str, ref: str) -> str:
        """Returns the base64 encoded content of the file."""
        ...

    def get_pull_request_changes(
        self, org: str, repo: str, number: int
    ) -> list[str]: ...

    def get_repo_labels(self, org: str, repo: str) -> list[str]: ...

    def create_repo_label(
        self, org: str, repo: str, label: str, color: str = ""
    ) -> None: ...

    def add_pr_label(self, org: str, repo: str, number: int, label: str) -> None: ...

    def add_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None: ...

    def remove_pr_label(
        self, org: str, repo: str, number: int, label: str
    ) -> None: ...

    def remove_pr_labels(
        self, org: str, repo: str, number: int, labels: Iterable[str]
    ) -> None: ...

    def create_pr_comment(
        self, org: str, repo: str, number: int, comment: str
    ) -> None: ...

    def update_pull_request(
        self,
        org: str,
        repo: str,
        number: int,
        assignees_number: int | None = None,
        testers_number: int | None = None,
    ) -> None: ...

    def merge_pull_request(
        self, org: str, repo: str, number: int, merge_method: str
    ) -> None: ...


class DryRunPlatformClient:
    """
    Passes reads through to the wrapped client and only logs writes.
    """

    PASS_THROUGH = {
        "cleanup",
        "get_user_permission",
        "get_path_content",
        "get_pull_request_changes",
        "get_repo_labels",
    }

    def __init__(self, client: PlatformClient):
        self._client = client
        self.platform = client.platform
        self.dry_run = True

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._client, name)
        if name in self.PASS_THROUGH or not callable(attr):
            return attr

        def log_only(*args: Any, **kwargs: Any) -> None:
            logging.info([name, *args, *kwargs.values()])

        return log_only


def init_platform_client(settings: Mapping[str, Any]) -> PlatformClient:
    # adapters pull in their SDKs, import only the one that is used
    name = settings.get("name", "gitee")
    url = settings.get("url")
    token = settings["token"]

    if name == "gitee":
        from reviewbot.utils.gitee_api import GiteeApi  # noqa: PLC0415

        return GiteeApi(token=token, host=url)
    if name == "github":
        from reviewbot.utils.github_api import GithubApi  # noqa: PLC0415

        return GithubApi(token=token, base_url=url)
    if name == "gitlab":
        from reviewbot.utils.gitlab_api import GitLabApi  # noqa: PLC0415

        return GitLabApi(url=url, token=token)
    raise UnsupportedPlatformError(f"invalid platform: {name}")
