from typing import Any, Self
from urllib.parse import quote

import requests
from pydantic import BaseModel


class RepoFileCacheError(Exception):
    pass


class Branch(BaseModel, frozen=True):
    platform: str
    org: str
    repo: str
    branch: str


class CachedFile(BaseModel, frozen=True):
    path: str
    sha: str = ""
    content: str = ""


class FilesInfo(BaseModel, frozen=True):
    files: list[CachedFile] = []


class RepoFileCacheApi:
    """
    Client of the service caching, per branch, every file with a given
    name in a repository. Content is base64 encoded.
    """

    def __init__(
        self,
        endpoint: str,
        read_timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.read_timeout = read_timeout
        self.session = session or requests.Session()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        self.session.close()

    def get_files(
        self, branch: Branch, file_name: str, summary: bool = False
    ) -> list[CachedFile]:
        parts = (branch.platform, branch.org, branch.repo, branch.branch, file_name)
        url = "/".join([self.endpoint, "v1", "file", *(quote(p, safe="") for p in parts)])
        try:
            response = self.session.get(
                url,
                params={"summary": str(summary).lower()},
                timeout=self.read_timeout,
            )
            response.raise_for_status()
            return FilesInfo.model_validate(response.json()["data"]).files
        except requests.RequestException as e:
            raise RepoFileCacheError(f"get {file_name} files of {branch}: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            # pydantic ValidationError is a ValueError too
            raise RepoFileCacheError(f"invalid response from {url}: {e}") from e
