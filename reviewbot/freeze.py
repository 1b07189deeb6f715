import logging
from collections.abc import Iterable
from typing import Any

from pydantic import (
    BaseModel,
    field_validator,
)

from reviewbot.config import FreezeFile
from reviewbot.utils.platform import (
    PlatformClient,
    decode_content,
)
from reviewbot.utils.ruamel import safe_load

MSG_FROZEN_WITH_OWNER = (
    "The target branch of PR has been frozen and it can be merge only by "
    "branch owners: {owners}"
)


class FreezeResolutionError(Exception):
    pass


class FreezeItem(BaseModel, frozen=True):
    branch: str
    community: list[str] = []
    frozen: bool = False
    owner: list[str] = []

    @field_validator("community", "owner", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        # `owner:` without a value loads as None
        return v or []

    def has_org(self, org: str) -> bool:
        return org in self.community

    def is_owner(self, login: str) -> bool:
        return login.lower() in {o.lower() for o in self.owner}

    def check_owner(self, login: str | None) -> str | None:
        """
        Returns the reason why `login` may not merge into the branch, None
        when it may. Without a login only an unfrozen branch is mergeable.
        """
        if not self.frozen:
            return None
        if login and self.is_owner(login):
            return None
        return MSG_FROZEN_WITH_OWNER.format(owners=", ".join(self.owner))


class FreezeContent(BaseModel, frozen=True):
    release: list[FreezeItem] = []

    def get_freeze_item(self, org: str, branch: str) -> FreezeItem | None:
        return next(
            (i for i in self.release if i.branch == branch and i.has_org(org)),
            None,
        )


def get_freeze_content(cli: PlatformClient, freeze_file: FreezeFile) -> FreezeContent:
    content = cli.get_path_content(
        freeze_file.owner, freeze_file.repo, freeze_file.path, freeze_file.branch
    )
    data = safe_load(decode_content(content))
    return FreezeContent.model_validate(data or {})


def resolve_freeze_item(
    cli: PlatformClient,
    org: str,
    branch: str,
    freeze_files: Iterable[FreezeFile],
) -> FreezeItem | None:
    """
    Looks up the freeze entry of (org, branch) in the freeze files, in
    order. The first file holding an entry wins.

    A freeze file that can not be read or parsed fails the whole lookup,
    the following files are not consulted. Merging into a branch that may
    be frozen is never allowed.
    """
    for freeze_file in freeze_files:
        try:
            fc = get_freeze_content(cli, freeze_file)
        except Exception as e:
            logging.error(f"get freeze file:{freeze_file}, err:{e}")
            raise FreezeResolutionError(f"freeze file {freeze_file}: {e}") from e

        if item := fc.get_freeze_item(org, branch):
            return item

    return None
