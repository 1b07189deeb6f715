import re
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)


class ConfigurationError(Exception):
    pass


class MergeMethod(StrEnum):
    MERGE = "merge"
    SQUASH = "squash"


class FreezeFile(BaseModel, frozen=True):
    """
    Location of a remote freeze document.
    """

    owner: str
    repo: str
    branch: str
    path: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}/{self.branch}:{self.path}"


class BotConfig(BaseModel, frozen=True):
    """
    Merge policy of the repositories listed in `repos`.

    `lgtm_counts_required` greater than 1 switches the lgtm label to the
    per-reviewer 'lgtm-<login>' form. `labels_for_merge` lists labels,
    besides approved and lgtm, that must be present and
    `missing_labels_for_merge` the ones that must not.
    """

    repos: list[str]
    excluded_repos: list[str] = []
    lgtm_counts_required: int = Field(default=1, ge=0)
    check_permission_based_on_sig_owners: bool = False
    sigs_dir: str = ""
    labels_for_merge: list[str] = []
    missing_labels_for_merge: list[str] = []
    merge_method: MergeMethod = MergeMethod.MERGE
    freeze_file: list[FreezeFile] = []
    unable_checking_reviewer_for_pr: bool = False

    _sig_dir_re: re.Pattern | None = PrivateAttr(default=None)

    @field_validator("lgtm_counts_required")
    @classmethod
    def default_lgtm_counts(cls, v: int) -> int:
        return v or 1

    @field_validator("repos")
    @classmethod
    def repos_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("repos must not be empty")
        return v

    @model_validator(mode="after")
    def sigs_dir_set(self) -> "BotConfig":
        if self.check_permission_based_on_sig_owners and not self.sigs_dir:
            raise ValueError("missing sigs_dir")
        return self

    def model_post_init(self, __context: Any) -> None:
        if self.check_permission_based_on_sig_owners:
            self._sig_dir_re = re.compile(
                rf"^{re.escape(self.sigs_dir.rstrip('/'))}/[-\w]+/"
            )

    @property
    def sig_dir_pattern(self) -> re.Pattern | None:
        return self._sig_dir_re

    def applies_to(self, org: str, repo: str) -> bool:
        full_name = f"{org}/{repo}"
        if full_name in self.excluded_repos:
            return False
        return full_name in self.repos or org in self.repos


class Configuration(BaseModel, frozen=True):
    config_items: list[BotConfig] = []

    def config_for(self, org: str, repo: str) -> BotConfig | None:
        """
        An item naming the repository explicitly wins over one that only
        names its organization.
        """
        full_name = f"{org}/{repo}"
        org_match = None
        for item in self.config_items:
            if not item.applies_to(org, repo):
                continue
            if full_name in item.repos:
                return item
            if org_match is None:
                org_match = item
        return org_match


def load_configuration(raw: Mapping[str, Any]) -> Configuration:
    try:
        return Configuration.model_validate({
            "config_items": raw.get("config_items") or [],
        })
    except ValidationError as e:
        raise ConfigurationError(f"invalid bot configuration: {e}") from e
