from enum import StrEnum

from pydantic import BaseModel, Field


class PRAction(StrEnum):
    """
    Pull request actions the bot reacts to. Everything else a platform
    reports is normalised to OTHER.
    """

    OPENED = "opened"
    UPDATED_LABEL = "updated_label"
    CHANGED_SOURCE_BRANCH = "changed_source_branch"
    OTHER = "other"


class PRState:
    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


class PullRequest(BaseModel, frozen=True):
    """
    Immutable view of a pull request at the time an event was received.
    """

    org: str
    repo: str
    number: int
    author: str
    base_ref: str
    state: str = PRState.OPEN
    mergeable: bool = False
    need_review: bool = False
    need_test: bool = False
    labels: frozenset[str] = frozenset()
    assignees: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"

    def is_open(self) -> bool:
        return self.state == PRState.OPEN


class PullRequestEvent(BaseModel, frozen=True):
    action: PRAction = PRAction.OTHER
    pull_request: PullRequest


class NoteEvent(BaseModel, frozen=True):
    """
    A comment event. Only newly created comments on pull requests are
    considered as commands.
    """

    commenter: str
    comment: str
    is_pull_request: bool = True
    is_creating: bool = Field(
        default=True,
        description="False when the comment was edited or deleted",
    )
    pull_request: PullRequest

    def is_pr_command(self) -> bool:
        return (
            self.is_pull_request and self.pull_request.is_open() and self.is_creating
        )
