from collections.abc import Callable
from typing import Any

import pytest

from reviewbot.config import BotConfig
from reviewbot.models import (
    NoteEvent,
    PullRequest,
)
from reviewbot.test.fake_platform import FakePlatformClient


@pytest.fixture
def platform() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def bot_config_builder() -> Callable[..., BotConfig]:
    def builder(**kwargs: Any) -> BotConfig:
        return BotConfig(repos=kwargs.pop("repos", ["openeuler/kernel"]), **kwargs)

    return builder


@pytest.fixture
def pr_builder() -> Callable[..., PullRequest]:
    def builder(**kwargs: Any) -> PullRequest:
        data: dict[str, Any] = {
            "org": "openeuler",
            "repo": "kernel",
            "number": 42,
            "author": "author",
            "base_ref": "master",
            "mergeable": True,
        }
        data.update(kwargs)
        return PullRequest(**data)

    return builder


@pytest.fixture
def note_builder(
    pr_builder: Callable[..., PullRequest],
) -> Callable[..., NoteEvent]:
    def builder(
        comment: str, commenter: str = "reviewer", **pr_kwargs: Any
    ) -> NoteEvent:
        return NoteEvent(
            commenter=commenter,
            comment=comment,
            pull_request=pr_builder(**pr_kwargs),
        )

    return builder
