import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import reviewbot.cli as reviewbot_cli
from reviewbot.status import ExitCodes
from reviewbot.test.fake_platform import FakePlatformClient

CONFIG = """
[platform]
name = "gitee"
token = "secret"

[[config_items]]
repos = ["openeuler/kernel"]
merge_method = "squash"
"""

PULL_REQUEST = {
    "org": "openeuler",
    "repo": "kernel",
    "number": 42,
    "author": "author",
    "base_ref": "master",
    "mergeable": True,
    "labels": ["lgtm", "approved"],
}


@pytest.fixture(autouse=True)
def env(monkeypatch: pytest.MonkeyPatch) -> None:
    # init_env exports these, undo it after each test
    monkeypatch.setenv("REVIEWBOT_CONFIG", "")
    monkeypatch.setenv("REVIEWBOT_LOG_LEVEL", "INFO")


@pytest.fixture
def platform(mocker) -> FakePlatformClient:
    fake = FakePlatformClient()
    mocker.patch.object(reviewbot_cli, "init_platform_client", return_value=fake)
    return fake


def write(tmp_path: Path, name: str, content: str) -> str:
    path = tmp_path / name
    path.write_text(content)
    return str(path)


def invoke(*args: str):
    return CliRunner().invoke(reviewbot_cli.root, list(args))


def test_handle_note_event(tmp_path, platform):
    config = write(tmp_path, "config.toml", CONFIG)
    event = write(
        tmp_path,
        "event.json",
        json.dumps({
            "commenter": "bob",
            "comment": "/check-pr",
            "pull_request": PULL_REQUEST,
        }),
    )
    result = invoke("--config", config, "handle-event", "note", event)
    assert result.exit_code == ExitCodes.SUCCESS, result.output
    assert platform.merged_with() == ["squash"]


def test_handle_event_dry_run(tmp_path, platform):
    config = write(tmp_path, "config.toml", CONFIG)
    event = write(
        tmp_path,
        "event.json",
        json.dumps({"action": "updated_label", "pull_request": PULL_REQUEST}),
    )
    result = invoke(
        "--config", config, "--dry-run", "handle-event", "pull_request", event
    )
    assert result.exit_code == ExitCodes.SUCCESS, result.output
    assert platform.calls == []


def test_missing_config_file(tmp_path, platform):
    event = write(tmp_path, "event.json", "{}")
    result = invoke(
        "--config", str(tmp_path / "missing.toml"), "handle-event", "note", event
    )
    assert result.exit_code == ExitCodes.CONFIG_ERROR


def test_invalid_bot_config(tmp_path, platform):
    config = write(
        tmp_path,
        "config.toml",
        CONFIG + '\n[[config_items]]\nrepos = ["openeuler"]\nmerge_method = "rebase"\n',
    )
    event = write(tmp_path, "event.json", "{}")
    result = invoke("--config", config, "handle-event", "note", event)
    assert result.exit_code == ExitCodes.CONFIG_ERROR


def test_invalid_event(tmp_path, platform):
    config = write(tmp_path, "config.toml", CONFIG)
    event = write(tmp_path, "event.json", json.dumps({"comment": "/lgtm"}))
    result = invoke("--config", config, "handle-event", "note", event)
    assert result.exit_code == ExitCodes.EVENT_ERROR


def test_handler_failure(tmp_path, platform):
    config = write(tmp_path, "config.toml", CONFIG)
    event = write(
        tmp_path,
        "event.json",
        json.dumps({
            "commenter": "bob",
            "comment": "/check-pr",
            "pull_request": {**PULL_REQUEST, "repo": "docs"},
        }),
    )
    result = invoke("--config", config, "handle-event", "note", event)
    assert result.exit_code == ExitCodes.ERROR
    assert platform.calls == []
