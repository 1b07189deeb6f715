import json
import logging
import os
import sys
import traceback
from collections.abc import Callable
from typing import Any

import click
import sentry_sdk
from pydantic import ValidationError
from sentry_sdk.integrations.logging import LoggingIntegration

from reviewbot.bot import ReviewBot
from reviewbot.config import (
    ConfigurationError,
    load_configuration,
)
from reviewbot.models import (
    NoteEvent,
    PullRequestEvent,
)
from reviewbot.status import ExitCodes
from reviewbot.utils import config
from reviewbot.utils.environment import init_env
from reviewbot.utils.platform import (
    DryRunPlatformClient,
    PlatformClient,
    UnsupportedPlatformError,
    init_platform_client,
)
from reviewbot.utils.repo_file_cache import RepoFileCacheApi

EVENT_MODELS = {
    "note": NoteEvent,
    "pull_request": PullRequestEvent,
}

# Enable Sentry
if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        os.environ["SENTRY_DSN"],
        integrations=[
            LoggingIntegration(event_level=logging.ERROR),
        ],
    )


def config_file(function: Callable) -> Callable:
    help_msg = "Path to configuration file in toml format."
    function = click.option(
        "--config",
        "configfile",
        required=True,
        default=os.environ.get("REVIEWBOT_CONFIG"),
        help=help_msg,
    )(function)
    return function


def dry_run(function: Callable) -> Callable:
    help_msg = (
        "If `true`, it will only print the planned actions "
        "that would be performed, without executing them."
    )

    function = click.option("--dry-run/--no-dry-run", default=False, help=help_msg)(
        function
    )
    return function


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to INFO.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def init_bot(dry_run: bool) -> ReviewBot:
    cli: PlatformClient = init_platform_client(config.read_all("platform"))
    if dry_run:
        cli = DryRunPlatformClient(cli)

    cache_cli = None
    if endpoint := config.get_config().get("repo_file_cache", {}).get("endpoint"):
        cache_cli = RepoFileCacheApi(endpoint)

    return ReviewBot(
        cli=cli,
        configuration=load_configuration(config.get_config()),
        cache_cli=cache_cli,
    )


def cleanup_bot(bot: ReviewBot) -> None:
    for client in (bot.cli, bot.cache_cli):
        if client is not None and hasattr(client, "cleanup"):
            client.cleanup()


@click.group()
@config_file
@dry_run
@log_level
@click.pass_context
def root(ctx: click.Context, configfile: str, dry_run: bool, log_level: str) -> None:
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    try:
        init_env(log_level=log_level, config_file=configfile, dry_run=dry_run)
    except (config.ConfigNotFound, OSError, ValueError) as e:
        sys.stderr.write(f"can not load configuration: {e}\n")
        sys.exit(ExitCodes.CONFIG_ERROR)


@root.command("handle-event")
@click.argument("event_type", type=click.Choice(sorted(EVENT_MODELS)))
@click.argument("event_file", type=click.File("r"))
@click.pass_context
def handle_event(ctx: click.Context, event_type: str, event_file: Any) -> None:
    """Handle a pull request or comment event read from EVENT_FILE (JSON)."""
    try:
        bot = init_bot(ctx.obj["dry_run"])
    except (
        ConfigurationError,
        config.SecretNotFound,
        UnsupportedPlatformError,
        KeyError,
    ) as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(ExitCodes.CONFIG_ERROR)

    try:
        event = EVENT_MODELS[event_type].model_validate(json.load(event_file))
    except (ValidationError, ValueError) as e:
        sys.stderr.write(f"invalid {event_type} event: {e}\n")
        sys.exit(ExitCodes.EVENT_ERROR)

    try:
        if isinstance(event, NoteEvent):
            bot.handle_note_event(event)
        else:
            bot.handle_pull_request_event(event)
    except Exception:
        traceback.print_exc(file=sys.stderr)
        sys.exit(ExitCodes.ERROR)
    finally:
        cleanup_bot(bot)
