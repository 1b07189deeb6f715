import logging
import os

from reviewbot.utils import config

REVIEWBOT_CONFIG = "REVIEWBOT_CONFIG"
REVIEWBOT_LOG_LEVEL = "REVIEWBOT_LOG_LEVEL"

LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def log_fmt(dry_run: bool | None = None) -> str:
    log_fmt = (
        "[%(asctime)s] [%(levelname)s] [DRY-RUN] "
        if dry_run
        else "[%(asctime)s] [%(levelname)s] "
    )

    log_fmt += "[%(filename)s:%(funcName)s:%(lineno)d] - %(message)s"

    return log_fmt


def init_env(
    log_level: str | None = None,
    config_file: str | None = None,
    dry_run: bool | None = None,
) -> None:
    # store env configs in environment variables. this way child processes
    # will inherit them.
    if log_level:
        os.environ[REVIEWBOT_LOG_LEVEL] = log_level
    if config_file:
        os.environ[REVIEWBOT_CONFIG] = config_file

    logging.basicConfig(
        format=log_fmt(dry_run=dry_run),
        datefmt=LOG_DATEFMT,
        level=getattr(logging, os.environ.get(REVIEWBOT_LOG_LEVEL, "INFO")),
    )

    config_file = os.environ.get(REVIEWBOT_CONFIG)
    if not config_file:
        raise config.ConfigNotFound("no config file for review-bot specified")
    config.init_from_toml(config_file)
