import logging
from collections.abc import Callable

from reviewbot.actions import (
    check_reviewer,
    do_retest,
)
from reviewbot.approve import handle_approve
from reviewbot.config import (
    BotConfig,
    Configuration,
    ConfigurationError,
)
from reviewbot.lgtm import (
    clear_lgtm_labels,
    handle_lgtm,
)
from reviewbot.merge import (
    handle_check_pr,
    handle_label_update,
)
from reviewbot.models import (
    NoteEvent,
    PullRequestEvent,
)
from reviewbot.utils.platform import PlatformClient
from reviewbot.utils.repo_file_cache import RepoFileCacheApi

BOT_NAME = "review"


class ReviewBot:
    """
    Entry point of the pull request and comment events of a platform.
    Every handler of an event runs, the failures are raised together.
    """

    def __init__(
        self,
        cli: PlatformClient,
        configuration: Configuration,
        cache_cli: RepoFileCacheApi | None = None,
    ):
        self.cli = cli
        self.configuration = configuration
        self.cache_cli = cache_cli

    def get_config(self, org: str, repo: str) -> BotConfig:
        if cfg := self.configuration.config_for(org, repo):
            return cfg
        raise ConfigurationError(f"no config for this repo:{org}/{repo}")

    @staticmethod
    def _run_all(name: str, handlers: list[Callable[[], None]]) -> None:
        errors = []
        for handler in handlers:
            try:
                handler()
            except Exception as e:
                logging.error(f"{name}: {e}")
                errors.append(e)

        if errors:
            raise ExceptionGroup(f"Errors occurred while handling {name}", errors)

    def handle_pull_request_event(self, e: PullRequestEvent) -> None:
        pr = e.pull_request
        cfg = self.get_config(pr.org, pr.repo)
        logging.info([BOT_NAME, "pull request event", pr.full_name, pr.number, e.action])

        self._run_all(
            "pull request event",
            [
                lambda: clear_lgtm_labels(self.cli, e),
                lambda: do_retest(self.cli, e),
                lambda: check_reviewer(self.cli, cfg, e),
                lambda: handle_label_update(self.cli, cfg, e),
            ],
        )

    def handle_note_event(self, e: NoteEvent) -> None:
        pr = e.pull_request
        cfg = self.get_config(pr.org, pr.repo)
        logging.info([BOT_NAME, "note event", pr.full_name, pr.number, e.commenter])

        self._run_all(
            "note event",
            [
                lambda: handle_lgtm(self.cli, self.cache_cli, cfg, e),
                lambda: handle_approve(self.cli, self.cache_cli, cfg, e),
                lambda: handle_check_pr(self.cli, cfg, e),
            ],
        )
