from reviewbot.config import BotConfig
from reviewbot.models import (
    PRAction,
    PullRequestEvent,
)
from reviewbot.utils.platform import PlatformClient

RETEST_COMMAND = "/retest"
MSG_NOT_SET_REVIEWER = (
    "**@{author}** Thank you for submitting a PullRequest. It is detected that "
    "you have not set a reviewer, please set a one."
)


def do_retest(cli: PlatformClient, e: PullRequestEvent) -> None:
    if e.action != PRAction.CHANGED_SOURCE_BRANCH:
        return

    pr = e.pull_request
    cli.create_pr_comment(pr.org, pr.repo, pr.number, RETEST_COMMAND)


def check_reviewer(cli: PlatformClient, cfg: BotConfig, e: PullRequestEvent) -> None:
    if cfg.unable_checking_reviewer_for_pr or e.action != PRAction.OPENED:
        return

    pr = e.pull_request
    if pr.assignees:
        return

    cli.create_pr_comment(
        pr.org, pr.repo, pr.number, MSG_NOT_SET_REVIEWER.format(author=pr.author)
    )
