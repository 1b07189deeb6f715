import logging
import re

from prometheus_client import Counter

from reviewbot.config import BotConfig
from reviewbot.freeze import resolve_freeze_item
from reviewbot.labels import check_labels
from reviewbot.models import (
    NoteEvent,
    PRAction,
    PullRequest,
    PullRequestEvent,
)
from reviewbot.utils.platform import PlatformClient

MSG_PR_CONFLICTS = "PR conflicts to the target branch."
MSG_NOT_MERGEABLE = (
    "@{trigger} , this pr is not mergeable and the reasons are below:\n{reasons}"
)

RE_CHECK_PR = re.compile(r"(?mi)^/check-pr\s*$")

merged_pull_requests = Counter(
    name="reviewbot_merged_pull_requests",
    documentation="Number of pull requests the bot has merged",
    labelnames=["org", "repo", "merge_method"],
)


class MergeHelper:
    """
    Decides whether a pull request may be merged and merges it.

    `trigger` is the user who asked for the merge. It is None when the
    merge was triggered by a label change, in which case nobody can
    override a branch freeze.
    """

    def __init__(
        self,
        cli: PlatformClient,
        cfg: BotConfig,
        pr: PullRequest,
        trigger: str | None = None,
    ):
        self.cli = cli
        self.cfg = cfg
        self.pr = pr
        self.trigger = trigger

    def can_merge(self) -> list[str]:
        """
        Returns the reasons blocking the merge, an empty list when the pull
        request is mergeable. Raises FreezeResolutionError when the freeze
        state of the target branch is unknown.
        """
        reasons = []
        if not self.pr.mergeable:
            reasons.append(MSG_PR_CONFLICTS)

        reasons.extend(check_labels(self.pr.labels, self.cfg))

        freeze = resolve_freeze_item(
            self.cli, self.pr.org, self.pr.base_ref, self.cfg.freeze_file
        )
        if freeze is not None and (reason := freeze.check_owner(self.trigger)):
            reasons.append(reason)

        return reasons

    def merge(self) -> None:
        org, repo, number = self.pr.org, self.pr.repo, self.pr.number

        if self.pr.need_review or self.pr.need_test:
            logging.info(["clear reviewer and tester counts", org, repo, number])
            self.cli.update_pull_request(
                org, repo, number, assignees_number=0, testers_number=0
            )

        logging.info(["merge", org, repo, number, self.cfg.merge_method.value])
        self.cli.merge_pull_request(org, repo, number, self.cfg.merge_method.value)
        if not self.cli.dry_run:
            merged_pull_requests.labels(
                org=org, repo=repo, merge_method=self.cfg.merge_method.value
            ).inc()


def try_merge(
    cli: PlatformClient,
    cfg: BotConfig,
    pr: PullRequest,
    trigger: str | None = None,
    add_comment: bool = False,
) -> bool:
    """
    Merges the pull request when the policy allows it. When it does not
    and `add_comment` is set, the trigger is told why.

    :return: whether the pull request was merged
    """
    h = MergeHelper(cli, cfg, pr, trigger=trigger)

    if reasons := h.can_merge():
        logging.info(["not mergeable", pr.org, pr.repo, pr.number, reasons])
        if add_comment:
            cli.create_pr_comment(
                pr.org,
                pr.repo,
                pr.number,
                MSG_NOT_MERGEABLE.format(trigger=trigger, reasons="\n".join(reasons)),
            )
        return False

    h.merge()
    return True


def handle_check_pr(cli: PlatformClient, cfg: BotConfig, e: NoteEvent) -> None:
    if not e.is_pr_command() or not RE_CHECK_PR.search(e.comment):
        return

    try_merge(cli, cfg, e.pull_request, trigger=e.commenter, add_comment=True)


def handle_label_update(
    cli: PlatformClient, cfg: BotConfig, e: PullRequestEvent
) -> None:
    if e.action != PRAction.UPDATED_LABEL or not e.pull_request.is_open():
        return

    try_merge(cli, cfg, e.pull_request)
