import logging
import re

from reviewbot.config import BotConfig
from reviewbot.labels import (
    LGTM,
    gen_lgtm_label,
    get_lgtm_labels,
)
from reviewbot.models import (
    NoteEvent,
    PRAction,
    PullRequestEvent,
)
from reviewbot.permission import has_permission
from reviewbot.utils.platform import PlatformClient
from reviewbot.utils.repo_file_cache import RepoFileCacheApi

COMMENT_ADD_LGTM_BY_SELF = (
    "***lgtm*** can not be added in your self-own pull request. :astonished:"
)
COMMENT_CLEAR_LABEL = (
    "New code changes of pr are detected and remove these labels ***{labels}***. "
    ":flushed: "
)
COMMENT_NO_PERMISSION_FOR_LABEL = """
***@{commenter}*** has no permission to {action} ***{label}*** label in this pull request. :astonished:
Please contact to the collaborators in this repository."""

RE_ADD_LGTM = re.compile(r"(?mi)^/lgtm\s*$")
RE_REMOVE_LGTM = re.compile(r"(?mi)^/lgtm cancel\s*$")


def is_same_user(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def handle_lgtm(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    cfg: BotConfig,
    e: NoteEvent,
) -> None:
    if not e.is_pr_command():
        return

    if RE_ADD_LGTM.search(e.comment):
        add_lgtm(cli, cache_cli, cfg, e)
    elif RE_REMOVE_LGTM.search(e.comment):
        remove_lgtm(cli, cache_cli, cfg, e)


def add_lgtm(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    cfg: BotConfig,
    e: NoteEvent,
) -> None:
    pr = e.pull_request
    org, repo, number = pr.org, pr.repo, pr.number
    commenter = e.commenter

    if is_same_user(pr.author, commenter):
        cli.create_pr_comment(org, repo, number, COMMENT_ADD_LGTM_BY_SELF)
        return

    if not has_permission(cli, cache_cli, commenter, pr, cfg):
        cli.create_pr_comment(
            org,
            repo,
            number,
            COMMENT_NO_PERMISSION_FOR_LABEL.format(
                commenter=commenter, action="add", label=LGTM
            ),
        )
        return

    label = gen_lgtm_label(commenter, cfg.lgtm_counts_required)
    if label != LGTM:
        try:
            create_label_if_needed(cli, org, repo, label)
        except Exception as ex:
            # not fatal, the label is added anyway
            logging.error(f"create repo label: {label}, err: {ex}")

    cli.add_pr_label(org, repo, number, label)


def remove_lgtm(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    cfg: BotConfig,
    e: NoteEvent,
) -> None:
    pr = e.pull_request
    org, repo, number = pr.org, pr.repo, pr.number
    commenter = e.commenter

    if not is_same_user(pr.author, commenter):
        if not has_permission(cli, cache_cli, commenter, pr, cfg):
            cli.create_pr_comment(
                org,
                repo,
                number,
                COMMENT_NO_PERMISSION_FOR_LABEL.format(
                    commenter=commenter, action="remove", label=LGTM
                ),
            )
            return

        cli.remove_pr_label(
            org, repo, number, gen_lgtm_label(commenter, cfg.lgtm_counts_required)
        )
        return

    # the author can remove every lgtm label
    if labels := get_lgtm_labels(pr.labels):
        cli.remove_pr_labels(org, repo, number, labels)


def create_label_if_needed(
    cli: PlatformClient, org: str, repo: str, label: str
) -> None:
    if label in cli.get_repo_labels(org, repo):
        return
    cli.create_repo_label(org, repo, label)


def clear_lgtm_labels(cli: PlatformClient, e: PullRequestEvent) -> None:
    """
    New commits invalidate the lgtm labels given so far.
    """
    if e.action != PRAction.CHANGED_SOURCE_BRANCH:
        return

    pr = e.pull_request
    if not (labels := get_lgtm_labels(pr.labels)):
        return

    cli.remove_pr_labels(pr.org, pr.repo, pr.number, labels)
    cli.create_pr_comment(
        pr.org,
        pr.repo,
        pr.number,
        COMMENT_CLEAR_LABEL.format(labels=", ".join(labels)),
    )
