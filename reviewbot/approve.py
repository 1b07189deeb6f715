import re

from reviewbot.config import BotConfig
from reviewbot.labels import APPROVED
from reviewbot.lgtm import COMMENT_NO_PERMISSION_FOR_LABEL
from reviewbot.models import NoteEvent
from reviewbot.permission import has_permission
from reviewbot.utils.platform import PlatformClient
from reviewbot.utils.repo_file_cache import RepoFileCacheApi

RE_ADD_APPROVE = re.compile(r"(?mi)^/approve\s*$")
RE_REMOVE_APPROVE = re.compile(r"(?mi)^/approve cancel\s*$")


def handle_approve(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    cfg: BotConfig,
    e: NoteEvent,
) -> None:
    if not e.is_pr_command():
        return

    if RE_ADD_APPROVE.search(e.comment):
        set_approved(cli, cache_cli, cfg, e, add=True)
    elif RE_REMOVE_APPROVE.search(e.comment):
        set_approved(cli, cache_cli, cfg, e, add=False)


def set_approved(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    cfg: BotConfig,
    e: NoteEvent,
    add: bool,
) -> None:
    pr = e.pull_request

    if not has_permission(cli, cache_cli, e.commenter, pr, cfg):
        cli.create_pr_comment(
            pr.org,
            pr.repo,
            pr.number,
            COMMENT_NO_PERMISSION_FOR_LABEL.format(
                commenter=e.commenter,
                action="add" if add else "remove",
                label=APPROVED,
            ),
        )
        return

    if add:
        cli.add_pr_label(pr.org, pr.repo, pr.number, APPROVED)
    else:
        cli.remove_pr_label(pr.org, pr.repo, pr.number, APPROVED)
