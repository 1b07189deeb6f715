import logging
import posixpath

from reviewbot.config import BotConfig
from reviewbot.models import PullRequest
from reviewbot.utils.owners import (
    OWNERS_FILE,
    decode_owner_file,
)
from reviewbot.utils.platform import PlatformClient
from reviewbot.utils.repo_file_cache import (
    Branch,
    RepoFileCacheApi,
    RepoFileCacheError,
)

TRUSTED_PERMISSIONS = {"admin", "write"}

_LOG = logging.getLogger(__name__)


def has_permission(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    commenter: str,
    pr: PullRequest,
    cfg: BotConfig,
) -> bool:
    """
    Tells whether the commenter may add or remove the lgtm and approved
    labels of the pull request. In order, the commenter is trusted when
    they are admin or have write access to the repository, are listed in
    the root OWNERS file, or, for repositories with sig directories, are
    listed in the OWNERS file of every directory the pull request touches.
    """
    permission = cli.get_user_permission(pr.org, pr.repo, commenter)
    if permission in TRUSTED_PERMISSIONS:
        return True

    if commenter.lower() in get_repo_owners(cli, pr):
        return True

    if cfg.check_permission_based_on_sig_owners:
        return is_owner_of_sig(cli, cache_cli, commenter, pr, cfg)

    return False


def get_repo_owners(cli: PlatformClient, pr: PullRequest) -> set[str]:
    # read errors count as an empty owner list
    try:
        content = cli.get_path_content(pr.org, pr.repo, OWNERS_FILE, pr.base_ref)
    except Exception as e:
        _LOG.warning(
            f"[{pr.full_name}#{pr.number}] can not read {OWNERS_FILE} at {pr.base_ref}: {e}"
        )
        return set()

    if not content:
        return set()
    return decode_owner_file(content)


def get_changed_dirs(changes: list[str], cfg: BotConfig) -> set[str] | None:
    """
    Returns the directories of the changed files, None if any of them is
    outside the sig directories.
    """
    pattern = cfg.sig_dir_pattern
    if pattern is None:
        return None

    dirs = set()
    for filename in changes:
        if not pattern.match(filename):
            return None
        dirs.add(posixpath.dirname(filename))
    return dirs


def is_owner_of_sig(
    cli: PlatformClient,
    cache_cli: RepoFileCacheApi | None,
    commenter: str,
    pr: PullRequest,
    cfg: BotConfig,
) -> bool:
    changes = cli.get_pull_request_changes(pr.org, pr.repo, pr.number)
    if not changes:
        return False

    dirs = get_changed_dirs(changes, cfg)
    if not dirs:
        return False

    if cache_cli is None:
        raise RepoFileCacheError(
            f"{pr.full_name} checks sig owners but no repo file cache is configured"
        )

    branch = Branch(
        platform=cli.platform,
        org=pr.org,
        repo=pr.repo,
        branch=pr.base_ref,
    )
    files = cache_cli.get_files(branch, OWNERS_FILE)
    if not files:
        _LOG.info(f"there is no {OWNERS_FILE} file stored in cache for {branch}")

    login = commenter.lower()
    for f in files:
        path = posixpath.dirname(f.path)
        if path not in dirs:
            continue

        if login not in decode_owner_file(f.content):
            return False

        dirs.discard(path)
        if not dirs:
            return True

    # some directory has no OWNERS file
    return False
