import binascii
import logging

from reviewbot.utils.platform import decode_content
from reviewbot.utils.ruamel import (
    YAMLError,
    safe_load,
)

OWNERS_FILE = "OWNERS"

_LOG = logging.getLogger(__name__)


def decode_owner_file(content: str) -> set[str]:
    """
    Decodes a base64 encoded OWNERS file and returns its maintainers and
    committers, lower cased. A file that can not be decoded has no owners.

    :param content: base64 encoded OWNERS file
    :type content: str

    :return: the owners
    :rtype: set
    """
    try:
        raw_owners = decode_content(content)
    except (binascii.Error, ValueError) as e:
        _LOG.error(f"decode {OWNERS_FILE} file: {e}")
        return set()

    try:
        owners = safe_load(raw_owners)
    except YAMLError as e:
        _LOG.error(f"Non-parsable {OWNERS_FILE} file: {e}")
        return set()

    if owners is None:
        return set()
    if not isinstance(owners, dict):
        _LOG.warning(f"{OWNERS_FILE} file content is not a dictionary")
        return set()

    result = set()
    for key in ("maintainers", "committers"):
        logins = owners.get(key) or []
        if isinstance(logins, str):
            logins = [logins]
        result.update(str(login).lower() for login in logins)
    return result
