import base64

import pytest

from reviewbot.utils.owners import decode_owner_file

from .fixtures import Fixtures

fxt = Fixtures("owners")


def encode(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


def test_decode_owner_file():
    assert decode_owner_file(fxt.get_base64("OWNERS")) == {"alice", "bob", "carol"}


def test_decode_owner_file_single_login():
    assert decode_owner_file(encode("maintainers: Dave\n")) == {"dave"}


@pytest.mark.parametrize(
    "content",
    [
        "not base64!",
        encode(""),
        encode("maintainers: [\n"),
        encode("- alice\n- bob\n"),
        encode("reviewers:\n  - alice\n"),
    ],
)
def test_decode_owner_file_without_owners(content):
    assert decode_owner_file(content) == set()


def test_decode_owner_file_wrapped_content():
    encoded = fxt.get_base64("OWNERS")
    wrapped = "\n".join(encoded[i : i + 20] for i in range(0, len(encoded), 20))
    assert decode_owner_file(wrapped + "\n") == {"alice", "bob", "carol"}


def test_decode_owner_file_invalid_characters():
    assert decode_owner_file("@@@@" + fxt.get_base64("OWNERS")) == set()
