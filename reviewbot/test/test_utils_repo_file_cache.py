import pytest
from pytest_httpserver import HTTPServer

from reviewbot.utils.repo_file_cache import (
    Branch,
    CachedFile,
    RepoFileCacheApi,
    RepoFileCacheError,
)

BRANCH = Branch(platform="gitee", org="openeuler", repo="community", branch="master")
URL = "/v1/file/gitee/openeuler/community/master/OWNERS"


@pytest.fixture
def cache_api(httpserver: HTTPServer) -> RepoFileCacheApi:
    return RepoFileCacheApi(endpoint=httpserver.url_for("/"))


def test_get_files(httpserver: HTTPServer, cache_api: RepoFileCacheApi) -> None:
    httpserver.expect_request(URL, query_string="summary=false").respond_with_json({
        "data": {
            "files": [
                {"path": "sig/kernel/OWNERS", "sha": "abc", "content": "dGVzdA=="},
                {"path": "OWNERS", "content": "dGVzdA=="},
            ]
        }
    })
    assert cache_api.get_files(BRANCH, "OWNERS") == [
        CachedFile(path="sig/kernel/OWNERS", sha="abc", content="dGVzdA=="),
        CachedFile(path="OWNERS", content="dGVzdA=="),
    ]


def test_get_files_empty(httpserver: HTTPServer, cache_api: RepoFileCacheApi) -> None:
    httpserver.expect_request(URL).respond_with_json({"data": {}})
    assert cache_api.get_files(BRANCH, "OWNERS") == []


@pytest.mark.parametrize(
    "body, status",
    [
        ("oops", 500),
        ("not json", 200),
        ('{"files": []}', 200),
        ('{"data": {"files": [{"sha": "no path"}]}}', 200),
    ],
)
def test_get_files_failed(
    httpserver: HTTPServer, cache_api: RepoFileCacheApi, body: str, status: int
) -> None:
    httpserver.expect_request(URL).respond_with_data(
        body, status=status, content_type="application/json"
    )
    with pytest.raises(RepoFileCacheError):
        cache_api.get_files(BRANCH, "OWNERS")
