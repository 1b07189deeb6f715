import pytest
from pytest_httpserver import HTTPServer

from reviewbot.utils.gitee_api import GiteeApi
from reviewbot.utils.platform import PlatformApiError

TOKEN = "test_token"
REPO = "/repos/openeuler/kernel"
PR = f"{REPO}/pulls/42"


@pytest.fixture
def gitee_api(httpserver: HTTPServer) -> GiteeApi:
    return GiteeApi(token=TOKEN, host=httpserver.url_for("/"))


def test_get_user_permission(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(
        f"{REPO}/collaborators/bob/permission",
        query_string={"access_token": TOKEN},
    ).respond_with_json({"permission": "write"})
    assert gitee_api.get_user_permission("openeuler", "kernel", "bob") == "write"


def test_get_user_permission_failed(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(f"{REPO}/collaborators/bob/permission").respond_with_data(
        status=404
    )
    with pytest.raises(PlatformApiError):
        gitee_api.get_user_permission("openeuler", "kernel", "bob")


def test_get_path_content(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(
        f"{REPO}/contents/sig/OWNERS",
        query_string={"access_token": TOKEN, "ref": "master"},
    ).respond_with_json({"type": "file", "content": "dGVzdA=="})
    assert (
        gitee_api.get_path_content("openeuler", "kernel", "/sig/OWNERS", "master")
        == "dGVzdA=="
    )


def test_get_path_content_directory(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(f"{REPO}/contents/sig").respond_with_json([
        {"type": "dir", "path": "sig/kernel"}
    ])
    with pytest.raises(PlatformApiError, match="is not a file"):
        gitee_api.get_path_content("openeuler", "kernel", "sig", "master")


def test_get_pull_request_changes(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(f"{PR}/files").respond_with_json([
        {"filename": "sig/kernel/OWNERS"},
        {"filename": "README.md"},
    ])
    assert gitee_api.get_pull_request_changes("openeuler", "kernel", 42) == [
        "sig/kernel/OWNERS",
        "README.md",
    ]


def test_get_repo_labels(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(f"{REPO}/labels").respond_with_json([
        {"name": "lgtm"},
        {"name": "approved"},
    ])
    assert gitee_api.get_repo_labels("openeuler", "kernel") == ["lgtm", "approved"]


def test_add_pr_labels(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_oneshot_request(
        f"{PR}/labels", method="POST", json=["lgtm-bob"]
    ).respond_with_json([{"name": "lgtm-bob"}])
    gitee_api.add_pr_label("openeuler", "kernel", 42, "lgtm-bob")
    httpserver.check_assertions()


def test_remove_pr_labels(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_oneshot_request(
        f"{PR}/labels/lgtm-a,lgtm-b", method="DELETE"
    ).respond_with_data(status=204)
    gitee_api.remove_pr_labels("openeuler", "kernel", 42, ["lgtm-a", "lgtm-b"])
    httpserver.check_assertions()


def test_remove_pr_labels_nothing(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    gitee_api.remove_pr_labels("openeuler", "kernel", 42, [])
    assert len(httpserver.log) == 0


def test_create_pr_comment(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_oneshot_request(
        f"{PR}/comments", method="POST", json={"body": "/retest"}
    ).respond_with_json({"id": 1})
    gitee_api.create_pr_comment("openeuler", "kernel", 42, "/retest")
    httpserver.check_assertions()


def test_update_pull_request(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_oneshot_request(
        PR, method="PATCH", json={"assignees_number": 0, "testers_number": 0}
    ).respond_with_json({"number": 42})
    gitee_api.update_pull_request("openeuler", "kernel", 42, 0, 0)
    httpserver.check_assertions()


def test_merge_pull_request(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_oneshot_request(
        f"{PR}/merge", method="PUT", json={"merge_method": "squash"}
    ).respond_with_json({"merged": True})
    gitee_api.merge_pull_request("openeuler", "kernel", 42, "squash")
    httpserver.check_assertions()


def test_merge_pull_request_failed(httpserver: HTTPServer, gitee_api: GiteeApi) -> None:
    httpserver.expect_request(f"{PR}/merge", method="PUT").respond_with_data(
        status=405
    )
    with pytest.raises(PlatformApiError):
        gitee_api.merge_pull_request("openeuler", "kernel", 42, "merge")
