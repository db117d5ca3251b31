import pytest

from conftest import FakeGithubClient
from release_changelog.clients.github_client import GithubApiError
from release_changelog.utils.release_publisher import PublishError, ReleaseNotesPublisher


@pytest.fixture
def client():
    return FakeGithubClient(releases={"v1.0.0": "2023-01-01T00:00:00Z", "v1.1.0": "2023-02-01T00:00:00Z"})


def test_publish_updates_release_body(client):
    info = ReleaseNotesPublisher(client).publish("org", "widget", "v1.1.0", "notes")
    assert client.updated == {2: "notes"}
    assert info.id == 2


@pytest.mark.parametrize("body", ["", "x" * 11])
def test_invalid_body_rejected(client, body):
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client, body_max_chars=10).publish("org", "widget", "v1.1.0", body)
    assert exc.value.code == "VALIDATION"
    assert client.calls == []


def test_unknown_tag(client):
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client).publish("org", "widget", "v9", "notes")
    assert exc.value.code == "NOT_FOUND"


def test_anonymous_client_refused():
    client = FakeGithubClient(releases={"v1.1.0": "2023-02-01T00:00:00Z"}, token=None)
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client).publish("org", "widget", "v1.1.0", "notes")
    assert exc.value.code == "UNAUTHORIZED"


def test_update_failure_keeps_code(client):
    client.update_error = GithubApiError("forbidden", code="UNAUTHORIZED")
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client).publish("org", "widget", "v1.1.0", "notes")
    assert exc.value.code == "UNAUTHORIZED"


@pytest.mark.parametrize("payload", [{}, {"id": None}, {"id": "abc"}])
def test_release_without_id_is_unknown_error(client, payload):
    client.get_release_by_tag = lambda owner, repo, tag: payload
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client).publish("org", "widget", "v1.1.0", "notes")
    assert exc.value.code == "UNKNOWN"
    assert client.updated == {}


def test_update_response_without_id_is_unknown_error(client):
    client.update_release = lambda owner, repo, release_id, body: {"html_url": "https://github.com/org/widget/releases/1"}
    with pytest.raises(PublishError) as exc:
        ReleaseNotesPublisher(client).publish("org", "widget", "v1.1.0", "notes")
    assert exc.value.code == "UNKNOWN"
