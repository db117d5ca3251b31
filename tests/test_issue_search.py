import pytest

from conftest import FakeGithubClient, make_item
from release_changelog.clients.github_client import GithubApiError
from release_changelog.utils.issue_search import IssueSearchClient, SearchFetchError


def test_search_normalizes_items():
    client = FakeGithubClient(items=[make_item("Fix crash", 12, "bug", "docs")])
    issues = IssueSearchClient(client).search(["repo:org/widget", "is:merged"])
    assert len(issues) == 1
    assert issues[0].title == "Fix crash"
    assert issues[0].url == "https://api.github.com/repos/org/widget/issues/12"
    assert issues[0].html_url == "https://github.com/org/widget/pull/12"
    assert [label.name for label in issues[0].labels] == ["bug", "docs"]
    assert client.calls[0][:2] == ("search", "repo:org/widget is:merged")


def test_missing_html_url_is_none():
    item = make_item("No html", 3)
    del item["html_url"]
    issues = IssueSearchClient(FakeGithubClient(items=[item])).search(["is:merged"])
    assert issues[0].html_url is None
    assert issues[0].url == "https://api.github.com/repos/org/widget/issues/3"


def test_follows_pages_in_order():
    items = [make_item(f"pr{i}", i) for i in range(5)]
    client = FakeGithubClient(items=items)
    issues = IssueSearchClient(client, per_page=2).search(["is:merged"])
    assert [i.title for i in issues] == ["pr0", "pr1", "pr2", "pr3", "pr4"]
    assert [c[2] for c in client.calls] == [1, 2, 3]


def test_exact_page_multiple_stops_at_total():
    client = FakeGithubClient(items=[make_item(f"pr{i}", i) for i in range(4)])
    IssueSearchClient(client, per_page=2).search(["is:merged"])
    assert len(client.calls) == 2


def test_max_pages_truncates():
    client = FakeGithubClient(items=[make_item(f"pr{i}", i) for i in range(10)])
    issues = IssueSearchClient(client, per_page=2, max_pages=3).search(["is:merged"])
    assert len(issues) == 6


def test_empty_result():
    assert IssueSearchClient(FakeGithubClient()).search(["is:merged"]) == []


def test_error_wrapped_with_code():
    client = FakeGithubClient()
    client.search_error = GithubApiError("limit", code="RATE_LIMIT")
    with pytest.raises(SearchFetchError) as exc:
        IssueSearchClient(client).search(["is:merged"])
    assert exc.value.code == "RATE_LIMIT"
    assert "Rate limit" in str(exc.value)
