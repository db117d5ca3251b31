from typing import Any, Dict, List, Optional

import pytest

from release_changelog.clients.github_client import GithubApiError
from release_changelog.configs.settings import ChangelogSettings


def make_item(title: str, number: int, *labels: str) -> Dict[str, Any]:
    """Raw search item the way GitHub returns it."""
    return {
        "number": number,
        "title": title,
        "url": f"https://api.github.com/repos/org/widget/issues/{number}",
        "html_url": f"https://github.com/org/widget/pull/{number}",
        "labels": [{"id": i, "name": name} for i, name in enumerate(labels)],
    }


class FakeGithubClient:
    """In-memory stand-in for GithubClient."""

    def __init__(self, releases: Optional[Dict[str, str]] = None, items: Optional[List[Dict[str, Any]]] = None,
                 latest: Optional[str] = None, token: Optional[str] = "tok"):
        self.releases = releases or {}
        self.items = items or []
        self.latest = latest
        self.token = token
        self.calls: List[tuple] = []
        self.search_error: Optional[GithubApiError] = None
        self.update_error: Optional[GithubApiError] = None
        self.updated: Dict[int, str] = {}
        self.closed = False

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def _release(self, tag: str) -> Dict[str, Any]:
        if tag not in self.releases:
            raise GithubApiError(f"release {tag} not found", code="NOT_FOUND", status_code=404)
        return {
            "id": sorted(self.releases).index(tag) + 1,
            "tag_name": tag,
            "created_at": self.releases[tag],
            "html_url": f"https://github.com/org/widget/releases/tag/{tag}",
        }

    def get_release_by_tag(self, owner, repo, tag):
        self.calls.append(("release", owner, repo, tag))
        return self._release(tag)

    def get_latest_release(self, owner, repo):
        self.calls.append(("latest", owner, repo))
        if self.latest is None:
            raise GithubApiError("no release", code="NOT_FOUND", status_code=404)
        return self._release(self.latest)

    def search_issues(self, query, page=1, per_page=100):
        self.calls.append(("search", query, page, per_page))
        if self.search_error is not None:
            raise self.search_error
        start = (page - 1) * per_page
        return {
            "total_count": len(self.items),
            "incomplete_results": False,
            "items": self.items[start:start + per_page],
        }

    def update_release(self, owner, repo, release_id, body):
        self.calls.append(("update", owner, repo, release_id))
        if self.update_error is not None:
            raise self.update_error
        self.updated[release_id] = body
        return {"id": release_id, "html_url": "https://github.com/org/widget/releases/1"}

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


@pytest.fixture
def fake_client():
    return FakeGithubClient(
        releases={
            "v1.0.0": "2023-01-01T00:00:00Z",
            "v1.1.0": "2023-02-01T00:00:00Z",
        },
        items=[
            make_item("Add export command", 15, "feature"),
            make_item("Fix crash on empty config", 12, "bug"),
        ],
        latest="v1.1.0",
    )


@pytest.fixture
def settings(tmp_path):
    return ChangelogSettings(
        owner="org",
        repo="widget",
        output=str(tmp_path / "release-note"),
        previous_release="v1.0.0",
        current_release="v1.1.0",
    )
