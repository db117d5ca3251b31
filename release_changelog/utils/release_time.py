#!/usr/bin/env python3
"""Resolve release tags to their creation time.

The search API filters merged PRs with ``merged:<start>..<end>``, so both
release instants are rendered as second-precision UTC strings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from release_changelog.clients.github_client import GithubClient, GithubApiError
from release_changelog.utils.changelog_models import ReleaseReference

logger = logging.getLogger(__name__)


class TimeResolutionError(Exception):
    """Raised when a release time cannot be resolved.

    ``code`` is NOT_FOUND for a missing release and TRANSPORT for API failures.
    """
    def __init__(self, message: str, code: str = "TRANSPORT") -> None:
        super().__init__(message)
        self.code = code


def format_utc_timestamp(dt: datetime) -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    t = dt.astimezone(timezone.utc)
    return "%04d-%02d-%02dT%02d:%02d:%02dZ" % (t.year, t.month, t.day, t.hour, t.minute, t.second)


def parse_github_timestamp(value: str) -> datetime:
    # fromisoformat only accepts a trailing Z from 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class ReleaseTimeResolver:
    """Look up release creation times on GitHub."""

    def __init__(self, client: GithubClient):
        self.client = client

    def reference(self, owner: str, repo: str, tag: str) -> ReleaseReference:
        """Return the release reference for ``tag``.

        Raises:
            TimeResolutionError: If the release is missing or the API call fails
        """
        if not tag:
            raise TimeResolutionError("Release tag is empty", code="NOT_FOUND")
        try:
            data = self.client.get_release_by_tag(owner, repo, tag)
        except GithubApiError as e:
            logger.error(f"Cannot get the creation time of {repo}/{tag}")
            if e.code == "NOT_FOUND":
                raise TimeResolutionError(f"Release {tag} not found in {owner}/{repo}", code="NOT_FOUND") from e
            raise TimeResolutionError(f"Failed to fetch release {tag} ({e.code}): {e}") from e

        created_at = data.get("created_at")
        if not created_at:
            raise TimeResolutionError(f"Release {tag} has no creation time", code="NOT_FOUND")
        try:
            created = parse_github_timestamp(created_at)
        except ValueError as e:
            raise TimeResolutionError(f"Unparseable creation time for {tag}: {created_at!r}") from e
        return ReleaseReference(tag=data.get("tag_name") or tag, created_at=created)

    def creation_time(self, owner: str, repo: str, tag: str) -> datetime:
        return self.reference(owner, repo, tag).created_at

    def resolve(self, owner: str, repo: str, tag: str) -> str:
        """Return the creation time of ``tag`` formatted for a search query."""
        return format_utc_timestamp(self.creation_time(owner, repo, tag))

    def latest_release_name(self, owner: str, repo: str) -> str:
        """Return the tag name of the latest published release."""
        try:
            data = self.client.get_latest_release(owner, repo)
        except GithubApiError as e:
            if e.code == "NOT_FOUND":
                raise TimeResolutionError(f"{owner}/{repo} has no published release", code="NOT_FOUND") from e
            raise TimeResolutionError(f"Failed to fetch latest release ({e.code}): {e}") from e
        name = data.get("tag_name") or ""
        if not name:
            raise TimeResolutionError(f"Latest release of {owner}/{repo} has no tag name", code="NOT_FOUND")
        return name
