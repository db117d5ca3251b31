#!/usr/bin/env python3
"""Publish the rendered changelog as the body of a GitHub release.

The release is looked up by tag and its body replaced. Failures carry a typed
code; callers log them and keep the local changelog file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from release_changelog.clients.github_client import GithubClient, GithubApiError
from release_changelog.configs.config import Config

logger = logging.getLogger(__name__)


class PublishError(Exception):
    def __init__(self, message: str, code: str = "UNKNOWN"):
        super().__init__(message)
        self.code = code


@dataclass
class ReleaseInfo:
    id: int
    tag_name: str
    html_url: str
    draft: bool
    prerelease: bool

    @classmethod
    def from_api(cls, data: Dict[str, Any], tag: str = "") -> "ReleaseInfo":
        try:
            release_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise PublishError(f"Release payload for {tag or 'release'} has no usable id", code="UNKNOWN") from e
        return cls(
            id=release_id,
            tag_name=data.get("tag_name", tag),
            html_url=data.get("html_url", ""),
            draft=bool(data.get("draft", False)),
            prerelease=bool(data.get("prerelease", False)),
        )


class ReleaseNotesPublisher:
    def __init__(self, client: GithubClient, *, body_max_chars: Optional[int] = None):
        self.client = client
        self.body_max_chars = body_max_chars or Config.RELEASE_BODY_MAX_CHARS

    def publish(self, owner: str, repo: str, tag: str, content: str) -> ReleaseInfo:
        """Replace the body of release ``tag`` with ``content``."""
        self._validate_body(content)
        if not self.client.authenticated:
            raise PublishError("Publishing release notes requires a token (--token)", code="UNAUTHORIZED")
        release = self.get_by_tag(owner, repo, tag)
        try:
            data = self.client.update_release(owner, repo, release.id, content)
        except GithubApiError as e:
            raise PublishError(f"Failed to update release {tag}: {e}", code=e.code) from e
        info = ReleaseInfo.from_api(data, tag)
        logger.info(f"Release notes published: {info.html_url or tag}")
        return info

    def get_by_tag(self, owner: str, repo: str, tag: str) -> ReleaseInfo:
        try:
            data = self.client.get_release_by_tag(owner, repo, tag)
        except GithubApiError as e:
            raise PublishError(f"Failed to look up release {tag}: {e}", code=e.code) from e
        return ReleaseInfo.from_api(data, tag)

    def _validate_body(self, body: str) -> None:
        if not body:
            raise PublishError("Empty release body", code="VALIDATION")
        if len(body) > self.body_max_chars:
            raise PublishError(
                f"Release body exceeds limit: len={len(body)} max={self.body_max_chars}",
                code="VALIDATION",
            )
