#!/usr/bin/env python3
"""Immutable per-run settings built once from parsed command-line arguments."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from release_changelog.configs.config import Config

AuthMode = Literal["token", "anonymous"]


class ChangelogSettings(BaseModel):
    """Everything a changelog run needs, passed explicitly to each component."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    save: bool = Field(False, description="Publish the changelog as the release body")
    owner: str = Field(default_factory=lambda: Config.DEFAULT_OWNER, description="Repository owner or organization")
    repo: str = Field("", description="Repository name")
    label: str = Field("", description="Label filter for the search query")
    output: str = Field(default_factory=lambda: Config.DEFAULT_OUTPUT, description="Output file path")
    token_file: Optional[str] = Field(None, description="Path to a file holding a GitHub token")
    previous_release: str = Field("", description="Previous release tag")
    current_release: str = Field("", description="Current release tag; latest release when empty")
    base_branch: str = Field(default_factory=lambda: Config.DEFAULT_BASE_BRANCH, description="Base branch of merged PRs")
    web_links: bool = Field(False, description="Link bullets to the web page instead of the API URL")
    verbose: bool = False

    @property
    def auth_mode(self) -> AuthMode:
        return "token" if self.token_file else "anonymous"

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_args(cls, args: Any) -> "ChangelogSettings":
        """Build settings from an argparse namespace."""
        return cls(
            save=bool(args.save),
            owner=args.user,
            repo=args.repo,
            label=args.label,
            output=args.output,
            token_file=args.token or None,
            previous_release=args.previous_release,
            current_release=args.current_release,
            base_branch=args.base,
            web_links=bool(getattr(args, "web_links", False)),
            verbose=bool(getattr(args, "verbose", False)),
        )
