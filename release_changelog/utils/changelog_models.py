#!/usr/bin/env python3
"""Pydantic models for the changelog data flow.

Issues come from the search endpoint, PR items are derived from them for
rendering, and a report ties the items to the two releases they span.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LabelInfo(BaseModel):
	"""A GitHub label attached to an issue or PR."""

	name: str = Field(..., description="Label name")

	model_config = ConfigDict(extra="ignore", frozen=True)


class Issue(BaseModel):
	"""A search hit as returned by the issue search endpoint."""

	number: Optional[int] = Field(None, description="Issue or PR number")
	title: str = Field(..., description="Issue title")
	url: str = Field(..., description="Canonical API URL of the issue")
	html_url: Optional[str] = Field(None, description="Web URL of the issue")
	labels: List[LabelInfo] = Field(default_factory=list, description="Labels in listed order")

	model_config = ConfigDict(extra="ignore", frozen=True)


class PRItem(BaseModel):
	"""One changelog bullet, classified by a single label."""

	title: str
	link: str
	type: str = ""

	model_config = ConfigDict(frozen=True)


class ReleaseReference(BaseModel):
	"""A release tag and its creation instant."""

	tag: str
	created_at: datetime

	model_config = ConfigDict(frozen=True)


class ChangelogReport(BaseModel):
	"""The rendered changelog for one repository and release pair."""

	repo: str
	current_release: str
	previous_release: str
	issues: List[Issue] = Field(default_factory=list)
	web_links: bool = False

	model_config = ConfigDict(frozen=True)

	def render(self) -> str:
		from release_changelog.utils.label_grouper import render

		return render(self.repo, self.current_release, self.previous_release, self.issues, web_links=self.web_links)
