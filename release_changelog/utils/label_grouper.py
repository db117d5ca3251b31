#!/usr/bin/env python3
from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from release_changelog.utils.changelog_models import Issue, LabelInfo, PRItem


def fetch_label(labels: Sequence[LabelInfo]) -> str:
	# first listed label wins, secondary labels are not rendered
	for label in labels or []:
		return label.name
	return ""


def capitalize_words(label: str) -> str:
	"""Upper-case the first letter of each word and leave the rest untouched."""
	out: List[str] = []
	prev = " "
	for ch in label:
		at_word_start = not (prev.isalnum() or prev == "_")
		out.append(ch.upper() if at_word_start else ch)
		prev = ch
	return "".join(out)


def issue_link(issue: Issue, web_links: bool = False) -> str:
	# API URL by default, web URL only when asked for and present
	if web_links and issue.html_url:
		return issue.html_url
	return issue.url


def to_pr_items(issues: Iterable[Issue], web_links: bool = False) -> List[PRItem]:
	return [
		PRItem(title=issue.title, link=issue_link(issue, web_links), type=fetch_label(issue.labels))
		for issue in issues
	]


def sort_by_label(items: Iterable[PRItem]) -> List[PRItem]:
	# sorted() is stable, ties keep fetch order
	return sorted(items, key=lambda it: it.type)


def header_line(repo: str, current_release: str, previous_release: str) -> str:
	return f"{repo}: {current_release} -- {previous_release}\n"


def render(
	repo: str, current_release: str, previous_release: str, issues: Iterable[Issue], web_links: bool = False,
) -> str:
	content = header_line(repo, current_release, previous_release)
	seen: Set[str] = set()
	for item in sort_by_label(to_pr_items(issues, web_links)):
		# unlabeled items sort first and stay under the header line
		if item.type and item.type not in seen:
			content += f"\n## {capitalize_words(item.type)}\n"
			seen.add(item.type)
		content += f"* {item.title} - {item.link}\n"
	return content
