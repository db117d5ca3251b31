#!/usr/bin/env python3
"""Issue search wrapper for collecting merged pull requests.

This module runs a search query across result pages and normalizes the raw
items into ``Issue`` models for rendering.
"""

import logging
from typing import Dict, List, Any, Optional, Sequence

from release_changelog.clients.github_client import GithubClient, GithubApiError
from release_changelog.configs.config import Config
from release_changelog.utils.changelog_models import Issue, LabelInfo
from release_changelog.utils.query_builder import query_string

# Set up logging
logger = logging.getLogger(__name__)


class SearchFetchError(Exception):
    """Raised when the issue search fails, with a typed code for friendly handling."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


class IssueSearchClient:
    """Fetches every issue matching a search query."""

    def __init__(self, client: GithubClient, per_page: Optional[int] = None, max_pages: Optional[int] = None):
        """Initialize the search client.

        Args:
            client: GitHub REST client
            per_page: Results per page (defaults to Config.SEARCH_PER_PAGE)
            max_pages: Page limit (defaults to Config.SEARCH_MAX_PAGES)
        """
        search_config = Config.get_search_config()
        self.client = client
        self.per_page = per_page or search_config["per_page"]
        self.max_pages = max_pages or search_config["max_pages"]

    def search(self, queries: Sequence[str]) -> List[Issue]:
        """Run the query made of ``queries`` and return all matching issues.

        Raises:
            SearchFetchError: If any page fails to load
        """
        query = query_string(queries)
        issues: List[Issue] = []
        page = 1
        total = 0

        try:
            while True:
                data = self.client.search_issues(query, page=page, per_page=self.per_page)
                items = data.get("items") or []
                total = int(data.get("total_count") or 0)
                if data.get("incomplete_results"):
                    logger.warning(f"Search results for page {page} are incomplete (query timed out upstream)")

                issues.extend(self._normalize_issue(item) for item in items)

                if len(items) < self.per_page or len(issues) >= total:
                    break
                if page >= self.max_pages:
                    logger.warning(f"Search matched {total} issues, truncating at {len(issues)}")
                    break
                page += 1
        except GithubApiError as e:
            message = self._friendly_message_from_code(e.code, fallback=f"Failed to search issues: {e}")
            raise SearchFetchError(message, code=e.code) from e

        logger.debug(f"✓ Fetched {len(issues)} of {total} issues in {page} page(s)")
        return issues

    def _normalize_issue(self, item: Dict[str, Any]) -> Issue:
        labels_data = item.get("labels") or []
        labels = [LabelInfo(name=label["name"]) for label in labels_data if label.get("name")]
        return Issue(
            number=item.get("number"),
            title=item.get("title") or "",
            url=item.get("url") or "",
            html_url=item.get("html_url"),
            labels=labels,
        )

    def _friendly_message_from_code(self, code: str, *, fallback: str) -> str:
        mapping = {
            "TIMEOUT": "Timeout while searching issues. Please retry or increase HTTP_TIMEOUT_S.",
            "UNAUTHORIZED": "Access denied. Please check your GitHub token and its scopes.",
            "RATE_LIMIT": "Rate limit exceeded. Please wait a few minutes or pass --token.",
            "NETWORK": "Network error while contacting GitHub. Please retry.",
            "VALIDATION": "GitHub rejected the search query. Please check repository and label.",
        }
        return mapping.get(code, fallback)
