#!/usr/bin/env python3
"""GitHub REST API client used by the changelog generator.

This module wraps a ``requests`` session with the handful of endpoints the
changelog needs: release lookup, issue search and release updates. Requests
are authenticated when a token is supplied and anonymous otherwise.
"""

import logging
from typing import Dict, Any, Optional

import requests
from requests.utils import quote

from release_changelog.configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GithubApiError(Exception):
    """Raised when a GitHub API call fails, with a typed code."""
    def __init__(self, message: str, code: str = "UNKNOWN", status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class GithubClient:
    """Minimal GitHub REST client for releases and issue search."""

    def __init__(self, token: Optional[str] = None, timeout_s: Optional[int] = None, base_url: Optional[str] = None):
        """Initialize the GitHub client.

        Args:
            token: GitHub Personal Access Token; anonymous access when None
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            base_url: API root (defaults to Config.GITHUB_API_URL)
        """
        github_config = Config.get_github_config()
        self.token = token
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.base_url = (base_url or github_config["base_url"]).rstrip("/")

        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': github_config["user_agent"],
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'
            logger.info("GitHub client initialized (authenticated)")
        else:
            logger.info("GitHub client initialized (anonymous, low rate limit)")

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Dict[str, Any]:
        """Fetch a release by its tag name.

        Raises:
            GithubApiError: NOT_FOUND when no release carries this tag
        """
        # tags may hold #, ? or %, which must not leak into the path
        url = f"{self.base_url}/repos/{owner}/{repo}/releases/tags/{quote(tag, safe='')}"
        logger.info(f"Fetching release: {owner}/{repo}@{tag}")
        return self._request("GET", url, what=f"release {owner}/{repo}@{tag}")

    def get_latest_release(self, owner: str, repo: str) -> Dict[str, Any]:
        """Fetch the latest published (non-draft, non-prerelease) release."""
        url = f"{self.base_url}/repos/{owner}/{repo}/releases/latest"
        logger.info(f"Fetching latest release: {owner}/{repo}")
        return self._request("GET", url, what=f"latest release of {owner}/{repo}")

    def search_issues(self, query: str, page: int = 1, per_page: int = 100) -> Dict[str, Any]:
        """Run one page of an issue search.

        Returns:
            Raw search page with ``total_count``, ``incomplete_results`` and ``items``
        """
        url = f"{self.base_url}/search/issues"
        params = {'q': query, 'page': page, 'per_page': per_page}
        logger.debug(f"Searching issues page {page}: {query}")
        return self._request("GET", url, params=params, what="issue search")

    def update_release(self, owner: str, repo: str, release_id: int, body: str) -> Dict[str, Any]:
        """Replace the body of an existing release."""
        url = f"{self.base_url}/repos/{owner}/{repo}/releases/{release_id}"
        logger.info(f"Updating release body: {owner}/{repo} id={release_id}")
        return self._request("PATCH", url, payload={"body": body}, what=f"release {owner}/{repo} id={release_id}")

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        what: str = "resource",
    ) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, params=params, json=payload, timeout=self.timeout_s)
        except requests.Timeout as e:
            raise GithubApiError(f"Timeout while fetching {what}: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"Failed to fetch {what}: {e}", code="NETWORK")

        sc = response.status_code
        if sc == 401:
            raise GithubApiError("Invalid GitHub token or insufficient permissions", code="UNAUTHORIZED", status_code=sc)
        if sc == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                raise GithubApiError("GitHub API rate limit exhausted", code="RATE_LIMIT", status_code=sc)
            raise GithubApiError(f"Access to {what} forbidden", code="UNAUTHORIZED", status_code=sc)
        if sc == 404:
            raise GithubApiError(f"{what} not found", code="NOT_FOUND", status_code=sc)
        if sc == 422:
            raise GithubApiError(f"GitHub rejected request for {what}: {_error_detail(response)}", code="VALIDATION", status_code=sc)
        if sc == 429:
            raise GithubApiError("GitHub API rate limit exceeded", code="RATE_LIMIT", status_code=sc)
        if sc >= 500:
            raise GithubApiError(f"GitHub server error: HTTP {sc}", code="NETWORK", status_code=sc)
        if sc >= 400:
            raise GithubApiError(f"GitHub API error: HTTP {sc}", status_code=sc)

        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and remaining.isdigit() and int(remaining) < 10:
            logger.warning(f"GitHub API rate limit low: {remaining} requests remaining")

        try:
            return response.json()
        except ValueError as e:
            raise GithubApiError(f"Invalid JSON in response for {what}: {e}", status_code=sc)

    def close(self) -> None:
        """Close the GitHub client session."""
        if self.session:
            self.session.close()
            logger.debug("GitHub client session closed")

    def __enter__(self) -> "GithubClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _error_detail(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    return str(data.get("message", "")) if isinstance(data, dict) else str(data)[:200]
