import os
from typing import Dict, Any

from dotenv import load_dotenv

from release_changelog import __version__

load_dotenv()


class Config:
	"""Configuration for the changelog generator."""

	# GitHub REST API
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	USER_AGENT = os.getenv("USER_AGENT", f"release-changelog/{__version__}")

	# Search paging; GitHub never returns more than 1000 search results
	SEARCH_PER_PAGE = int(os.getenv("SEARCH_PER_PAGE", "100"))
	SEARCH_MAX_PAGES = int(os.getenv("SEARCH_MAX_PAGES", "10"))

	# Release publishing
	RELEASE_BODY_MAX_CHARS = int(os.getenv("RELEASE_BODY_MAX_CHARS", "125000"))

	# CLI defaults
	DEFAULT_OWNER = os.getenv("CHANGELOG_DEFAULT_OWNER", "knabben")
	DEFAULT_OUTPUT = os.getenv("CHANGELOG_DEFAULT_OUTPUT", "./release-note")
	DEFAULT_BASE_BRANCH = os.getenv("CHANGELOG_DEFAULT_BASE", "master")

	# Observability
	METRICS_ENABLED = bool(int(os.getenv("METRICS_ENABLED", "0")))
	METRICS_ROOT = os.getenv("METRICS_ROOT", ".cache/release_changelog/metrics")

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"base_url": cls.GITHUB_API_URL,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"user_agent": cls.USER_AGENT,
		}

	@classmethod
	def get_search_config(cls) -> Dict[str, int]:
		return {
			"per_page": cls.SEARCH_PER_PAGE,
			"max_pages": cls.SEARCH_MAX_PAGES,
		}

	@classmethod
	def observability(cls) -> Dict[str, Any]:
		return {
			"metrics_root": cls.METRICS_ROOT,
			"metrics_enabled": cls.METRICS_ENABLED,
		}
