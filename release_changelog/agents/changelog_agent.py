#!/usr/bin/env python3
"""Changelog agent for GitHub releases.

This agent resolves the time window between two releases, searches the merged
pull requests inside it, renders them grouped by label and writes the result
to a file, optionally publishing it as the release body.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from release_changelog.clients.github_client import GithubClient
from release_changelog.configs.config import Config
from release_changelog.configs.settings import ChangelogSettings
from release_changelog.utils.changelog_models import ChangelogReport
from release_changelog.utils.issue_search import IssueSearchClient, SearchFetchError
from release_changelog.utils.label_grouper import fetch_label
from release_changelog.utils.metrics import Timer, record_publish, record_run
from release_changelog.utils.output_file import FileOpenError, open_output
from release_changelog.utils.query_builder import (
	QueryBuildError, TimeWindow, build_query, build_time_window, query_string,
)
from release_changelog.utils.release_publisher import ReleaseNotesPublisher, PublishError
from release_changelog.utils.release_time import ReleaseTimeResolver, TimeResolutionError
from release_changelog.utils.token_file import TokenFileError, load_token

# Set up logging
logger = logging.getLogger(__name__)


class ChangelogAgent:
	"""Agent generating a label-grouped changelog between two releases."""

	def __init__(self, settings: ChangelogSettings, client: Optional[GithubClient] = None):
		"""Initialize the changelog agent.

		Args:
			settings: Immutable run settings
			client: Optional GithubClient. If None, an anonymous one is created.
		"""
		self.settings = settings
		self.client = client or GithubClient()
		self.resolver = ReleaseTimeResolver(self.client)
		self.searcher = IssueSearchClient(self.client)
		self.publisher = ReleaseNotesPublisher(self.client)
		logger.info(f"Changelog agent initialized ({settings.auth_mode} access)")

	def resolve_window(self) -> Tuple[str, TimeWindow]:
		"""Resolve both release times, defaulting the current release to the latest one.

		Returns:
			The current release name and the merge window

		Raises:
			TimeResolutionError: If a release cannot be resolved
			InvalidWindowError: If the previous release is newer than the current one
		"""
		owner, repo = self.settings.owner, self.settings.repo
		previous = self.settings.previous_release
		current = self.settings.current_release

		try:
			with Timer("github.release.get", repo=repo, tag=previous):
				start = self.resolver.resolve(owner, repo, previous)
		except TimeResolutionError as e:
			logger.error(f"Failed to get created time of previous release -- {previous}: {e}")
			raise

		if not current:
			try:
				with Timer("github.release.latest", repo=repo):
					current = self.resolver.latest_release_name(owner, repo)
			except TimeResolutionError as e:
				logger.error(f"Failed to get latest release version when current_release is missing: {e}")
				raise
			logger.info(f"Last release version: {current}")

		try:
			with Timer("github.release.get", repo=repo, tag=current):
				end = self.resolver.resolve(owner, repo, current)
		except TimeResolutionError as e:
			logger.error(f"Failed to get created time of current release -- {current}: {e}")
			raise

		return current, build_time_window(start, end)

	def build_queries(self, window: TimeWindow) -> List[str]:
		s = self.settings
		return build_query(s.owner, s.repo, s.label, window, base_branch=s.base_branch)

	def run(self) -> bool:
		"""Generate the changelog file and optionally publish it.

		Every failure is logged and ends the run early.

		Returns:
			True when the changelog file was written
		"""
		s = self.settings
		try:
			f = open_output(s.output)
		except FileOpenError as e:
			logger.error(str(e))
			record_run(s.repo, step="output", code=e.code)
			return False

		with f:
			logger.info(f"Start fetching release note from {s.full_repo}")
			try:
				current, window = self.resolve_window()
				queries = self.build_queries(window)
			except (TimeResolutionError, QueryBuildError) as e:
				logger.error(f"Failed to create query string for {s.repo}: {e}")
				record_run(s.repo, step="window", code=e.code, previous_release=s.previous_release)
				return False

			logger.info(f"Query: {query_string(queries)}")
			try:
				with Timer("github.search", repo=s.repo):
					issues = self.searcher.search(queries)
			except SearchFetchError as e:
				logger.error(f"Failed to fetch PR with release note for {s.repo}: {e}")
				record_run(s.repo, step="search", code=e.code, current_release=current, previous_release=s.previous_release)
				return False

			report = ChangelogReport(
				repo=s.repo,
				current_release=current,
				previous_release=s.previous_release,
				issues=issues,
				web_links=s.web_links,
			)
			content = report.render()
			logger.info(f"Saving data on: {s.output}")
			f.write(content)
			record_run(
				s.repo,
				step="written",
				labels=[fetch_label(issue.labels) for issue in issues],
				current_release=current,
				previous_release=s.previous_release,
			)

		if s.save:
			self.publish(current, content)
		return True

	def publish(self, tag: str, content: str) -> bool:
		logger.info("Update GITHUB release notes")
		try:
			with Timer("github.release.update", repo=self.settings.repo, tag=tag):
				self.publisher.publish(self.settings.owner, self.settings.repo, tag, content)
		except PublishError as e:
			logger.error(f"Error updating release notes ({e.code}): {e}")
			record_publish(self.settings.repo, tag, code=e.code)
			return False
		record_publish(self.settings.repo, tag)
		return True


class CommandError(Exception):
	"""Raised instead of exiting when the command line cannot be parsed."""


class _Parser(argparse.ArgumentParser):
	def error(self, message):
		raise CommandError(f"{self.prog}: error: {message}")


def build_parser() -> argparse.ArgumentParser:
	parser = _Parser(
		prog="changelog",
		description="Changelog between GITHUB repository releases",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  changelog -r widget -p v1.0.0 -c v1.1.0
  changelog -u myorg -r widget -l release-note -p v1.0.0 -t ~/.github-token --save
		"""
	)
	parser.add_argument("--save", "-s", action="store_true", help="Save release notes on Github")
	parser.add_argument("--user", "-u", default=Config.DEFAULT_OWNER, help="Github owner or org")
	parser.add_argument("--repo", "-r", default="", help="Github repo")
	parser.add_argument("--label", "-l", default="", help="Release-note label")
	parser.add_argument("--output", "-o", default=Config.DEFAULT_OUTPUT, help="Path to output file")
	parser.add_argument("--token", "-t", default="", help="Github token file (optional, anonymous access without it)")
	parser.add_argument("--previous_release", "--previous-release", "-p", dest="previous_release", default="", help="Previous release")
	parser.add_argument("--current_release", "--current-release", "-c", dest="current_release", default="", help="Current release (latest release when empty)")
	parser.add_argument("--base", "-b", default=Config.DEFAULT_BASE_BRANCH, help="Base branch of the merged PRs")
	parser.add_argument("--web-links", "-w", dest="web_links", action="store_true", help="Link PRs to their web page instead of the API URL")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	"""CLI entry point for the changelog agent."""
	try:
		args = build_parser().parse_args(argv)
	except CommandError as e:
		print(e)
		return -1

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)
	if not args.verbose:
		logging.getLogger("urllib3").setLevel(logging.WARNING)

	settings = ChangelogSettings.from_args(args)

	token = None
	if settings.auth_mode == "token":
		try:
			token = load_token(settings.token_file)
		except TokenFileError as e:
			logger.critical(f"Error accessing user supplied token_file: {e}")
			return 1

	try:
		with GithubClient(token) as client:
			ChangelogAgent(settings, client).run()
	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())
