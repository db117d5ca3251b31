#!/usr/bin/env python3
"""Assemble the issue search query for merged PRs between two releases."""

from __future__ import annotations

import logging
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class QueryBuildError(Exception):
    def __init__(self, message: str, code: str = "QUERY_BUILD") -> None:
        super().__init__(message)
        self.code = code


class InvalidWindowError(QueryBuildError):
    """Raised when the previous release is newer than the current one."""
    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_WINDOW")


class TimeWindow(BaseModel):
    """Merge window between two formatted UTC instants."""

    start: str
    end: str

    model_config = ConfigDict(frozen=True)

    @property
    def range_expr(self) -> str:
        return f"{self.start}..{self.end}"


def build_time_window(start: str, end: str) -> TimeWindow:
    # Fixed-width YYYY-MM-DDTHH:MM:SSZ strings order the same as the instants
    if start and end and start > end:
        raise InvalidWindowError(f"Previous release ({start}) is newer than current release ({end})")
    return TimeWindow(start=start, end=end)


def add_query(queries: Sequence[str], *query_parts: str) -> List[str]:
    """Return ``queries`` plus ``key:part1part2...`` built from ``query_parts``.

    The clause is dropped when fewer than two parts are given or any part is
    empty, so an unset filter becomes a no-op.
    """
    if len(query_parts) < 2:
        logger.debug(f"Not enough to form a query: {list(query_parts)}")
        return list(queries)
    if any(part == "" for part in query_parts):
        logger.debug(f"Skipping query clause with empty part: {list(query_parts)}")
        return list(queries)
    key, values = query_parts[0], query_parts[1:]
    return list(queries) + [f"{key}:{''.join(values)}"]


def build_query(owner: str, repo: str, label: str, window: TimeWindow, base_branch: str = "master") -> List[str]:
    """Build the search clauses for merged PRs of ``owner/repo`` inside ``window``."""
    queries: List[str] = []
    queries = add_query(queries, "repo", owner, "/", repo)
    queries = add_query(queries, "label", label)
    queries = add_query(queries, "is", "merged")
    queries = add_query(queries, "type", "pr")
    queries = add_query(queries, "merged", window.start, "..", window.end)
    queries = add_query(queries, "base", base_branch)
    return queries


def query_string(queries: Sequence[str]) -> str:
    return " ".join(queries)
