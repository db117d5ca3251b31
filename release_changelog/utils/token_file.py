#!/usr/bin/env python3
"""Read a GitHub API token from a file."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class TokenFileError(Exception):
    """Raised when the user supplied token file cannot be used."""
    def __init__(self, message: str, code: str = "TOKEN_FILE") -> None:
        super().__init__(message)
        self.code = code


def load_token(path: str) -> str:
    """Return the token stored in ``path`` with surrounding whitespace removed.

    Raises:
        TokenFileError: If the file is missing, unreadable or empty
    """
    try:
        token = Path(path).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise TokenFileError(f"Cannot read token file {path}: {e}") from e
    if not token:
        raise TokenFileError(f"Token file {path} is empty")
    logger.debug(f"Loaded API token from {path}")
    return token
