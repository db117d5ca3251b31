#!/usr/bin/env python3
"""Open the changelog output file for a single truncating write."""

from __future__ import annotations

import os
from typing import IO


class FileOpenError(Exception):
    def __init__(self, message: str, code: str = "FILE_OPEN") -> None:
        super().__init__(message)
        self.code = code


def open_output(path: str) -> IO[str]:
    """Open ``path`` for writing, creating it with mode 0600 or truncating it.

    Raises:
        FileOpenError: If the file cannot be opened or created
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_TRUNC | os.O_CREAT, 0o600)
    except OSError as e:
        raise FileOpenError(f"Failed to open and/or create output file {path}: {e}") from e
    return os.fdopen(fd, "w", encoding="utf-8")
