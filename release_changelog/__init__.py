"""Changelog generator for GitHub releases."""

__version__ = "0.1.0"
