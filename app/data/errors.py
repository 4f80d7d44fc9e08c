"""
Load-time error taxonomy.

DataLoadError and its subclasses abort startup. TimestampParseError is
row-level: the loader catches it, logs and skips the row.
"""
from __future__ import annotations


class DataLoadError(Exception):
    """The source dataset could not be loaded at all."""


class SourceUnavailableError(DataLoadError):
    """The source file could not be opened."""


class HeaderReadError(DataLoadError):
    """The header row could not be consumed."""


class TimestampParseError(ValueError):
    """No accepted timestamp format matched."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"unable to parse timestamp: {raw!r}")
        self.raw = raw
