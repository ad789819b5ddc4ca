"""
Error taxonomy. Every failure that aborts an invocation derives from
WaymarksError; the CLI reports it and exits non-zero.
"""

from __future__ import annotations


class WaymarksError(Exception):
    """Base class for all pipeline-fatal errors."""


class UnresolvedCountry(WaymarksError):
    """The country token matches neither a known ISO code nor a country name."""

    def __init__(self, token: str):
        super().__init__(f"Invalid country name or ISO: {token}")
        self.token = token


class AcquisitionError(WaymarksError):
    """Download, extraction or decoding of the reference dataset failed."""


class DecodeError(WaymarksError):
    """A persisted gazetteer file exists but does not hold valid content."""


class PersistError(WaymarksError):
    """A gazetteer file could not be written."""
