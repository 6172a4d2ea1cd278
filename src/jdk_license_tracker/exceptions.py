"""Exceptions raised by jdk_license_tracker.

Parse problems with untrusted input are not exceptions: they come back as
``ParseFailure`` values. The classes here cover configuration integrity,
unreadable input files, and reference data downloads.
"""

from pathlib import Path
from typing import Optional, Union


class TrackerError(Exception):
    """Base exception class for all jdk_license_tracker errors."""


class ConfigurationError(TrackerError):
    """Raised when settings, rules, or lifecycle data fail integrity checks.

    Fatal at startup: nothing should be analyzed with a rule set or
    reference table that failed validation.
    """

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None):
        self.source = str(source) if source is not None else None

        if source is not None:
            message = f"Configuration error in '{source}': {message}"

        super().__init__(message)


class InputError(TrackerError):
    """Raised when an input file cannot be read or exceeds safety limits."""

    def __init__(self, message: str, name: Optional[str] = None):
        self.name = name

        if name:
            message = f"{name}: {message}"

        super().__init__(message)


class DataFetchError(TrackerError):
    """Raised when lifecycle reference data cannot be downloaded."""
