"""Input scanners for the shapes raw version text arrives in.

This module provides scanners for extracting Java system properties from
properties exports, ``java -version`` transcripts, and bare version tokens.
"""

from jdk_license_tracker.scanners.base import BaseScanner, PropertyEntry
from jdk_license_tracker.scanners.properties import PropertiesScanner
from jdk_license_tracker.scanners.token import TokenScanner
from jdk_license_tracker.scanners.version_output import VersionOutputScanner

__all__ = [
    "BaseScanner",
    "PropertiesScanner",
    "PropertyEntry",
    "TokenScanner",
    "VersionOutputScanner",
    "get_scanner",
]

# Registry of available scanners in priority order
_SCANNERS: list[type[BaseScanner]] = [
    VersionOutputScanner,
    PropertiesScanner,
    TokenScanner,
]


def get_scanner(text: str) -> BaseScanner:
    """Get the appropriate scanner for the given text.

    Auto-detects the input shape and returns the matching scanner instance.

    Args:
        text: Raw input text.

    Returns:
        Scanner instance bound to the text.

    Raises:
        ValueError: If no scanner recognizes the text.
    """
    for scanner_cls in _SCANNERS:
        if scanner_cls.can_handle(text):
            return scanner_cls(text)

    raise ValueError(
        "Input is not a properties export, a java -version transcript, "
        "or a single version token"
    )
