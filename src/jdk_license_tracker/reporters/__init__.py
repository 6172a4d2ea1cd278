"""Output reporters for verdict reports.

This module provides reporters for rendering analysis results to Markdown
and JSON.
"""

from jdk_license_tracker.reporters.base import BaseReporter
from jdk_license_tracker.reporters.json import JsonReporter
from jdk_license_tracker.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "JsonReporter", "MarkdownReporter", "get_reporter"]

_REPORTERS: dict[str, type[BaseReporter]] = {
    "markdown": MarkdownReporter,
    "json": JsonReporter,
}


def get_reporter(format_name: str) -> BaseReporter:
    """Get a reporter for the given output format.

    Args:
        format_name: "markdown" or "json".

    Returns:
        Reporter instance.

    Raises:
        ValueError: If the format is not supported.
    """
    try:
        return _REPORTERS[format_name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unsupported format {format_name!r}, expected one of: {', '.join(_REPORTERS)}"
        ) from None
