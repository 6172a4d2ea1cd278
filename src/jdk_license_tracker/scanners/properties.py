"""Scanner for Java properties exports.

Handles files written by ``java.util.Properties.store`` as well as the
indented ``java -XshowSettings:properties`` listing. Implements the parts of
the ``.properties`` grammar that matter for system property dumps: comment
lines, ``=``/``:``/whitespace separators, backslash escapes (including
``\\uXXXX``) and line continuations.
"""

import logging
import re
from collections.abc import Iterator

from jdk_license_tracker.scanners.base import BaseScanner, PropertyEntry

logger = logging.getLogger(__name__)

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"

_ESCAPE_PATTERN = re.compile(r"\\(?:u([0-9a-fA-F]{4})|(.))", re.DOTALL)
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(text: str) -> str:
    def replace(match: re.Match) -> str:
        if match.group(1) is not None:
            return chr(int(match.group(1), 16))
        char = match.group(2)
        return _ESCAPES.get(char, char)

    return _ESCAPE_PATTERN.sub(replace, text)


def _logical_lines(text: str) -> Iterator[str]:
    """Join continuation lines and drop comments and blank lines."""
    pending: list[str] = []
    for physical in text.splitlines():
        line = physical.lstrip(_WHITESPACE)

        if not pending and (not line or line[0] in "#!"):
            continue

        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending.append(line[:-1])
            continue

        pending.append(line)
        yield "".join(pending)
        pending = []

    if pending:
        yield "".join(pending)


def _split_entry(line: str) -> PropertyEntry:
    """Split a logical line into an unescaped key and value."""
    end = 0
    length = len(line)
    while end < length:
        char = line[end]
        if char == "\\":
            end += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        end += 1

    key = line[: min(end, length)]
    start = end
    while start < length and line[start] in _WHITESPACE:
        start += 1
    if start < length and line[start] in _SEPARATORS:
        start += 1
    while start < length and line[start] in _WHITESPACE:
        start += 1

    return _unescape(key), _unescape(line[start:])


class PropertiesScanner(BaseScanner):
    """Scanner for ``key=value`` style Java system property dumps."""

    KEY_LINE_PATTERN = re.compile(
        r"^[ \t\f]*(?:[A-Za-z0-9_.\-]+[ \t\f]*[=:]|java\.[A-Za-z0-9_.\-]+[ \t\f]+\S)",
        re.MULTILINE,
    )

    @classmethod
    def can_handle(cls, text: str) -> bool:
        """Check for at least one property-shaped line.

        A line counts when it reads ``key=value`` or ``key: value``, or when a
        ``java.*`` key is separated from its value by whitespace only. Other
        keys need an explicit separator so that free prose is not taken for a
        properties file.

        Args:
            text: Raw input text.

        Returns:
            True if a property-shaped line is present.
        """
        return cls.KEY_LINE_PATTERN.search(text) is not None

    @property
    def source_name(self) -> str:
        return "properties"

    def scan(self) -> list[PropertyEntry]:
        """Parse the text as a Java properties document.

        Returns:
            List of (key, value) pairs in document order; values are stripped
            of trailing whitespace.
        """
        entries = []
        for line in _logical_lines(self.text):
            key, value = _split_entry(line)
            if not key:
                logger.debug("Skipping property line without a key: %.50s", line)
                continue
            entries.append((key, value.rstrip()))
        return entries
