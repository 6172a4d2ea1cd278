"""Grammars for the notations Java has used for its version strings.

Each grammar is a tagged variant recognizing one notation:

* ``LEGACY``: ``1.X[.Y[_U]][-suffix]`` as printed by Java 8 and earlier,
  e.g. ``1.8.0_301-b09``. The leading ``1.`` is dropped and ``X`` becomes the
  major version, so Java 8 is major 8 in both eras.
* ``MODERN``: JEP 223/322 ``X[.Y[.Z[.P]]][-pre][+build][-opt]``, e.g.
  ``17.0.2+8-LTS``. Also accepted for major 8 (``8.0.302+8``) because some
  distributions publish Java 8 in this form.
* ``VENDOR_UPDATE``: ``X.Y[.0]_U``, an underscore update number on a modern
  leading integer. Non-standard; accepted but reported at reduced confidence.

All patterns are anchored and use bounded digit runs, so matching is linear
in the length of the input.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from jdk_license_tracker.models import (
    FormatEra,
    ParseFailure,
    ParseFailureReason,
    VersionNumber,
)

MAX_TOKEN_LENGTH = 128

_SUFFIX = r"[0-9A-Za-z~+]+(?:[._\-][0-9A-Za-z~+]+)*"

LEGACY_PATTERN = re.compile(
    r"1\.(?P<major>\d{1,3})"
    r"(?:\.(?P<minor>\d{1,3})(?:_(?P<update>\d{1,4}))?)?"
    rf"(?:-(?P<suffix>{_SUFFIX}))?"
)

MODERN_PATTERN = re.compile(
    r"(?P<major>\d{1,4})"
    r"(?P<rest>(?:\.\d{1,5}){0,3})"
    r"(?:-(?P<pre>[0-9A-Za-z]+))?"
    r"(?:\+(?P<build>\d{1,5}))?"
    rf"(?:-(?P<opt>{_SUFFIX}))?"
)

VENDOR_UPDATE_PATTERN = re.compile(
    r"(?P<major>\d{1,4})\.(?P<minor>\d{1,3})(?:\.(?P<micro>\d{1,3}))?"
    r"_(?P<update>\d{1,4})"
    rf"(?:-(?P<suffix>{_SUFFIX}))?"
)

# HotSpot VM versions as reported in java.vm.version before Java 9
HOTSPOT_PATTERN = re.compile(r"\d{1,3}\.\d{1,4}-b\d{1,4}")

_BUILD_PART = re.compile(r"b(\d{1,5})")
_PRE_RELEASE_PARTS = frozenset({"ea"})


@dataclass(frozen=True)
class GrammarMatch:
    """A version string recognized by one grammar.

    Attributes:
        era: Grammar that recognized the string.
        version: Canonical version number.
        tag: Optional vendor/distribution suffix left over after parsing.
    """

    era: FormatEra
    version: VersionNumber
    tag: Optional[str] = None


@dataclass(frozen=True)
class Grammar:
    """One notation: a pattern, a builder, and the majors the era allows.

    Attributes:
        era: Format era this grammar recognizes.
        pattern: Anchored regular expression for the notation.
        builder: Turns a regex match into a ``GrammarMatch`` (None rejects it).
        min_major: Smallest major version valid in this era.
        max_major: Largest major version valid in this era, if bounded.
    """

    era: FormatEra
    pattern: re.Pattern
    builder: Callable[[re.Match], Optional[GrammarMatch]]
    min_major: int
    max_major: Optional[int] = None

    def match(self, text: str) -> Optional[GrammarMatch]:
        found = self.pattern.fullmatch(text)
        return self.builder(found) if found else None

    def accepts_major(self, major: int) -> bool:
        if major < self.min_major:
            return False
        return self.max_major is None or major <= self.max_major


def _split_suffix(suffix: Optional[str]) -> tuple[Optional[str], Optional[int], Optional[str]]:
    """Split a legacy-style suffix into pre-release, build and leftover tag.

    Args:
        suffix: Text after the first "-", e.g. "b09" or "ea-b12".

    Returns:
        Tuple of (pre, build, tag).
    """
    if not suffix:
        return None, None, None

    pre = None
    build = None
    leftover = []
    for part in re.split(r"[._\-]", suffix):
        build_match = _BUILD_PART.fullmatch(part)
        if build_match and build is None:
            build = int(build_match.group(1))
        elif part.lower() in _PRE_RELEASE_PARTS and pre is None:
            pre = part.lower()
        else:
            leftover.append(part)

    return pre, build, "-".join(leftover) or None


def _build_legacy(found: re.Match) -> GrammarMatch:
    minor = found.group("minor")
    update = found.group("update")
    pre, build, tag = _split_suffix(found.group("suffix"))
    return GrammarMatch(
        era=FormatEra.LEGACY,
        version=VersionNumber(
            major=int(found.group("major")),
            minor=int(minor) if minor is not None else None,
            security=int(update) if update is not None else None,
            pre=pre,
            build=build,
        ),
        tag=tag,
    )


def _build_modern(found: re.Match) -> GrammarMatch:
    components = [int(part) for part in found.group("rest").split(".")[1:]]
    components += [None] * (3 - len(components))
    minor, security, patch = components
    build = found.group("build")
    return GrammarMatch(
        era=FormatEra.MODERN,
        version=VersionNumber(
            major=int(found.group("major")),
            minor=minor,
            security=security,
            patch=patch,
            pre=found.group("pre"),
            build=int(build) if build is not None else None,
        ),
        tag=found.group("opt"),
    )


def _build_vendor_update(found: re.Match) -> Optional[GrammarMatch]:
    micro = found.group("micro")
    if micro is not None and int(micro) != 0:
        # X.Y.Z_U with a non-zero Z has no defined mapping
        return None
    pre, build, tag = _split_suffix(found.group("suffix"))
    return GrammarMatch(
        era=FormatEra.VENDOR_UPDATE,
        version=VersionNumber(
            major=int(found.group("major")),
            minor=int(found.group("minor")),
            security=int(found.group("update")),
            pre=pre,
            build=build,
        ),
        tag=tag,
    )


GRAMMARS: tuple[Grammar, ...] = (
    Grammar(FormatEra.LEGACY, LEGACY_PATTERN, _build_legacy, min_major=1, max_major=8),
    Grammar(FormatEra.MODERN, MODERN_PATTERN, _build_modern, min_major=8),
    Grammar(FormatEra.VENDOR_UPDATE, VENDOR_UPDATE_PATTERN, _build_vendor_update, min_major=8),
)


def match_version(
    text: str, grammars: Sequence[Grammar] = GRAMMARS
) -> Union[GrammarMatch, ParseFailure]:
    """Recognize a single version token.

    Every grammar is tried. Exactly one in-range match is required: no match
    at all is ``Malformed``, a shape that only matches outside its era's
    major range is ``UnknownEra``, and two grammars producing different
    versions is ``UnknownEra`` as well.

    Args:
        text: Version token, e.g. "1.8.0_301" or "17.0.2+8".
        grammars: Grammars to try.

    Returns:
        The unique ``GrammarMatch`` or a ``ParseFailure``.
    """
    token = text.strip()
    if not token:
        return ParseFailure(ParseFailureReason.MALFORMED, "version string is empty")
    if len(token) > MAX_TOKEN_LENGTH:
        return ParseFailure(
            ParseFailureReason.MALFORMED,
            f"version string is longer than {MAX_TOKEN_LENGTH} characters",
        )

    accepted: list[GrammarMatch] = []
    out_of_era: list[GrammarMatch] = []
    for grammar in grammars:
        result = grammar.match(token)
        if result is None:
            continue
        if grammar.accepts_major(result.version.major):
            accepted.append(result)
        else:
            out_of_era.append(result)

    if not accepted:
        if out_of_era:
            return ParseFailure(
                ParseFailureReason.UNKNOWN_ERA,
                f"{token!r} has major version {out_of_era[0].version.major}, "
                f"which no {out_of_era[0].era.value} release ever used",
            )
        return ParseFailure(
            ParseFailureReason.MALFORMED,
            f"{token!r} does not match any known Java version format",
        )

    distinct = {result.version for result in accepted}
    if len(distinct) > 1:
        eras = ", ".join(result.era.value for result in accepted)
        return ParseFailure(
            ParseFailureReason.UNKNOWN_ERA,
            f"{token!r} reads differently under the {eras} formats",
        )

    return accepted[0]


def parse_version_number(text: str) -> VersionNumber:
    """Parse a version token, raising on failure.

    Used for trusted configuration values such as rule thresholds.

    Args:
        text: Version token.

    Returns:
        The canonical version number.

    Raises:
        ValueError: If the token is not a recognizable version.
    """
    result = match_version(text)
    if isinstance(result, ParseFailure):
        raise ValueError(str(result))
    return result.version
