"""Version parser turning untrusted input into a canonical version identity.

The parser scans the input into Java system properties, picks the version
string by key precedence, recognizes it with exactly one grammar, and
attaches the vendor found by the vendor resolver. Problems with the input
are returned as ``ParseFailure`` values; nothing is guessed.

Key precedence:

1. ``java.runtime.version`` (most specific, carries the build number)
2. ``java.version``
3. ``java.vm.version``, only when neither of the above is present
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from types import MappingProxyType
from typing import Optional, Union

from jdk_license_tracker.grammars import GRAMMARS, HOTSPOT_PATTERN, Grammar, GrammarMatch, match_version
from jdk_license_tracker.models import (
    FormatEra,
    ParseFailure,
    ParseFailureReason,
    VersionIdentity,
    VersionNumber,
)
from jdk_license_tracker.reference import get_reference_data
from jdk_license_tracker.resolvers import VendorEvidence, WaterfallVendorResolver
from jdk_license_tracker.scanners import PropertyEntry, get_scanner

logger = logging.getLogger(__name__)

JAVA_VERSION = "java.version"
JAVA_RUNTIME_VERSION = "java.runtime.version"
JAVA_VM_VERSION = "java.vm.version"
JAVA_VERSION_DATE = "java.version.date"

VERSION_KEYS = (JAVA_RUNTIME_VERSION, JAVA_VERSION, JAVA_VM_VERSION)

# Placeholder some launchers print for properties they do not know
_UNAVAILABLE = "unavailable"

ParseResult = Union[VersionIdentity, ParseFailure]


def _conflicting_components(generic: VersionNumber, runtime: VersionNumber) -> list[str]:
    """List components that java.version states and java.runtime.version contradicts."""
    conflicts = []
    for name in ("minor", "security", "patch"):
        stated = getattr(generic, name)
        if stated is not None and getattr(runtime, name) != stated:
            conflicts.append(name)
    for name in ("pre", "build"):
        stated = getattr(generic, name)
        other = getattr(runtime, name)
        if stated is not None and other is not None and stated != other:
            conflicts.append(name)
    return conflicts


class VersionParser:
    """Parses raw version text into a ``VersionIdentity``.

    Attributes:
        vendor_resolver: Waterfall used to attribute the version to a vendor.
        grammars: Version grammars, each tried once per version string.
    """

    def __init__(
        self,
        vendor_resolver: WaterfallVendorResolver,
        grammars: Sequence[Grammar] = GRAMMARS,
    ) -> None:
        self.vendor_resolver = vendor_resolver
        self.grammars = tuple(grammars)

    def parse(self, raw: str, vendor_hint: Optional[str] = None) -> ParseResult:
        """Parse raw input into a version identity.

        Args:
            raw: A properties export, a ``java -version`` transcript, or a
                single version token.
            vendor_hint: Optional vendor name supplied alongside the input.

        Returns:
            The identity, or a ``ParseFailure`` naming what was wrong.
        """
        if not raw or not raw.strip():
            return ParseFailure(ParseFailureReason.MALFORMED, "input is empty")

        try:
            scanner = get_scanner(raw)
        except ValueError as e:
            return ParseFailure(ParseFailureReason.MALFORMED, str(e))

        logger.debug("Using scanner: %s", scanner.source_name)
        return self.parse_properties(scanner.scan(), vendor_hint)

    def parse_properties(
        self, entries: Iterable[PropertyEntry], vendor_hint: Optional[str] = None
    ) -> ParseResult:
        """Parse already extracted system properties.

        Args:
            entries: (key, value) pairs in input order; keys may repeat.
            vendor_hint: Optional vendor name supplied alongside the input.

        Returns:
            The identity, or a ``ParseFailure``.
        """
        properties: dict[str, str] = {}
        for key, value in entries:
            value = value.strip()
            if key in VERSION_KEYS:
                if not value or value.lower() == _UNAVAILABLE:
                    continue
                if key in properties and properties[key] != value:
                    return ParseFailure(
                        ParseFailureReason.AMBIGUOUS_KEYS,
                        f"{key} is given twice with different values: "
                        f"{properties[key]!r} and {value!r}",
                    )
            properties[key] = value

        runtime = properties.get(JAVA_RUNTIME_VERSION)
        generic = properties.get(JAVA_VERSION)
        notes: list[str] = []
        tags: list[str] = []

        if runtime is None and generic is None:
            vm_version = properties.get(JAVA_VM_VERSION)
            if vm_version is None:
                return ParseFailure(
                    ParseFailureReason.MALFORMED, "no Java version property found"
                )
            if HOTSPOT_PATTERN.fullmatch(vm_version):
                return ParseFailure(
                    ParseFailureReason.UNKNOWN_ERA,
                    f"{JAVA_VM_VERSION} {vm_version!r} is a HotSpot VM version, "
                    "not a Java version",
                )
            chosen = self._match(JAVA_VM_VERSION, vm_version)
            if isinstance(chosen, ParseFailure):
                return chosen
            source_key = JAVA_VM_VERSION
            notes.append(f"version taken from {JAVA_VM_VERSION} only")
        else:
            generic_match = self._match(JAVA_VERSION, generic) if generic is not None else None
            runtime_match = self._match(JAVA_RUNTIME_VERSION, runtime) if runtime is not None else None
            for result in (runtime_match, generic_match):
                if isinstance(result, ParseFailure):
                    return result

            if generic_match is not None and runtime_match is not None:
                failure = self._check_consistency(generic_match, runtime_match)
                if failure is not None:
                    return failure
                if generic_match.tag:
                    tags.append(generic_match.tag)

            if runtime_match is not None:
                chosen, source_key = runtime_match, JAVA_RUNTIME_VERSION
            else:
                chosen, source_key = generic_match, JAVA_VERSION

        if chosen.tag:
            tags.insert(0, chosen.tag)
        if chosen.era is FormatEra.VENDOR_UPDATE:
            notes.append("non-standard underscore update notation")

        release_date = None
        date_text = properties.get(JAVA_VERSION_DATE)
        if date_text:
            try:
                release_date = date.fromisoformat(date_text)
            except ValueError:
                notes.append(f"ignored unparseable {JAVA_VERSION_DATE} {date_text!r}")

        vendor = self.vendor_resolver.resolve(
            VendorEvidence(
                properties=MappingProxyType(properties),
                hint=vendor_hint,
                tags=tuple(tags),
            )
        )
        if not vendor.is_known:
            notes.append("vendor could not be determined")
        elif vendor.weak:
            notes.append(f"vendor inferred from {vendor.source} {vendor.evidence!r}")

        identity = VersionIdentity(
            version=chosen.version,
            era=chosen.era,
            vendor=vendor,
            raw=properties[source_key],
            source_key=source_key,
            release_date=release_date,
            tag=chosen.tag,
            confidence_notes=tuple(notes),
        )
        logger.debug(
            "Parsed %s %s from %s", vendor.vendor.display_name, identity.display_version, source_key
        )
        return identity

    def _match(self, key: str, value: str) -> Union[GrammarMatch, ParseFailure]:
        result = match_version(value, self.grammars)
        if isinstance(result, ParseFailure):
            return ParseFailure(result.reason, f"{key}: {result.detail}")
        return result

    def _check_consistency(
        self, generic: GrammarMatch, runtime: GrammarMatch
    ) -> Optional[ParseFailure]:
        if generic.version.major != runtime.version.major:
            return ParseFailure(
                ParseFailureReason.AMBIGUOUS_KEYS,
                f"{JAVA_VERSION} says major {generic.version.major} but "
                f"{JAVA_RUNTIME_VERSION} says major {runtime.version.major}",
            )

        conflicts = _conflicting_components(generic.version, runtime.version)
        if conflicts:
            return ParseFailure(
                ParseFailureReason.AMBIGUOUS_KEYS,
                f"{JAVA_VERSION} and {JAVA_RUNTIME_VERSION} disagree on "
                f"{', '.join(conflicts)}",
            )
        return None


def parse(raw: str, vendor_hint: Optional[str] = None) -> ParseResult:
    """Parse raw input using the default reference data.

    Args:
        raw: Raw version text.
        vendor_hint: Optional vendor name supplied alongside the input.

    Returns:
        The identity, or a ``ParseFailure``.
    """
    return VersionParser(get_reference_data().vendor_resolver()).parse(raw, vendor_hint)
