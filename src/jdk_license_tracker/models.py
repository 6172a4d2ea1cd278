"""Core data models for jdk_license_tracker.

This module defines the fundamental data structures used throughout the
analysis pipeline, including the canonical Java version number, vendor
tags, license determinations, lifecycle reference records, and the verdict
handed back to callers.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import total_ordering
from typing import Optional


class FormatEra(str, Enum):
    """Notation family a version string was written in."""

    LEGACY = "legacy"
    MODERN = "modern"
    VENDOR_UPDATE = "vendor-update"


class Vendor(str, Enum):
    """Closed set of known Java distributions."""

    OPENJDK = "openjdk"
    ORACLE = "oracle"
    ZULU = "zulu"
    TEMURIN = "temurin"
    CORRETTO = "corretto"
    MICROSOFT = "microsoft"
    LIBERICA = "liberica"
    SAPMACHINE = "sapmachine"
    SEMERU = "semeru"
    REDHAT = "redhat"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        """Return the human-readable distribution name (e.g. "OracleJDK")."""
        return _VENDOR_DISPLAY_NAMES[self]


_VENDOR_DISPLAY_NAMES = {
    Vendor.OPENJDK: "OpenJDK",
    Vendor.ORACLE: "OracleJDK",
    Vendor.ZULU: "Zulu",
    Vendor.TEMURIN: "Temurin",
    Vendor.CORRETTO: "Corretto",
    Vendor.MICROSOFT: "Microsoft",
    Vendor.LIBERICA: "Liberica",
    Vendor.SAPMACHINE: "SapMachine",
    Vendor.SEMERU: "Semeru",
    Vendor.REDHAT: "RedHat",
    Vendor.UNKNOWN: "Unknown",
}


def _absent_first(value: Optional[int]) -> int:
    # Absent components sort before 0 and never compare equal to it.
    return -1 if value is None else value


@total_ordering
@dataclass(frozen=True)
class VersionNumber:
    """Canonical, totally ordered Java version number.

    Legacy ``1.X.Y_U`` strings normalize to ``major=X, minor=Y, security=U``
    so that ``1.8.0_301`` and ``8.0.301`` compare equal. Components missing
    from the source string stay ``None`` rather than being filled with zero.

    Attributes:
        major: Feature release number (8, 11, 17, ...).
        minor: Interim number (modern) or micro number (legacy).
        security: Security/update number.
        patch: Emergency patch number (fourth modern component).
        pre: Pre-release identifier such as "ea".
        build: Build number from "+B" or "-bNN".
    """

    major: int
    minor: Optional[int] = None
    security: Optional[int] = None
    patch: Optional[int] = None
    pre: Optional[str] = None
    build: Optional[int] = None

    @property
    def sort_key(self) -> tuple:
        """Return the tuple used for ordering comparisons."""
        return (
            self.major,
            _absent_first(self.minor),
            _absent_first(self.security),
            _absent_first(self.patch),
            (1, "") if self.pre is None else (0, self.pre),
            _absent_first(self.build),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        text = str(self.major)
        for component in (self.minor, self.security, self.patch):
            if component is None:
                break
            text += f".{component}"
        if self.pre:
            text += f"-{self.pre}"
        if self.build is not None:
            text += f"+{self.build}"
        return text


@dataclass(frozen=True)
class VendorInfo:
    """Vendor tag attached to a parsed version.

    Attributes:
        vendor: Resolved distribution.
        evidence: Raw text that matched the vendor signature.
        source: Where the evidence came from (a property key or "hint").
        weak: True when the evidence was circumstantial (e.g. a build suffix).
    """

    vendor: Vendor
    evidence: str = ""
    source: Optional[str] = None
    weak: bool = False

    @property
    def is_known(self) -> bool:
        return self.vendor is not Vendor.UNKNOWN


@dataclass(frozen=True)
class VersionIdentity:
    """Canonical identity of a Java runtime version.

    Produced by the version parser and consumed by the license rule engine
    and risk classifier. Ordering goes through ``version``.

    Attributes:
        version: Canonical version number.
        era: Notation the version was written in.
        vendor: Resolved vendor information.
        raw: The version string the identity was built from.
        source_key: Property key the version string came from.
        release_date: Build date from ``java.version.date``, if known.
        tag: Optional vendor/distribution suffix (e.g. "LTS", "Ubuntu-120.04").
        confidence_notes: Reasons the parse fell back to a weaker path.
    """

    version: VersionNumber
    era: FormatEra
    vendor: VendorInfo
    raw: str
    source_key: str
    release_date: Optional[date] = None
    tag: Optional[str] = None
    confidence_notes: tuple[str, ...] = ()

    @property
    def major(self) -> int:
        return self.version.major

    @property
    def minor(self) -> Optional[int]:
        return self.version.minor

    @property
    def security(self) -> Optional[int]:
        return self.version.security

    @property
    def build(self) -> Optional[int]:
        return self.version.build

    @property
    def display_version(self) -> str:
        """Render the version in the notation of its own era.

        Returns:
            A string such as "1.8.0_301-b09" or "17.0.2+8" that parses back
            to the same ``VersionNumber``.
        """
        version = self.version
        if self.era is FormatEra.LEGACY:
            text = f"1.{version.major}"
            if version.minor is not None:
                text += f".{version.minor}"
                if version.security is not None:
                    text += f"_{version.security}"
            if version.pre:
                text += f"-{version.pre}"
            if version.build is not None:
                text += f"-b{version.build:02d}"
            return text
        if self.era is FormatEra.VENDOR_UPDATE:
            text = f"{version.major}.{version.minor}_{version.security}"
            if version.pre:
                text += f"-{version.pre}"
            if version.build is not None:
                text += f"-b{version.build:02d}"
            return text
        return str(version)


class ParseFailureReason(str, Enum):
    """Why an input could not be turned into a version identity."""

    MALFORMED = "Malformed"
    AMBIGUOUS_KEYS = "AmbiguousKeys"
    UNKNOWN_ERA = "UnknownEra"


@dataclass(frozen=True)
class ParseFailure:
    """Typed parse failure returned instead of a guessed version.

    Attributes:
        reason: Failure category.
        detail: Human-readable description naming the offending input.
    """

    reason: ParseFailureReason
    detail: str

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.detail}"


class LicenseFlag(str, Enum):
    COMMERCIAL = "Commercial"
    FREE = "Free"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class LicenseDetermination:
    """Result of evaluating the license rule chain.

    Attributes:
        flag: Whether a commercial license is required.
        explanation: Rendered explanation naming the concrete version/vendor.
        policy_source: Reference to the vendor policy behind the rule.
        rule_id: Identifier of the rule that matched.
        license_expression: Normalized license expression, if the rule has one.
    """

    flag: LicenseFlag
    explanation: str
    policy_source: str
    rule_id: str
    license_expression: Optional[str] = None

    @property
    def requires_commercial_license(self) -> bool:
        return self.flag is LicenseFlag.COMMERCIAL


@dataclass(frozen=True)
class LifecycleRecord:
    """Support lifecycle reference data for one (vendor, major) pair.

    Attributes:
        vendor: Distribution, or None for the vendor-neutral table.
        major: Feature release number.
        lts: True if the release is a long-term support release.
        eol_date: Last day of any security support, if announced.
        security_support_until: End of free/premier public updates, if known.
    """

    vendor: Optional[Vendor]
    major: int
    lts: bool
    eol_date: Optional[date] = None
    security_support_until: Optional[date] = None

    @property
    def key(self) -> tuple[Optional[Vendor], int]:
        return (self.vendor, self.major)


class RiskCategory(str, Enum):
    CURRENT = "Current"
    MAINTENANCE_LTS = "MaintenanceLTS"
    APPROACHING_EOL = "ApproachingEOL"
    END_OF_LIFE = "EndOfLife"
    UNSUPPORTED = "Unsupported"


@dataclass(frozen=True)
class RiskAssessment:
    """Outcome of lifecycle classification.

    Attributes:
        category: Operational risk category.
        record: Lifecycle record used, or None when the pair is untracked.
        reduced_confidence: True if a fallback table was used or nothing matched.
        days_until_eol: Days from ``as_of`` to the EOL date (negative once past).
        note: Why confidence was reduced, if it was.
    """

    category: RiskCategory
    record: Optional[LifecycleRecord] = None
    reduced_confidence: bool = False
    days_until_eol: Optional[int] = None
    note: Optional[str] = None


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    REDUCED = "reduced"


@dataclass(frozen=True)
class ParseConfidence:
    level: ConfidenceLevel
    reasons: tuple[str, ...] = ()

    @property
    def is_reduced(self) -> bool:
        return self.level is ConfidenceLevel.REDUCED


@dataclass(frozen=True)
class Verdict:
    """Complete analysis result for one input.

    Attributes:
        identity: Parsed version identity.
        license: License rule engine result.
        risk: Risk classifier result.
        parse_confidence: Whether any step fell back to a weaker path.
    """

    identity: VersionIdentity
    license: LicenseDetermination
    risk: RiskAssessment
    parse_confidence: ParseConfidence

    @property
    def risk_category(self) -> RiskCategory:
        return self.risk.category

    @property
    def requires_commercial_license(self) -> bool:
        return self.license.requires_commercial_license

    @property
    def is_older_than_jdk8(self) -> bool:
        return self.identity.major < 8
