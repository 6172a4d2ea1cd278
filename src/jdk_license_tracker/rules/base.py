"""License rule data structures.

A rule pairs a declarative predicate with the license flag it yields. Rules
are evaluated as an ordered sequence and the first matching rule wins.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Optional

from jdk_license_tracker.models import LicenseFlag, Vendor, VersionIdentity, VersionNumber


@dataclass(frozen=True)
class RulePredicate:
    """Declarative conditions a version identity must satisfy.

    Every condition left as None is ignored, so an empty predicate matches
    everything. Version thresholds compare canonical ``VersionNumber``s and
    are therefore era-independent.

    Attributes:
        vendors: Vendors the rule applies to, or None for any vendor.
        major_min: Smallest matching major version (inclusive).
        major_max: Largest matching major version (inclusive).
        version_min: Smallest matching version (inclusive).
        version_below: Versions must be strictly below this.
        requires_security: Identity must carry an update/security number.
        released_on_or_after: Build date must be known and on/after this.
        released_before: Build date must be known and before this.
        as_of_on_or_after: Evaluation date must be given and on/after this.
    """

    vendors: Optional[frozenset[Vendor]] = None
    major_min: Optional[int] = None
    major_max: Optional[int] = None
    version_min: Optional[VersionNumber] = None
    version_below: Optional[VersionNumber] = None
    requires_security: Optional[bool] = None
    released_on_or_after: Optional[date] = None
    released_before: Optional[date] = None
    as_of_on_or_after: Optional[date] = None

    def matches(self, identity: VersionIdentity, as_of: Optional[date] = None) -> bool:
        """Check whether the identity satisfies every condition.

        Args:
            identity: Parsed version identity.
            as_of: Evaluation date, if any.

        Returns:
            True if all conditions hold.
        """
        if self.vendors is not None and identity.vendor.vendor not in self.vendors:
            return False
        if self.major_min is not None and identity.major < self.major_min:
            return False
        if self.major_max is not None and identity.major > self.major_max:
            return False
        if self.version_min is not None and identity.version < self.version_min:
            return False
        if self.version_below is not None and not identity.version < self.version_below:
            return False
        if self.requires_security is not None and (
            (identity.security is not None) != self.requires_security
        ):
            return False

        released = identity.release_date
        if self.released_on_or_after is not None and (
            released is None or released < self.released_on_or_after
        ):
            return False
        if self.released_before is not None and (
            released is None or released >= self.released_before
        ):
            return False
        if self.as_of_on_or_after is not None and (
            as_of is None or as_of < self.as_of_on_or_after
        ):
            return False

        return True

    @property
    def conditions(self) -> tuple[tuple[str, Any], ...]:
        """Return the set conditions other than the vendor filter."""
        return tuple(
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if f.name != "vendors" and getattr(self, f.name) is not None
        )

    @property
    def is_unconditional(self) -> bool:
        """True if the predicate matches every identity."""
        return self.vendors is None and not self.conditions

    def overlaps_vendors(self, other: "RulePredicate") -> bool:
        if self.vendors is None or other.vendors is None:
            return True
        return bool(self.vendors & other.vendors)


@dataclass(frozen=True)
class LicenseRule:
    """One entry of the ordered license rule chain.

    Attributes:
        rule_id: Unique identifier, reported with every determination.
        predicate: Conditions under which the rule applies.
        flag: License flag the rule yields.
        explanation: Jinja2 template for the human-readable explanation.
        policy_source: Reference to the vendor policy behind the rule.
        license_expression: SPDX-style license expression, if known.
        cutoff: Policy cutoff date exposed to the explanation template.
    """

    rule_id: str
    predicate: RulePredicate
    flag: LicenseFlag
    explanation: str
    policy_source: str
    license_expression: Optional[str] = None
    cutoff: Optional[date] = None
