"""Base interface for vendor resolvers.

Resolvers look at one kind of evidence (an explicit hint, a property value,
a version suffix) and match it against the configured vendor signatures.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

from jdk_license_tracker.models import Vendor, VendorInfo


@dataclass(frozen=True)
class VendorSignature:
    """Configured text signature identifying one distribution.

    Patterns are lowercase substrings. A signature matches a piece of
    evidence when any pattern occurs in it and, for every entry in
    ``requires``, the named property contains one of the listed patterns.

    Attributes:
        vendor: Distribution the signature identifies.
        patterns: Substrings that identify the vendor.
        requires: (property key, patterns) pairs that must also match.
    """

    vendor: Vendor
    patterns: tuple[str, ...]
    requires: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def matches(self, value: str, evidence: "VendorEvidence") -> bool:
        """Check the signature against a piece of evidence.

        Args:
            value: Evidence text under test.
            evidence: All available evidence, for ``requires`` checks.

        Returns:
            True if the signature identifies the vendor.
        """
        lowered = value.lower()
        if not any(pattern in lowered for pattern in self.patterns):
            return False

        for key, patterns in self.requires:
            other = evidence.properties.get(key, "").lower()
            if not any(pattern in other for pattern in patterns):
                return False

        return True


@dataclass(frozen=True)
class VendorEvidence:
    """Everything the parser knows that can hint at a vendor.

    Attributes:
        properties: Extracted system properties.
        hint: Optional vendor hint supplied alongside the input.
        tags: Optional suffixes left over from the version strings.
    """

    properties: Mapping[str, str] = field(default_factory=dict)
    hint: Optional[str] = None
    tags: tuple[str, ...] = ()


class BaseVendorResolver(ABC):
    """Abstract base class for vendor resolvers.

    Attributes:
        signatures: Vendor signatures in matching order.
    """

    def __init__(self, signatures: Sequence[VendorSignature]) -> None:
        self.signatures = tuple(signatures)

    @abstractmethod
    def resolve(self, evidence: VendorEvidence) -> Optional[VendorInfo]:
        """Resolve the vendor from this resolver's kind of evidence.

        Args:
            evidence: Available vendor evidence.

        Returns:
            VendorInfo if a signature matched, None otherwise.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the resolver name for logging/debugging."""
        ...

    @property
    def priority(self) -> int:
        """Return resolver priority for waterfall ordering.

        Lower numbers are tried first. Default is 100.
        """
        return 100

    def _match(self, value: str, evidence: VendorEvidence) -> Optional[VendorSignature]:
        for signature in self.signatures:
            if signature.matches(value, evidence):
                return signature
        return None


class PropertyFieldResolver(BaseVendorResolver):
    """Resolver that inspects a fixed list of property keys in order.

    Subclasses set ``fields`` and, for circumstantial evidence, ``weak``.
    """

    fields: tuple[str, ...] = ()
    weak: bool = False

    def resolve(self, evidence: VendorEvidence) -> Optional[VendorInfo]:
        for key in self.fields:
            value = evidence.properties.get(key)
            if not value:
                continue
            signature = self._match(value, evidence)
            if signature is not None:
                return VendorInfo(
                    vendor=signature.vendor,
                    evidence=value,
                    source=key,
                    weak=self.weak,
                )
        return None
