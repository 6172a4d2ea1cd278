"""Waterfall vendor resolver orchestrating resolvers in priority order.

Resolution strategy:
1. Explicit vendor hint
2. ``java.vendor.version``
3. ``java.vendor`` / ``java.vm.vendor``
4. ``java.runtime.name`` / ``java.vm.name``
5. Distribution markers in version suffixes (weak)

The first resolver that matches a signature wins. When nothing matches the
vendor is ``Unknown``, which is a valid outcome rather than a failure.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from jdk_license_tracker.models import Vendor, VendorInfo
from jdk_license_tracker.resolvers.base import (
    BaseVendorResolver,
    VendorEvidence,
    VendorSignature,
)
from jdk_license_tracker.resolvers.hint import HintResolver
from jdk_license_tracker.resolvers.properties import (
    PropertyVendorResolver,
    RuntimeNameResolver,
    VendorVersionResolver,
)
from jdk_license_tracker.resolvers.suffix import SuffixResolver

logger = logging.getLogger(__name__)


class WaterfallVendorResolver:
    """Chains vendor resolvers, stopping at the first match.

    Attributes:
        resolvers: Resolvers sorted by ascending priority.
    """

    def __init__(
        self,
        signatures: Sequence[VendorSignature],
        resolvers: Optional[Sequence[BaseVendorResolver]] = None,
    ) -> None:
        """Initialize the waterfall.

        Args:
            signatures: Vendor signatures shared by the default resolvers.
            resolvers: Optional custom resolvers replacing the defaults.
        """
        if resolvers is None:
            resolvers = [
                HintResolver(signatures),
                VendorVersionResolver(signatures),
                PropertyVendorResolver(signatures),
                RuntimeNameResolver(signatures),
                SuffixResolver(signatures),
            ]
        self.resolvers = sorted(resolvers, key=lambda r: r.priority)

    def resolve(self, evidence: VendorEvidence) -> VendorInfo:
        """Resolve the vendor from all available evidence.

        Args:
            evidence: Properties, hint and version tags.

        Returns:
            VendorInfo from the first matching resolver, or ``Unknown``.
        """
        for resolver in self.resolvers:
            info = resolver.resolve(evidence)
            if info is not None:
                logger.debug(
                    "Resolver %s matched %s from %r",
                    resolver.name,
                    info.vendor.display_name,
                    info.evidence,
                )
                return info

        logger.debug("No vendor signature matched, vendor is Unknown")
        return VendorInfo(vendor=Vendor.UNKNOWN)
