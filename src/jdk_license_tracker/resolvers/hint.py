"""Resolver for an explicit vendor hint supplied next to the input."""

import logging
from typing import Optional

from jdk_license_tracker.models import VendorInfo
from jdk_license_tracker.resolvers.base import BaseVendorResolver, VendorEvidence

logger = logging.getLogger(__name__)


class HintResolver(BaseVendorResolver):
    """Matches the caller's vendor hint (e.g. "Oracle") against signatures.

    A hint that matches no signature is ignored so that the property-based
    resolvers still get a chance.

    Priority: 10 (an explicit hint beats anything found in the text)
    """

    @property
    def name(self) -> str:
        return "hint"

    @property
    def priority(self) -> int:
        return 10

    def resolve(self, evidence: VendorEvidence) -> Optional[VendorInfo]:
        hint = (evidence.hint or "").strip()
        if not hint:
            return None

        signature = self._match(hint, evidence)
        if signature is None:
            logger.debug("Vendor hint %r matches no known vendor signature", hint)
            return None

        return VendorInfo(vendor=signature.vendor, evidence=hint, source="hint")
