"""Resolver for distribution markers embedded in version suffixes.

Linux distributions and some vendors tag their builds in the optional part
of the version string, e.g. ``17.0.2+8-Ubuntu-120.04``. This is the weakest
kind of evidence and is tried last.
"""

from typing import Optional

from jdk_license_tracker.models import VendorInfo
from jdk_license_tracker.resolvers.base import BaseVendorResolver, VendorEvidence


class SuffixResolver(BaseVendorResolver):
    """Matches version suffix tags against vendor signatures.

    Results are marked ``weak`` so the verdict reports reduced confidence.

    Priority: 90
    """

    @property
    def name(self) -> str:
        return "version-suffix"

    @property
    def priority(self) -> int:
        return 90

    def resolve(self, evidence: VendorEvidence) -> Optional[VendorInfo]:
        for tag in evidence.tags:
            signature = self._match(tag, evidence)
            if signature is not None:
                return VendorInfo(
                    vendor=signature.vendor,
                    evidence=tag,
                    source="version suffix",
                    weak=True,
                )
        return None
