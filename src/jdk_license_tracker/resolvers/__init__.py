"""Vendor resolvers for attributing a version to a Java distribution.

This module provides resolvers that match vendor hints, system properties,
and version suffixes against configured vendor signatures.
"""

from jdk_license_tracker.resolvers.base import (
    BaseVendorResolver,
    PropertyFieldResolver,
    VendorEvidence,
    VendorSignature,
)
from jdk_license_tracker.resolvers.hint import HintResolver
from jdk_license_tracker.resolvers.loader import load_signatures, signatures_from_table
from jdk_license_tracker.resolvers.properties import (
    PropertyVendorResolver,
    RuntimeNameResolver,
    VendorVersionResolver,
)
from jdk_license_tracker.resolvers.suffix import SuffixResolver
from jdk_license_tracker.resolvers.waterfall import WaterfallVendorResolver

__all__ = [
    "BaseVendorResolver",
    "HintResolver",
    "PropertyFieldResolver",
    "PropertyVendorResolver",
    "RuntimeNameResolver",
    "SuffixResolver",
    "VendorEvidence",
    "VendorSignature",
    "VendorVersionResolver",
    "WaterfallVendorResolver",
    "load_signatures",
    "signatures_from_table",
]
