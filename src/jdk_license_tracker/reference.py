"""Immutable reference data bundle.

Everything the core needs besides the input itself (vendor signatures,
license rules, lifecycle records and the warning window) is loaded and
validated once here and then shared read-only.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from jdk_license_tracker.config import Settings
from jdk_license_tracker.lifecycle import (
    RiskClassifier,
    index_records,
    load_lifecycle,
    load_overlay,
    merge_records,
)
from jdk_license_tracker.models import LifecycleRecord
from jdk_license_tracker.resolvers import VendorSignature, WaterfallVendorResolver, load_signatures
from jdk_license_tracker.rules import LicenseRule, LicenseRuleEngine, load_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    """Validated, read-only reference data.

    Attributes:
        signatures: Vendor signatures in matching order.
        rules: License rule chain in evaluation order.
        lifecycle: Lifecycle records (bundled table merged with any overlay).
        warning_window: Lead time for ``ApproachingEOL``.
        rules_source: Where the rules were loaded from.
    """

    signatures: tuple[VendorSignature, ...]
    rules: tuple[LicenseRule, ...]
    lifecycle: tuple[LifecycleRecord, ...]
    warning_window: timedelta
    rules_source: Optional[str] = None

    def vendor_resolver(self) -> WaterfallVendorResolver:
        return WaterfallVendorResolver(self.signatures)

    def rule_engine(self) -> LicenseRuleEngine:
        return LicenseRuleEngine(self.rules, self.rules_source)

    def classifier(self) -> RiskClassifier:
        return RiskClassifier(self.lifecycle, self.warning_window)


def load_reference_data(settings: Optional[Settings] = None) -> ReferenceData:
    """Load and validate all reference data.

    Args:
        settings: Settings naming the data files. Defaults to the bundled data.

    Returns:
        The validated bundle.

    Raises:
        ConfigurationError: If any file is unreadable or fails its integrity
            checks.
    """
    settings = settings or Settings()

    signatures = load_signatures(settings.vendors_path)
    rules = load_rules(settings.rules_path)
    lifecycle = load_lifecycle(settings.lifecycle_path)

    overlay_path = settings.lifecycle_overlay_path
    if overlay_path is not None and overlay_path.is_file():
        lifecycle = merge_records(lifecycle, load_overlay(overlay_path))

    reference = ReferenceData(
        signatures=signatures,
        rules=rules,
        lifecycle=lifecycle,
        warning_window=settings.warning_window,
        rules_source=str(settings.rules_path),
    )

    # Fail at startup rather than on first use
    reference.rule_engine()
    index_records(lifecycle, settings.lifecycle_path)

    return reference


@lru_cache(maxsize=1)
def get_reference_data() -> ReferenceData:
    """Return the process-wide default reference data, loading it once."""
    return load_reference_data()
