"""Risk classification against lifecycle reference data.

Classification is a pure function of the identity, the reference table and
the evaluation date; the classifier never reads the clock.
"""

import logging
from collections.abc import Iterable
from datetime import date, timedelta
from types import MappingProxyType
from typing import Optional

from jdk_license_tracker.lifecycle.loader import index_records
from jdk_license_tracker.models import (
    LifecycleRecord,
    RiskAssessment,
    RiskCategory,
    Vendor,
    VersionIdentity,
)

logger = logging.getLogger(__name__)

# Placeholder: vendors do not publish a standard warning period
DEFAULT_WARNING_WINDOW = timedelta(days=180)


def categorize(record: LifecycleRecord, as_of: date, window: timedelta) -> RiskCategory:
    """Map a lifecycle record and evaluation date to a risk category.

    Args:
        record: Lifecycle record for the version's (vendor, major).
        as_of: Evaluation date.
        window: How long before EOL a release counts as approaching it.

    Returns:
        ``EndOfLife`` after the EOL date, ``ApproachingEOL`` within the
        window before it, otherwise ``MaintenanceLTS`` for LTS releases and
        ``Current`` for the rest.
    """
    if record.eol_date is not None:
        if as_of > record.eol_date:
            return RiskCategory.END_OF_LIFE
        if as_of >= record.eol_date - window:
            return RiskCategory.APPROACHING_EOL
    return RiskCategory.MAINTENANCE_LTS if record.lts else RiskCategory.CURRENT


class RiskClassifier:
    """Classifies version identities by operational risk.

    Attributes:
        records: Read-only index of lifecycle records by (vendor, major).
        warning_window: Lead time for ``ApproachingEOL``.
    """

    def __init__(
        self,
        records: Iterable[LifecycleRecord],
        warning_window: timedelta = DEFAULT_WARNING_WINDOW,
    ) -> None:
        self.records = MappingProxyType(index_records(records))
        self.warning_window = warning_window

    def lookup(self, vendor: Vendor, major: int) -> Optional[LifecycleRecord]:
        """Find the record for a vendor, using the neutral table for Unknown."""
        if vendor is Vendor.UNKNOWN:
            return self.records.get((None, major))
        return self.records.get((vendor, major))

    def classify(self, identity: VersionIdentity, as_of: date) -> RiskAssessment:
        """Classify a version identity as of a given date.

        Args:
            identity: Parsed version identity.
            as_of: Evaluation date.

        Returns:
            The risk assessment. Identities without a lifecycle record are
            ``Unsupported`` with reduced confidence.
        """
        vendor = identity.vendor.vendor
        record = self.lookup(vendor, identity.major)

        if record is None:
            note = f"no lifecycle data for {vendor.display_name} {identity.major}"
            logger.debug("Unsupported: %s", note)
            return RiskAssessment(
                category=RiskCategory.UNSUPPORTED,
                reduced_confidence=True,
                note=note,
            )

        days_until_eol = (record.eol_date - as_of).days if record.eol_date else None
        reduced = vendor is Vendor.UNKNOWN
        return RiskAssessment(
            category=categorize(record, as_of, self.warning_window),
            record=record,
            reduced_confidence=reduced,
            days_until_eol=days_until_eol,
            note="vendor-neutral lifecycle data used" if reduced else None,
        )
