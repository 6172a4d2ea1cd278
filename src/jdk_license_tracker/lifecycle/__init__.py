"""Lifecycle reference data and risk classification."""

from jdk_license_tracker.lifecycle.classifier import (
    DEFAULT_WARNING_WINDOW,
    RiskClassifier,
    categorize,
)
from jdk_license_tracker.lifecycle.fetcher import EndOfLifeFetcher, records_from_cycles, write_overlay
from jdk_license_tracker.lifecycle.loader import (
    index_records,
    load_lifecycle,
    load_overlay,
    merge_records,
    record_from_dict,
    record_to_dict,
)

__all__ = [
    "DEFAULT_WARNING_WINDOW",
    "EndOfLifeFetcher",
    "RiskClassifier",
    "categorize",
    "index_records",
    "load_lifecycle",
    "load_overlay",
    "merge_records",
    "record_from_dict",
    "record_to_dict",
    "records_from_cycles",
    "write_overlay",
]
