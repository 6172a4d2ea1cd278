"""Tests for loading and merging lifecycle records."""

import json
from datetime import date
from pathlib import Path

import pytest

from jdk_license_tracker.config import bundled_data_path
from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.lifecycle import (
    index_records,
    load_lifecycle,
    load_overlay,
    merge_records,
    record_from_dict,
)
from jdk_license_tracker.models import LifecycleRecord, Vendor

SOURCE = Path("lifecycle.toml")


def test_bundled_table() -> None:
    records = load_lifecycle(bundled_data_path("lifecycle.toml"))
    index = index_records(records)

    assert (None, 8) in index
    assert (Vendor.ORACLE, 17) in index
    assert (Vendor.ZULU, 6) not in index
    assert index[(Vendor.ORACLE, 8)].lts


def test_record_from_dict() -> None:
    record = record_from_dict(
        {"vendor": "Temurin", "major": 17, "lts": True, "eol_date": "2027-10-31"}, SOURCE
    )

    assert record == LifecycleRecord(
        vendor=Vendor.TEMURIN, major=17, lts=True, eol_date=date(2027, 10, 31)
    )


@pytest.mark.parametrize("vendor", [None, "unknown"])
def test_neutral_records(vendor) -> None:
    record = record_from_dict({"vendor": vendor, "major": 11}, SOURCE)
    assert record.vendor is None


@pytest.mark.parametrize(
    "entry,message",
    [
        ({"major": "17"}, "invalid major"),
        ({"major": 0}, "invalid major"),
        ({"major": 17, "vendor": "acme"}, "unknown vendor"),
        ({"major": 17, "eol_date": "soon"}, "not a date"),
    ],
)
def test_invalid_records(entry: dict, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        record_from_dict(entry, SOURCE)


def test_duplicate_records() -> None:
    records = [LifecycleRecord(Vendor.ZULU, 11, True), LifecycleRecord(Vendor.ZULU, 11, False)]
    with pytest.raises(ConfigurationError, match="duplicate lifecycle record for \\(Zulu, 11\\)"):
        index_records(records)


def test_merge_replaces_matching_keys() -> None:
    base = [
        LifecycleRecord(Vendor.ZULU, 11, True, eol_date=date(2026, 9, 30)),
        LifecycleRecord(Vendor.ZULU, 17, True),
    ]
    overlay = [
        LifecycleRecord(Vendor.ZULU, 11, True, eol_date=date(2032, 1, 31)),
        LifecycleRecord(Vendor.ZULU, 25, True),
    ]

    merged = {r.key: r for r in merge_records(base, overlay)}

    assert len(merged) == 3
    assert merged[(Vendor.ZULU, 11)].eol_date == date(2032, 1, 31)


def test_overlay_without_records(tmp_path: Path) -> None:
    path = tmp_path / "overlay.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ConfigurationError, match="no 'records' list"):
        load_overlay(path)


def test_overlay_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "overlay.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_overlay(path)
