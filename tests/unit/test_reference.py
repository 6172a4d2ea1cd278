"""Tests for the reference data bundle."""

import json
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from jdk_license_tracker.config import Settings
from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import Vendor
from jdk_license_tracker.reference import ReferenceData, get_reference_data, load_reference_data


def test_bundled_reference_data(reference: ReferenceData) -> None:
    assert reference.signatures
    assert reference.rules[-1].rule_id == "unknown-vendor"
    assert reference.lifecycle
    assert reference.rules_source.endswith("license_rules.toml")


def test_reference_data_is_frozen(reference: ReferenceData) -> None:
    with pytest.raises(AttributeError):
        reference.rules = ()


@pytest.mark.usefixtures("default_reference")
def test_default_reference_data_is_shared() -> None:
    assert get_reference_data() is get_reference_data()


def test_overlay_replaces_bundled_records(tmp_path: Path, settings: Settings) -> None:
    overlay = tmp_path / "lifecycle.json"
    overlay.write_text(
        json.dumps(
            {"records": [{"vendor": "zulu", "major": 6, "lts": True, "eol_date": "2026-12-31"}]}
        ),
        encoding="utf-8",
    )

    reference = load_reference_data(replace(settings, lifecycle_overlay_path=overlay))
    record = reference.classifier().lookup(Vendor.ZULU, 6)

    assert record is not None
    assert record.eol_date == date(2026, 12, 31)


def test_missing_overlay_is_ignored(tmp_path: Path, settings: Settings) -> None:
    reference = load_reference_data(
        replace(settings, lifecycle_overlay_path=tmp_path / "missing.json")
    )
    assert reference.classifier().lookup(Vendor.ZULU, 6) is None


def test_invalid_rules_fail_at_load(tmp_path: Path, settings: Settings) -> None:
    rules = tmp_path / "rules.toml"
    rules.write_text(
        '[[rule]]\nid = "only"\nvendors = ["oracle"]\nflag = "Free"\n'
        'explanation = "{{ vendor }} {{ version }}"\npolicy_source = "https://example.com"\n',
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError, match="catch-all"):
        load_reference_data(replace(settings, rules_path=rules))


def test_missing_vendor_file(tmp_path: Path, settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        load_reference_data(replace(settings, vendors_path=tmp_path / "vendors.toml"))
