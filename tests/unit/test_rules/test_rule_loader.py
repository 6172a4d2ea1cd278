"""Tests for loading license rules from TOML."""

from datetime import date
from pathlib import Path

import pytest

from jdk_license_tracker.config import bundled_data_path
from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import LicenseFlag, Vendor, VersionNumber
from jdk_license_tracker.rules import load_rules, rule_from_table, rules_from_table

SOURCE = Path("rules.toml")


def _entry(**overrides) -> dict:
    entry = {
        "id": "oracle-11",
        "vendors": ["oracle"],
        "major_min": 11,
        "major_max": 11,
        "flag": "Commercial",
        "explanation": "{{ vendor }} {{ version }} requires a subscription.",
        "policy_source": "https://www.oracle.com/downloads/licenses/javase-license1.html",
    }
    entry.update(overrides)
    return entry


def test_bundled_rules_keep_file_order() -> None:
    rules = load_rules(bundled_data_path("license_rules.toml"))

    assert rules[0].rule_id == "oracle-pre-8"
    assert rules[-1].rule_id == "unknown-vendor"
    assert rules[-1].predicate.is_unconditional


def test_rule_fields() -> None:
    rule = rule_from_table(
        _entry(version_min="11.0.2", cutoff=date(2019, 4, 16), license="LicenseRef-Oracle-OTN"),
        1,
        SOURCE,
    )

    assert rule.rule_id == "oracle-11"
    assert rule.flag is LicenseFlag.COMMERCIAL
    assert rule.predicate.vendors == frozenset({Vendor.ORACLE})
    assert rule.predicate.version_min == VersionNumber(11, 0, 2)
    assert rule.cutoff == date(2019, 4, 16)
    assert rule.license_expression == "LicenseRef-Oracle-OTN"


def test_string_dates_are_accepted() -> None:
    rule = rule_from_table(_entry(released_before="2019-04-16"), 1, SOURCE)
    assert rule.predicate.released_before == date(2019, 4, 16)


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"id": ""}, "has no id"),
        ({"flag": "Maybe"}, "invalid flag"),
        ({"explanation": "  "}, "no explanation"),
        ({"policy_source": None}, "no policy_source"),
        ({"vendors": ["acme"]}, "unknown vendor"),
        ({"vendors": []}, "non-empty list"),
        ({"major_min": "11"}, "must be an integer"),
        ({"version_min": "eleven"}, "version_min"),
        ({"released_before": "last year"}, "not a date"),
        ({"requires_security": "yes"}, "must be a boolean"),
        ({"major": 11}, "unknown keys: major"),
    ],
)
def test_invalid_rule(overrides: dict, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        rule_from_table(_entry(**overrides), 1, SOURCE)


def test_rule_must_be_array() -> None:
    with pytest.raises(ConfigurationError, match="array of tables"):
        rules_from_table({"rule": {"id": "x"}}, SOURCE)


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "rules.toml"
    path.write_text("[[rule]\nid = ", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="rules.toml"):
        load_rules(path)
