"""Tests for loading vendor signatures."""

from pathlib import Path

import pytest

from jdk_license_tracker.config import bundled_data_path
from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import Vendor
from jdk_license_tracker.resolvers import load_signatures, signatures_from_table


def test_bundled_signatures_load() -> None:
    signatures = load_signatures(bundled_data_path("vendors.toml"))

    assert signatures[0].vendor is Vendor.TEMURIN
    assert signatures[-1].vendor is Vendor.OPENJDK
    assert all(pattern == pattern.lower() for s in signatures for pattern in s.patterns)


def test_requires_is_parsed() -> None:
    signatures = signatures_from_table(
        {
            "signature": [
                {
                    "vendor": "openjdk",
                    "patterns": ["Oracle Corporation"],
                    "requires": {"java.runtime.name": ["OpenJDK"]},
                }
            ]
        },
        Path("vendors.toml"),
    )
    assert signatures[0].patterns == ("oracle corporation",)
    assert signatures[0].requires == (("java.runtime.name", ("openjdk",)),)


@pytest.mark.parametrize(
    "data,message",
    [
        ({}, "no \\[\\[signature\\]\\] entries"),
        ({"signature": [{"vendor": "acme", "patterns": ["acme"]}]}, "unknown vendor"),
        ({"signature": [{"vendor": "unknown", "patterns": ["x"]}]}, "Unknown vendor"),
        ({"signature": [{"vendor": "zulu", "patterns": []}]}, "non-empty list"),
    ],
)
def test_invalid_signatures(data: dict, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        signatures_from_table(data, Path("vendors.toml"))


def test_unreadable_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration error in"):
        load_signatures(tmp_path / "missing.toml")
