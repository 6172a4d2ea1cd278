"""Tests for the version string grammars."""

import pytest

from jdk_license_tracker.grammars import (
    MAX_TOKEN_LENGTH,
    GrammarMatch,
    match_version,
    parse_version_number,
)
from jdk_license_tracker.models import (
    FormatEra,
    ParseFailure,
    ParseFailureReason,
    VersionNumber,
)


class TestLegacyGrammar:
    """Test suite for 1.X[.Y[_U]][-suffix] strings."""

    def test_full_legacy_string(self) -> None:
        result = match_version("1.8.0_301-b09")
        assert isinstance(result, GrammarMatch)
        assert result.era is FormatEra.LEGACY
        assert result.version == VersionNumber(8, 0, 301, build=9)
        assert result.tag is None

    def test_short_legacy_string(self) -> None:
        result = match_version("1.7")
        assert isinstance(result, GrammarMatch)
        assert result.version == VersionNumber(7)

    def test_early_access_suffix(self) -> None:
        result = match_version("1.8.0-ea-b12")
        assert isinstance(result, GrammarMatch)
        assert result.version == VersionNumber(8, 0, pre="ea", build=12)

    def test_distribution_suffix_is_kept_as_tag(self) -> None:
        result = match_version("1.8.0_292-8u292-b10-0ubuntu1~20.04-b10")
        assert isinstance(result, GrammarMatch)
        assert result.version.security == 292
        assert result.version.build == 10
        assert "ubuntu" in result.tag

    @pytest.mark.parametrize("token", ["1.9.0", "1.11", "1.0"])
    def test_out_of_era_major_is_unknown_era(self, token: str) -> None:
        result = match_version(token)
        assert isinstance(result, ParseFailure)
        assert result.reason is ParseFailureReason.UNKNOWN_ERA


class TestModernGrammar:
    """Test suite for JEP 223/322 version strings."""

    def test_full_modern_string(self) -> None:
        result = match_version("17.0.2+8-LTS")
        assert isinstance(result, GrammarMatch)
        assert result.era is FormatEra.MODERN
        assert result.version == VersionNumber(17, 0, 2, build=8)
        assert result.tag == "LTS"

    def test_pre_release(self) -> None:
        result = match_version("21-ea+35")
        assert isinstance(result, GrammarMatch)
        assert result.version == VersionNumber(21, pre="ea", build=35)

    def test_four_components(self) -> None:
        result = match_version("11.0.9.1")
        assert isinstance(result, GrammarMatch)
        assert result.version.patch == 1

    def test_java_8_in_modern_form(self) -> None:
        result = match_version("8.0.302+8")
        assert isinstance(result, GrammarMatch)
        assert result.version.major == 8

    @pytest.mark.parametrize("token", ["5.0", "7"])
    def test_modern_form_below_8_is_unknown_era(self, token: str) -> None:
        result = match_version(token)
        assert isinstance(result, ParseFailure)
        assert result.reason is ParseFailureReason.UNKNOWN_ERA


class TestVendorUpdateGrammar:
    def test_underscore_update(self) -> None:
        result = match_version("8.0_302")
        assert isinstance(result, GrammarMatch)
        assert result.era is FormatEra.VENDOR_UPDATE
        assert result.version == VersionNumber(8, 0, 302)

    def test_non_zero_micro_is_rejected(self) -> None:
        result = match_version("11.0.3_4")
        assert isinstance(result, ParseFailure)
        assert result.reason is ParseFailureReason.MALFORMED


def test_legacy_and_modern_major_agree() -> None:
    """Test that Java 8 has major 8 in both notations."""
    legacy = match_version("1.8.0_301")
    modern = match_version("8.0.301+9")
    assert isinstance(legacy, GrammarMatch) and isinstance(modern, GrammarMatch)
    assert legacy.version.major == modern.version.major == 8
    assert legacy.version.minor == modern.version.minor == 0
    assert legacy.version.security == modern.version.security == 301


@pytest.mark.parametrize("token", ["", "   ", "abc", "17..2", "v17", "17.0.2 beta", "1_8"])
def test_malformed_tokens(token: str) -> None:
    result = match_version(token)
    assert isinstance(result, ParseFailure)
    assert result.reason is ParseFailureReason.MALFORMED


def test_overlong_token_is_malformed() -> None:
    result = match_version("1" * (MAX_TOKEN_LENGTH + 1))
    assert isinstance(result, ParseFailure)
    assert result.reason is ParseFailureReason.MALFORMED


def test_parse_version_number_raises_on_failure() -> None:
    assert parse_version_number("8.0.211") == VersionNumber(8, 0, 211)
    with pytest.raises(ValueError, match="Malformed"):
        parse_version_number("not-a-version")
