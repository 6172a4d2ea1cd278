"""Tests for the bundled license rule chain and the rule engine."""

import re
from datetime import date
from typing import Callable

import pytest

from jdk_license_tracker.grammars import GrammarMatch, match_version
from jdk_license_tracker.models import LicenseFlag, Vendor, VersionIdentity
from jdk_license_tracker.rules import LicenseRule, LicenseRuleEngine, RulePredicate

MakeIdentity = Callable[..., VersionIdentity]


class TestOracle8:
    """Oracle JDK 8 changed license with update 211 (April 2019)."""

    def test_update_before_cutoff_is_free(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("1.8.0_202"))

        assert result.flag is LicenseFlag.FREE
        assert result.rule_id == "oracle-8-bcl-update"
        assert "OracleJDK 1.8.0_202" in result.explanation

    def test_update_210_is_free(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        assert engine.evaluate(make_identity("1.8.0_210")).flag is LicenseFlag.FREE

    def test_update_211_is_commercial(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("1.8.0_211"))

        assert result.flag is LicenseFlag.COMMERCIAL
        assert result.rule_id == "oracle-8-otn-update"
        assert "update 211" in result.explanation
        assert "2019-04-16" in result.explanation

    def test_modern_notation_of_8_is_commercial(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        assert engine.evaluate(make_identity("8.0.301")).flag is LicenseFlag.COMMERCIAL

    @pytest.mark.parametrize(
        "release_date,flag",
        [
            (date(2019, 1, 15), LicenseFlag.FREE),
            (date(2019, 4, 16), LicenseFlag.COMMERCIAL),
            (date(2021, 7, 20), LicenseFlag.COMMERCIAL),
        ],
    )
    def test_build_date_without_update(
        self,
        engine: LicenseRuleEngine,
        make_identity: MakeIdentity,
        release_date: date,
        flag: LicenseFlag,
    ) -> None:
        result = engine.evaluate(make_identity("1.8", release_date=release_date))

        assert result.flag is flag
        assert release_date.isoformat() in result.explanation

    def test_no_update_and_no_date_is_unknown(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("1.8"))

        assert result.flag is LicenseFlag.UNKNOWN
        assert result.rule_id == "oracle-8-undetermined"


class TestOracleModern:
    @pytest.mark.parametrize("token", ["9.0.4", "10.0.2", "11.0.2", "11.0.22+9", "16.0.2"])
    def test_otn_only_releases_are_commercial(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity, token: str
    ) -> None:
        assert engine.evaluate(make_identity(token)).flag is LicenseFlag.COMMERCIAL

    @pytest.mark.parametrize("token", ["1.7.0_80", "1.6.0_45"])
    def test_pre_8_is_free(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity, token: str
    ) -> None:
        result = engine.evaluate(make_identity(token))

        assert result.flag is LicenseFlag.FREE
        assert result.rule_id == "oracle-pre-8"

    def test_17_before_cutoff_without_as_of_is_free(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("17.0.12"))

        assert result.flag is LicenseFlag.FREE
        assert result.rule_id == "oracle-17-nftc"

    def test_17_update_after_cutoff_is_commercial(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("17.0.13"))

        assert result.flag is LicenseFlag.COMMERCIAL
        assert result.rule_id == "oracle-17-otn-update"

    def test_17_evaluated_after_public_updates_ended(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("17.0.2"), as_of=date(2025, 1, 1))

        assert result.flag is LicenseFlag.COMMERCIAL
        assert "OracleJDK 17" in result.explanation
        assert "2024-10-01" in result.explanation
        assert "2025-01-01" in result.explanation

    def test_17_evaluated_before_public_updates_ended(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("17.0.2"), as_of=date(2024, 9, 30))

        assert result.flag is LicenseFlag.FREE

    def test_18_is_free(self, engine: LicenseRuleEngine, make_identity: MakeIdentity) -> None:
        assert engine.evaluate(make_identity("18.0.2")).flag is LicenseFlag.FREE

    @pytest.mark.parametrize(
        "as_of,flag",
        [
            (date(2026, 9, 30), LicenseFlag.FREE),
            (date(2026, 10, 1), LicenseFlag.COMMERCIAL),
        ],
    )
    def test_21_depends_on_as_of(
        self,
        engine: LicenseRuleEngine,
        make_identity: MakeIdentity,
        as_of: date,
        flag: LicenseFlag,
    ) -> None:
        assert engine.evaluate(make_identity("21.0.4"), as_of=as_of).flag is flag

    @pytest.mark.parametrize(
        "released,flag,rule_id",
        [
            (date(2026, 11, 1), LicenseFlag.FREE, "oracle-25-nftc"),
            (date(2028, 11, 1), LicenseFlag.COMMERCIAL, "oracle-25-otn-build-date"),
        ],
    )
    def test_25_depends_on_build_date(
        self,
        engine: LicenseRuleEngine,
        make_identity: MakeIdentity,
        released: date,
        flag: LicenseFlag,
        rule_id: str,
    ) -> None:
        result = engine.evaluate(make_identity("25.0.1", release_date=released))

        assert result.flag is flag
        assert result.rule_id == rule_id


class TestOtherVendors:
    @pytest.mark.parametrize(
        "vendor",
        [
            Vendor.OPENJDK,
            Vendor.TEMURIN,
            Vendor.ZULU,
            Vendor.CORRETTO,
            Vendor.MICROSOFT,
            Vendor.LIBERICA,
            Vendor.SAPMACHINE,
            Vendor.SEMERU,
            Vendor.REDHAT,
        ],
    )
    def test_openjdk_builds_are_free(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity, vendor: Vendor
    ) -> None:
        result = engine.evaluate(make_identity("1.8.0_392", vendor=vendor))

        assert result.flag is LicenseFlag.FREE
        assert result.license_expression == "GPL-2.0-only WITH Classpath-exception-2.0"
        assert result.license_expression in result.explanation

    def test_unknown_vendor_is_unknown(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        result = engine.evaluate(make_identity("17.0.2", vendor=Vendor.UNKNOWN))

        assert result.flag is LicenseFlag.UNKNOWN
        assert result.rule_id == "unknown-vendor"


class TestEngineProperties:
    TOKENS = ["1.6.0_45", "1.7.0_80", "1.8", "1.8.0_202", "1.8.0_411", "9.0.4",
              "11.0.22", "17.0.2", "17.0.14", "19.0.1", "21.0.4", "23.0.1", "25.0.1"]

    def test_every_identity_gets_a_determination(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        for vendor in Vendor:
            for token in self.TOKENS:
                result = engine.evaluate(make_identity(token, vendor=vendor))
                assert result.rule_id
                assert result.explanation
                assert result.policy_source

    def test_explanations_name_vendor_and_version(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        for vendor in Vendor:
            for token in self.TOKENS:
                identity = make_identity(token, vendor=vendor)
                result = engine.evaluate(identity, as_of=date(2030, 1, 1))
                assert f"{vendor.display_name} {identity.display_version}" in result.explanation

    def test_explanation_version_parses_back(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        """Test that the version quoted after the vendor parses to the same number."""
        tokens = self.TOKENS + ["17.0.2-ea+5", "1.8.0_202-b08", "21.0.4+7", "11.0.22+9"]
        for vendor in Vendor:
            pattern = re.compile(re.escape(vendor.display_name) + r" (\S+)")
            for token in tokens:
                identity = make_identity(token, vendor=vendor)
                result = engine.evaluate(identity, as_of=date(2030, 1, 1))

                quoted = [m.group(1).rstrip(":,.;") for m in pattern.finditer(result.explanation)]
                matches = [match_version(q) for q in quoted]
                assert any(
                    isinstance(m, GrammarMatch) and m.version == identity.version for m in matches
                ), (vendor, token, result.explanation)

    def test_later_evaluation_never_frees_a_version(
        self, engine: LicenseRuleEngine, make_identity: MakeIdentity
    ) -> None:
        """Test that moving as_of forward never turns Commercial into Free."""
        dates = [date(2020, 1, 1), date(2024, 10, 1), date(2026, 10, 1), date(2030, 1, 1)]
        for token in self.TOKENS:
            identity = make_identity(token)
            flags = [engine.evaluate(identity, as_of=d).flag for d in dates]
            for earlier, later in zip(flags, flags[1:]):
                assert not (earlier is LicenseFlag.COMMERCIAL and later is LicenseFlag.FREE)

    def test_first_matching_rule_wins(self, make_identity: MakeIdentity) -> None:
        rules = [
            LicenseRule("first", RulePredicate(major_min=17), LicenseFlag.COMMERCIAL,
                        "{{ vendor }} {{ version }} first", "policy-a"),
            LicenseRule("second", RulePredicate(major_min=11), LicenseFlag.FREE,
                        "{{ vendor }} {{ version }} second", "policy-b"),
            LicenseRule("fallback", RulePredicate(), LicenseFlag.UNKNOWN,
                        "{{ vendor }} {{ version }} unknown", "policy-c"),
        ]
        engine = LicenseRuleEngine(rules)

        assert engine.evaluate(make_identity("17.0.2")).rule_id == "first"
        assert engine.evaluate(make_identity("11.0.2")).rule_id == "second"
        assert engine.evaluate(make_identity("1.8.0_202")).rule_id == "fallback"

    def test_explanation_whitespace_is_collapsed(self, make_identity: MakeIdentity) -> None:
        rules = [
            LicenseRule("fallback", RulePredicate(), LicenseFlag.UNKNOWN,
                        "{{ vendor }}\n   {{ version }}\n{% if as_of %}as of {{ as_of }}{% endif %}",
                        "policy"),
        ]
        engine = LicenseRuleEngine(rules)

        assert engine.evaluate(make_identity("17.0.2")).explanation == "OracleJDK 17.0.2"
