"""License rules: data structures, TOML loading and the first-match engine."""

from jdk_license_tracker.rules.base import LicenseRule, RulePredicate
from jdk_license_tracker.rules.engine import (
    TEMPLATE_VARIABLES,
    LicenseRuleEngine,
    check_integrity,
)
from jdk_license_tracker.rules.loader import load_rules, rule_from_table, rules_from_table

__all__ = [
    "LicenseRule",
    "LicenseRuleEngine",
    "RulePredicate",
    "TEMPLATE_VARIABLES",
    "check_integrity",
    "load_rules",
    "rule_from_table",
    "rules_from_table",
]
