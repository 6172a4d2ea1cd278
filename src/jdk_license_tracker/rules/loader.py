"""Load license rules from TOML configuration.

Rules live in ``[[rule]]`` tables and keep their file order::

    [[rule]]
    id = "oracle-9-10"
    vendors = ["oracle"]
    major_min = 9
    major_max = 10
    flag = "Commercial"
    explanation = "{{ vendor }} {{ version }} requires a subscription."
    policy_source = "https://www.oracle.com/java/technologies/javase/jdk-faqs.html"
"""

import logging
import tomllib
from datetime import date
from pathlib import Path
from typing import Any, Optional

from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.grammars import parse_version_number
from jdk_license_tracker.models import LicenseFlag, Vendor, VersionNumber
from jdk_license_tracker.rules.base import LicenseRule, RulePredicate

logger = logging.getLogger(__name__)

_RULE_KEYS = frozenset(
    {
        "id",
        "vendors",
        "major_min",
        "major_max",
        "version_min",
        "version_below",
        "requires_security",
        "released_on_or_after",
        "released_before",
        "as_of_on_or_after",
        "flag",
        "explanation",
        "policy_source",
        "license",
        "cutoff",
    }
)


def _date(value: Any, what: str, source: Path) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ConfigurationError(f"{what} is not a date: {value!r}", source)


def _version(value: Any, what: str, source: Path) -> Optional[VersionNumber]:
    if value is None:
        return None
    try:
        return parse_version_number(str(value))
    except ValueError as e:
        raise ConfigurationError(f"{what}: {e}", source) from e


def _int(value: Any, what: str, source: Path) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}", source)
    return value


def _vendors(value: Any, what: str, source: Path) -> Optional[frozenset[Vendor]]:
    if value is None:
        return None
    if not isinstance(value, list) or not value:
        raise ConfigurationError(f"{what} must be a non-empty list", source)
    try:
        return frozenset(Vendor(str(item).lower()) for item in value)
    except ValueError:
        raise ConfigurationError(f"{what} names an unknown vendor: {value!r}", source) from None


def rule_from_table(entry: dict[str, Any], index: int, source: Path) -> LicenseRule:
    """Build one rule from a ``[[rule]]`` table.

    Args:
        entry: Parsed TOML table.
        index: 1-based position in the file, for error messages.
        source: File the table came from.

    Returns:
        The parsed rule.

    Raises:
        ConfigurationError: On unknown keys, missing fields or bad values.
    """
    rule_id = entry.get("id")
    if not isinstance(rule_id, str) or not rule_id:
        raise ConfigurationError(f"rule #{index} has no id", source)
    what = f"rule {rule_id!r}"

    unknown = sorted(set(entry) - _RULE_KEYS)
    if unknown:
        raise ConfigurationError(f"{what} has unknown keys: {', '.join(unknown)}", source)

    try:
        flag = LicenseFlag(entry.get("flag"))
    except ValueError:
        raise ConfigurationError(f"{what} has invalid flag {entry.get('flag')!r}", source) from None

    explanation = entry.get("explanation")
    policy_source = entry.get("policy_source")
    if not isinstance(explanation, str) or not explanation.strip():
        raise ConfigurationError(f"{what} has no explanation", source)
    if not isinstance(policy_source, str) or not policy_source.strip():
        raise ConfigurationError(f"{what} has no policy_source", source)

    requires_security = entry.get("requires_security")
    if requires_security is not None and not isinstance(requires_security, bool):
        raise ConfigurationError(f"{what}.requires_security must be a boolean", source)

    predicate = RulePredicate(
        vendors=_vendors(entry.get("vendors"), f"{what}.vendors", source),
        major_min=_int(entry.get("major_min"), f"{what}.major_min", source),
        major_max=_int(entry.get("major_max"), f"{what}.major_max", source),
        version_min=_version(entry.get("version_min"), f"{what}.version_min", source),
        version_below=_version(entry.get("version_below"), f"{what}.version_below", source),
        requires_security=requires_security,
        released_on_or_after=_date(
            entry.get("released_on_or_after"), f"{what}.released_on_or_after", source
        ),
        released_before=_date(entry.get("released_before"), f"{what}.released_before", source),
        as_of_on_or_after=_date(
            entry.get("as_of_on_or_after"), f"{what}.as_of_on_or_after", source
        ),
    )

    return LicenseRule(
        rule_id=rule_id,
        predicate=predicate,
        flag=flag,
        explanation=explanation.strip(),
        policy_source=policy_source.strip(),
        license_expression=entry.get("license"),
        cutoff=_date(entry.get("cutoff"), f"{what}.cutoff", source),
    )


def rules_from_table(data: dict[str, Any], source: Path) -> tuple[LicenseRule, ...]:
    entries = data.get("rule") or []
    if not isinstance(entries, list):
        raise ConfigurationError("'rule' must be an array of tables", source)
    return tuple(rule_from_table(entry, i, source) for i, entry in enumerate(entries, start=1))


def load_rules(path: Path) -> tuple[LicenseRule, ...]:
    """Read the ordered license rule chain from a TOML file.

    Args:
        path: Path to the rules file.

    Returns:
        Rules in file order. Integrity is checked separately by
        ``check_integrity``.

    Raises:
        ConfigurationError: If the file is unreadable or a rule is invalid.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(str(e), path) from e

    rules = rules_from_table(data, path)
    logger.info("Loaded %d license rules from %s", len(rules), path)
    return rules
