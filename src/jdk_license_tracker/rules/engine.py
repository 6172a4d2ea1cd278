"""License rule engine.

Evaluates a version identity against an ordered rule chain. The chain is
checked once at construction time so that evaluation is total: the last
rule is an unconditional ``Unknown`` catch-all and every explanation
template renders with the variables the engine supplies.
"""

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, meta
from license_expression import ExpressionError, get_spdx_licensing

from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import LicenseDetermination, LicenseFlag, VersionIdentity
from jdk_license_tracker.rules.base import LicenseRule

logger = logging.getLogger(__name__)

SPDX = get_spdx_licensing()

# Variables available to explanation templates
TEMPLATE_VARIABLES = frozenset(
    {
        "vendor",
        "major",
        "version",
        "security",
        "release_date",
        "cutoff",
        "as_of",
        "license",
        "rule_id",
        "policy_source",
    }
)

# Custom license identifiers are allowed for non-SPDX vendor licenses
_LICENSE_REF_PREFIX = "LicenseRef-"


def _environment() -> Environment:
    return Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=False)


def _check_license_expression(rule: LicenseRule, source: Optional[str]) -> None:
    try:
        parsed = SPDX.parse(rule.license_expression)
    except ExpressionError as e:
        raise ConfigurationError(
            f"rule {rule.rule_id!r} has an invalid license expression: {e}", source
        ) from e

    unknown = [
        key
        for key in SPDX.unknown_license_keys(parsed)
        if not key.startswith(_LICENSE_REF_PREFIX)
    ]
    if unknown:
        raise ConfigurationError(
            f"rule {rule.rule_id!r} uses unknown license keys: {', '.join(unknown)}",
            source,
        )


def check_integrity(rules: Sequence[LicenseRule], source: Optional[str] = None) -> None:
    """Validate a rule chain before it is used.

    Args:
        rules: Ordered rules.
        source: Where the rules came from, for error messages.

    Raises:
        ConfigurationError: If the chain is empty, lacks a final ``Unknown``
            catch-all, shadows later rules with an unconditional rule,
            repeats a rule id, contains two rules with identical conditions
            and overlapping vendors, or has an explanation template or
            license expression that does not compile.
    """
    if not rules:
        raise ConfigurationError("the license rule set is empty", source)

    last = rules[-1]
    if not last.predicate.is_unconditional or last.flag is not LicenseFlag.UNKNOWN:
        raise ConfigurationError(
            f"the last rule ({last.rule_id!r}) must be an unconditional Unknown catch-all",
            source,
        )

    seen_ids: set[str] = set()
    for position, rule in enumerate(rules):
        if rule.rule_id in seen_ids:
            raise ConfigurationError(f"duplicate rule id {rule.rule_id!r}", source)
        seen_ids.add(rule.rule_id)

        if position < len(rules) - 1 and rule.predicate.is_unconditional:
            raise ConfigurationError(
                f"rule {rule.rule_id!r} matches everything and shadows the rules after it",
                source,
            )

    body = rules[:-1]
    for i, rule in enumerate(body):
        for other in body[i + 1 :]:
            if (
                rule.predicate.conditions == other.predicate.conditions
                and rule.predicate.overlaps_vendors(other.predicate)
            ):
                raise ConfigurationError(
                    f"rules {rule.rule_id!r} and {other.rule_id!r} have identical "
                    "conditions for overlapping vendors",
                    source,
                )

    env = _environment()
    for rule in rules:
        try:
            ast = env.parse(rule.explanation)
        except TemplateSyntaxError as e:
            raise ConfigurationError(
                f"rule {rule.rule_id!r} explanation does not compile: {e.message}", source
            ) from e
        undeclared = meta.find_undeclared_variables(ast) - TEMPLATE_VARIABLES
        if undeclared:
            raise ConfigurationError(
                f"rule {rule.rule_id!r} explanation uses unknown variables: "
                f"{', '.join(sorted(undeclared))}",
                source,
            )

        if rule.license_expression is not None:
            _check_license_expression(rule, source)


class LicenseRuleEngine:
    """First-match evaluator over an ordered license rule chain.

    Attributes:
        rules: Validated rules in evaluation order.
    """

    def __init__(self, rules: Sequence[LicenseRule], source: Optional[str] = None) -> None:
        """Validate and compile the rule chain.

        Args:
            rules: Ordered rules.
            source: Where the rules came from, for error messages.

        Raises:
            ConfigurationError: If the chain fails ``check_integrity``.
        """
        check_integrity(rules, source)
        self.rules = tuple(rules)
        env = _environment()
        self._templates = {rule.rule_id: env.from_string(rule.explanation) for rule in self.rules}

    def match(self, identity: VersionIdentity, as_of: Optional[date] = None) -> LicenseRule:
        """Return the first rule whose predicate holds."""
        for rule in self.rules:
            if rule.predicate.matches(identity, as_of):
                return rule
        # check_integrity guarantees an unconditional final rule
        return self.rules[-1]

    def evaluate(
        self, identity: VersionIdentity, as_of: Optional[date] = None
    ) -> LicenseDetermination:
        """Determine whether a commercial license is required.

        Args:
            identity: Parsed version identity.
            as_of: Evaluation date. Rules conditioned on the evaluation date
                only match when it is given.

        Returns:
            The determination of the first matching rule.
        """
        rule = self.match(identity, as_of)
        logger.debug(
            "Rule %s matched %s %s",
            rule.rule_id,
            identity.vendor.vendor.display_name,
            identity.display_version,
        )

        return LicenseDetermination(
            flag=rule.flag,
            explanation=self._render(rule, identity, as_of),
            policy_source=rule.policy_source,
            rule_id=rule.rule_id,
            license_expression=rule.license_expression,
        )

    def _render(
        self, rule: LicenseRule, identity: VersionIdentity, as_of: Optional[date]
    ) -> str:
        context: dict[str, Any] = {
            "vendor": identity.vendor.vendor.display_name,
            "major": identity.major,
            "version": identity.display_version,
            "security": identity.security,
            "release_date": identity.release_date,
            "cutoff": rule.cutoff,
            "as_of": as_of,
            "license": rule.license_expression,
            "rule_id": rule.rule_id,
            "policy_source": rule.policy_source,
        }
        return " ".join(self._templates[rule.rule_id].render(context).split())
