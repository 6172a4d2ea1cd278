"""Analysis pipeline: parse, determine the license, classify the risk.

A parse failure short-circuits the pipeline: the license rule engine and
the risk classifier only ever see successfully parsed identities, and a
``Verdict`` always carries all three results.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Optional, Union

from jdk_license_tracker.models import (
    ConfidenceLevel,
    LicenseFlag,
    ParseConfidence,
    ParseFailure,
    RiskCategory,
    Verdict,
)
from jdk_license_tracker.parser import VersionParser
from jdk_license_tracker.reference import ReferenceData, get_reference_data

logger = logging.getLogger(__name__)

AnalysisOutcome = Union[Verdict, ParseFailure]


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one named input.

    Attributes:
        name: Where the input came from (file name, archive entry, "-").
        outcome: The verdict, or the reason no verdict could be built.
    """

    name: str
    outcome: AnalysisOutcome

    @property
    def verdict(self) -> Optional[Verdict]:
        return self.outcome if isinstance(self.outcome, Verdict) else None

    @property
    def failure(self) -> Optional[ParseFailure]:
        return self.outcome if isinstance(self.outcome, ParseFailure) else None


@dataclass(frozen=True)
class AnalysisSummary:
    """Counts over a batch of analysis results.

    ``total`` and ``failures`` count inputs. The remaining figures count
    distinct versions as returned by ``distinct_verdicts``, so a version
    found on many hosts is counted once.

    Attributes:
        total: Number of inputs.
        failures: Inputs that could not be parsed.
        distinct: Distinct versions among the parsed inputs.
        outdated: Distinct versions older than Java 8.
        commercial: Distinct versions requiring a commercial license.
        unknown_license: Distinct versions whose license could not be determined.
        end_of_life: Distinct versions past their end-of-life date.
        unsupported: Distinct versions with no lifecycle data.
    """

    total: int
    failures: int
    distinct: int
    outdated: int
    commercial: int
    unknown_license: int
    end_of_life: int
    unsupported: int


class Analyzer:
    """Runs raw input through parser, rule engine and classifier.

    Attributes:
        reference: Reference data the components were built from.
        parser: Version parser.
        engine: License rule engine.
        classifier: Risk classifier.
    """

    def __init__(self, reference: Optional[ReferenceData] = None) -> None:
        """Build the pipeline components.

        Args:
            reference: Reference data. Defaults to the process-wide bundle.

        Raises:
            ConfigurationError: If the rules fail their integrity check.
        """
        self.reference = reference or get_reference_data()
        self.parser = VersionParser(self.reference.vendor_resolver())
        self.engine = self.reference.rule_engine()
        self.classifier = self.reference.classifier()

    def analyze(
        self, raw: str, as_of: date, vendor_hint: Optional[str] = None
    ) -> AnalysisOutcome:
        """Analyze one raw input.

        Args:
            raw: Properties export, ``java -version`` transcript, or version token.
            as_of: Evaluation date for time-dependent rules and lifecycle.
            vendor_hint: Optional vendor name supplied alongside the input.

        Returns:
            A complete ``Verdict``, or the parser's ``ParseFailure``.
        """
        identity = self.parser.parse(raw, vendor_hint)
        if isinstance(identity, ParseFailure):
            logger.debug("Parse failed: %s", identity)
            return identity

        license_result = self.engine.evaluate(identity, as_of)
        risk = self.classifier.classify(identity, as_of)

        reasons = list(identity.confidence_notes)
        if risk.reduced_confidence and risk.note:
            reasons.append(risk.note)

        return Verdict(
            identity=identity,
            license=license_result,
            risk=risk,
            parse_confidence=ParseConfidence(
                level=ConfidenceLevel.REDUCED if reasons else ConfidenceLevel.HIGH,
                reasons=tuple(reasons),
            ),
        )

    def analyze_all(
        self,
        inputs: Iterable[tuple[str, str]],
        as_of: date,
        vendor_hint: Optional[str] = None,
    ) -> list[AnalysisResult]:
        """Analyze a batch of named inputs.

        Args:
            inputs: (name, raw text) pairs.
            as_of: Evaluation date.
            vendor_hint: Optional vendor name applied to every input.

        Returns:
            One result per input, in input order.
        """
        return [
            AnalysisResult(name=name, outcome=self.analyze(text, as_of, vendor_hint))
            for name, text in inputs
        ]


@lru_cache(maxsize=1)
def default_analyzer() -> Analyzer:
    """Return the analyzer built from the default reference data."""
    return Analyzer()


def analyze(raw: str, as_of: date, vendor_hint: Optional[str] = None) -> AnalysisOutcome:
    """Analyze raw input with the default reference data.

    Args:
        raw: Raw version text.
        as_of: Evaluation date.
        vendor_hint: Optional vendor name supplied alongside the input.

    Returns:
        A ``Verdict`` or a ``ParseFailure``.
    """
    return default_analyzer().analyze(raw, as_of, vendor_hint)


def distinct_verdicts(results: Iterable[AnalysisResult]) -> list[Verdict]:
    """Deduplicate verdicts and sort them by version.

    Two verdicts are duplicates when they share the displayed version, the
    property it came from, and the vendor.

    Args:
        results: Analysis results; failures are skipped.

    Returns:
        Unique verdicts in ascending version order.
    """
    seen: dict[tuple, Verdict] = {}
    for result in results:
        verdict = result.verdict
        if verdict is None:
            continue
        identity = verdict.identity
        key = (identity.display_version, identity.source_key, identity.vendor.vendor)
        seen.setdefault(key, verdict)
    return sorted(seen.values(), key=lambda v: v.identity.version)


def summarize(results: Iterable[AnalysisResult]) -> AnalysisSummary:
    """Count failures per input, and outdated, commercial and end-of-life versions."""
    results = list(results)
    failures = sum(1 for r in results if r.verdict is None)
    verdicts = distinct_verdicts(results)
    return AnalysisSummary(
        total=len(results),
        failures=failures,
        distinct=len(verdicts),
        outdated=sum(1 for v in verdicts if v.is_older_than_jdk8),
        commercial=sum(1 for v in verdicts if v.requires_commercial_license),
        unknown_license=sum(1 for v in verdicts if v.license.flag is LicenseFlag.UNKNOWN),
        end_of_life=sum(1 for v in verdicts if v.risk_category is RiskCategory.END_OF_LIFE),
        unsupported=sum(1 for v in verdicts if v.risk_category is RiskCategory.UNSUPPORTED),
    )
