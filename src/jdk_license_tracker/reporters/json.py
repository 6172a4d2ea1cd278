"""JSON reporter for machine-readable verdict reports."""

import json
from dataclasses import asdict
from datetime import date
from typing import Any

from jdk_license_tracker.analyzer import AnalysisResult, summarize
from jdk_license_tracker.models import ParseFailure, Verdict
from jdk_license_tracker.reporters.base import BaseReporter


def _verdict_to_dict(verdict: Verdict) -> dict[str, Any]:
    identity = verdict.identity
    risk = verdict.risk
    record = risk.record
    return {
        "version": identity.display_version,
        "canonical_version": str(identity.version),
        "major": identity.major,
        "era": identity.era.value,
        "source_key": identity.source_key,
        "release_date": identity.release_date.isoformat() if identity.release_date else None,
        "vendor": {
            "name": identity.vendor.vendor.display_name,
            "id": identity.vendor.vendor.value,
            "evidence": identity.vendor.evidence or None,
            "source": identity.vendor.source,
        },
        "license": {
            "flag": verdict.license.flag.value,
            "requires_commercial_license": verdict.requires_commercial_license,
            "explanation": verdict.license.explanation,
            "policy_source": verdict.license.policy_source,
            "rule_id": verdict.license.rule_id,
            "expression": verdict.license.license_expression,
        },
        "risk": {
            "category": risk.category.value,
            "lts": record.lts if record else None,
            "eol_date": record.eol_date.isoformat() if record and record.eol_date else None,
            "days_until_eol": risk.days_until_eol,
        },
        "confidence": {
            "level": verdict.parse_confidence.level.value,
            "reasons": list(verdict.parse_confidence.reasons),
        },
    }


def _failure_to_dict(failure: ParseFailure) -> dict[str, Any]:
    return {"reason": failure.reason.value, "detail": failure.detail}


class JsonReporter(BaseReporter):
    """Reporter that renders analysis results as a JSON document."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, results: list[AnalysisResult], as_of: date) -> str:
        document = {
            "as_of": as_of.isoformat(),
            "summary": asdict(summarize(results)),
            "results": [
                {
                    "input": result.name,
                    "verdict": _verdict_to_dict(result.verdict) if result.verdict else None,
                    "failure": _failure_to_dict(result.failure) if result.failure else None,
                }
                for result in results
            ],
        }
        return json.dumps(document, indent=self.indent) + "\n"

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def default_extension(self) -> str:
        return ".json"
