"""JDK License Tracker - Java runtime license and lifecycle analysis.

This package identifies the Java runtime version from untrusted text
(properties exports, ``java -version`` transcripts, version tokens),
determines whether it requires a commercial license under vendor policy,
and classifies its end-of-life risk.
"""

__version__ = "0.1.0"

from jdk_license_tracker.analyzer import Analyzer, analyze
from jdk_license_tracker.models import (
    FormatEra,
    LicenseDetermination,
    LicenseFlag,
    ParseFailure,
    ParseFailureReason,
    RiskAssessment,
    RiskCategory,
    Vendor,
    Verdict,
    VersionIdentity,
    VersionNumber,
)
from jdk_license_tracker.parser import parse

__all__ = [
    "__version__",
    "Analyzer",
    "FormatEra",
    "LicenseDetermination",
    "LicenseFlag",
    "ParseFailure",
    "ParseFailureReason",
    "RiskAssessment",
    "RiskCategory",
    "Vendor",
    "Verdict",
    "VersionIdentity",
    "VersionNumber",
    "analyze",
    "parse",
]
