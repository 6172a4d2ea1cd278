"""Pytest configuration and fixtures."""

from datetime import date
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest

from jdk_license_tracker import reference as reference_module
from jdk_license_tracker.analyzer import Analyzer, default_analyzer
from jdk_license_tracker.config import Settings
from jdk_license_tracker.grammars import GrammarMatch, match_version
from jdk_license_tracker.models import Vendor, VendorInfo, VersionIdentity
from jdk_license_tracker.parser import VersionParser
from jdk_license_tracker.reference import ReferenceData, get_reference_data, load_reference_data
from jdk_license_tracker.rules import LicenseRuleEngine

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding test input files."""
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def settings() -> Settings:
    """Bundled settings without the user's refreshed lifecycle overlay."""
    return Settings(lifecycle_overlay_path=None)


@pytest.fixture(scope="session")
def reference(settings: Settings) -> ReferenceData:
    """Bundled reference data."""
    return load_reference_data(settings)


@pytest.fixture
def default_reference(mocker, settings: Settings) -> Iterator[None]:
    """Point the module-level defaults at the bundled data only.

    ``analyze()`` and ``parse()`` otherwise pick up a lifecycle overlay
    refreshed into the user's cache directory.
    """
    load = reference_module.load_reference_data
    get_reference_data.cache_clear()
    default_analyzer.cache_clear()
    mocker.patch.object(
        reference_module, "load_reference_data", side_effect=lambda _settings=None: load(settings)
    )
    yield
    get_reference_data.cache_clear()
    default_analyzer.cache_clear()


@pytest.fixture
def analyzer(reference: ReferenceData) -> Analyzer:
    return Analyzer(reference)


@pytest.fixture
def parser(reference: ReferenceData) -> VersionParser:
    return VersionParser(reference.vendor_resolver())


@pytest.fixture
def engine(reference: ReferenceData) -> LicenseRuleEngine:
    return reference.rule_engine()


@pytest.fixture
def make_identity() -> Callable[..., VersionIdentity]:
    """Factory building a VersionIdentity from a version token."""

    def _make(
        token: str,
        vendor: Vendor = Vendor.ORACLE,
        release_date: Optional[date] = None,
    ) -> VersionIdentity:
        match = match_version(token)
        assert isinstance(match, GrammarMatch), match
        return VersionIdentity(
            version=match.version,
            era=match.era,
            vendor=VendorInfo(vendor=vendor),
            raw=token,
            source_key="java.version",
            release_date=release_date,
            tag=match.tag,
        )

    return _make
