"""Load lifecycle reference records.

The bundled table is TOML (``[[record]]`` entries). A refreshed overlay,
written by ``jdk-license-tracker refresh``, is JSON and replaces bundled
records with the same (vendor, major) key.
"""

import json
import logging
import tomllib
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import LifecycleRecord, Vendor

logger = logging.getLogger(__name__)


def _date(value: Any, what: str, source: Path) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ConfigurationError(f"{what} is not a date: {value!r}", source)


def record_from_dict(entry: dict[str, Any], source: Path) -> LifecycleRecord:
    """Build a lifecycle record from a TOML table or JSON object.

    Args:
        entry: Mapping with ``major`` and optional ``vendor``, ``lts``,
            ``eol_date`` and ``security_support_until``.
        source: File the entry came from, for error messages.

    Returns:
        The record. A missing vendor means the vendor-neutral table.

    Raises:
        ConfigurationError: If a field is missing or invalid.
    """
    major = entry.get("major")
    if isinstance(major, bool) or not isinstance(major, int) or major < 1:
        raise ConfigurationError(f"lifecycle record has invalid major {major!r}", source)

    vendor = None
    if entry.get("vendor") is not None:
        try:
            vendor = Vendor(str(entry["vendor"]).lower())
        except ValueError:
            raise ConfigurationError(
                f"lifecycle record for Java {major} names unknown vendor {entry['vendor']!r}",
                source,
            ) from None
        if vendor is Vendor.UNKNOWN:
            # The neutral table is expressed by omitting the vendor
            vendor = None

    what = f"lifecycle record ({entry.get('vendor') or 'neutral'}, {major})"
    return LifecycleRecord(
        vendor=vendor,
        major=major,
        lts=bool(entry.get("lts", False)),
        eol_date=_date(entry.get("eol_date"), f"{what}.eol_date", source),
        security_support_until=_date(
            entry.get("security_support_until"), f"{what}.security_support_until", source
        ),
    )


def index_records(
    records: Iterable[LifecycleRecord], source: Optional[Union[str, Path]] = None
) -> dict[tuple[Optional[Vendor], int], LifecycleRecord]:
    """Index records by (vendor, major), rejecting duplicates.

    Raises:
        ConfigurationError: If two records share a key.
    """
    index: dict[tuple[Optional[Vendor], int], LifecycleRecord] = {}
    for record in records:
        if record.key in index:
            vendor = record.vendor.display_name if record.vendor else "neutral"
            raise ConfigurationError(
                f"duplicate lifecycle record for ({vendor}, {record.major})", source
            )
        index[record.key] = record
    return index


def load_lifecycle(path: Path) -> tuple[LifecycleRecord, ...]:
    """Read the bundled lifecycle table.

    Args:
        path: Path to a TOML file with ``[[record]]`` entries.

    Returns:
        Records in file order.

    Raises:
        ConfigurationError: If the file is unreadable, invalid, or has
            duplicate keys.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(str(e), path) from e

    entries = data.get("record") or []
    records = tuple(record_from_dict(entry, path) for entry in entries)
    index_records(records, path)
    logger.info("Loaded %d lifecycle records from %s", len(records), path)
    return records


def load_overlay(path: Path) -> tuple[LifecycleRecord, ...]:
    """Read a refreshed lifecycle overlay written by the fetcher.

    Args:
        path: Path to the JSON overlay.

    Returns:
        Overlay records.

    Raises:
        ConfigurationError: If the overlay is unreadable or invalid.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(str(e), path) from e

    entries = data.get("records") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError("overlay has no 'records' list", path)

    records = tuple(record_from_dict(entry, path) for entry in entries)
    index_records(records, path)
    logger.info("Loaded %d lifecycle records from overlay %s", len(records), path)
    return records


def merge_records(
    base: Iterable[LifecycleRecord], overlay: Iterable[LifecycleRecord]
) -> tuple[LifecycleRecord, ...]:
    """Replace base records with overlay records sharing their key."""
    merged = {record.key: record for record in base}
    for record in overlay:
        merged[record.key] = record
    return tuple(merged.values())


def record_to_dict(record: LifecycleRecord) -> dict[str, Any]:
    """Serialize a record for the JSON overlay."""
    return {
        "vendor": record.vendor.value if record.vendor else None,
        "major": record.major,
        "lts": record.lts,
        "eol_date": record.eol_date.isoformat() if record.eol_date else None,
        "security_support_until": (
            record.security_support_until.isoformat()
            if record.security_support_until
            else None
        ),
    }
