"""Load vendor signatures from TOML configuration."""

import logging
import tomllib
from pathlib import Path
from typing import Any

from jdk_license_tracker.exceptions import ConfigurationError
from jdk_license_tracker.models import Vendor
from jdk_license_tracker.resolvers.base import VendorSignature

logger = logging.getLogger(__name__)


def _string_list(value: Any, what: str, source: Path) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value or not all(
        isinstance(item, str) and item.strip() for item in value
    ):
        raise ConfigurationError(f"{what} must be a non-empty list of strings", source)
    return tuple(item.strip().lower() for item in value)


def signatures_from_table(data: dict[str, Any], source: Path) -> tuple[VendorSignature, ...]:
    """Build vendor signatures from a parsed TOML document.

    Args:
        data: Parsed document with a ``signature`` array of tables.
        source: File the document came from, for error messages.

    Returns:
        Signatures in file order.

    Raises:
        ConfigurationError: If an entry is missing fields or names an
            unknown vendor.
    """
    entries = data.get("signature")
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError("no [[signature]] entries defined", source)

    signatures = []
    for index, entry in enumerate(entries, start=1):
        try:
            vendor = Vendor(str(entry.get("vendor", "")).lower())
        except ValueError:
            raise ConfigurationError(
                f"signature #{index} names unknown vendor {entry.get('vendor')!r}",
                source,
            ) from None
        if vendor is Vendor.UNKNOWN:
            raise ConfigurationError(
                f"signature #{index} cannot identify the Unknown vendor", source
            )

        patterns = _string_list(entry.get("patterns"), f"signature #{index} patterns", source)

        requires = []
        for key, value in (entry.get("requires") or {}).items():
            requires.append(
                (key, _string_list(value, f"signature #{index} requires.{key}", source))
            )

        signatures.append(
            VendorSignature(vendor=vendor, patterns=patterns, requires=tuple(requires))
        )

    return tuple(signatures)


def load_signatures(path: Path) -> tuple[VendorSignature, ...]:
    """Read vendor signatures from a TOML file.

    Args:
        path: Path to the signatures file.

    Returns:
        Signatures in file order.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(str(e), path) from e

    signatures = signatures_from_table(data, path)
    logger.info("Loaded %d vendor signatures from %s", len(signatures), path)
    return signatures
