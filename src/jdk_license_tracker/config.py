"""Settings for the analysis pipeline.

Settings are read from a TOML file, either from a ``[jdk-license-tracker]``
table or from the top level::

    [jdk-license-tracker]
    warning_window_days = 90
    rules_path = "policy/license_rules.toml"

Relative paths are resolved against the directory of the settings file.
Anything not set falls back to the bundled reference data.
"""

import logging
import tomllib
from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from importlib.resources import files
from pathlib import Path
from typing import Any, Optional

from jdk_license_tracker.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "jdk-license-tracker"

# Placeholder: no vendor publishes a standard warning period before EOL
DEFAULT_WARNING_WINDOW_DAYS = 180


def bundled_data_path(name: str) -> Path:
    """Return the path of a reference data file shipped with the package."""
    return Path(str(files("jdk_license_tracker.data").joinpath(name)))


def default_overlay_path() -> Path:
    return Path.home() / ".cache" / "jdk_license_tracker" / "lifecycle.json"


@dataclass(frozen=True)
class Settings:
    """Pipeline settings.

    Attributes:
        warning_window_days: Days before EOL a release counts as approaching it.
        rules_path: License rule chain (TOML).
        lifecycle_path: Bundled lifecycle table (TOML).
        vendors_path: Vendor signatures (TOML).
        lifecycle_overlay_path: Refreshed lifecycle overlay (JSON), applied
            when the file exists.
    """

    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS
    rules_path: Path = field(default_factory=lambda: bundled_data_path("license_rules.toml"))
    lifecycle_path: Path = field(default_factory=lambda: bundled_data_path("lifecycle.toml"))
    vendors_path: Path = field(default_factory=lambda: bundled_data_path("vendors.toml"))
    lifecycle_overlay_path: Optional[Path] = field(default_factory=default_overlay_path)

    @property
    def warning_window(self) -> timedelta:
        return timedelta(days=self.warning_window_days)


_PATH_FIELDS = frozenset({"rules_path", "lifecycle_path", "vendors_path", "lifecycle_overlay_path"})


def settings_from_dict(data: dict[str, Any], source: Optional[Path] = None) -> Settings:
    """Build settings from a parsed mapping.

    Args:
        data: Settings values.
        source: Settings file, used for error messages and to resolve
            relative paths.

    Returns:
        Settings with unspecified values left at their defaults.

    Raises:
        ConfigurationError: On unknown keys or values of the wrong type.
    """
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"unknown settings: {', '.join(unknown)}", source)

    base_dir = source.parent if source is not None else Path.cwd()
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in _PATH_FIELDS:
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{key} must be a path string", source)
            path = Path(value).expanduser()
            values[key] = path if path.is_absolute() else base_dir / path
        elif key == "warning_window_days":
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(
                    "warning_window_days must be a non-negative integer", source
                )
            values[key] = value

    return replace(Settings(), **values)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Settings file. If None, returns the defaults.

    Returns:
        The loaded settings.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    if path is None:
        return Settings()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(str(e), path) from e

    table = data.get(SETTINGS_TABLE, data)
    if not isinstance(table, dict):
        raise ConfigurationError(f"[{SETTINGS_TABLE}] must be a table", path)

    logger.info("Loaded settings from %s", path)
    return settings_from_dict(table, path)
