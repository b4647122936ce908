"""Processing options and their JSON/environment loader."""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final, Mapping

from geostamp.exceptions import ConfigurationError, NoWorkRequestedError
from geostamp.geo import PrivacyZone
from geostamp.types import Coordinate

LOGGER = logging.getLogger(__name__)

CONFIG_PATH_ENV: Final = "GEOSTAMP_CONFIG"
INPUT_DIR_ENV: Final = "GEOSTAMP_INPUT_DIR"
FAILED_DIR_ENV: Final = "GEOSTAMP_FAILED_DIR"
USE_GPS_TIMESTAMPS_ENV: Final = "GEOSTAMP_USE_GPS_TIMESTAMPS"
WORKERS_ENV: Final = "GEOSTAMP_WORKERS"

DEFAULT_CONFIG_FILE: Final = "geostamp.json"
DEFAULT_INPUT_DIRECTORY: Final = "data"
DEFAULT_FAILED_DIRECTORY: Final = "failed"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    """Settings shared read-only by every file operation of a run."""

    input_directory: Path
    failed_directory: Path
    correct_timestamp_from_gps: bool = True
    privacy_zones: tuple[PrivacyZone, ...] = field(default_factory=tuple)

    @property
    def geofencing_enabled(self) -> bool:
        return bool(self.privacy_zones)

    def validate(self) -> None:
        """Raise NoWorkRequestedError if neither feature is enabled."""
        if not self.correct_timestamp_from_gps and not self.geofencing_enabled:
            raise NoWorkRequestedError(
                "Nothing to do: GPS timestamp correction is disabled and no privacy zones are configured"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_directory": str(self.input_directory),
            "failed_directory": str(self.failed_directory),
            "use_gps_timestamps": self.correct_timestamp_from_gps,
            "privacy_zones": [
                {
                    "name": zone.name,
                    "centre": {"latitude": zone.center.latitude, "longitude": zone.center.longitude},
                    "distance": zone.radius_meters,
                }
                for zone in self.privacy_zones
            ],
        }


def _env_bool(value: str | None, default: bool) -> bool:
    """Parse a boolean environment variable with a configurable default."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{USE_GPS_TIMESTAMPS_ENV} must be a boolean, got {value!r}")


def _parse_positive_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    if value <= 0:
        return None
    return value


def _as_float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{what} must be a number, got {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise ConfigurationError(f"{what} must be finite, got {value!r}")
    return result


def parse_privacy_zone(raw: Any, index: int = 0) -> PrivacyZone:
    """Build a PrivacyZone from ``{name, centre: {latitude, longitude}, distance}``."""
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"privacy_zones[{index}] must be an object")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"privacy_zones[{index}].name must be a non-empty string")

    centre = raw.get("centre", raw.get("center"))
    if not isinstance(centre, Mapping):
        raise ConfigurationError(f"privacy zone '{name}' needs a centre with latitude and longitude")
    center = Coordinate(
        latitude=_as_float(centre.get("latitude"), f"privacy zone '{name}' latitude"),
        longitude=_as_float(centre.get("longitude"), f"privacy zone '{name}' longitude"),
    )
    if not center.is_valid():
        raise ConfigurationError(f"privacy zone '{name}' centre is out of range: {center}")

    radius = _as_float(raw.get("distance"), f"privacy zone '{name}' distance")
    if radius < 0:
        raise ConfigurationError(f"privacy zone '{name}' distance must be >= 0, got {radius}")

    return PrivacyZone(name=name, center=center, radius_meters=radius)


def options_from_mapping(data: Mapping[str, Any], base_dir: Path | None = None) -> ProcessingOptions:
    """Build ProcessingOptions from a parsed configuration mapping.

    Relative directories are resolved against ``base_dir`` when given.
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("configuration must be a JSON object")

    raw_zones = data.get("privacy_zones") or []
    if not isinstance(raw_zones, list):
        raise ConfigurationError("privacy_zones must be a list")
    zones = tuple(parse_privacy_zone(raw, index) for index, raw in enumerate(raw_zones))

    use_gps = data.get("use_gps_timestamps", True)
    if not isinstance(use_gps, bool):
        raise ConfigurationError(f"use_gps_timestamps must be true or false, got {use_gps!r}")

    def _directory(key: str, default: str) -> Path:
        value = data.get(key, default)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"{key} must be a non-empty path string")
        path = Path(value).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return path

    return ProcessingOptions(
        input_directory=_directory("input_directory", DEFAULT_INPUT_DIRECTORY),
        failed_directory=_directory("failed_directory", DEFAULT_FAILED_DIRECTORY),
        correct_timestamp_from_gps=use_gps,
        privacy_zones=zones,
    )


def load_processing_options(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ProcessingOptions:
    """Load options from a JSON file and apply environment overrides.

    A missing file at the default location yields the defaults; a missing file
    that was asked for explicitly is a ConfigurationError.
    """
    env = os.environ if env is None else env
    explicit = config_path is not None or CONFIG_PATH_ENV in env
    path = Path(config_path) if config_path is not None else Path(env.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_FILE))

    data: dict[str, Any] = {}
    base_dir: Path | None = None
    if path.is_file():
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{path} is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"Could not read {path}: {exc}") from exc
        base_dir = path.resolve().parent
        LOGGER.debug("Loaded configuration from %s", path)
    elif explicit:
        raise ConfigurationError(f"Configuration file not found: {path}")
    else:
        LOGGER.debug("No configuration file at %s, using defaults", path)

    options = options_from_mapping(data, base_dir)
    return apply_env_overrides(options, env)


def apply_env_overrides(options: ProcessingOptions, env: Mapping[str, str]) -> ProcessingOptions:
    overrides: dict[str, Any] = {}
    if env.get(INPUT_DIR_ENV):
        overrides["input_directory"] = Path(env[INPUT_DIR_ENV]).expanduser()
    if env.get(FAILED_DIR_ENV):
        overrides["failed_directory"] = Path(env[FAILED_DIR_ENV]).expanduser()
    if USE_GPS_TIMESTAMPS_ENV in env:
        overrides["correct_timestamp_from_gps"] = _env_bool(
            env[USE_GPS_TIMESTAMPS_ENV], options.correct_timestamp_from_gps
        )
    if overrides:
        LOGGER.debug("Environment overrides: %s", sorted(overrides))
        return replace(options, **overrides)
    return options


def workers_from_env(env: Mapping[str, str] | None = None) -> int | None:
    env = os.environ if env is None else env
    return _parse_positive_int(env.get(WORKERS_ENV))
