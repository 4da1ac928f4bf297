"""Runtime configuration for the gate crossing tracker."""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Region of Waterloo GRT GTFS-Realtime trip updates (includes ION light rail)
GRT_TRIP_UPDATES_URL = "https://webapps.regionofwaterloo.ca/api/grt-routes/api/tripupdates"

CONFIG_ENV_VAR = "GATEWATCH_CONFIG"
ENV_PREFIX = "GATEWATCH_"


def _load_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown timezone: {name!r}") from None


@dataclass(frozen=True)
class GateConfig:
    """Identifiers and timings used to predict gate closures at one crossing."""
    feed_url: str = GRT_TRIP_UPDATES_URL
    route_id: str = "301"
    stop_id_south: str = "6120"  # Platform served by southbound trains
    stop_id_north: str = "6121"  # Platform served by northbound trains
    south_offset: int = 60  # Seconds the gate closes before a southbound arrival
    north_offset: int = 45  # Seconds the gate closes before a northbound arrival
    fetch_timeout: float = 5.0  # Limit on the whole HTTP download in seconds
    request_timeout: float = 8.0  # Upper bound on a whole trigger in seconds
    timezone: str = ""  # IANA zone for display, e.g. "America/Toronto"; empty uses utc_offset
    utc_offset: int = 0  # Fixed seconds added when no timezone is set
    refresh_interval: int = 60  # Seconds between demo refreshes

    def __post_init__(self):
        for name in ("feed_url", "route_id", "stop_id_south", "stop_id_north"):
            if not getattr(self, name):
                raise ConfigError(f"{name} must not be empty")
        if self.south_offset < 0 or self.north_offset < 0:
            raise ConfigError("Lead-time offsets must be non-negative")
        if self.fetch_timeout <= 0 or self.request_timeout <= 0:
            raise ConfigError("Timeouts must be positive")
        if self.request_timeout < self.fetch_timeout:
            raise ConfigError("request_timeout must not be shorter than fetch_timeout")
        if self.refresh_interval <= 0:
            raise ConfigError("refresh_interval must be positive")
        if self.timezone:
            _load_zone(self.timezone)

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Display time zone, or None to use the fixed utc_offset."""
        return _load_zone(self.timezone) if self.timezone else None


def _coerce(name: str, field_type: Any, value: Any) -> Any:
    """Convert a raw config value to the type declared on GateConfig."""
    try:
        if field_type in (int, float) and isinstance(value, bool):
            raise TypeError(value)
        if field_type is int:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value)
        if field_type is float:
            return float(value)
        return str(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {name}: {value!r}") from None


def config_from_mapping(data: Mapping[str, Any], base: Optional[GateConfig] = None) -> GateConfig:
    """
    Build a GateConfig from a mapping of field names to values.

    Args:
        data: Keys must be GateConfig field names.
        base: Config supplying values for keys not present in data.

    Returns:
        New GateConfig.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    known = {f.name: f.type for f in fields(GateConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values = {name: _coerce(name, known[name], value) for name, value in data.items()}
    return replace(base or GateConfig(), **values)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    overrides = {}
    for f in fields(GateConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            overrides[f.name] = environ[key]
    return overrides


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GateConfig:
    """
    Load configuration from YAML and the environment.

    The YAML path is taken from ``path`` or the GATEWATCH_CONFIG variable.
    Without either, defaults are used. GATEWATCH_<FIELD> variables override
    both.

    Raises:
        ConfigError: If the file is missing, malformed, or has invalid values.
    """
    if environ is None:
        environ = os.environ
    if path is None and environ.get(CONFIG_ENV_VAR):
        path = environ[CONFIG_ENV_VAR]

    config = GateConfig()
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        try:
            with config_path.open() as handle:
                data = yaml.safe_load(handle)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_path}: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")
        config = config_from_mapping(data, config)
        logger.info(f"Loaded config from {config_path}")

    overrides = _env_overrides(environ)
    if overrides:
        logger.debug(f"Applying environment overrides: {sorted(overrides)}")
        config = config_from_mapping(overrides, config)

    return config
