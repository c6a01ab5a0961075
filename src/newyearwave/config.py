"""Runtime settings read from the environment (``.env`` is loaded by the entry points)."""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_GEO_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/master/"
    "geojson/ne_110m_admin_0_countries.geojson"
)
DEFAULT_SITE_URL = "https://nx10.dev/new-year-wave"
DEFAULT_TIMEZONE_MAP_URL = "https://www.timeanddate.com/counters/newyearmap.html"

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Invalid environment setting."""


@dataclass(frozen=True)
class Settings:
    geo_url: str  # GeoJSON FeatureCollection of country boundaries
    site_url: str  # Public URL used in share links
    timezone_map_url: str  # Civil time zone new year map, linked for comparison
    tick_seconds: float  # Live refresh interval
    cache_dir: Path  # Where downloaded boundary data is kept
    log_level: str
    log_dir: Path | None  # File sink directory; stderr only when None


def _positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _default_cache_dir(env: Mapping[str, str]) -> Path:
    """Per-user cache: $XDG_CACHE_HOME/newyearwave, else ~/.cache/newyearwave."""
    base = env.get("XDG_CACHE_HOME")
    return (Path(base) if base else Path.home() / ".cache") / "newyearwave"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (for tests).

    Returns:
        Frozen Settings with defaults filled in.

    Raises:
        ConfigError: On a malformed tick interval or unknown log level.
    """
    env = os.environ if environ is None else environ

    log_level = env.get("NYW_LOG_LEVEL", "INFO").upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"NYW_LOG_LEVEL must be one of {_LOG_LEVELS}, got {log_level!r}")

    log_dir = env.get("NYW_LOG_DIR")
    cache_dir = env.get("NYW_CACHE_DIR")

    return Settings(
        geo_url=env.get("NYW_GEO_URL", DEFAULT_GEO_URL),
        site_url=env.get("NYW_SITE_URL", DEFAULT_SITE_URL),
        timezone_map_url=env.get("NYW_TIMEZONE_MAP_URL", DEFAULT_TIMEZONE_MAP_URL),
        tick_seconds=_positive_float(
            "NYW_TICK_SECONDS", env.get("NYW_TICK_SECONDS", "1")
        ),
        cache_dir=Path(cache_dir) if cache_dir else _default_cache_dir(env),
        log_level=log_level,
        log_dir=Path(log_dir) if log_dir else None,
    )
