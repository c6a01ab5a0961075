"""Data model definitions. Explicit boundaries between the wave, geo and render layers."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class Phase(str, Enum):
    """Where an instant sits on the yearly new year timeline."""

    BEFORE = "before"
    DURING = "during"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TransitionPhase:
    """Classification of a single UTC instant. Recomputed every tick."""

    phase: Phase
    coverage_percent: float  # 0..100, linear over the 24h window
    countdown: timedelta | None  # Time left to window_start; only set when BEFORE
    display_year: int  # The year being welcomed
    previous_year: int  # The year being left behind
    window_start: datetime  # Dec 31 12:00 UTC of previous_year
    window_end: datetime  # Jan 1 12:00 UTC of display_year


@dataclass(frozen=True)
class WaveSnapshot:
    """Full derived value set for one instant. The sole input to renderers."""

    instant: datetime  # UTC datetime (with tzinfo=utc)
    midnight_lon: float  # Longitude currently at solar midnight, in (-180, 180]
    transition: TransitionPhase

    @property
    def phase(self) -> Phase:
        return self.transition.phase


@dataclass(frozen=True)
class CountryRegion:
    """A single country boundary plus its representative point."""

    id: str  # Stable feature id used to join geometry and shading
    name: str  # Display name ("France", "Unknown" if missing)
    centroid_lon: float  # Degrees east
    centroid_lat: float  # Degrees north
    geometry: dict[str, Any]  # GeoJSON Polygon / MultiPolygon


@dataclass(frozen=True)
class UserLocation:
    """Result of browser geolocation."""

    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees)
