"""Temporal geometry of the new year wave: solar midnight, transition phase, membership.

Mean solar time only: solar midnight moves a flat 15° per hour of UTC. No
equation-of-time or axial-tilt correction is applied.
"""

import math
from datetime import datetime, timedelta

import pytz
from pytz import utc

from newyearwave.models import Phase, TransitionPhase, WaveSnapshot

DEGREES_PER_HOUR = 15.0
WINDOW_HOURS = 24.0

# Solar midnight bands for the status line, east to west.
_REGION_BANDS: tuple[tuple[float, str], ...] = (
    (120.0, "region_pacific_start"),
    (60.0, "region_east_asia"),
    (0.0, "region_south_asia"),
    (-30.0, "region_europe_africa"),
    (-90.0, "region_atlantic"),
    (-150.0, "region_americas"),
)
_REGION_FINAL = "region_pacific_final"


class InvalidLongitudeError(ValueError):
    """Longitude is NaN or infinite."""


def _require_finite(lon: float) -> float:
    if not math.isfinite(lon):
        raise InvalidLongitudeError(f"longitude must be finite, got {lon!r}")
    return lon


def _as_utc(instant: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if instant.tzinfo is None or instant.tzinfo.utcoffset(instant) is None:
        return instant.replace(tzinfo=utc)
    return instant.astimezone(utc)


def utc_now() -> datetime:
    return datetime.now(utc)


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into (-180, 180].

    The antimeridian is always reported as +180, so the meridian the wave
    starts from has a single representation.

    Raises:
        InvalidLongitudeError: If lon is NaN or infinite.
    """
    wrapped = _require_finite(lon) % 360.0
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def solar_midnight_longitude(instant: datetime) -> float:
    """Return the longitude currently experiencing solar midnight.

    Solar noon at longitude L falls at UTC hour ``12 - L/15``; midnight is
    twelve hours away, which gives ``L = -hours * 15``.

    Args:
        instant: Point in time. Naive values are treated as UTC.

    Returns:
        Normalized longitude in degrees east.
    """
    t = _as_utc(instant)
    total_hours = t.hour + t.minute / 60 + t.second / 3600
    return normalize_longitude(-total_hours * DEGREES_PER_HOUR)


def relevant_years(instant: datetime) -> tuple[int, int]:
    """Return (display_year, previous_year) for an instant.

    Throughout December the year being welcomed is the next one.
    """
    t = _as_utc(instant)
    if t.month == 12:
        return t.year + 1, t.year
    return t.year, t.year - 1


def window_start(display_year: int) -> datetime:
    """Dec 31 12:00 UTC of the year before display_year: 180° reaches midnight."""
    return datetime(display_year - 1, 12, 31, 12, 0, 0, tzinfo=utc)


def window_end(display_year: int) -> datetime:
    """Jan 1 12:00 UTC of display_year: -180° reaches midnight."""
    return datetime(display_year, 1, 1, 12, 0, 0, tzinfo=utc)


def classify(instant: datetime) -> TransitionPhase:
    """Place an instant on the Before / During / Complete timeline.

    Args:
        instant: Point in time. Naive values are treated as UTC.

    Returns:
        TransitionPhase with coverage percentage, and the countdown to the
        window start when the wave has not started yet.
    """
    t = _as_utc(instant)
    display_year, previous_year = relevant_years(t)
    start = window_start(display_year)
    end = window_end(display_year)

    countdown: timedelta | None = None
    if t < start:
        # Only December reaches here: any other month's window already closed.
        phase = Phase.BEFORE
        coverage = 0.0
        countdown = start - t
    elif t < end:
        phase = Phase.DURING
        hours = (t - start).total_seconds() / 3600
        coverage = hours / WINDOW_HOURS * 100
    else:
        phase = Phase.COMPLETE
        coverage = 100.0

    return TransitionPhase(
        phase=phase,
        coverage_percent=coverage,
        countdown=countdown,
        display_year=display_year,
        previous_year=previous_year,
        window_start=start,
        window_end=end,
    )


def is_new_year(
    lon: float, phase: Phase | TransitionPhase, midnight_lon: float
) -> bool:
    """Decide whether a longitude has already entered the new year.

    During the wave the new year covers everything east of the midnight
    meridian. Once both values are normalized that is a single comparison
    whichever hemisphere the line is in. The line itself has not passed yet.

    Args:
        lon: Queried longitude, any finite value.
        phase: Phase, or the TransitionPhase it came from.
        midnight_lon: Current solar midnight longitude.

    Returns:
        True if lon has seen solar midnight on January 1.
    """
    _require_finite(lon)
    _require_finite(midnight_lon)
    if isinstance(phase, TransitionPhase):
        phase = phase.phase
    if phase is Phase.BEFORE:
        return False
    if phase is Phase.COMPLETE:
        return True
    return normalize_longitude(lon) > normalize_longitude(midnight_lon)


def solar_midnight_time_for_new_year(lon: float, year: int) -> datetime:
    """Return the UTC instant of lon's first solar midnight of January 1, year.

    The wave leaves 180° at the window start and travels 15° per hour
    westward, so lon is reached ``(180 - lon) / 15`` hours later.

    Args:
        lon: Longitude in degrees east; typically within [-180, 180].
        year: The year whose January 1 is wanted.

    Returns:
        Aware UTC datetime between window_start(year) and window_end(year).
    """
    hours_after_start = (180.0 - _require_finite(lon)) / DEGREES_PER_HOUR
    return window_start(year) + timedelta(hours=hours_after_start)


def snapshot(instant: datetime) -> WaveSnapshot:
    """Recompute every derived value for one instant."""
    t = _as_utc(instant)
    return WaveSnapshot(
        instant=t,
        midnight_lon=solar_midnight_longitude(t),
        transition=classify(t),
    )


def snapshot_is_new_year(snap: WaveSnapshot, lon: float) -> bool:
    return is_new_year(lon, snap.transition, snap.midnight_lon)


def snapshot_midnight_time(snap: WaveSnapshot, lon: float) -> datetime:
    return solar_midnight_time_for_new_year(lon, snap.transition.display_year)


# --- Status labels ---


def wave_region(midnight_lon: float) -> str:
    """Region key for the band the midnight line is crossing."""
    lon = normalize_longitude(midnight_lon)
    for threshold, key in _REGION_BANDS:
        if lon > threshold:
            return key
    return _REGION_FINAL


def status_key(snap: WaveSnapshot) -> str:
    """Return the i18n key of the one-line status for a snapshot."""
    transition = snap.transition
    if transition.phase is Phase.COMPLETE:
        return "status_complete"
    if transition.phase is Phase.DURING:
        return wave_region(snap.midnight_lon)
    days, hours, _, _ = split_countdown(transition.countdown or timedelta(0))
    if days == 0 and hours < 1:
        return "status_almost"
    if days == 0:
        return "status_soon"
    return "status_awaiting"


# --- Formatting ---


def split_countdown(delta: timedelta) -> tuple[int, int, int, int]:
    """Split a non-negative duration into whole (days, hours, minutes, seconds)."""
    total = max(0, int(delta.total_seconds()))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return days, hours, minutes, seconds


def format_countdown(delta: timedelta) -> str:
    days, hours, minutes, seconds = split_countdown(delta)
    clock = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if days > 0:
        return f"{days}d {clock}"
    return clock


def format_longitude(lon: float) -> str:
    direction = "E" if lon >= 0 else "W"
    return f"{abs(lon):.2f}° {direction}"


def format_utc(instant: datetime) -> str:
    return _as_utc(instant).strftime("%Y-%m-%d %H:%M:%S") + " UTC"


def format_local(instant: datetime, tz_name: str) -> str:
    """Format an instant in the viewer's time zone ("Jan 1, 05:30").

    Unknown zone names fall back to UTC.
    """
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = utc
    local = _as_utc(instant).astimezone(tz)
    return f"{local:%b} {local.day}, {local:%H:%M}"
