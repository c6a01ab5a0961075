"""Plotly world map of the new year wave.

Equirectangular projection, so meridians are vertical lines and the
new year band is a plain rectangle east of the midnight line.
"""

import numpy as np
import plotly.graph_objects as go

from newyearwave.geo import feature_collection
from newyearwave.i18n import t
from newyearwave.models import CountryRegion, Phase, UserLocation, WaveSnapshot
from newyearwave.wave import (
    format_local,
    snapshot_is_new_year,
    snapshot_midnight_time,
)

_BG = "#0a0a12"
_OCEAN = "#0d1b2a"
_LAND_OLD = "#1b263b"
_LAND_NEW = "#2a2a1a"
_BORDER = "#334155"
_GRID = "#1e293b"
_MIDNIGHT = "#2dd4bf"
_BAND = "rgba(252, 211, 77, 0.15)"
_USER = "#f472b6"

_LAT_LIMIT = 89.9


def _meridian(lon: float) -> tuple[list[float], list[float]]:
    """Densified pole-to-pole meridian so plotly does not shortcut it."""
    lats = np.linspace(-_LAT_LIMIT, _LAT_LIMIT, 37)
    return [lon] * len(lats), list(lats)


def _band(west_lon: float, east_lon: float) -> tuple[list[float], list[float]]:
    """Closed rectangle outline between two meridians, densified along both parallels."""
    lons = list(np.linspace(west_lon, east_lon, 25))
    _, up = _meridian(east_lon)
    _, down = _meridian(west_lon)
    lon_path = lons + [east_lon] * len(up) + lons[::-1] + [west_lon] * len(down)
    lat_path = (
        [-_LAT_LIMIT] * len(lons) + up + [_LAT_LIMIT] * len(lons) + down[::-1]
    )
    return lon_path, lat_path


def _country_trace(
    snap: WaveSnapshot,
    countries: tuple[CountryRegion, ...],
    tz_name: str,
    lang: str,
) -> go.Choropleth:
    year = snap.transition.display_year
    z: list[int] = []
    hover: list[str] = []
    for c in countries:
        in_new = snapshot_is_new_year(snap, c.centroid_lon)
        z.append(1 if in_new else 0)
        when = format_local(snapshot_midnight_time(snap, c.centroid_lon), tz_name)
        label = t("in_year" if in_new else "waiting_year", lang).format(year=year)
        hover.append(
            f"<b>{c.name}</b><br>"
            f"{t('tooltip_midnight', lang).format(year=year)}: {when}<br>"
            f"{label}"
        )

    return go.Choropleth(
        geojson=feature_collection(countries),
        locations=[c.id for c in countries],
        z=z,
        zmin=0,
        zmax=1,
        colorscale=[[0.0, _LAND_OLD], [1.0, _LAND_NEW]],
        showscale=False,
        marker=dict(line=dict(color=_BORDER, width=0.5)),
        hovertext=hover,
        hoverinfo="text",
        name="countries",
    )


def render_wave_map(
    snap: WaveSnapshot,
    countries: tuple[CountryRegion, ...],
    user_location: UserLocation | None = None,
    tz_name: str = "UTC",
    lang: str = "en",
) -> go.Figure:
    """Render a WaveSnapshot as a Plotly world map.

    Countries are shaded by whether their centroid longitude has entered
    the new year. During the wave a translucent band covers everything east
    of the midnight meridian; once complete it covers the whole map. The
    midnight meridian itself is always drawn.

    Args:
        snap: Derived wave state for the current tick.
        countries: Boundary regions with centroids.
        user_location: Browser geolocation, drawn as a marker if given.
        tz_name: Viewer's IANA time zone for hover times.
        lang: Language code ('ko' or 'en') for labels.

    Returns:
        Plotly Figure object.
    """
    traces: list[go.BaseTraceType] = []

    if snap.phase is Phase.DURING:
        band_lon, band_lat = _band(snap.midnight_lon, 180.0)
    elif snap.phase is Phase.COMPLETE:
        band_lon, band_lat = _band(-180.0, 180.0)
    else:
        band_lon, band_lat = [], []
    if band_lon:
        traces.append(
            go.Scattergeo(
                lon=band_lon,
                lat=band_lat,
                mode="lines",
                fill="toself",
                fillcolor=_BAND,
                line=dict(width=0),
                hoverinfo="skip",
                name="new_year_band",
            )
        )

    if countries:
        traces.append(_country_trace(snap, countries, tz_name, lang))

    eq_lon = list(np.linspace(-180, 180, 73))
    traces.append(
        go.Scattergeo(
            lon=eq_lon,
            lat=[0.0] * len(eq_lon),
            mode="lines",
            line=dict(color=_GRID, width=1, dash="dot"),
            hoverinfo="skip",
            name="equator",
        )
    )
    pm_lon, pm_lat = _meridian(0.0)
    traces.append(
        go.Scattergeo(
            lon=pm_lon,
            lat=pm_lat,
            mode="lines",
            line=dict(color=_GRID, width=1, dash="dash"),
            hoverinfo="skip",
            name="prime_meridian",
        )
    )

    # Glow: a wide faint stroke under the sharp line.
    mid_lon, mid_lat = _meridian(snap.midnight_lon)
    traces.append(
        go.Scattergeo(
            lon=mid_lon,
            lat=mid_lat,
            mode="lines",
            line=dict(color=_MIDNIGHT, width=12),
            opacity=0.2,
            hoverinfo="skip",
            name="midnight_glow",
        )
    )
    traces.append(
        go.Scattergeo(
            lon=mid_lon,
            lat=mid_lat,
            mode="lines",
            line=dict(color=_MIDNIGHT, width=2),
            hoverinfo="skip",
            name="midnight_line",
        )
    )

    if user_location is not None:
        traces.append(
            go.Scattergeo(
                lon=[user_location.lng],
                lat=[user_location.lat],
                mode="markers+text",
                marker=dict(size=12, color=_USER, line=dict(color="#ffffff", width=2)),
                text=[t("you_marker", lang)],
                textposition="top center",
                textfont=dict(color=_USER, size=11),
                hoverinfo="skip",
                name="user",
            )
        )

    fig = go.Figure(data=traces)
    fig.update_geos(
        projection_type="equirectangular",
        showframe=False,
        showcoastlines=False,
        showcountries=False,
        showland=False,
        showocean=True,
        oceancolor=_OCEAN,
        bgcolor=_BG,
        lonaxis=dict(range=[-180, 180], showgrid=True, gridcolor=_GRID, dtick=30),
        lataxis=dict(range=[-90, 90], showgrid=True, gridcolor=_GRID, dtick=30),
    )
    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=False,
        margin=dict(l=0, r=0, t=0, b=0),
        height=500,
        dragmode=False,
        hoverlabel=dict(bgcolor="#0f172a", font_color="#e2e8f0"),
    )
    return fig
