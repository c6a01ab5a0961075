from datetime import datetime, timezone

import pytest

from newyearwave.geo import parse_countries
from newyearwave.models import UserLocation
from newyearwave.renderers.plotly_map import render_wave_map
from newyearwave.wave import snapshot


def _trace(fig, name):
    matches = [tr for tr in fig.data if tr.name == name]
    return matches[0] if matches else None


@pytest.fixture
def countries(square_geojson):
    return parse_countries(square_geojson)


def test_during_shades_only_countries_east_of_line(countries):
    # 15:00 UTC Dec 31: midnight at 135°E. Eastland (140°E) is in, Westland is not.
    snap = snapshot(datetime(2024, 12, 31, 15, 0, 0, tzinfo=timezone.utc))
    fig = render_wave_map(snap, countries)

    choropleth = _trace(fig, "countries")
    assert list(choropleth.locations) == ["0", "1"]
    assert list(choropleth.z) == [1, 0]
    assert "Eastland" in choropleth.hovertext[0]
    assert "✓ In 2025" in choropleth.hovertext[0]
    assert "Waiting for 2025" in choropleth.hovertext[1]

    band = _trace(fig, "new_year_band")
    assert band is not None
    assert min(band.lon) == pytest.approx(135)
    assert max(band.lon) == pytest.approx(180)

    line = _trace(fig, "midnight_line")
    assert set(line.lon) == {135}


def test_before_has_no_band_and_nothing_shaded(countries):
    snap = snapshot(datetime(2024, 12, 20, tzinfo=timezone.utc))
    fig = render_wave_map(snap, countries)
    assert _trace(fig, "new_year_band") is None
    assert list(_trace(fig, "countries").z) == [0, 0]
    assert _trace(fig, "midnight_line") is not None


def test_complete_band_covers_the_map(countries):
    snap = snapshot(datetime(2025, 4, 2, tzinfo=timezone.utc))
    fig = render_wave_map(snap, countries)
    band = _trace(fig, "new_year_band")
    assert min(band.lon) == pytest.approx(-180)
    assert max(band.lon) == pytest.approx(180)
    assert list(_trace(fig, "countries").z) == [1, 1]


def test_hover_times_use_viewer_timezone(countries):
    snap = snapshot(datetime(2024, 12, 31, 15, 0, 0, tzinfo=timezone.utc))
    fig = render_wave_map(snap, countries, tz_name="Asia/Seoul")
    # Eastland at 140°E: (180 - 140) / 15 h after Dec 31 12:00 UTC = 14:40 UTC = 23:40 KST
    assert "Dec 31, 23:40" in _trace(fig, "countries").hovertext[0]


def test_user_marker(countries):
    snap = snapshot(datetime(2025, 1, 1, tzinfo=timezone.utc))
    fig = render_wave_map(
        snap, countries, user_location=UserLocation(lat=37.5, lng=127.0), lang="ko"
    )
    marker = _trace(fig, "user")
    assert list(marker.lon) == [127.0]
    assert list(marker.lat) == [37.5]
    assert list(marker.text) == ["나"]


def test_renders_without_boundary_data():
    snap = snapshot(datetime(2025, 1, 1, tzinfo=timezone.utc))
    fig = render_wave_map(snap, ())
    assert _trace(fig, "countries") is None
    assert fig.layout.geo.projection.type == "equirectangular"
