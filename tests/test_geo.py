import json
import math

import httpx
import pytest

from newyearwave.geo import (
    GeoDataError,
    _cache_path,
    compute_centroid,
    feature_collection,
    fetch_countries,
    load_countries,
    parse_countries,
)

URL = "https://example.test/countries.geojson"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_centroid_of_square():
    lon, lat = compute_centroid(
        {
            "type": "Polygon",
            "coordinates": [[[10, -10], [30, -10], [30, 10], [10, 10], [10, -10]]],
        }
    )
    assert math.isclose(lon, 20, abs_tol=1e-9)
    assert math.isclose(lat, 0, abs_tol=1e-9)


def test_centroid_across_antimeridian_stays_near_date_line():
    # Two halves of one island split at 180°, as Natural Earth stores Fiji.
    geometry = {
        "type": "MultiPolygon",
        "coordinates": [
            [[[178, -18], [180, -18], [180, -16], [178, -16], [178, -18]]],
            [[[-180, -18], [-178, -18], [-178, -16], [-180, -16], [-180, -18]]],
        ],
    }
    lon, lat = compute_centroid(geometry)
    assert abs(lon) > 179
    assert -18 < lat < -16


def test_centroid_weights_larger_ring():
    geometry = {
        "type": "MultiPolygon",
        "coordinates": [
            [[[0, 0], [40, 0], [40, 40], [0, 40], [0, 0]]],
            [[[100, 0], [101, 0], [101, 1], [100, 1], [100, 0]]],
        ],
    }
    lon, _ = compute_centroid(geometry)
    assert 15 < lon < 25


def test_centroid_without_rings_raises():
    with pytest.raises(GeoDataError):
        compute_centroid({"type": "Polygon", "coordinates": []})


def test_parse_countries(square_geojson):
    regions = parse_countries(square_geojson)
    assert [r.name for r in regions] == ["Eastland", "Westland"]
    assert [r.id for r in regions] == ["0", "1"]
    assert math.isclose(regions[0].centroid_lon, 140, abs_tol=1e-9)
    assert math.isclose(regions[1].centroid_lon, -100, abs_tol=1e-9)
    assert 30 < regions[1].centroid_lat < 50


def test_parse_countries_unknown_name():
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": None,
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                },
            }
        ],
    }
    assert parse_countries(collection)[0].name == "Unknown"


def test_parse_rejects_non_feature_collection():
    with pytest.raises(GeoDataError):
        parse_countries({"type": "Topology", "objects": {}})


def test_fetch_countries(square_geojson):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=square_geojson)

    regions = fetch_countries(URL, client=_client(handler))
    assert len(regions) == 2
    assert str(seen[0].url) == URL
    assert "NewYearWave" in seen[0].headers["user-agent"]


def test_fetch_countries_http_error():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(GeoDataError, match="Failed to fetch"):
        fetch_countries(URL, client=client)


def test_fetch_countries_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(GeoDataError):
        fetch_countries(URL, client=_client(handler))


def test_fetch_countries_bad_json():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(GeoDataError, match="not valid JSON"):
        fetch_countries(URL, client=client)


def test_load_countries_caches(tmp_path, square_geojson):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=square_geojson)

    first = load_countries(URL, tmp_path, client=_client(handler))
    assert len(calls) == 1
    assert len(list(tmp_path.glob("countries-*.geojson"))) == 1

    def offline(request: httpx.Request) -> httpx.Response:
        raise AssertionError("cache should have been used")

    second = load_countries(URL, tmp_path, client=_client(offline))
    assert second == first


def test_load_countries_replaces_corrupt_cache(tmp_path, square_geojson):
    load_countries(
        URL, tmp_path, client=_client(lambda r: httpx.Response(200, json=square_geojson))
    )
    cached = next(tmp_path.glob("countries-*.geojson"))
    cached.write_text("{not json", encoding="utf-8")

    regions = load_countries(
        URL, tmp_path, client=_client(lambda r: httpx.Response(200, json=square_geojson))
    )
    assert len(regions) == 2
    assert json.loads(cached.read_text(encoding="utf-8"))["type"] == "FeatureCollection"


def test_load_countries_does_not_cache_failures(tmp_path):
    with pytest.raises(GeoDataError):
        load_countries(URL, tmp_path, client=_client(lambda r: httpx.Response(404)))
    assert not list(tmp_path.glob("*"))


def test_feature_collection_round_trips_ids(square_geojson):
    regions = parse_countries(square_geojson)
    fc = feature_collection(regions)
    assert fc["type"] == "FeatureCollection"
    assert [f["id"] for f in fc["features"]] == ["0", "1"]
    assert fc["features"][1]["properties"]["name"] == "Westland"


def _square(lon: float) -> dict:
    return {
        "type": "Feature",
        "properties": {"NAME": "Square"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [[lon, 0], [lon + 1, 0], [lon + 1, 1], [lon, 1], [lon, 0]]
            ],
        },
    }


def test_centroid_ragged_ring_raises():
    with pytest.raises(GeoDataError, match="malformed"):
        compute_centroid(
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 0, 2, 3], [1], [0, 0]]]}
        )


def test_centroid_non_numeric_ring_raises():
    with pytest.raises(GeoDataError):
        compute_centroid({"type": "MultiPolygon", "coordinates": [5, 6]})


def test_parse_rejects_features_mapping():
    with pytest.raises(GeoDataError, match="must be a list"):
        parse_countries({"type": "FeatureCollection", "features": {"0": _square(0)}})


def test_parse_skips_malformed_features():
    ragged = _square(20)
    ragged["geometry"]["coordinates"] = [[[20, 0], [21, 0, 9, 9], [21]]]
    collection = {
        "type": "FeatureCollection",
        "features": [
            "oops",
            {"type": "Feature", "geometry": "Polygon"},
            ragged,
            _square(10),
        ],
    }
    regions = parse_countries(collection)
    assert [r.id for r in regions] == ["3"]


def test_parse_without_usable_features_raises():
    with pytest.raises(GeoDataError, match="no usable"):
        parse_countries({"type": "FeatureCollection", "features": ["oops"]})


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "FeatureCollection", "features": ["oops"]},
        {"type": "FeatureCollection", "features": {"a": 1}},
        [1, 2, 3],
    ],
)
def test_fetch_countries_malformed_payload(payload):
    client = _client(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(GeoDataError):
        fetch_countries(URL, client=client)


def test_load_countries_malformed_payload_is_geo_error(tmp_path):
    payload = {"type": "FeatureCollection", "features": ["oops"]}
    with pytest.raises(GeoDataError):
        load_countries(
            URL, tmp_path, client=_client(lambda r: httpx.Response(200, json=payload))
        )
    assert not list(tmp_path.glob("*"))


def test_load_countries_unwritable_cache_dir(tmp_path, square_geojson):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    regions = load_countries(
        URL,
        blocker / "cache",
        client=_client(lambda r: httpx.Response(200, json=square_geojson)),
    )
    assert [r.name for r in regions] == ["Eastland", "Westland"]


def test_load_countries_unreadable_cache_refetches(tmp_path, square_geojson):
    # A directory squatting on the cache file name can be neither read nor replaced.
    _cache_path(URL, tmp_path).mkdir()
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=square_geojson)

    regions = load_countries(URL, tmp_path, client=_client(handler))
    assert len(regions) == 2
    assert len(calls) == 1
