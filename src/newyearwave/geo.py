"""Country boundary loading: GeoJSON download, on-disk cache, centroids."""

import hashlib
import json
import math
from pathlib import Path
from typing import Any

import httpx
import numpy as np
from loguru import logger

from newyearwave.models import CountryRegion

_NAME_KEYS = ("NAME", "name", "ADMIN", "NAME_EN")
_HEADERS = {"User-Agent": "NewYearWave/1.0 (https://nx10.dev/new-year-wave)"}


class GeoDataError(Exception):
    """Boundary data could not be fetched or parsed."""


def _exterior_rings(geometry: dict[str, Any]) -> list[list[list[float]]]:
    """Exterior ring of every polygon in a Polygon or MultiPolygon."""
    kind = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if kind == "Polygon":
        return [coords[0]] if coords else []
    if kind == "MultiPolygon":
        return [poly[0] for poly in coords if poly]
    return []


def compute_centroid(geometry: dict[str, Any]) -> tuple[float, float]:
    """Return (lon, lat) of a polygon's representative point.

    Each exterior ring contributes the mean of its vertices on the unit
    sphere, weighted by its planar area. Averaging vectors instead of raw
    degrees keeps regions split at the antimeridian (Fiji, Chukotka) on the
    correct side of the globe.

    Raises:
        GeoDataError: If the geometry has no usable ring or its coordinates
            are not numeric vertex lists.
    """
    try:
        rings = _exterior_rings(geometry)
    except (AttributeError, KeyError, IndexError, TypeError) as e:
        raise GeoDataError(f"malformed polygon coordinates: {e}") from e

    total = np.zeros(3)
    for ring in rings:
        try:
            pts = np.asarray(ring, dtype=float)
        except (TypeError, ValueError) as e:
            raise GeoDataError(f"malformed ring: {e}") from e
        if pts.ndim != 2 or pts.shape[0] < 3 or pts.shape[1] < 2:
            continue
        if np.array_equal(pts[0], pts[-1]):
            pts = pts[:-1]
        lon = np.radians(pts[:, 0])
        lat = np.radians(pts[:, 1])
        xyz = np.column_stack(
            (np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat))
        )
        # Shoelace area in degree space; tiny islands still get a nonzero weight.
        x, y = pts[:, 0], pts[:, 1]
        area = 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))
        total += xyz.mean(axis=0) * max(area, 1e-9)

    if not np.any(total):
        raise GeoDataError("geometry has no polygon rings")
    lon_deg = math.degrees(math.atan2(total[1], total[0]))
    lat_deg = math.degrees(math.atan2(total[2], math.hypot(total[0], total[1])))
    return lon_deg, lat_deg


def _feature_name(properties: dict[str, Any] | None) -> str:
    props = properties or {}
    for key in _NAME_KEYS:
        if props.get(key):
            return str(props[key])
    return "Unknown"


def parse_countries(collection: dict[str, Any]) -> tuple[CountryRegion, ...]:
    """Turn a GeoJSON FeatureCollection into CountryRegion records.

    Features without Polygon/MultiPolygon geometry are skipped, and so are
    features whose coordinates cannot be read.

    Raises:
        GeoDataError: If the payload is not a FeatureCollection with a list
            of features, or no feature yields a region.
    """
    if not isinstance(collection, dict) or collection.get("type") != "FeatureCollection":
        raise GeoDataError("expected a GeoJSON FeatureCollection")
    features = collection.get("features") or []
    if not isinstance(features, list):
        raise GeoDataError("FeatureCollection 'features' must be a list")

    regions: list[CountryRegion] = []
    for i, feature in enumerate(features):
        if not isinstance(feature, dict):
            logger.warning("Skipping feature {}: not an object", i)
            continue
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            continue
        if geometry.get("type") not in ("Polygon", "MultiPolygon"):
            continue
        try:
            lon, lat = compute_centroid(geometry)
        except GeoDataError as e:
            logger.warning("Skipping feature {}: {}", i, e)
            continue
        properties = feature.get("properties")
        regions.append(
            CountryRegion(
                id=str(i),
                name=_feature_name(properties if isinstance(properties, dict) else None),
                centroid_lon=lon,
                centroid_lat=lat,
                geometry=geometry,
            )
        )
    if not regions:
        raise GeoDataError("no usable country polygons in map data")
    return tuple(regions)


def _download(url: str, client: httpx.Client | None) -> dict[str, Any]:
    """Single GET of the boundary file. Raises GeoDataError on any failure."""
    logger.info("Fetching country boundaries from {}", url)
    try:
        if client is None:
            resp = httpx.get(url, headers=_HEADERS, timeout=20, follow_redirects=True)
        else:
            resp = client.get(url, headers=_HEADERS)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        raise GeoDataError(f"Failed to fetch map data: {e}") from e
    except ValueError as e:
        raise GeoDataError(f"Map data is not valid JSON: {e}") from e


def fetch_countries(
    url: str, client: httpx.Client | None = None
) -> tuple[CountryRegion, ...]:
    """Download boundary data and parse it.

    Args:
        url: GeoJSON FeatureCollection URL.
        client: Optional httpx client (tests pass one with a mock transport).

    Returns:
        Tuple of CountryRegion objects.

    Raises:
        GeoDataError: On network/HTTP failure or a malformed payload.
    """
    return parse_countries(_download(url, client))


def _cache_path(url: str, cache_dir: Path) -> Path:
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]
    return cache_dir / f"countries-{digest}.geojson"


def load_countries(
    url: str, cache_dir: Path, client: httpx.Client | None = None
) -> tuple[CountryRegion, ...]:
    """Return country regions, downloading once and caching under cache_dir.

    A corrupt or unreadable cache file is discarded and fetched again. A
    cache that cannot be written only costs the next run a download.

    Raises:
        GeoDataError: When the data is neither cached nor fetchable.
    """
    path = _cache_path(url, cache_dir)
    if path.exists():
        try:
            with path.open(encoding="utf-8") as f:
                return parse_countries(json.load(f))
        except (OSError, ValueError, GeoDataError) as e:
            logger.warning("Discarding unreadable boundary cache {}: {}", path, e)
            try:
                path.unlink(missing_ok=True)
            except OSError as unlink_error:
                logger.warning("Could not remove boundary cache {}: {}", path, unlink_error)

    collection = _download(url, client)
    regions = parse_countries(collection)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(collection, f)
    except OSError as e:
        logger.warning("Could not write boundary cache {}: {}", path, e)
    else:
        logger.info("Cached {} country regions at {}", len(regions), path)
    return regions


def feature_collection(countries: tuple[CountryRegion, ...]) -> dict[str, Any]:
    """Rebuild a GeoJSON FeatureCollection keyed by region id, for plotly."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": c.id,
                "properties": {"name": c.name},
                "geometry": c.geometry,
            }
            for c in countries
        ],
    }
