# tests/conftest.py
from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def silence_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def square_geojson() -> dict:
    """Two square countries (western Pacific, North America) and a Point feature to skip."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"NAME": "Eastland"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [
                        [[130, -10], [150, -10], [150, 10], [130, 10], [130, -10]]
                    ],
                },
            },
            {
                "type": "Feature",
                "properties": {"name": "Westland"},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [
                        [[[-110, 30], [-90, 30], [-90, 50], [-110, 50], [-110, 30]]]
                    ],
                },
            },
            {
                "type": "Feature",
                "properties": {"NAME": "Pointless"},
                "geometry": {"type": "Point", "coordinates": [0, 0]},
            },
        ],
    }
