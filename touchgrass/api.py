"""One-liner API for touchgrass — ``import touchgrass; touchgrass.detect(40.78, -73.97)``.

Synchronous wrappers around the async pipeline for scripts, notebooks and
the CLI. They open a ``GooglePlacesClient`` from the environment unless a
places client is passed in.

Examples
--------
>>> import touchgrass
>>> result = touchgrass.detect(40.7812, -73.9665)
>>> result.is_outdoors, result.confidence
>>> touchgrass.touching_grass(40.7812, -73.9665).is_touching_grass
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from touchgrass.core.config import DEFAULT_CONFIG, DetectionOptions, TouchGrassConfig
from touchgrass.core.models import (
    GeoCoordinates,
    GrassDetectionResult,
    OutdoorDetectionResult,
)
from touchgrass.decision.engine import detect_outdoor_location
from touchgrass.decision.grass import analyze_grass
from touchgrass.places.client import (
    GooglePlacesClient,
    OverrideOnlyPlaces,
    PlacesClient,
)

logger = logging.getLogger("touchgrass.api")


async def _detect(
    coordinates: GeoCoordinates,
    places: Optional[PlacesClient],
    options: DetectionOptions,
    config: TouchGrassConfig,
) -> OutdoorDetectionResult:
    if places is not None:
        return await detect_outdoor_location(coordinates, places, options, config)
    async with GooglePlacesClient.from_env(config.places_api) as google:
        return await detect_outdoor_location(coordinates, google, options, config)


async def _grass(
    coordinates: GeoCoordinates,
    places: Optional[PlacesClient],
    is_manual_override: bool,
    config: TouchGrassConfig,
) -> GrassDetectionResult:
    if places is not None:
        return await analyze_grass(coordinates, places, is_manual_override, config)
    async with GooglePlacesClient.from_env(config.places_api) as google:
        return await analyze_grass(coordinates, google, is_manual_override, config)


def detect(
    lat: float,
    lng: float,
    *,
    manual_override: bool = False,
    threshold: Optional[int] = None,
    places: Optional[PlacesClient] = None,
    config: TouchGrassConfig = DEFAULT_CONFIG,
) -> OutdoorDetectionResult:
    """Detect whether ``(lat, lng)`` is an outdoor natural location.

    Parameters
    ----------
    lat, lng : float
        WGS84 coordinates in degrees.
    manual_override : bool
        Force a positive verdict without querying places.
    threshold : int, optional
        Outdoor confidence threshold (default 70).
    places : PlacesClient, optional
        Backend to use instead of Google Places.

    Raises
    ------
    ConfigurationError
        When no ``places`` is given and ``GOOGLE_MAPS_API_KEY`` is not set
        (skipped for manual overrides, which never query places).
    """
    options = DetectionOptions.merged(manual_override, outdoors=threshold)
    coordinates = GeoCoordinates(lat, lng)
    if manual_override and places is None:
        return asyncio.run(
            detect_outdoor_location(coordinates, OverrideOnlyPlaces(), options, config)
        )
    return asyncio.run(_detect(coordinates, places, options, config))


def touching_grass(
    lat: float,
    lng: float,
    *,
    manual_override: bool = False,
    places: Optional[PlacesClient] = None,
    config: TouchGrassConfig = DEFAULT_CONFIG,
) -> GrassDetectionResult:
    """Decide whether ``(lat, lng)`` is a place where you can touch grass."""
    coordinates = GeoCoordinates(lat, lng)
    if manual_override and places is None:
        return asyncio.run(analyze_grass(coordinates, OverrideOnlyPlaces(), True, config))
    return asyncio.run(_grass(coordinates, places, manual_override, config))

