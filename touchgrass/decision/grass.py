"""Grass analysis on top of the outdoor verdict."""

from __future__ import annotations

import logging
from typing import Optional

from touchgrass.core.config import DEFAULT_CONFIG, DetectionOptions, TouchGrassConfig
from touchgrass.core.models import (
    Explanations,
    GeoCoordinates,
    GrassDetectionResult,
    SpaceCategory,
)
from touchgrass.decision.engine import FALLBACK_CONFIDENCE, OutdoorDetector
from touchgrass.places.client import PlacesClient

logger = logging.getLogger("touchgrass.decision.grass")

GREEN_SPACE_TYPES = frozenset({"park", "campground", "natural_feature", "playground"})
GRASSY_CATEGORIES = frozenset({
    SpaceCategory.NATURAL_AREA,
    SpaceCategory.PROTECTED_AREA,
    SpaceCategory.MANAGED_OUTDOOR,
})
GREEN_SPACE_CONFIDENCE = 95


async def analyze_grass(
    coordinates: GeoCoordinates,
    places: PlacesClient,
    is_manual_override: bool = False,
    config: TouchGrassConfig = DEFAULT_CONFIG,
    log: Optional[logging.Logger] = None,
) -> GrassDetectionResult:
    """Decide whether the caller is plausibly touching grass.

    Playgrounds, parks and locations inside a green-space boundary count
    as grass outright; otherwise the location must be outdoors and
    classified as a natural, protected or managed outdoor space.
    """
    log = log or logger
    try:
        options = DetectionOptions(
            is_manual_override=is_manual_override,
            thresholds=config.detection.thresholds,
        )
        outdoor = await OutdoorDetector(places, config=config, logger=log).detect(
            coordinates, options
        )
        debug = outdoor.debug_info
        place_types = list(debug.get("placeTypes") or [])
        place_name = debug.get("placeName") or ""

        is_playground_or_park = any(t in ("playground", "park") for t in place_types)
        has_playground_name = "playground" in place_name.lower()
        in_green_boundary = debug.get("inBoundary") is True and any(
            t in GREEN_SPACE_TYPES for t in place_types
        )

        if is_playground_or_park or has_playground_name or in_green_boundary:
            log.info(
                "Location is in a park area, treating as touching grass "
                "(name=%s, types=%s)",
                place_name,
                place_types,
            )
            return GrassDetectionResult(
                is_touching_grass=True,
                confidence=GREEN_SPACE_CONFIDENCE,
                reasons=["Location is in a park or green space area"],
                explanations=Explanations(
                    positive=["Parks and green spaces typically have grass areas"]
                ),
                debug_info={
                    "isInPark": True,
                    "isInBuilding": False,
                    "placeTypes": place_types,
                },
            )

        touching = outdoor.is_outdoors and outdoor.space_category in GRASSY_CATEGORIES
        return GrassDetectionResult(
            is_touching_grass=touching,
            confidence=outdoor.confidence,
            reasons=outdoor.reasons,
            explanations=outdoor.explanations,
            debug_info={
                "isInPark": touching,
                "isInBuilding": bool(debug.get("isBuilding", False)),
                "placeTypes": place_types,
            },
        )
    except Exception as exc:
        log.exception("Grass analysis failed at %s", coordinates)
        return GrassDetectionResult(
            is_touching_grass=False,
            confidence=FALLBACK_CONFIDENCE,
            reasons=["Detection failed", str(exc) or type(exc).__name__],
            explanations=Explanations(
                negative=["We couldn't determine if you're touching grass."]
            ),
            debug_info={"isInPark": False, "isInBuilding": False, "placeTypes": []},
        )
