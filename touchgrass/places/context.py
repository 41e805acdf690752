"""Place context aggregator.

Fans out one query per signal type / keyword against a ``PlacesClient``,
joins the results and condenses them into a ``PlaceContext``.

Failure modes:
  - backend unreachable (``PlacesUnavailableError``) → degraded context
  - a single query timing out → no results for that query
  - anything else → propagates to the caller once in-flight queries are cancelled
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Iterable, Optional

from touchgrass.core.config import DEFAULT_CONFIG, PlaceSearchOptions
from touchgrass.core.exceptions import PlacesTimeoutError, PlacesUnavailableError
from touchgrass.core.models import GeoCoordinates, Place, PlaceContext
from touchgrass.places.boundaries import (
    degrees_to_meters,
    extract_boundary_from_place,
    find_containing_boundaries,
)
from touchgrass.places.buildings import (
    BUILDING_TYPES,
    OUTDOOR_EXEMPTION_TYPES,
    PARK_BOUNDARY_TYPES,
    find_nearest_building_distance,
    is_likely_residential_area,
    is_outdoor_place_name,
)
from touchgrass.places.client import PlacesClient

logger = logging.getLogger("touchgrass.places.context")

NATURAL_AREA_TYPES = (
    "park",
    "campground",
    "natural_feature",
    "forest",
    "trail",
    "nature_reserve",
    "golf_course",
    "stadium",
    "beach",
    "zoo",
    "rv_park",
)

NATURAL_AREA_KEYWORDS = (
    "park",
    "forest",
    "trail",
    "nature",
    "preserve",
    "conservation",
    "state park",
    "national park",
    "wildlife refuge",
    "sanctuary",
    "beach",
    "waterfront",
    "river",
    "lake",
)

SEARCH_TYPES = NATURAL_AREA_TYPES + tuple(sorted(BUILDING_TYPES - set(NATURAL_AREA_TYPES)))


async def _guarded(
    query: Awaitable[list[Place]],
    label: str,
    timeout_s: Optional[float],
    log: logging.Logger,
) -> list[Place]:
    """Run one sub-query; a timeout yields no results instead of failing."""
    try:
        if timeout_s is None:
            return await query
        return await asyncio.wait_for(query, timeout=timeout_s)
    except (asyncio.TimeoutError, PlacesTimeoutError):
        log.warning("Place query timed out: %s", label)
        return []


def dedupe_places(batches: Iterable[Iterable[Place]]) -> list[Place]:
    """Flatten result batches, keeping the first place seen per id."""
    seen: set[str] = set()
    places = []
    for batch in batches:
        for place in batch:
            if place.place_id and place.place_id not in seen:
                seen.add(place.place_id)
                places.append(place)
    return places


async def fetch_places(
    coordinates: GeoCoordinates,
    places: PlacesClient,
    options: PlaceSearchOptions,
    log: logging.Logger,
) -> list[Place]:
    """Concurrent nearby + keyword searches, joined and deduplicated."""
    radius = options.search_radius_m
    queries = [
        _guarded(
            places.search_nearby(coordinates, radius, place_type),
            f"type={place_type}",
            options.query_timeout_s,
            log,
        )
        for place_type in SEARCH_TYPES
    ]
    if options.include_keyword_search:
        queries += [
            _guarded(
                places.search_by_keyword(coordinates, radius, keyword),
                f"keyword={keyword}",
                options.query_timeout_s,
                log,
            )
            for keyword in NATURAL_AREA_KEYWORDS
        ]

    # One failed query fails the call; its siblings must not outlive it.
    tasks = [asyncio.ensure_future(q) for q in queries]
    try:
        batches = await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
    found = dedupe_places(batches)
    log.info(
        "Place search completed: %d queries, %d unique places (radius=%dm)",
        len(queries),
        len(found),
        radius,
    )
    return found


def summarize_places(
    coordinates: GeoCoordinates,
    places: list[Place],
    options: PlaceSearchOptions = DEFAULT_CONFIG.search,
    log: Optional[logging.Logger] = None,
) -> PlaceContext:
    """Condense raw places into a ``PlaceContext`` (no I/O)."""
    log = log or logger

    place_types: set[str] = set()
    for place in places:
        place_types.update(place.types)

    boundaries = [
        b for b in (extract_boundary_from_place(p) for p in places) if b is not None
    ]
    containing = find_containing_boundaries(coordinates, places)
    in_boundary = bool(containing)

    nearest_building = find_nearest_building_distance(coordinates, places)

    exempt_types = place_types & OUTDOOR_EXEMPTION_TYPES
    has_outdoor_name = any(is_outdoor_place_name(p.name) for p in places)
    in_park_boundary = any(c.place.types & PARK_BOUNDARY_TYPES for c in containing)
    exempt = bool(exempt_types) or has_outdoor_name or in_park_boundary

    if exempt:
        log.debug(
            "Outdoor area detected, ignoring building proximity "
            "(types=%s, outdoor_name=%s, park_boundary=%s, nearest_building=%s)",
            sorted(exempt_types),
            has_outdoor_name,
            in_park_boundary,
            nearest_building,
        )

    is_building = (
        not exempt
        and nearest_building is not None
        and nearest_building < options.building_proximity_radius_m / 2
    )
    is_residential = any(is_likely_residential_area(p) for p in places)

    place_name = None
    distance_to_edge = None
    if containing:
        primary = containing[0]
        place_name = primary.place.name
        distance_to_edge = primary.distance

    context = PlaceContext(
        coordinates=coordinates,
        place_types=frozenset(place_types),
        place_name=place_name,
        boundaries=boundaries,
        in_boundary=in_boundary,
        is_building=is_building,
        is_residential_area=is_residential,
        nearest_building_distance_m=nearest_building,
        distance_to_edge=distance_to_edge,
        debug={
            "placeCount": len(places),
            "boundaryCount": len(boundaries),
            "containingBoundaryCount": len(containing),
            "primaryPlace": place_name,
            "placeName": place_name,
            "placeTypes": sorted(place_types),
            "allPlaceNames": [p.name for p in places if p.name],
            "nearestBuildingDistance": nearest_building,
            "inBoundary": in_boundary,
            "distanceToEdgeMeters": (
                None if distance_to_edge is None else degrees_to_meters(distance_to_edge)
            ),
            "isBuilding": is_building,
        },
    )
    log.info(
        "Place context: %d types, in_boundary=%s, building=%s, residential=%s, "
        "nearest_building=%s",
        len(place_types),
        in_boundary,
        is_building,
        is_residential,
        nearest_building,
    )
    return context


async def build_place_context(
    coordinates: GeoCoordinates,
    places: PlacesClient,
    options: PlaceSearchOptions = DEFAULT_CONFIG.search,
    log: Optional[logging.Logger] = None,
) -> PlaceContext:
    """Query the places backend and aggregate a ``PlaceContext``.

    Parameters
    ----------
    coordinates : GeoCoordinates
        The point being classified.
    places : PlacesClient
        Backend to query; every search is issued concurrently.
    options : PlaceSearchOptions
        Search radius, building proximity radius, keyword toggle and
        per-query timeout.
    log : logging.Logger, optional
        Logger for this call; defaults to the module logger.

    Returns
    -------
    PlaceContext
        An empty context with ``debug["error"]`` set when the backend is
        unreachable. Other backend errors propagate.
    """
    log = log or logger
    try:
        found = await fetch_places(coordinates, places, options, log)
    except PlacesUnavailableError as exc:
        log.error("Places backend unavailable for %s: %s", coordinates, exc)
        return PlaceContext(coordinates=coordinates, debug={"error": str(exc)})
    return summarize_places(coordinates, found, options, log)
