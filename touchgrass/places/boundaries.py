"""Boundary engine: geometric primitives over lat/lng rectangles.

All distances returned here are raw degree deltas. They are only used for
coarse "well inside" / "near the edge" bucketing, and the confidence
thresholds were tuned against degrees, so they are not converted to meters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from shapely.geometry import Point, box
from shapely.geometry.base import BaseGeometry

from touchgrass.core.models import Boundary, GeoCoordinates, Place

# Half-width of the box synthesized around a bare point (~110 m of latitude).
FALLBACK_HALF_SIZE_DEG = 0.001

METERS_PER_DEGREE = 111_000


@dataclass(frozen=True)
class ContainingBoundary:
    """A boundary that contains the query point, with its source place."""

    boundary: Boundary
    place: Place
    distance: float


def boundary_polygon(boundary: Boundary) -> BaseGeometry:
    """Shapely rectangle for a boundary (x = lng, y = lat)."""
    return box(
        boundary.southwest.lng,
        boundary.southwest.lat,
        boundary.northeast.lng,
        boundary.northeast.lat,
    )


def is_point_in_boundary(point: GeoCoordinates, boundary: Boundary) -> bool:
    """Edge-inclusive containment test.

    ``covers`` (unlike ``contains``) counts points on the boundary line.
    """
    return boundary_polygon(boundary).covers(Point(point.lng, point.lat))


def distance_from_boundary_edge(point: GeoCoordinates, boundary: Boundary) -> float:
    """Signed degree distance to the nearest edge.

    Positive (smallest gap to any edge) when the point is inside,
    negative gap to the crossed edge when it is outside.
    """
    to_north = boundary.northeast.lat - point.lat
    to_south = point.lat - boundary.southwest.lat
    to_east = boundary.northeast.lng - point.lng
    to_west = point.lng - boundary.southwest.lng

    if is_point_in_boundary(point, boundary):
        return min(to_north, to_south, to_east, to_west)

    if point.lat > boundary.northeast.lat:
        return to_north
    if point.lat < boundary.southwest.lat:
        return to_south
    if point.lng > boundary.northeast.lng:
        return to_east
    return to_west


def extract_boundary_from_place(place: Place) -> Optional[Boundary]:
    """Boundary for a place: its viewport, else a small box around its location."""
    if place.viewport is not None:
        ne, sw = place.viewport
        return Boundary(northeast=ne, southwest=sw, is_true_boundary=True)

    if place.location is not None:
        lat, lng = place.location.lat, place.location.lng
        return Boundary(
            northeast=GeoCoordinates(
                lat + FALLBACK_HALF_SIZE_DEG, lng + FALLBACK_HALF_SIZE_DEG
            ),
            southwest=GeoCoordinates(
                lat - FALLBACK_HALF_SIZE_DEG, lng - FALLBACK_HALF_SIZE_DEG
            ),
            is_fallback=True,
        )

    return None


def find_containing_boundaries(
    point: GeoCoordinates, places: Iterable[Place]
) -> list[ContainingBoundary]:
    """All boundaries containing ``point``, most deeply contained first."""
    found = []
    for place in places:
        boundary = extract_boundary_from_place(place)
        if boundary is not None and is_point_in_boundary(point, boundary):
            found.append(
                ContainingBoundary(
                    boundary=boundary,
                    place=place,
                    distance=distance_from_boundary_edge(point, boundary),
                )
            )
    found.sort(key=lambda c: c.distance, reverse=True)
    return found


def degrees_to_meters(degrees: float) -> float:
    """Rough conversion using 1° of latitude ≈ 111 km."""
    return abs(degrees) * METERS_PER_DEGREE
