"""Place-type vocabularies and building / residential heuristics."""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from touchgrass.core.models import GeoCoordinates, Place

EARTH_RADIUS_M = 6_371_000

# ── Vocabularies ────────────────────────────────────────────────────────

BUILDING_TYPES = frozenset({
    # Residential
    "residential", "home_goods_store", "real_estate_agency", "lodging",
    "house", "apartment", "residential_area", "sublocality_level_1", "premise",
    "housing_complex",
    # Commercial / retail
    "store", "shopping_mall", "supermarket", "department_store",
    "grocery_or_supermarket", "furniture_store", "clothing_store", "hardware_store",
    # Food and dining
    "restaurant", "cafe", "bar", "night_club", "food_court", "bakery",
    # Business and services
    "bank", "atm", "post_office", "courthouse", "police", "fire_station",
    "insurance_agency", "accounting", "finance", "lawyer", "dentist", "doctor",
    # Indoor entertainment
    "movie_theater", "bowling_alley", "casino", "gym", "fitness_center",
    "spa", "beauty_salon", "hair_care",
    # Industrial
    "factory", "warehouse", "industrial_park",
    # Transportation
    "subway_station", "train_station", "bus_station", "transit_station", "airport",
    "airport_terminal", "gas_station",
    # Education
    "library", "school", "primary_school", "secondary_school", "book_store",
})

RESIDENTIAL_AREA_TYPES = frozenset({
    "locality", "sublocality", "administrative_area_level_3",
    "administrative_area_level_4", "neighborhood", "political", "premise",
})

# Places of these types are never treated as buildings.
OUTDOOR_EXEMPTION_TYPES = frozenset({
    "park", "playground", "natural_feature", "campground", "rv_park", "forest",
    "athletic_field", "sports_complex", "stadium", "golf_course", "skate_park",
    "beach", "lake", "river", "ocean",
})

# Boundary place types that exempt the location from building detection.
PARK_BOUNDARY_TYPES = frozenset({"park", "campground", "natural_feature", "playground"})

BUILDING_NAME_PATTERNS = (
    re.compile(r"apartment|house|home|condo|complex|residence|villa|estate|building", re.I),
    re.compile(r"restaurant|cafe|store|mall|shop|center|diner|hotel|lodge", re.I),
    re.compile(r"gym|fitness|studio|office|tower|plaza|court|dorm|hall", re.I),
)

# Not applied to outdoor-typed places (see is_likely_residential_area).
RESIDENTIAL_AREA_PATTERNS = (
    re.compile(r"neighborhood|community|village|subdivision|district|residential|housing", re.I),
    re.compile(r"manor|court|park|garden|estate|commons|terrace|heights|vista", re.I),
)

OUTDOOR_NAME_INDICATORS = (
    "park", "playground", "field", "garden", "square", "common", "green",
    "plaza", "sports", "stadium", "recreational", "beach", "lake",
)


# ── Heuristics ──────────────────────────────────────────────────────────


def is_outdoor_place_name(name: Optional[str]) -> bool:
    """True when a place name suggests an outdoor area."""
    if not name:
        return False
    lowered = name.lower()
    return any(word in lowered for word in OUTDOOR_NAME_INDICATORS)


def is_likely_building(place: Place) -> bool:
    if place.types & BUILDING_TYPES:
        return True
    if place.name:
        return any(p.search(place.name) for p in BUILDING_NAME_PATTERNS)
    return False


def is_likely_residential_area(place: Place) -> bool:
    """Residential by type, or by name for places not typed as outdoor.

    Name patterns include words like "park" and "garden", so they are
    skipped for places whose types already mark them as outdoor spaces.
    """
    if place.types & RESIDENTIAL_AREA_TYPES:
        return True
    if place.name and not place.types & OUTDOOR_EXEMPTION_TYPES:
        return any(p.search(place.name) for p in RESIDENTIAL_AREA_PATTERNS)
    return False


def haversine_distance_m(a: GeoCoordinates, b: GeoCoordinates) -> float:
    """Great-circle distance in meters."""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)
    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def find_nearest_building_distance(
    point: GeoCoordinates, places: Iterable[Place]
) -> Optional[float]:
    """Distance in meters to the closest building candidate with a location."""
    distances = [
        haversine_distance_m(point, place.location)
        for place in places
        if place.location is not None and is_likely_building(place)
    ]
    return min(distances) if distances else None


def format_distance(distance_km: float) -> str:
    """Human-readable distance: meters below 1 km, whole kilometers above."""
    if distance_km < 1:
        return f"{round(distance_km * 1000):,}m"
    return f"{round(distance_km):,}km"
