"""Core data models for the touchgrass pipeline.

Defines the data structures that flow through a single detection call:
  Place → PlaceContext → ClassificationResult → ConfidenceResult
  → Explanations → OutdoorDetectionResult

Every object is built fresh per call and never shared between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

# ── Enums ───────────────────────────────────────────────────────────────


class SpaceCategory(Enum):
    """What kind of space a location was classified as."""

    NATURAL_AREA = "NATURAL_AREA"         # Parks, forests, wilderness
    PROTECTED_AREA = "PROTECTED_AREA"     # State parks, preserves, refuges
    MANAGED_OUTDOOR = "MANAGED_OUTDOOR"   # Golf courses, stadiums, playgrounds
    URBAN_OUTDOOR = "URBAN_OUTDOOR"       # Plazas, campuses
    WATER_FEATURE = "WATER_FEATURE"       # Beaches, shorelines, lakes
    RESIDENTIAL = "RESIDENTIAL"
    URBAN = "URBAN"
    INDOOR = "INDOOR"
    UNKNOWN = "UNKNOWN"


OUTDOOR_CATEGORIES = frozenset({
    SpaceCategory.NATURAL_AREA,
    SpaceCategory.PROTECTED_AREA,
    SpaceCategory.MANAGED_OUTDOOR,
    SpaceCategory.WATER_FEATURE,
    SpaceCategory.URBAN_OUTDOOR,
})


# ── Geography ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoCoordinates:
    """A WGS84 point in degrees."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Boundary:
    """Axis-aligned lat/lng rectangle approximating a place's extent.

    ``is_fallback`` marks a box synthesized around a bare point;
    ``is_true_boundary`` marks one taken from a real viewport.
    """

    northeast: GeoCoordinates
    southwest: GeoCoordinates
    is_fallback: bool = False
    is_true_boundary: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "northeast": self.northeast.to_dict(),
            "southwest": self.southwest.to_dict(),
            "isFallback": self.is_fallback,
            "isTrueBoundary": self.is_true_boundary,
        }


@dataclass(frozen=True)
class Place:
    """Backend-agnostic projection of a places-API record."""

    place_id: str
    name: Optional[str] = None
    types: frozenset[str] = frozenset()
    location: Optional[GeoCoordinates] = None
    viewport: Optional[tuple[GeoCoordinates, GeoCoordinates]] = None  # (ne, sw)
    vicinity: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        geometry: dict[str, Any] = {}
        if self.location is not None:
            geometry["location"] = self.location.to_dict()
        if self.viewport is not None:
            ne, sw = self.viewport
            geometry["viewport"] = {
                "northeast": ne.to_dict(),
                "southwest": sw.to_dict(),
            }
        return {
            "id": self.place_id,
            "name": self.name,
            "types": sorted(self.types),
            "geometry": geometry or None,
            "vicinity": self.vicinity,
        }


# ── Pipeline stages ─────────────────────────────────────────────────────


@dataclass
class PlaceContext:
    """Aggregated snapshot of the place signals around one coordinate."""

    coordinates: GeoCoordinates
    place_types: frozenset[str] = frozenset()
    place_name: Optional[str] = None
    boundaries: list[Boundary] = field(default_factory=list)
    in_boundary: bool = False
    is_building: bool = False
    is_residential_area: bool = False
    nearest_building_distance_m: Optional[float] = None
    distance_to_edge: Optional[float] = None     # degrees, not meters
    debug: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table."""

    name: str
    predicate: Callable[[PlaceContext], bool]
    category: SpaceCategory
    base_confidence: int      # 0–100
    reason: str
    description: str = ""


@dataclass
class ClassificationResult:
    """Outcome of running the rule table over a PlaceContext."""

    space_category: SpaceCategory
    is_likely_outdoors: bool
    base_confidence: int
    reasons: list[str] = field(default_factory=list)
    debug: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfidenceAdjustment:
    """An independent additive/subtractive confidence rule."""

    name: str
    predicate: Callable[[PlaceContext, ClassificationResult], bool]
    delta: int
    reason: str


@dataclass(frozen=True)
class AppliedAdjustment:
    """Record of an adjustment that fired during a calculation."""

    name: str
    delta: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "delta": self.delta, "reason": self.reason}


@dataclass
class ConfidenceResult:
    """Final score and verdict."""

    confidence: int           # clamped 0–100
    is_outdoors: bool
    adjustments: list[AppliedAdjustment] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)


@dataclass
class Explanations:
    """User-facing phrases; derived after the decision is made."""

    positive: list[str] = field(default_factory=list)
    negative: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {"positive": list(self.positive), "negative": list(self.negative)}


# ── Results ─────────────────────────────────────────────────────────────


@dataclass
class OutdoorDetectionResult:
    """The only value returned to callers of the detector."""

    is_outdoors: bool
    confidence: int
    reasons: list[str]
    explanations: Explanations
    space_category: SpaceCategory
    debug_info: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isOutdoors": self.is_outdoors,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
            "explanations": self.explanations.to_dict(),
            "spaceCategory": self.space_category.value,
            "debugInfo": dict(self.debug_info),
        }


@dataclass
class GrassDetectionResult:
    """Whether the caller is plausibly touching grass."""

    is_touching_grass: bool
    confidence: int
    reasons: list[str]
    explanations: Explanations
    debug_info: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isTouchingGrass": self.is_touching_grass,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
            "explanations": self.explanations.to_dict(),
            "debugInfo": dict(self.debug_info),
        }
