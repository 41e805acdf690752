"""touchgrass configuration: detection thresholds, place search and places API settings."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class DetectionThresholds:
    """Thresholds used when turning a confidence score into a verdict."""

    outdoors: int = 70
    building_proximity_m: float = 30.0
    natural_area: int = 50


@dataclass(frozen=True)
class DetectionOptions:
    """Per-call detection options."""

    is_manual_override: bool = False
    thresholds: DetectionThresholds = field(default_factory=DetectionThresholds)

    @classmethod
    def merged(
        cls,
        is_manual_override: Optional[bool] = None,
        **thresholds: float,
    ) -> "DetectionOptions":
        """Build options from partial values, filling the rest with defaults.

        Unknown threshold names raise ``TypeError`` (from ``replace``).
        """
        base = cls()
        return cls(
            is_manual_override=(
                base.is_manual_override
                if is_manual_override is None
                else is_manual_override
            ),
            thresholds=replace(
                base.thresholds,
                **{k: v for k, v in thresholds.items() if v is not None},
            ),
        )


@dataclass(frozen=True)
class PlaceSearchOptions:
    """How the place context aggregator queries the places backend."""

    search_radius_m: int = 250
    building_proximity_radius_m: float = 100.0
    include_keyword_search: bool = True
    query_timeout_s: Optional[float] = 10.0


@dataclass(frozen=True)
class PlacesAPIConfig:
    """Google Places web service settings."""

    base_url: str = "https://maps.googleapis.com/maps/api"
    api_key_env: str = "GOOGLE_MAPS_API_KEY"
    request_timeout_s: float = 15.0
    connect_timeout_s: float = 5.0
    max_connections: int = 100
    max_keepalive_connections: int = 20


@dataclass(frozen=True)
class TouchGrassConfig:
    """Top-level touchgrass configuration."""

    detection: DetectionOptions = field(default_factory=DetectionOptions)
    search: PlaceSearchOptions = field(default_factory=PlaceSearchOptions)
    places_api: PlacesAPIConfig = field(default_factory=PlacesAPIConfig)


DEFAULT_CONFIG = TouchGrassConfig()
