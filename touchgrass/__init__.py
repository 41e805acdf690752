"""touchgrass — decide whether a coordinate is outdoors in a natural, grassy place.

One-liner API::

    import touchgrass

    touchgrass.detect(40.7812, -73.9665)
    touchgrass.detect(40.7812, -73.9665, manual_override=True)
    touchgrass.touching_grass(40.7812, -73.9665)

Async API::

    from touchgrass import GeoCoordinates, GooglePlacesClient, detect_outdoor_location

    async with GooglePlacesClient.from_env() as places:
        result = await detect_outdoor_location(GeoCoordinates(40.78, -73.97), places)
"""

__version__ = "1.0.0"

from touchgrass.api import detect, touching_grass
from touchgrass.core.config import DetectionOptions, DetectionThresholds
from touchgrass.core.models import (
    GeoCoordinates,
    GrassDetectionResult,
    OutdoorDetectionResult,
    Place,
    SpaceCategory,
)
from touchgrass.decision.engine import OutdoorDetector, detect_outdoor_location
from touchgrass.decision.grass import analyze_grass
from touchgrass.places.client import GooglePlacesClient, PlacesClient

__all__ = [
    "detect",
    "touching_grass",
    "detect_outdoor_location",
    "analyze_grass",
    "OutdoorDetector",
    "DetectionOptions",
    "DetectionThresholds",
    "GeoCoordinates",
    "Place",
    "SpaceCategory",
    "OutdoorDetectionResult",
    "GrassDetectionResult",
    "GooglePlacesClient",
    "PlacesClient",
    "__version__",
]
