"""touchgrass custom exceptions."""

from __future__ import annotations


class TouchGrassError(Exception):
    """Base exception for all touchgrass errors."""


class ConfigurationError(TouchGrassError):
    """Raised when required settings (e.g. an API key) are missing."""


class PlacesAPIError(TouchGrassError):
    """Raised when the places backend rejects or fails a query."""


class PlacesUnavailableError(PlacesAPIError):
    """Raised when the places backend cannot be reached at all."""


class PlacesTimeoutError(PlacesAPIError):
    """Raised when a single places query runs out of time."""
