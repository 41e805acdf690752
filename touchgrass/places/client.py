"""Places-query interface and its Google Places web service implementation.

The detector only depends on the ``PlacesClient`` protocol; any object with
the three async methods below can be passed in (tests use an in-memory stub).

Usage::

    async with GooglePlacesClient.from_env() as places:
        result = await detect_outdoor_location(coords, places)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from touchgrass.core.config import DEFAULT_CONFIG, PlacesAPIConfig
from touchgrass.core.exceptions import (
    ConfigurationError,
    PlacesAPIError,
    PlacesTimeoutError,
    PlacesUnavailableError,
)
from touchgrass.core.models import GeoCoordinates, Place

logger = logging.getLogger("touchgrass.places.client")

# Statuses that mean every further query will fail too.
_FATAL_STATUSES = frozenset({"REQUEST_DENIED", "OVER_QUERY_LIMIT"})


@runtime_checkable
class PlacesClient(Protocol):
    """Black-box, asynchronous, potentially failing places backend."""

    async def search_nearby(
        self, coordinates: GeoCoordinates, radius_m: int, place_type: str
    ) -> list[Place]:
        ...

    async def search_by_keyword(
        self, coordinates: GeoCoordinates, radius_m: int, keyword: str
    ) -> list[Place]:
        ...

    async def get_details(self, place_id: str) -> Optional[Place]:
        ...


# ── Parsing ─────────────────────────────────────────────────────────────


def _coords(raw: Any) -> Optional[GeoCoordinates]:
    if not isinstance(raw, dict) or "lat" not in raw or "lng" not in raw:
        return None
    return GeoCoordinates(float(raw["lat"]), float(raw["lng"]))


def parse_google_place(raw: dict[str, Any]) -> Place:
    """Project a Google Places JSON result onto ``Place``."""
    geometry = raw.get("geometry") or {}
    viewport = None
    raw_viewport = geometry.get("viewport")
    if isinstance(raw_viewport, dict):
        ne = _coords(raw_viewport.get("northeast"))
        sw = _coords(raw_viewport.get("southwest"))
        if ne is not None and sw is not None:
            viewport = (ne, sw)

    return Place(
        place_id=raw.get("place_id", ""),
        name=raw.get("name"),
        types=frozenset(raw.get("types") or ()),
        location=_coords(geometry.get("location")),
        viewport=viewport,
        vicinity=raw.get("vicinity"),
    )


# ── Google implementation ───────────────────────────────────────────────


class GooglePlacesClient:
    """``PlacesClient`` backed by the Google Places web service.

    One ``httpx.AsyncClient`` is opened lazily per client and reused by
    every query; close it with ``await client.close()`` or ``async with``.
    """

    def __init__(
        self,
        api_key: str,
        config: PlacesAPIConfig = DEFAULT_CONFIG.places_api,
        http: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ConfigurationError("A Google Maps API key is required")
        self.api_key = api_key
        self.config = config
        self._http = http
        self._owns_http = http is None

    @classmethod
    def from_env(
        cls, config: PlacesAPIConfig = DEFAULT_CONFIG.places_api
    ) -> "GooglePlacesClient":
        """Create a client from the API key in ``config.api_key_env``."""
        api_key = os.environ.get(config.api_key_env, "")
        if not api_key:
            raise ConfigurationError(
                f"Environment variable {config.api_key_env} is not set"
            )
        return cls(api_key, config=config)

    async def __aenter__(self) -> "GooglePlacesClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(
                    self.config.request_timeout_s,
                    connect=self.config.connect_timeout_s,
                ),
                limits=httpx.Limits(
                    max_connections=self.config.max_connections,
                    max_keepalive_connections=self.config.max_keepalive_connections,
                ),
            )
            self._owns_http = True
        return self._http

    async def close(self) -> None:
        if self._owns_http and self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def _get_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        http = self._get_http()
        try:
            resp = await http.get(
                f"/place/{endpoint}/json", params={**params, "key": self.api_key}
            )
        except httpx.TimeoutException as exc:
            raise PlacesTimeoutError(f"Places {endpoint} query timed out") from exc
        except httpx.TransportError as exc:
            raise PlacesUnavailableError(f"Places backend unreachable: {exc}") from exc

        if resp.status_code != 200:
            raise PlacesAPIError(f"Places {endpoint} returned HTTP {resp.status_code}")
        return resp.json()

    def _results(self, endpoint: str, data: dict[str, Any], label: str) -> list[Place]:
        status = data.get("status", "")
        if status == "OK":
            return [parse_google_place(r) for r in data.get("results", [])]
        if status == "ZERO_RESULTS":
            return []
        if status in _FATAL_STATUSES:
            raise PlacesAPIError(f"Places {endpoint} failed: {status}")
        logger.warning("Place search failed for %s (%s)", label, status)
        return []

    async def search_nearby(
        self, coordinates: GeoCoordinates, radius_m: int, place_type: str
    ) -> list[Place]:
        data = await self._get_json(
            "nearbysearch",
            {
                "location": f"{coordinates.lat},{coordinates.lng}",
                "radius": radius_m,
                "type": place_type,
            },
        )
        return self._results("nearbysearch", data, f"type '{place_type}'")

    async def search_by_keyword(
        self, coordinates: GeoCoordinates, radius_m: int, keyword: str
    ) -> list[Place]:
        data = await self._get_json(
            "textsearch",
            {
                "location": f"{coordinates.lat},{coordinates.lng}",
                "radius": radius_m,
                "query": keyword,
            },
        )
        return self._results("textsearch", data, f"keyword '{keyword}'")

    async def get_details(self, place_id: str) -> Optional[Place]:
        data = await self._get_json(
            "details",
            {"place_id": place_id, "fields": "geometry,name,types,vicinity,place_id"},
        )
        status = data.get("status", "")
        if status in ("ZERO_RESULTS", "NOT_FOUND"):
            return None
        if status != "OK":
            raise PlacesAPIError(f"Place details failed for {place_id}: {status}")
        result = data.get("result") or {}
        result.setdefault("place_id", place_id)
        return parse_google_place(result)


class OverrideOnlyPlaces:
    """``PlacesClient`` for manual-override calls, which never query places."""

    async def search_nearby(self, coordinates, radius_m, place_type):
        raise RuntimeError("places queried during a manual override")

    async def search_by_keyword(self, coordinates, radius_m, keyword):
        raise RuntimeError("places queried during a manual override")

    async def get_details(self, place_id):
        raise RuntimeError("places queried during a manual override")
