"""FastAPI backend for touchgrass.

Provides:
  - POST /api/detect  — outdoor detection for a coordinate
  - POST /api/grass   — "touching grass" check for a coordinate
  - GET  /api/health  — liveness probe

The places backend is a FastAPI dependency (``get_places_client``) so it
can be swapped out, e.g. in tests via ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from touchgrass import __version__
from touchgrass.core.config import DEFAULT_CONFIG, DetectionOptions
from touchgrass.core.exceptions import ConfigurationError
from touchgrass.core.models import GeoCoordinates
from touchgrass.decision.engine import detect_outdoor_location
from touchgrass.decision.grass import analyze_grass
from touchgrass.places.client import (
    GooglePlacesClient,
    OverrideOnlyPlaces,
    PlacesClient,
)

logger = logging.getLogger("touchgrass.web.server")

app = FastAPI(title="touchgrass", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ── Dependencies ───────────────────────────────────────────────


async def get_places_client() -> AsyncIterator[Optional[PlacesClient]]:
    """One Google Places client (and HTTP connection pool) per request.

    Yields ``None`` when no API key is configured; routes that need places
    turn that into a 503.
    """
    try:
        client = GooglePlacesClient.from_env(DEFAULT_CONFIG.places_api)
    except ConfigurationError as exc:
        logger.warning("Places backend not configured: %s", exc)
        yield None
        return
    try:
        yield client
    finally:
        await client.close()


def _places_for(
    places: Optional[PlacesClient], manual_override: bool
) -> PlacesClient:
    if manual_override:
        return OverrideOnlyPlaces()
    if places is None:
        raise HTTPException(503, "Places backend is not configured")
    return places


# ── Request bodies ─────────────────────────────────────────────


class DetectBody(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    manual_override: bool = False
    threshold: Optional[int] = Field(None, ge=0, le=100)


class GrassBody(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    manual_override: bool = False


# ── REST API ───────────────────────────────────────────────────


@app.get("/api/health")
async def health():
    return {"ok": True, "version": __version__}


@app.post("/api/detect")
async def detect(
    body: DetectBody, places: Optional[PlacesClient] = Depends(get_places_client)
):
    """Run outdoor detection for one coordinate."""
    options = DetectionOptions.merged(body.manual_override, outdoors=body.threshold)
    result = await detect_outdoor_location(
        GeoCoordinates(body.lat, body.lng),
        _places_for(places, body.manual_override),
        options,
    )
    return result.to_dict()


@app.post("/api/grass")
async def grass(
    body: GrassBody, places: Optional[PlacesClient] = Depends(get_places_client)
):
    """Check whether one coordinate is somewhere you can touch grass."""
    result = await analyze_grass(
        GeoCoordinates(body.lat, body.lng),
        _places_for(places, body.manual_override),
        body.manual_override,
    )
    return result.to_dict()


def run(host: str = "127.0.0.1", port: int = 8000):
    """Serve the API with uvicorn (used by ``touchgrass serve``)."""
    import uvicorn

    uvicorn.run(
        "touchgrass.web.server:app",
        host=host,
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    run()
