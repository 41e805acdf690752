"""Outdoor detection engine — the single public entry point.

Routes each call down one of two paths:
  Override: manual override set → positive verdict, no place queries
  Pipeline: aggregate → classify → score → explain

Any failure on the pipeline path yields a conservative negative verdict;
``detect`` never raises.
"""

from __future__ import annotations

import logging
from typing import Optional

from touchgrass.core.config import DEFAULT_CONFIG, DetectionOptions, TouchGrassConfig
from touchgrass.core.models import (
    Explanations,
    GeoCoordinates,
    OutdoorDetectionResult,
    SpaceCategory,
)
from touchgrass.decision.confidence import MANUAL_OVERRIDE_REASON, calculate_confidence
from touchgrass.decision.explanations import generate_explanations
from touchgrass.decision.rules import DEFAULT_RULESET, RuleSet
from touchgrass.places.client import PlacesClient
from touchgrass.places.context import build_place_context

FALLBACK_CONFIDENCE = 20


class OutdoorDetector:
    """Stateless outdoor detector bound to a places backend.

    Usage::

        detector = OutdoorDetector(places)
        result = await detector.detect(GeoCoordinates(40.78, -73.97))
        if result.is_outdoors:
            # allow the attestation
    """

    def __init__(
        self,
        places: PlacesClient,
        config: TouchGrassConfig = DEFAULT_CONFIG,
        rules: Optional[RuleSet] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.places = places
        self.config = config
        self.rules = rules or DEFAULT_RULESET
        self.log = logger or logging.getLogger("touchgrass.decision.engine")

    async def detect(
        self,
        coordinates: GeoCoordinates,
        options: Optional[DetectionOptions] = None,
    ) -> OutdoorDetectionResult:
        """Decide whether ``coordinates`` is an outdoor natural location."""
        options = options or self.config.detection
        self.log.info(
            "Starting outdoor detection at (%.6f, %.6f) override=%s",
            coordinates.lat,
            coordinates.lng,
            options.is_manual_override,
        )

        if options.is_manual_override:
            return self._override_result()

        try:
            return await self._run_pipeline(coordinates, options)
        except Exception as exc:
            self.log.exception("Outdoor detection failed at %s", coordinates)
            return self._fallback_result(exc)

    async def _run_pipeline(
        self, coordinates: GeoCoordinates, options: DetectionOptions
    ) -> OutdoorDetectionResult:
        context = await build_place_context(
            coordinates, self.places, self.config.search, self.log
        )
        classification = self.rules.evaluate(context, self.log)
        confidence = calculate_confidence(
            context, classification, options, log=self.log
        )
        explanations = generate_explanations(
            context, classification, confidence, options, self.log
        )

        result = OutdoorDetectionResult(
            is_outdoors=confidence.is_outdoors,
            confidence=confidence.confidence,
            reasons=confidence.reasons,
            explanations=explanations,
            space_category=classification.space_category,
            debug_info={
                **context.debug,
                **classification.debug,
                "confidenceAdjustments": [a.to_dict() for a in confidence.adjustments],
            },
        )
        self.log.info(
            "Outdoor detection complete: outdoors=%s confidence=%d category=%s",
            result.is_outdoors,
            result.confidence,
            result.space_category.value,
        )
        return result

    def _override_result(self) -> OutdoorDetectionResult:
        self.log.info("Manual override enabled, skipping place queries")
        return OutdoorDetectionResult(
            is_outdoors=True,
            confidence=100,
            reasons=[MANUAL_OVERRIDE_REASON],
            explanations=Explanations(
                positive=["You've overridden outdoor detection."]
            ),
            space_category=SpaceCategory.NATURAL_AREA,
            debug_info={"manualOverride": True},
        )

    @staticmethod
    def _fallback_result(exc: BaseException) -> OutdoorDetectionResult:
        message = str(exc) or type(exc).__name__
        return OutdoorDetectionResult(
            is_outdoors=False,
            confidence=FALLBACK_CONFIDENCE,
            reasons=["Detection failed", message],
            explanations=Explanations(
                negative=["We couldn't determine if you're outdoors."]
            ),
            space_category=SpaceCategory.UNKNOWN,
            debug_info={"error": True, "errorMessage": message},
        )


async def detect_outdoor_location(
    coordinates: GeoCoordinates,
    places: PlacesClient,
    options: Optional[DetectionOptions] = None,
    config: TouchGrassConfig = DEFAULT_CONFIG,
    logger: Optional[logging.Logger] = None,
) -> OutdoorDetectionResult:
    """Run one detection with a throwaway ``OutdoorDetector``."""
    detector = OutdoorDetector(places, config=config, logger=logger)
    return await detector.detect(coordinates, options)
