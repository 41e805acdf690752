"""Confidence scoring for the outdoor verdict.

Starts from the classification's base confidence and adds the delta of
every adjustment whose predicate holds. Adjustments are independent of
each other, so their order does not change the total.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from touchgrass.core.config import DetectionOptions, DetectionThresholds
from touchgrass.core.models import (
    AppliedAdjustment,
    ClassificationResult,
    ConfidenceAdjustment,
    ConfidenceResult,
    PlaceContext,
    SpaceCategory,
)

logger = logging.getLogger("touchgrass.decision.confidence")

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100

FAR_FROM_BUILDINGS_M = 100
# Edge distances are degree deltas (see touchgrass.places.boundaries).
WELL_INSIDE_EDGE = 30
NEAR_EDGE = 10

MANUAL_OVERRIDE_REASON = "Manual override enabled"


def clamp_confidence(value: float) -> int:
    """Clamp a raw score into [0, 100]."""
    return int(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value)))


def _category_is(category: SpaceCategory):
    return lambda _ctx, cls: cls.space_category == category


def build_default_adjustments(
    thresholds: Optional[DetectionThresholds] = None,
) -> tuple[ConfidenceAdjustment, ...]:
    """Create the built-in adjustment table.

    ``thresholds.building_proximity_m`` sets the "close to a building" cutoff.
    """
    close_m = (thresholds or DetectionThresholds()).building_proximity_m
    return (
        # Building proximity
        ConfidenceAdjustment(
            name="InBuilding",
            predicate=lambda ctx, _cls: ctx.is_building,
            delta=-60,
            reason="Inside or very near a building",
        ),
        ConfidenceAdjustment(
            name="CloseToBuilding",
            predicate=lambda ctx, _cls: not ctx.is_building
            and ctx.nearest_building_distance_m is not None
            and ctx.nearest_building_distance_m < close_m,
            delta=-30,
            reason=f"Close to a building (less than {close_m:g}m)",
        ),
        ConfidenceAdjustment(
            name="FarFromBuildings",
            predicate=lambda ctx, _cls: not ctx.is_building
            and ctx.nearest_building_distance_m is not None
            and ctx.nearest_building_distance_m > FAR_FROM_BUILDINGS_M,
            delta=15,
            reason=f"Far from buildings (more than {FAR_FROM_BUILDINGS_M}m)",
        ),
        # Boundary depth
        ConfidenceAdjustment(
            name="WellInsideBoundary",
            predicate=lambda ctx, _cls: ctx.in_boundary
            and ctx.distance_to_edge is not None
            and ctx.distance_to_edge > WELL_INSIDE_EDGE,
            delta=10,
            reason="Well inside the boundary of recognized area",
        ),
        ConfidenceAdjustment(
            name="NearBoundaryEdge",
            predicate=lambda ctx, _cls: ctx.in_boundary
            and ctx.distance_to_edge is not None
            and ctx.distance_to_edge < NEAR_EDGE,
            delta=-5,
            reason="Near the edge of a recognized area",
        ),
        ConfidenceAdjustment(
            name="OutsideBoundary",
            predicate=lambda ctx, _cls: not ctx.in_boundary,
            delta=-20,
            reason="Outside any recognized area boundary",
        ),
        # Category bonuses
        ConfidenceAdjustment(
            name="ProtectedArea",
            predicate=_category_is(SpaceCategory.PROTECTED_AREA),
            delta=15,
            reason="In a protected natural area",
        ),
        ConfidenceAdjustment(
            name="NaturalArea",
            predicate=_category_is(SpaceCategory.NATURAL_AREA),
            delta=10,
            reason="In a natural area",
        ),
        ConfidenceAdjustment(
            name="WaterFeature",
            predicate=_category_is(SpaceCategory.WATER_FEATURE),
            delta=10,
            reason="Near a water feature",
        ),
        ConfidenceAdjustment(
            name="ManagedOutdoor",
            predicate=_category_is(SpaceCategory.MANAGED_OUTDOOR),
            delta=5,
            reason="In a managed outdoor area",
        ),
        # Residential
        ConfidenceAdjustment(
            name="ResidentialArea",
            predicate=lambda ctx, _cls: ctx.is_residential_area,
            delta=-25,
            reason="In a residential area",
        ),
    )


def manual_override_result() -> ConfidenceResult:
    return ConfidenceResult(
        confidence=MAX_CONFIDENCE,
        is_outdoors=True,
        adjustments=[
            AppliedAdjustment("ManualOverride", MAX_CONFIDENCE, MANUAL_OVERRIDE_REASON)
        ],
        reasons=[MANUAL_OVERRIDE_REASON],
    )


def calculate_confidence(
    context: PlaceContext,
    classification: ClassificationResult,
    options: Optional[DetectionOptions] = None,
    adjustments: Optional[Iterable[ConfidenceAdjustment]] = None,
    log: Optional[logging.Logger] = None,
) -> ConfidenceResult:
    """Score a classified context and decide whether it is outdoors.

    Parameters
    ----------
    context : PlaceContext
        Aggregated place signals.
    classification : ClassificationResult
        Output of the classifier; supplies the base confidence.
    options : DetectionOptions, optional
        Manual override flag and thresholds. Defaults are used when omitted.
    adjustments : iterable of ConfidenceAdjustment, optional
        Replaces the built-in adjustment table.
    log : logging.Logger, optional
        Logger for this call.

    Returns
    -------
    ConfidenceResult
        Confidence clamped to [0, 100]; ``is_outdoors`` is
        ``confidence >= thresholds.outdoors``.
    """
    log = log or logger
    options = options or DetectionOptions()

    if options.is_manual_override:
        log.info("Manual override enabled, confidence forced to 100")
        return manual_override_result()

    table = (
        tuple(adjustments)
        if adjustments is not None
        else build_default_adjustments(options.thresholds)
    )

    raw = classification.base_confidence
    applied: list[AppliedAdjustment] = []
    reasons = list(classification.reasons)

    for adj in table:
        try:
            fired = adj.predicate(context, classification)
        except Exception as exc:
            log.warning("Confidence adjustment '%s' raised: %s", adj.name, exc)
            continue
        if fired:
            raw += adj.delta
            applied.append(AppliedAdjustment(adj.name, adj.delta, adj.reason))
            reasons.append(adj.reason)
            log.debug("Adjustment '%s' applied (%+d → %d)", adj.name, adj.delta, raw)

    confidence = clamp_confidence(raw)
    is_outdoors = confidence >= options.thresholds.outdoors

    log.info(
        "Confidence: base=%d raw=%d final=%d outdoors=%s (%d adjustments)",
        classification.base_confidence,
        raw,
        confidence,
        is_outdoors,
        len(applied),
    )
    return ConfidenceResult(
        confidence=confidence,
        is_outdoors=is_outdoors,
        adjustments=applied,
        reasons=reasons,
    )
