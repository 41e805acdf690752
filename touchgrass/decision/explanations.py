"""User-facing explanations for a detection verdict.

Runs after the decision is made and never changes it.
"""

from __future__ import annotations

import logging
from typing import Optional

from touchgrass.core.config import DetectionOptions
from touchgrass.core.models import (
    ClassificationResult,
    ConfidenceResult,
    Explanations,
    PlaceContext,
    SpaceCategory,
)
from touchgrass.decision.confidence import WELL_INSIDE_EDGE
from touchgrass.places.buildings import format_distance

logger = logging.getLogger("touchgrass.decision.explanations")

_NATURAL = (SpaceCategory.NATURAL_AREA, SpaceCategory.PROTECTED_AREA)


def _positive_phrase(context: PlaceContext, category: SpaceCategory) -> str:
    name = context.place_name
    if category == SpaceCategory.PROTECTED_AREA:
        return f"You're in {name or 'a protected natural area'}."
    if category == SpaceCategory.NATURAL_AREA:
        return f"You're in {name}." if name else "You're in a natural outdoor area."
    if category == SpaceCategory.WATER_FEATURE:
        if "beach" in context.place_types:
            return f"You're at {name or 'a beach'}."
        if name and "river" in name.lower():
            return f"You're by {name}."
        return "You're at a waterfront area."
    if category == SpaceCategory.MANAGED_OUTDOOR:
        if "golf_course" in context.place_types:
            return f"You're on {name or 'a golf course'}."
        if "stadium" in context.place_types:
            return f"You're at {name or 'a stadium'}."
        return "You're in a managed outdoor area."
    if category == SpaceCategory.URBAN_OUTDOOR:
        return "You're in an outdoor area."
    return "You appear to be outdoors."


def _negative_phrase(context: PlaceContext, category: SpaceCategory) -> str:
    if context.is_building:
        return "You're inside or very near a building."
    if category == SpaceCategory.RESIDENTIAL:
        return "You're in a residential area without clear natural features."
    if category == SpaceCategory.URBAN:
        return "You're in an urban area without clear natural features."
    if category == SpaceCategory.INDOOR:
        return "You appear to be indoors."
    return "We couldn't confirm that you're in an outdoor natural area."


def generate_explanations(
    context: PlaceContext,
    classification: ClassificationResult,
    confidence: ConfidenceResult,
    options: Optional[DetectionOptions] = None,
    log: Optional[logging.Logger] = None,
) -> Explanations:
    """Build positive/negative phrases for a finished verdict."""
    log = log or logger
    close_m = (options or DetectionOptions()).thresholds.building_proximity_m
    category = classification.space_category
    explanations = Explanations()

    if confidence.is_outdoors:
        explanations.positive.append(_positive_phrase(context, category))
    else:
        explanations.negative.append(_negative_phrase(context, category))

    distance = context.nearest_building_distance_m
    if not context.is_building and distance is not None and distance < close_m:
        explanations.negative.append(
            f"You're close to buildings ({format_distance(distance / 1000)} away)."
        )

    if context.in_boundary:
        if (
            confidence.is_outdoors
            and context.distance_to_edge is not None
            and context.distance_to_edge > WELL_INSIDE_EDGE
        ):
            explanations.positive.append("You're well inside the boundaries of this area.")
    elif category in _NATURAL:
        explanations.negative.append(
            "However, you're near the edge or just outside the official boundaries."
        )

    # Natural-looking place with a negative verdict: flag the disagreement.
    if not confidence.is_outdoors and not context.is_building and category in _NATURAL:
        explanations.negative.append(
            "While this appears to be a natural area, other factors suggest "
            "you might not be in a suitable location."
        )

    log.info(
        "Generated explanations: %d positive, %d negative (outdoors=%s)",
        len(explanations.positive),
        len(explanations.negative),
        confidence.is_outdoors,
    )
    return explanations
