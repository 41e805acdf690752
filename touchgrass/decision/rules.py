"""Rule-based space classification.

Each rule is a row of data:
    (name, predicate(context) → bool, category, base confidence, reason)

Rules are declared once, grouped by tier in descending priority:
    Protected > Natural > Water > Managed > Urban outdoor > Residential > Indoor

Every rule is evaluated so all matches can be reported, but the first
match in declaration order decides the category.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from touchgrass.core.models import (
    OUTDOOR_CATEGORIES,
    ClassificationResult,
    ClassificationRule,
    PlaceContext,
    SpaceCategory,
)

logger = logging.getLogger("touchgrass.decision.rules")


def _name_has(context: PlaceContext, *words: str) -> bool:
    if not context.place_name:
        return False
    name = context.place_name.lower()
    return any(word in name for word in words)


def _has_type(context: PlaceContext, *types: str) -> bool:
    return any(t in context.place_types for t in types)


# ─── Protected areas ────────────────────────────────────────────────────

PROTECTED_AREA_RULES = (
    ClassificationRule(
        name="StateOrNationalPark",
        description="State or national parks are definitively natural areas",
        predicate=lambda c: _name_has(c, "state park", "national park"),
        category=SpaceCategory.PROTECTED_AREA,
        base_confidence=95,
        reason="Location is within a state or national park",
    ),
    ClassificationRule(
        name="Preserve",
        description="Preserves are protected natural areas",
        predicate=lambda c: _name_has(c, "preserve", "conservation"),
        category=SpaceCategory.PROTECTED_AREA,
        base_confidence=95,
        reason="Location is within a nature preserve or conservation area",
    ),
    ClassificationRule(
        name="WildlifeRefuge",
        description="Wildlife refuges and sanctuaries are protected natural areas",
        predicate=lambda c: _name_has(c, "wildlife refuge", "sanctuary"),
        category=SpaceCategory.PROTECTED_AREA,
        base_confidence=95,
        reason="Location is within a wildlife refuge or sanctuary",
    ),
)

# ─── Natural areas ──────────────────────────────────────────────────────

NATURAL_AREA_RULES = (
    ClassificationRule(
        name="Park",
        description="Parks are generally outdoor spaces",
        predicate=lambda c: _has_type(c, "park") or _name_has(c, "park"),
        category=SpaceCategory.NATURAL_AREA,
        base_confidence=90,
        reason="Location is within a park",
    ),
    ClassificationRule(
        name="NaturalFeature",
        description="Natural features are outdoor areas",
        predicate=lambda c: _has_type(c, "natural_feature"),
        category=SpaceCategory.NATURAL_AREA,
        base_confidence=90,
        reason="Location is at a natural feature",
    ),
    ClassificationRule(
        name="Forest",
        description="Forests are natural areas",
        predicate=lambda c: _has_type(c, "forest") or _name_has(c, "forest", "woods"),
        category=SpaceCategory.NATURAL_AREA,
        base_confidence=90,
        reason="Location is in a forested area",
    ),
    ClassificationRule(
        name="Trail",
        description="Trails are typically outdoor spaces",
        predicate=lambda c: _has_type(c, "trail") or _name_has(c, "trail"),
        category=SpaceCategory.NATURAL_AREA,
        base_confidence=90,
        reason="Location is on a trail",
    ),
    ClassificationRule(
        name="ParkBoundary",
        description="Inside a park-like boundary even when buildings are near",
        predicate=lambda c: c.in_boundary
        and _has_type(c, "park", "campground", "natural_feature"),
        category=SpaceCategory.NATURAL_AREA,
        base_confidence=90,
        reason="Location is within the boundary of a park",
    ),
)

# ─── Water features ─────────────────────────────────────────────────────

WATER_FEATURE_RULES = (
    ClassificationRule(
        name="Beach",
        description="Beaches are outdoor areas by water",
        predicate=lambda c: _has_type(c, "beach") or _name_has(c, "beach"),
        category=SpaceCategory.WATER_FEATURE,
        base_confidence=90,
        reason="Location is at a beach",
    ),
    ClassificationRule(
        name="Waterfront",
        description="Waterfronts, shores, and coastlines are outdoor areas",
        predicate=lambda c: _name_has(
            c, "waterfront", "shore", "coast", "bay", "harbor"
        ),
        category=SpaceCategory.WATER_FEATURE,
        base_confidence=85,
        reason="Location is at a waterfront area",
    ),
    ClassificationRule(
        name="River",
        description="Rivers and lakes are water features",
        predicate=lambda c: _name_has(c, "river", "lake", "stream", "creek"),
        category=SpaceCategory.WATER_FEATURE,
        base_confidence=85,
        reason="Location is near a river, lake, or stream",
    ),
)

# ─── Managed outdoor ────────────────────────────────────────────────────

MANAGED_OUTDOOR_RULES = (
    ClassificationRule(
        name="Playground",
        description="Identifies playground areas",
        predicate=lambda c: _has_type(c, "playground") or _name_has(c, "playground"),
        category=SpaceCategory.MANAGED_OUTDOOR,
        base_confidence=95,
        reason="Location is in a playground area",
    ),
    ClassificationRule(
        name="GolfCourse",
        description="Golf courses are managed outdoor areas",
        predicate=lambda c: _has_type(c, "golf_course"),
        category=SpaceCategory.MANAGED_OUTDOOR,
        base_confidence=90,
        reason="Location is on a golf course",
    ),
    ClassificationRule(
        name="Stadium",
        description="Stadiums can be outdoor facilities",
        predicate=lambda c: _has_type(c, "stadium"),
        category=SpaceCategory.MANAGED_OUTDOOR,
        base_confidence=75,     # some stadiums are covered
        reason="Location is at a stadium",
    ),
    ClassificationRule(
        name="SportsComplex",
        description="Sports complexes can be outdoor facilities",
        predicate=lambda c: _has_type(c, "sports_complex"),
        category=SpaceCategory.MANAGED_OUTDOOR,
        base_confidence=75,
        reason="Location is at a sports complex",
    ),
)

# ─── Urban outdoor ──────────────────────────────────────────────────────

URBAN_OUTDOOR_RULES = (
    ClassificationRule(
        name="University",
        description="University campuses often have outdoor areas",
        predicate=lambda c: _has_type(c, "university"),
        category=SpaceCategory.URBAN_OUTDOOR,
        base_confidence=60,
        reason="Location is on a university campus",
    ),
    ClassificationRule(
        name="Plaza",
        description="Plazas are urban outdoor spaces",
        predicate=lambda c: _has_type(c, "plaza") or _name_has(c, "plaza"),
        category=SpaceCategory.URBAN_OUTDOOR,
        base_confidence=70,
        reason="Location is at a plaza",
    ),
)

# ─── Residential / indoor ───────────────────────────────────────────────

RESIDENTIAL_RULES = (
    ClassificationRule(
        name="ResidentialArea",
        description="Residential areas with houses, neighborhoods",
        predicate=lambda c: c.is_residential_area
        or _has_type(
            c,
            "locality",
            "sublocality",
            "neighborhood",
            "premise",
            "political",
            "administrative_area",
        ),
        category=SpaceCategory.RESIDENTIAL,
        base_confidence=50,
        reason="Location is in a residential area",
    ),
)

INDOOR_RULES = (
    ClassificationRule(
        name="Building",
        description="Inside or near a building",
        predicate=lambda c: c.is_building,
        category=SpaceCategory.INDOOR,
        base_confidence=20,
        reason="Location is inside or very near a building",
    ),
)

ALL_CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    PROTECTED_AREA_RULES
    + NATURAL_AREA_RULES
    + WATER_FEATURE_RULES
    + MANAGED_OUTDOOR_RULES
    + URBAN_OUTDOOR_RULES
    + RESIDENTIAL_RULES
    + INDOOR_RULES
)


class RuleSet:
    """Ordered, immutable collection of classification rules.

    Usage::

        rules = RuleSet(ALL_CLASSIFICATION_RULES)
        result = rules.evaluate(context)
    """

    def __init__(self, rules: Iterable[ClassificationRule] = ALL_CLASSIFICATION_RULES):
        self._rules: tuple[ClassificationRule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def matching(
        self, context: PlaceContext, log: Optional[logging.Logger] = None
    ) -> list[ClassificationRule]:
        """Every rule whose predicate holds, in declaration order.

        A predicate that raises is logged and counted as a non-match.
        """
        log = log or logger
        matched = []
        for rule in self._rules:
            try:
                if rule.predicate(context):
                    matched.append(rule)
                    log.debug("Rule '%s' matched", rule.name)
            except Exception as exc:
                log.warning("Rule '%s' raised: %s", rule.name, exc)
        return matched

    def evaluate(
        self, context: PlaceContext, log: Optional[logging.Logger] = None
    ) -> ClassificationResult:
        """Classify a context; the first matching rule is primary."""
        log = log or logger
        log.info(
            "Classifying location (name=%s, types=%s, in_boundary=%s, "
            "building=%s, residential=%s)",
            context.place_name,
            sorted(context.place_types),
            context.in_boundary,
            context.is_building,
            context.is_residential_area,
        )

        matched = self.matching(context, log)
        if not matched:
            log.info("No classification rules matched")
            return ClassificationResult(
                space_category=SpaceCategory.UNKNOWN,
                is_likely_outdoors=False,
                base_confidence=0,
                reasons=["No specific category detected"],
                debug={"allMatchingRules": [], "primaryRule": None},
            )

        primary = matched[0]
        result = ClassificationResult(
            space_category=primary.category,
            is_likely_outdoors=(
                primary.category in OUTDOOR_CATEGORIES and not context.is_building
            ),
            base_confidence=primary.base_confidence,
            reasons=[primary.reason],
            debug={
                "allMatchingRules": [r.name for r in matched],
                "primaryRule": primary.name,
                "spaceCategory": primary.category.value,
                "baseConfidence": primary.base_confidence,
            },
        )

        if context.is_building:
            result.reasons.append("Inside or very near a building")
            result.debug["isBuilding"] = True
        if context.in_boundary:
            result.reasons.append("Inside a recognized area boundary")
            result.debug["inBoundary"] = True
            result.debug["distanceToEdge"] = context.distance_to_edge

        log.info(
            "Rule '%s' fired → %s (base=%d, likely_outdoors=%s)",
            primary.name,
            result.space_category.value,
            result.base_confidence,
            result.is_likely_outdoors,
        )
        return result


DEFAULT_RULESET = RuleSet()


def classify_location(
    context: PlaceContext, log: Optional[logging.Logger] = None
) -> ClassificationResult:
    """Classify a context with the built-in rule table."""
    return DEFAULT_RULESET.evaluate(context, log)
