"""Tests for confidence scoring."""

import pytest

from touchgrass.core.config import DetectionOptions, DetectionThresholds
from touchgrass.core.models import (
    ClassificationResult,
    ConfidenceAdjustment,
    PlaceContext,
    SpaceCategory,
)
from touchgrass.decision.confidence import (
    build_default_adjustments,
    calculate_confidence,
    clamp_confidence,
)

from conftest import ORIGIN


def ctx(**kwargs):
    return PlaceContext(coordinates=ORIGIN, **kwargs)


def classified(category=SpaceCategory.NATURAL_AREA, base=90):
    return ClassificationResult(
        space_category=category,
        is_likely_outdoors=True,
        base_confidence=base,
        reasons=["Location is within a park"],
    )


def names(result):
    return [a.name for a in result.adjustments]


class TestClamp:
    @pytest.mark.parametrize("raw,expected", [(-45, 0), (0, 0), (55, 55), (100, 100), (130, 100)])
    def test_clamp(self, raw, expected):
        assert clamp_confidence(raw) == expected


class TestCalculateConfidence:
    def test_park_inside_fallback_boundary(self):
        context = ctx(in_boundary=True, distance_to_edge=0.0008)
        result = calculate_confidence(context, classified())

        assert result.confidence == 95
        assert result.is_outdoors
        assert names(result) == ["NearBoundaryEdge", "NaturalArea"]
        assert result.reasons[0] == "Location is within a park"

    def test_building_is_clamped_to_zero(self):
        context = ctx(is_building=True, in_boundary=True, distance_to_edge=0.0009)
        result = calculate_confidence(context, classified(SpaceCategory.INDOOR, 20))

        assert result.confidence == 0
        assert not result.is_outdoors
        assert "InBuilding" in names(result)

    def test_score_never_exceeds_100(self):
        context = ctx(in_boundary=True, distance_to_edge=50, nearest_building_distance_m=500)
        result = calculate_confidence(context, classified(SpaceCategory.PROTECTED_AREA, 95))
        assert result.confidence == 100

    def test_close_to_building_outside_boundary(self):
        context = ctx(nearest_building_distance_m=12)
        result = calculate_confidence(context, classified())

        assert names(result) == ["CloseToBuilding", "OutsideBoundary", "NaturalArea"]
        assert result.confidence == 50
        assert "Close to a building (less than 30m)" in result.reasons

    def test_building_proximity_threshold_is_configurable(self):
        options = DetectionOptions(thresholds=DetectionThresholds(building_proximity_m=5))
        result = calculate_confidence(ctx(nearest_building_distance_m=12), classified(), options)
        assert "CloseToBuilding" not in names(result)

    def test_residential_penalty(self):
        result = calculate_confidence(
            ctx(is_residential_area=True), classified(SpaceCategory.RESIDENTIAL, 50)
        )
        assert names(result) == ["OutsideBoundary", "ResidentialArea"]
        assert result.confidence == 5

    def test_threshold_decides_verdict(self):
        context = ctx(in_boundary=True, distance_to_edge=0.0008)
        strict = DetectionOptions.merged(outdoors=96)
        result = calculate_confidence(context, classified(), strict)
        assert result.confidence == 95
        assert not result.is_outdoors

    def test_verdict_at_exact_threshold_is_outdoors(self):
        context = ctx(in_boundary=True, distance_to_edge=0.0008)
        result = calculate_confidence(context, classified(), DetectionOptions.merged(outdoors=95))
        assert result.is_outdoors

    def test_manual_override(self):
        result = calculate_confidence(
            ctx(is_building=True), classified(SpaceCategory.INDOOR, 20),
            DetectionOptions(is_manual_override=True),
        )
        assert result.confidence == 100
        assert result.is_outdoors
        assert result.reasons == ["Manual override enabled"]
        assert names(result) == ["ManualOverride"]

    def test_custom_adjustments_replace_defaults(self):
        bonus = ConfidenceAdjustment("Bonus", lambda c, r: True, 7, "bonus")
        result = calculate_confidence(ctx(), classified(base=10), adjustments=[bonus])
        assert result.confidence == 17
        assert names(result) == ["Bonus"]

    def test_raising_adjustment_is_skipped(self):
        def boom(_c, _r):
            raise ValueError("bad predicate")

        table = [
            ConfidenceAdjustment("Boom", boom, 50, "never"),
            ConfidenceAdjustment("Bonus", lambda c, r: True, 5, "bonus"),
        ]
        result = calculate_confidence(ctx(), classified(base=10), adjustments=table)
        assert result.confidence == 15
        assert names(result) == ["Bonus"]

    def test_adjustment_order_does_not_matter(self):
        context = ctx(nearest_building_distance_m=12, is_residential_area=True)
        table = build_default_adjustments()
        forward = calculate_confidence(context, classified(), adjustments=table)
        backward = calculate_confidence(context, classified(), adjustments=reversed(table))
        assert forward.confidence == backward.confidence
        assert sorted(names(forward)) == sorted(names(backward))
