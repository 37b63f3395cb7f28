"""Unit tests for placement validation."""

import numpy as np
import pytest

from cargoload.engine.candidates import CandidatePoint
from cargoload.engine.cargo import ContainerSpec
from cargoload.engine.state import PlacementState
from cargoload.engine.validator import (
    FailureReason,
    PlacementValidator,
    footprint_covered,
)


def point(x, y, z, source=None):
    return CandidatePoint(x, y, z, source=source)


class TestBoundsAndWeight:
    """Bounds and weight checks."""

    def test_exact_fit_is_legal(self, state, make_box):
        validator = PlacementValidator(state)
        assert validator.validate(make_box(100, 100, 100), point(0, 0, 0)).legal

    def test_rounding_within_epsilon_is_legal(self, state, make_box):
        validator = PlacementValidator(state)
        box = make_box(100.0000001, 50, 50)
        assert validator.validate(box, point(0, 0, 0)).legal

    def test_exceeding_depth_fails(self, state, make_box):
        result = PlacementValidator(state).validate(make_box(50, 50, 60), point(0, 0, 50))
        assert not result
        assert result.reason is FailureReason.BOUNDS

    def test_weight_limit(self, make_box):
        state = PlacementState(ContainerSpec(100, 100, 100, max_load=10))
        state.commit(make_box(10, 10, 10, weight=6), (0, 0, 0))
        validator = PlacementValidator(state)

        heavy = validator.validate(make_box(10, 10, 10, weight=6), point(10, 0, 0))
        assert heavy.reason is FailureReason.WEIGHT

        # Reaching the limit exactly is allowed
        assert validator.validate(make_box(10, 10, 10, weight=4), point(10, 0, 0)).legal

    def test_bounds_checked_before_weight(self, make_box):
        state = PlacementState(ContainerSpec(100, 100, 100, max_load=1))
        result = PlacementValidator(state).validate(make_box(200, 10, 10, weight=5), point(0, 0, 0))
        assert result.reason is FailureReason.BOUNDS


class TestOverlap:
    """Non-overlap check."""

    def test_touching_faces_do_not_overlap(self, state, make_box):
        state.commit(make_box(50, 50, 50), (0, 0, 0))
        validator = PlacementValidator(state)

        assert validator.validate(make_box(50, 50, 50), point(50, 0, 0)).legal
        assert validator.validate(make_box(50, 50, 50), point(0, 0, 50)).legal

    def test_intersection_fails(self, state, make_box):
        state.commit(make_box(50, 50, 50, box_id="base"), (0, 0, 0))
        result = PlacementValidator(state).validate(make_box(50, 50, 50), point(25, 0, 0))

        assert result.reason is FailureReason.OVERLAP
        assert "base" in result.detail

    def test_validation_does_not_change_state(self, state, make_box):
        state.commit(make_box(50, 50, 50), (0, 0, 0))
        n_points = len(state.candidates)

        PlacementValidator(state).validate(make_box(10, 10, 10), point(50, 0, 0))

        assert state.num_committed == 1
        assert state.committed_weight == 1.0
        assert len(state.candidates) == n_points


class TestSupport:
    """Support check."""

    def test_floor_is_always_supported(self, state, make_box):
        assert PlacementValidator(state).validate(make_box(30, 30, 30), point(70, 0, 70)).legal

    def test_floating_box_fails(self, state, make_box):
        result = PlacementValidator(state).validate(make_box(30, 30, 30), point(0, 20, 0))
        assert result.reason is FailureReason.SUPPORT

    def test_union_of_two_tops_supports(self, state, make_box):
        state.commit(make_box(50, 50, 100), (0, 0, 0))
        state.commit(make_box(50, 50, 100), (50, 0, 0))

        result = PlacementValidator(state).validate(make_box(100, 50, 100), point(0, 50, 0))
        assert result.legal

    def test_gap_between_tops_fails(self, state, make_box):
        state.commit(make_box(40, 50, 100), (0, 0, 0))
        state.commit(make_box(40, 50, 100), (60, 0, 0))

        result = PlacementValidator(state).validate(make_box(100, 20, 100), point(0, 50, 0))
        assert result.reason is FailureReason.SUPPORT

    def test_tops_at_other_levels_do_not_support(self, state, make_box):
        state.commit(make_box(50, 50, 100), (0, 0, 0))
        state.commit(make_box(50, 40, 100), (50, 0, 0))

        result = PlacementValidator(state).validate(make_box(100, 20, 100), point(0, 50, 0))
        assert result.reason is FailureReason.SUPPORT

    def test_overhang_fails(self, state, make_box):
        state.commit(make_box(60, 40, 60), (0, 0, 0))

        result = PlacementValidator(state).validate(make_box(80, 10, 30), point(0, 40, 0))
        assert result.reason is FailureReason.SUPPORT

    def test_point_from_covering_box_is_supported(self, state, make_box):
        state.commit(make_box(60, 40, 60), (0, 0, 0))

        result = PlacementValidator(state).validate(make_box(50, 20, 50), point(0, 40, 0, source=0))
        assert result.legal

    def test_point_source_falls_back_to_union_of_tops(self, state, make_box):
        state.commit(make_box(50, 50, 100), (0, 0, 0))
        state.commit(make_box(50, 50, 100), (50, 0, 0))
        validator = PlacementValidator(state)

        # The source alone covers half; the neighbour completes it
        assert validator.validate(make_box(100, 20, 100), point(0, 50, 0, source=0)).legal

    def test_point_source_covering_half_fails(self, make_box):
        narrow = PlacementState(ContainerSpec(100, 100, 100))
        narrow.commit(make_box(50, 50, 100), (0, 0, 0))
        result = PlacementValidator(narrow).validate(make_box(100, 20, 100), point(0, 50, 0, source=0))
        assert result.reason is FailureReason.SUPPORT


class TestStacking:
    """Stacking restriction."""

    def test_box_on_no_stack_box_fails(self, state, make_box):
        state.commit(make_box(100, 50, 100, cant_stack_top=True), (0, 0, 0))

        result = PlacementValidator(state).validate(make_box(50, 50, 50), point(0, 50, 0))
        assert result.reason is FailureReason.STACKING

    def test_no_stack_source_box_fails(self, state, make_box):
        state.commit(make_box(100, 50, 100, cant_stack_top=True), (0, 0, 0))

        result = PlacementValidator(state).validate(make_box(50, 50, 50), point(0, 50, 0, source=0))
        assert result.reason is FailureReason.STACKING

    def test_partial_contact_with_no_stack_box_fails(self, state, make_box):
        state.commit(make_box(50, 50, 100), (0, 0, 0))
        state.commit(make_box(50, 50, 100, cant_stack_top=True), (50, 0, 0))

        result = PlacementValidator(state).validate(make_box(100, 20, 100), point(0, 50, 0))
        assert result.reason is FailureReason.STACKING

    def test_adjacent_no_stack_box_is_ignored(self, state, make_box):
        state.commit(make_box(50, 50, 100), (0, 0, 0))
        state.commit(make_box(50, 50, 100, cant_stack_top=True), (50, 0, 0))

        # Only an edge touches the flagged box
        result = PlacementValidator(state).validate(make_box(50, 20, 100), point(0, 50, 0))
        assert result.legal


class TestFootprintCoverage:
    """footprint_covered helper."""

    def test_no_rectangles(self):
        assert not footprint_covered(0, 10, 0, 10, np.empty((0, 4)))

    def test_single_exact_rectangle(self):
        assert footprint_covered(0, 10, 0, 10, np.array([[0, 10, 0, 10]], dtype=float))

    def test_overlapping_rectangles(self):
        rects = np.array([[0, 6, 0, 10], [4, 10, 0, 10]], dtype=float)
        assert footprint_covered(0, 10, 0, 10, rects)

    @pytest.mark.parametrize("rects", [
        [[0, 5, 0, 10], [5, 10, 0, 5]],            # missing corner
        [[0, 10, 0, 4], [0, 10, 6, 10]],           # strip gap
    ])
    def test_uncovered_region(self, rects):
        assert not footprint_covered(0, 10, 0, 10, np.array(rects, dtype=float))
