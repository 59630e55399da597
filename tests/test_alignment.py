"""
Tests for drop resolution.
"""

import pytest

from stacker.stack_core.alignment import resolve_drop
from stacker.stack_core.block import Block, MovingBlock


def make_reference(left=100.0, width=250.0):
    return Block(level=0, left=left, width=width, bottom=0.0)


def make_moving(left, width=250.0):
    return MovingBlock(level=1, left=left, width=width, bottom=30.0, moving_right=True)


class TestOverlap:
    """Test overlap geometry."""

    def test_shifted_right_keeps_moving_left_edge(self):
        """offset 50 -> overlap 200, anchored at the moving block."""
        outcome = resolve_drop(make_moving(150.0), make_reference())

        assert outcome.success
        assert outcome.offset == 50.0
        assert outcome.overlap == 200.0
        assert outcome.new_width == 200.0
        assert outcome.new_left == 150.0

    def test_shifted_left_reanchors_to_reference(self):
        outcome = resolve_drop(make_moving(60.0), make_reference())

        assert outcome.success
        assert outcome.offset == -40.0
        assert outcome.new_width == 210.0
        assert outcome.new_left == 100.0

    def test_exact_alignment_keeps_full_width(self):
        outcome = resolve_drop(make_moving(100.0), make_reference())

        assert outcome.success
        assert outcome.is_perfect
        assert outcome.new_width == 250.0
        assert outcome.new_left == 100.0
        assert outcome.cut_piece is None

    def test_new_left_is_left_bound_of_overlap(self):
        """The kept interval starts at max(moving.left, reference.left)."""
        reference = make_reference()
        for left in (-100.0, 0.0, 99.5, 100.0, 100.5, 200.0, 340.0):
            outcome = resolve_drop(make_moving(left), reference)
            if outcome.success:
                assert outcome.new_left == max(left, reference.left)


class TestMiss:
    """Test game-ending drops."""

    def test_full_overshoot_misses(self):
        """offset 300 -> overlap -50."""
        outcome = resolve_drop(make_moving(400.0), make_reference())

        assert not outcome.success
        assert outcome.offset == 300.0
        assert outcome.overlap == -50.0

    def test_zero_overlap_misses(self):
        """Touching edges is not an overlap."""
        outcome = resolve_drop(make_moving(350.0), make_reference())
        assert not outcome.success

    def test_narrow_block_always_misses(self):
        """Width at or below the threshold misses even when aligned."""
        reference = make_reference(left=200.0, width=4.0)
        outcome = resolve_drop(make_moving(200.0, width=4.0), reference, miss_epsilon=5.0)
        assert not outcome.success

    def test_width_at_threshold_misses(self):
        reference = make_reference(left=200.0, width=5.0)
        outcome = resolve_drop(make_moving(200.0, width=5.0), reference, miss_epsilon=5.0)
        assert not outcome.success

    def test_width_above_threshold_succeeds(self):
        reference = make_reference(left=200.0, width=6.0)
        outcome = resolve_drop(make_moving(200.0, width=6.0), reference, miss_epsilon=5.0)
        assert outcome.success


class TestCutPiece:
    """Test the discarded strip."""

    def test_right_strip_when_shifted_right(self):
        outcome = resolve_drop(make_moving(150.0), make_reference())
        cut = outcome.cut_piece

        assert cut is not None
        assert cut.width == 50.0
        assert cut.left == 350.0
        assert cut.bottom == 30.0

    def test_left_strip_when_shifted_left(self):
        outcome = resolve_drop(make_moving(60.0), make_reference())
        cut = outcome.cut_piece

        assert cut is not None
        assert cut.width == 40.0
        assert cut.left == 60.0

    def test_cut_and_kept_cover_moving_span(self):
        moving = make_moving(170.0)
        outcome = resolve_drop(moving, make_reference())
        cut = outcome.cut_piece

        assert outcome.new_width + cut.width == pytest.approx(moving.width)
        assert min(outcome.new_left, cut.left) == pytest.approx(moving.left)
        assert max(outcome.new_left + outcome.new_width, cut.left + cut.width) == pytest.approx(moving.right)

    def test_miss_has_no_cut(self):
        outcome = resolve_drop(make_moving(400.0), make_reference())
        assert outcome.cut_piece is None


class TestNoMutation:
    """resolve_drop never changes its inputs."""

    def test_inputs_untouched(self):
        moving = make_moving(150.0)
        reference = make_reference()

        resolve_drop(moving, reference)

        assert moving.left == 150.0
        assert moving.width == 250.0
        assert reference == make_reference()
