"""
Tests for snapshots and the solid renderer.
"""

import pytest
import numpy as np

from stacker.stack_core.config_loader import load_config
from stacker.stack_core.render_solid import SolidRenderer
from stacker.stack_core.session import GameSession


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def session(config):
    session = GameSession(config=config)
    session.reset()
    return session


@pytest.fixture
def renderer(config):
    return SolidRenderer(config)


def drop_at(session, left):
    session.moving_block.left = left
    return session.drop()


class TestSnapshot:
    """Test snapshot packing."""

    def test_initial_snapshot(self, session):
        snap = session.snapshot()

        assert snap.status == 1
        assert snap.level == 0
        assert snap.has_moving
        assert snap.moving_left == -250.0
        assert snap.offset_to_reference == -350.0
        assert snap.projected_overlap == -100.0

    def test_stack_is_newest_first(self, session):
        drop_at(session, 150.0)
        drop_at(session, 160.0)
        snap = session.snapshot()

        assert list(snap.stack_level[:3]) == [2, 1, 0]
        assert list(snap.stack_width[:3]) == [190.0, 200.0, 250.0]
        assert list(snap.stack_mask[:4]) == [True, True, True, False]
        assert snap.stack_level[3] == -1

    def test_stack_truncated_to_max_blocks(self, session, config):
        max_blocks = config.observation.max_blocks
        for _ in range(max_blocks + 5):
            drop_at(session, session.top_block.left)
        snap = session.snapshot()

        assert snap.stack_mask.all()
        assert snap.stack_level[0] == max_blocks + 5
        assert snap.stack_level[-1] == 6

    def test_snapshots_are_independent(self, session):
        first = session.snapshot()
        drop_at(session, 150.0)
        session.snapshot()

        assert first.stack_mask.sum() == 1

    def test_game_over_snapshot(self, session):
        drop_at(session, 400.0)
        snap = session.snapshot()

        assert snap.status == 2
        assert not snap.has_moving
        assert snap.moving_width == 0.0

    def test_obs_dict_dtypes(self, session):
        obs = session.snapshot().to_obs_dict()

        assert obs["score"].dtype == np.int64
        assert obs["moving_left"].dtype == np.float32
        assert obs["stack_mask"].dtype == bool
        assert "board_rgb" not in obs


class TestSolidRenderer:
    """Test numpy rendering."""

    def test_output_shape(self, session, renderer):
        img = renderer.render(session.get_render_data(), 225, 300)

        assert img.shape == (300, 225, 3)
        assert img.dtype == np.uint8

    def test_base_block_drawn(self, session, renderer):
        img = renderer.render(session.get_render_data(), 450, 510)

        # Base spans x in [100, 350), bottom row of the image
        assert tuple(img[-1, 200]) == (90, 90, 110)
        assert tuple(img[-1, 10]) == (30, 30, 40)

    def test_moving_block_drawn(self, session, renderer):
        session.moving_block.left = 100.0
        img = renderer.render(session.get_render_data(), 450, 510)

        # Second row from the bottom
        assert tuple(img[-45, 200]) == (255, 200, 80)

    def test_off_screen_block_is_clipped(self, session, renderer):
        img = renderer.render(session.get_render_data(), 450, 510)
        assert not np.any(np.all(img == (255, 200, 80), axis=-1))

    def test_game_over_tint(self, session, renderer):
        before = renderer.render(session.get_render_data(), 90, 120)
        drop_at(session, 400.0)
        after = renderer.render(session.get_render_data(), 90, 120)

        assert not np.array_equal(before, after)

    def test_level_color_cycles(self):
        assert SolidRenderer.level_color(1) == SolidRenderer.level_color(7)
