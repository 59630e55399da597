"""
Tests for Gymnasium environment API.
"""

import pytest
import numpy as np

from stacker.stack_core.config_loader import load_config
from stacker.stack_core.env_gym import StackerEnv, ACTION_DROP, ACTION_WAIT


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = StackerEnv()
    yield env
    env.close()


class TestStackerEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2

        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["delta_score"] == 0

    def test_observation_structure(self, env, config):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset()

        for key in ("status", "level", "score", "width", "speed", "moving_left",
                    "offset_to_reference", "projected_overlap"):
            assert key in obs

        max_blocks = config.observation.max_blocks
        assert obs["stack_left"].shape == (max_blocks,)
        assert obs["stack_width"].shape == (max_blocks,)
        assert obs["stack_mask"].shape == (max_blocks,)
        assert obs["stack_mask"].sum() == 1

    def test_observation_in_space(self, env):
        obs, _ = env.reset()
        assert env.observation_space.contains(obs)

        obs, *_ = env.step(ACTION_WAIT)
        assert env.observation_space.contains(obs)

    def test_step_returns_five_values(self, env):
        """Step should return (obs, reward, terminated, truncated, info)."""
        env.reset()

        result = env.step(ACTION_WAIT)

        assert isinstance(result, tuple)
        assert len(result) == 5

        obs, reward, terminated, truncated, info = result
        assert isinstance(obs, dict)
        assert isinstance(reward, (int, float))
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert isinstance(info, dict)

    def test_wait_advances_block(self, env):
        obs, _ = env.reset()
        start = float(obs["moving_left"])

        obs, *_ = env.step(ACTION_WAIT)

        assert float(obs["moving_left"]) == start + 2.0

    def test_reward_is_always_zero(self, env):
        env.reset()
        for _ in range(400):
            _, reward, terminated, truncated, _ = env.step(ACTION_WAIT)
            assert reward == 0.0

    def test_aligned_drop_scores(self, env):
        env.reset()
        for _ in range(175):
            env.step(ACTION_WAIT)

        obs, _, terminated, _, info = env.step(ACTION_DROP)

        assert not terminated
        assert info["dropped"]
        assert info["delta_score"] == 1
        assert int(obs["level"]) == 1
        assert float(obs["width"]) == 250.0

    def test_immediate_drop_terminates(self, env):
        """The first block starts off-screen, so dropping at once misses."""
        env.reset()

        _, _, terminated, truncated, info = env.step(ACTION_DROP)

        assert terminated
        assert not truncated
        assert info["terminated_reason"] == "miss"
        assert info["score"] == 0

    def test_numpy_action(self, env):
        env.reset()
        env.step(np.array(0))
        env.step(np.array([0]))

    def test_invalid_action(self, env):
        env.reset()
        with pytest.raises(ValueError):
            env.step(2)

    def test_reset_after_termination(self, env):
        env.reset()
        env.step(ACTION_DROP)

        obs, info = env.reset()

        assert int(obs["level"]) == 0
        assert info["status"] == "running"

    def test_frame_skip(self):
        env = StackerEnv(frame_skip=4)
        env.reset()
        obs, *_ = env.step(ACTION_WAIT)
        assert float(obs["moving_left"]) == -250.0 + 8.0
        env.close()

    def test_invalid_frame_skip(self):
        with pytest.raises(ValueError):
            StackerEnv(frame_skip=0)


class TestImageObservation:
    """Test rendered observations."""

    def test_board_rgb_shape(self, config):
        env = StackerEnv(image_obs=True)
        obs, _ = env.reset()

        assert obs["board_rgb"].shape == (
            config.observation.image_height,
            config.observation.image_width,
            3,
        )
        assert obs["board_rgb"].dtype == np.uint8
        env.close()

    def test_rgb_array_render(self):
        env = StackerEnv(render_mode="rgb_array", image_width=90, image_height=120)
        env.reset()

        frame = env.render()

        assert frame.shape == (120, 90, 3)
        env.close()

    def test_headless_render_returns_none(self, env):
        env.reset()
        assert env.render() is None
