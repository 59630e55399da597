"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the stacking game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from stacker.stack_core.config_loader import GameConfig, load_config
from stacker.stack_core.session import GameSession
from stacker.stack_core.state_snapshot import GameSnapshot

ACTION_WAIT = 0
ACTION_DROP = 1


class StackerEnv(gym.Env):
    """
    Block stacking game as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = let the block keep moving, 1 = drop it.

    Each step applies the action, then advances `frame_skip` ticks.

    Observation Space:
        Dict containing session state and optional RGB image.

    Reward:
        Always 0.0. Use info["delta_score"] or info["score"].
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        frame_skip: int = 1,
        debug: bool = False,
    ):
        """
        Initialize stacker environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            frame_skip: Ticks advanced per step.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._frame_skip = frame_skip
        self._debug = debug

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._session = GameSession(config=self._config, debug=debug)

        # Lazily created
        self._renderer = None
        self._window = None
        self._clock = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            board = self._config.board
            print(f"[DEBUG] StackerEnv initialized")
            print(f"[DEBUG]   Container width: {board.container_width}")
            print(f"[DEBUG]   Initial width: {board.initial_width}")
            print(f"[DEBUG]   Frame skip: {self._frame_skip}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        board = self._config.board
        motion = self._config.motion
        max_blocks = self._config.observation.max_blocks
        width = board.container_width

        obs_dict = {
            # Core state
            "status": spaces.Box(low=0, high=2, shape=(), dtype=np.int32),
            "level": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "width": spaces.Box(low=0, high=board.initial_width, shape=(), dtype=np.float32),
            "speed": spaces.Box(low=0, high=motion.max_speed, shape=(), dtype=np.float32),
            "scroll_offset": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),

            # Moving block
            "moving_left": spaces.Box(low=-board.initial_width, high=width, shape=(), dtype=np.float32),
            "moving_width": spaces.Box(low=0, high=board.initial_width, shape=(), dtype=np.float32),
            "moving_right": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),

            # Derived
            "offset_to_reference": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "projected_overlap": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Stack arrays
            "stack_left": spaces.Box(low=-np.inf, high=np.inf, shape=(max_blocks,), dtype=np.float32),
            "stack_width": spaces.Box(low=0, high=board.initial_width, shape=(max_blocks,), dtype=np.float32),
            "stack_level": spaces.Box(low=-1, high=np.iinfo(np.int32).max, shape=(max_blocks,), dtype=np.int32),
            "stack_mask": spaces.MultiBinary(max_blocks),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Accepted for API compatibility; the game is deterministic.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._session.reset()

        obs = self._snapshot_to_obs(snapshot)
        info = self._session.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 to wait, 1 to drop.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])
        action = int(action)
        if action not in (ACTION_WAIT, ACTION_DROP):
            raise ValueError(f"Invalid action {action}, expected 0 (wait) or 1 (drop)")

        score_before = self._session.score
        dropped = False

        if action == ACTION_DROP:
            dropped = self._session.drop() is not None

        for _ in range(self._frame_skip):
            if not self._session.tick():
                break

        terminated = self._session.is_over
        truncated = not terminated and self._session.ticks >= self._config.caps.max_ticks

        obs = self._snapshot_to_obs(self._session.snapshot())

        reward = 0.0

        info = self._session.get_info()
        info["delta_score"] = self._session.score - score_before
        info["dropped"] = dropped
        if truncated:
            info["terminated_reason"] = "tick_cap"

        if self._debug and dropped:
            print(f"[DEBUG] Drop: level={info['level']}, width={info['width']:.1f}, "
                  f"speed={info['speed']:.1f}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            from stacker.stack_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(
            self._session.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            self._render_human(self._render_to_array())
            return None

        return None

    def _render_human(self, frame: np.ndarray) -> None:
        """Blit a frame to a pygame window."""
        try:
            import pygame
        except ImportError as e:
            raise ImportError("pygame required for human rendering: pip install pygame") from e

        if self._window is None:
            pygame.init()
            self._window = pygame.display.set_mode((self._img_width, self._img_height))
            pygame.display.set_caption("Stacker")
            self._clock = pygame.time.Clock()

        pygame.event.pump()
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self._window.blit(surface, (0, 0))
        pygame.display.flip()
        self._clock.tick(self.metadata["render_fps"])

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None
        if self._window is not None:
            import pygame
            pygame.display.quit()
            self._window = None

    @property
    def session(self) -> GameSession:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def frame_skip(self) -> int:
        """Ticks advanced per step."""
        return self._frame_skip
