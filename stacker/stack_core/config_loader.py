"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Play area geometry."""
    container_width: float  # Width of the play area in pixels
    block_height: float     # Height of a single block row
    initial_width: float    # Width of the base block
    visible_rows: int       # Rows visible before the view scrolls

    @property
    def base_left(self) -> float:
        """Left edge of the centred base block."""
        return self.container_width / 2 - self.initial_width / 2


@dataclass(frozen=True)
class MotionConfig:
    """Oscillation speed parameters."""
    min_speed: float
    max_speed: float
    speed_increment: float
    start_moving_right: bool
    tick_rate_hz: float
    normalize_to_tick_rate: bool


@dataclass(frozen=True)
class RulesConfig:
    """Drop resolution parameters."""
    miss_epsilon: float


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_blocks: int
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    motion: MotionConfig
    rules: RulesConfig
    caps: CapsConfig
    observation: ObservationConfig

    def to_dict(self) -> dict:
        """Plain dict of the gameplay-relevant values (used for hashing)."""
        return {
            "board": {
                "container_width": self.board.container_width,
                "block_height": self.board.block_height,
                "initial_width": self.board.initial_width,
                "visible_rows": self.board.visible_rows,
            },
            "motion": {
                "min_speed": self.motion.min_speed,
                "max_speed": self.motion.max_speed,
                "speed_increment": self.motion.speed_increment,
                "start_moving_right": self.motion.start_moving_right,
                "tick_rate_hz": self.motion.tick_rate_hz,
                "normalize_to_tick_rate": self.motion.normalize_to_tick_rate,
            },
            "rules": {
                "miss_epsilon": self.rules.miss_epsilon,
            },
        }


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    motion = config.motion

    if board.container_width <= 0 or board.block_height <= 0:
        raise ValueError(
            f"Board dimensions must be positive, got width={board.container_width}, "
            f"block_height={board.block_height}"
        )

    if not 0 < board.initial_width <= board.container_width:
        raise ValueError(
            f"initial_width ({board.initial_width}) must be in "
            f"(0, container_width={board.container_width}]"
        )

    if board.visible_rows < 0:
        raise ValueError(f"visible_rows must be >= 0, got {board.visible_rows}")

    if motion.min_speed <= 0:
        raise ValueError(f"min_speed must be positive, got {motion.min_speed}")

    if motion.min_speed > motion.max_speed:
        raise ValueError(
            f"min_speed ({motion.min_speed}) exceeds max_speed ({motion.max_speed})"
        )

    if motion.speed_increment < 0:
        raise ValueError(f"speed_increment must be >= 0, got {motion.speed_increment}")

    if motion.tick_rate_hz <= 0:
        raise ValueError(f"tick_rate_hz must be positive, got {motion.tick_rate_hz}")

    if config.rules.miss_epsilon < 0:
        raise ValueError(f"miss_epsilon must be >= 0, got {config.rules.miss_epsilon}")

    if config.caps.max_ticks <= 0:
        raise ValueError(f"max_ticks must be positive, got {config.caps.max_ticks}")

    if config.observation.max_blocks <= 0:
        raise ValueError(f"max_blocks must be positive, got {config.observation.max_blocks}")

    # Validate render style
    if config.observation.render_style != "solid":
        raise ValueError(f"render_style must be 'solid', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        container_width=float(board_data["container_width"]),
        block_height=float(board_data["block_height"]),
        initial_width=float(board_data["initial_width"]),
        visible_rows=int(board_data.get("visible_rows", 15))
    )

    motion_data = raw["motion"]
    motion = MotionConfig(
        min_speed=float(motion_data["min_speed"]),
        max_speed=float(motion_data["max_speed"]),
        speed_increment=float(motion_data["speed_increment"]),
        start_moving_right=bool(motion_data.get("start_moving_right", True)),
        tick_rate_hz=float(motion_data.get("tick_rate_hz", 60)),
        normalize_to_tick_rate=bool(motion_data.get("normalize_to_tick_rate", False))
    )

    rules_data = raw.get("rules", {})
    rules = RulesConfig(
        miss_epsilon=float(rules_data.get("miss_epsilon", 5.0))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 100000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_blocks=int(obs_data.get("max_blocks", 16)),
        image_width=int(obs_data.get("image_width", 225)),
        image_height=int(obs_data.get("image_height", 300)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    config = GameConfig(
        board=board,
        motion=motion,
        rules=rules,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
