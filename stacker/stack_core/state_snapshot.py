"""
State Snapshot
==============

Packs session state into fixed-size numpy arrays for observations and
render collaborators. The stack arrays hold the topmost blocks, newest first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from stacker.stack_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from stacker.stack_core.session import GameSession


@dataclass
class GameSnapshot:
    """
    Complete session state snapshot.

    All arrays are fixed-size with masking for variable stack heights.
    """
    # Core state
    status: int
    level: int
    score: int
    width: float
    speed: float
    scroll_offset: float
    accept_drop_input: bool

    # Moving block (zeros when there is none)
    has_moving: bool
    moving_left: float
    moving_width: float
    moving_right: bool

    # Board info (for normalization)
    container_width: float
    block_height: float

    # Derived features
    offset_to_reference: float   # moving.left - top.left
    projected_overlap: float     # overlap if dropped now

    # Stack arrays (fixed size, padded, top of stack first)
    stack_left: np.ndarray       # (MAX_BLOCKS,) float32
    stack_width: np.ndarray      # (MAX_BLOCKS,) float32
    stack_level: np.ndarray      # (MAX_BLOCKS,) int32
    stack_mask: np.ndarray       # (MAX_BLOCKS,) bool

    # Optional image
    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            # Core state
            "status": np.array(self.status, dtype=np.int32),
            "level": np.array(self.level, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "width": np.array(self.width, dtype=np.float32),
            "speed": np.array(self.speed, dtype=np.float32),
            "scroll_offset": np.array(self.scroll_offset, dtype=np.float32),

            # Moving block
            "moving_left": np.array(self.moving_left, dtype=np.float32),
            "moving_width": np.array(self.moving_width, dtype=np.float32),
            "moving_right": np.array(int(self.moving_right), dtype=np.int8),

            # Derived
            "offset_to_reference": np.array(self.offset_to_reference, dtype=np.float32),
            "projected_overlap": np.array(self.projected_overlap, dtype=np.float32),

            # Stack arrays
            "stack_left": self.stack_left,
            "stack_width": self.stack_width,
            "stack_level": self.stack_level,
            "stack_mask": self.stack_mask,
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds session snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_blocks = config.observation.max_blocks
        self._container_width = config.board.container_width
        self._block_height = config.board.block_height

        # Pre-allocate arrays
        self._stack_left = np.zeros(self._max_blocks, dtype=np.float32)
        self._stack_width = np.zeros(self._max_blocks, dtype=np.float32)
        self._stack_level = np.zeros(self._max_blocks, dtype=np.int32)
        self._stack_mask = np.zeros(self._max_blocks, dtype=bool)

    @property
    def max_blocks(self) -> int:
        return self._max_blocks

    def build(
        self,
        session: "GameSession",
        board_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """Build a snapshot from the current session state."""
        # Reset arrays
        self._stack_left.fill(0)
        self._stack_width.fill(0)
        self._stack_level.fill(-1)
        self._stack_mask.fill(False)

        stack = session.stack
        top_blocks = list(reversed(stack[-self._max_blocks:]))
        for i, block in enumerate(top_blocks):
            self._stack_left[i] = block.left
            self._stack_width[i] = block.width
            self._stack_level[i] = block.level
            self._stack_mask[i] = True

        moving = session.moving_block
        reference = stack[-1]
        if moving is not None:
            offset = moving.left - reference.left
            overlap = reference.width - abs(offset)
            moving_left, moving_width, moving_right = moving.left, moving.width, moving.moving_right
        else:
            offset = 0.0
            overlap = 0.0
            moving_left, moving_width, moving_right = 0.0, 0.0, session.direction

        # Copies so snapshots stay valid after the builder is reused
        return GameSnapshot(
            status=session.status.value,
            level=session.level,
            score=session.score,
            width=session.width,
            speed=session.speed,
            scroll_offset=session.scroll_offset,
            accept_drop_input=session.accept_drop_input,
            has_moving=moving is not None,
            moving_left=moving_left,
            moving_width=moving_width,
            moving_right=moving_right,
            container_width=self._container_width,
            block_height=self._block_height,
            offset_to_reference=offset,
            projected_overlap=overlap,
            stack_left=self._stack_left.copy(),
            stack_width=self._stack_width.copy(),
            stack_level=self._stack_level.copy(),
            stack_mask=self._stack_mask.copy(),
            board_rgb=board_rgb
        )
