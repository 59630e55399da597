"""
Blocks
======

Value types for committed blocks and the single oscillating block.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Block:
    """A committed block in the tower. Never changes once placed."""
    level: int
    left: float
    width: float
    bottom: float

    @property
    def right(self) -> float:
        """Right edge (exclusive)."""
        return self.left + self.width

    @staticmethod
    def at_level(level: int, left: float, width: float, block_height: float) -> "Block":
        """Create a block whose bottom is derived from its level."""
        return Block(level=level, left=left, width=width, bottom=level * block_height)


@dataclass
class MovingBlock:
    """
    The block currently oscillating above the tower.

    Only `left` and `moving_right` change per tick. Width is narrowed once,
    when the block is settled onto the stack.
    """
    level: int
    left: float
    width: float
    bottom: float
    moving_right: bool

    @property
    def right(self) -> float:
        return self.left + self.width

    def settle(self, left: float, width: float) -> Block:
        """Apply the drop geometry and freeze the block."""
        self.left = left
        self.width = width
        return Block(level=self.level, left=left, width=width, bottom=self.bottom)
