"""
Alignment Engine
================

Resolves a drop: overlap between the moving block and the block below it,
the narrowed geometry, and the discarded cut piece.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from stacker.stack_core.block import Block, MovingBlock


@dataclass(frozen=True)
class CutPiece:
    """The strip trimmed off the moving block. Cosmetic only."""
    left: float
    width: float
    bottom: float


@dataclass(frozen=True)
class DropOutcome:
    """Result of resolving a drop."""
    success: bool
    offset: float
    overlap: float
    new_left: float = 0.0
    new_width: float = 0.0
    cut_piece: Optional[CutPiece] = None

    @staticmethod
    def miss(offset: float, overlap: float) -> "DropOutcome":
        return DropOutcome(False, offset, overlap)

    @staticmethod
    def placed(
        offset: float,
        overlap: float,
        new_left: float,
        new_width: float,
        cut_piece: Optional[CutPiece]
    ) -> "DropOutcome":
        return DropOutcome(True, offset, overlap, new_left, new_width, cut_piece)

    @property
    def is_perfect(self) -> bool:
        """True for an exact alignment (nothing trimmed)."""
        return self.success and self.offset == 0

    def __repr__(self) -> str:
        if not self.success:
            return f"DropOutcome(miss, offset={self.offset}, overlap={self.overlap})"
        return f"DropOutcome(width={self.new_width}, left={self.new_left})"


def resolve_drop(
    moving: Union[Block, MovingBlock],
    reference: Block,
    miss_epsilon: float = 5.0
) -> DropOutcome:
    """
    Compute the outcome of dropping `moving` onto `reference`.

    Neither block is modified; the caller applies the geometry on success.

    Args:
        moving: The block being dropped.
        reference: The block directly below (the base block on the first drop).
        miss_epsilon: Blocks this narrow or narrower always miss.

    Returns:
        DropOutcome describing the placement or the miss.
    """
    offset = moving.left - reference.left
    overlap = reference.width - abs(offset)

    # Both guards are evaluated before a placement is accepted
    if overlap <= 0 or moving.width <= miss_epsilon:
        return DropOutcome.miss(offset, overlap)

    new_width = overlap
    new_left = moving.left if offset > 0 else reference.left

    return DropOutcome.placed(
        offset=offset,
        overlap=overlap,
        new_left=new_left,
        new_width=new_width,
        cut_piece=_cut_piece(moving, offset, new_left, new_width)
    )


def _cut_piece(
    moving: Union[Block, MovingBlock],
    offset: float,
    new_left: float,
    new_width: float
) -> Optional[CutPiece]:
    """The part of the moving block's span not covered by the overlap."""
    cut_width = abs(moving.width - new_width)
    if offset == 0 or cut_width == 0:
        return None

    if offset > 0:
        # Overhang on the right
        left = new_left + new_width
    else:
        left = moving.left

    return CutPiece(left=left, width=cut_width, bottom=moving.bottom)
