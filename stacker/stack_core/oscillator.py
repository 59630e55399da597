"""
Oscillator
==========

Horizontal triangle-wave motion of the moving block.

The block travels fully off-screen on both sides before reversing:
the right turn-around point is `container_width` (left edge at the right
wall) and the left one is `-width` (right edge at the left wall).
"""

from __future__ import annotations

from typing import Tuple


def advance(
    left: float,
    width: float,
    speed: float,
    moving_right: bool,
    container_width: float
) -> Tuple[float, bool]:
    """
    Advance the block by one tick.

    Args:
        left: Current left edge.
        width: Block width.
        speed: Pixels per tick (> 0).
        moving_right: Current direction.
        container_width: Play area width.

    Returns:
        (new_left, new_moving_right) tuple.
    """
    if moving_right:
        new_left = left + speed
        if new_left > container_width:
            return container_width, False
        return new_left, True

    new_left = left - speed
    if new_left < -width:
        return -width, True
    return new_left, False


def spawn_left(width: float, moving_right: bool, container_width: float) -> float:
    """Off-screen starting position on the side the block travels from."""
    return -width if moving_right else container_width
