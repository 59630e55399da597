"""
Solid Renderer
==============

Fast numpy-based renderer that draws blocks as solid rectangles.
Consumes `GameSession.get_render_data()` only.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import numpy as np

from stacker.stack_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the tower as solid-color rectangles.

    The view spans the visible rows plus one row for the moving block and
    follows `scroll_offset`, so the active row always stays on screen.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        self._bg_color = np.array([30, 30, 40], dtype=np.uint8)
        self._base_color = np.array([90, 90, 110], dtype=np.uint8)
        self._moving_color = np.array([255, 200, 80], dtype=np.uint8)
        self._cut_color = np.array([120, 70, 50], dtype=np.uint8)
        self._game_over_tint = np.array([120, 20, 20], dtype=np.uint8)

    @staticmethod
    def level_color(level: int) -> Tuple[int, int, int]:
        """Cycle hues up the tower."""
        palette = (
            (102, 224, 255),
            (106, 119, 255),
            (200, 119, 255),
            (255, 102, 119),
            (255, 158, 94),
            (94, 224, 142),
        )
        return palette[level % len(palette)]

    def view_height(self, render_data: Dict[str, Any]) -> float:
        """World-space height of the visible area."""
        return (render_data["visible_rows"] + 2) * render_data["block_height"]

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the session state to an RGB array.

        Args:
            render_data: Data from GameSession.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        board_width = render_data["container_width"]
        board_height = self.view_height(render_data)
        scale = min(width / board_width, height / board_height)
        offset_x = (width - board_width * scale) / 2
        scroll = render_data["scroll_offset"]
        block_height = render_data["block_height"]

        for block in render_data["stack"]:
            color = self._base_color if block["level"] == 0 else np.array(
                self.level_color(block["level"]), dtype=np.uint8
            )
            self._fill_rect(
                img, block["left"], block["bottom"] - scroll, block["width"],
                block_height, color, scale, offset_x
            )

        cut = render_data.get("cut_piece")
        if cut is not None:
            self._fill_rect(
                img, cut["left"], cut["bottom"] - scroll, cut["width"],
                block_height, self._cut_color, scale, offset_x
            )

        moving = render_data.get("moving")
        if moving is not None:
            self._fill_rect(
                img, moving["left"], moving["bottom"] - scroll, moving["width"],
                block_height, self._moving_color, scale, offset_x
            )

        if render_data.get("status") == "game_over":
            img[:] = (img.astype(np.uint16) // 2 + self._game_over_tint // 2).astype(np.uint8)

        return img

    def _fill_rect(
        self,
        img: np.ndarray,
        left: float,
        bottom: float,
        rect_width: float,
        rect_height: float,
        color: np.ndarray,
        scale: float,
        offset_x: float
    ) -> None:
        """Fill a world-space rectangle, clipped to the image."""
        img_h, img_w = img.shape[:2]

        x0 = int(round(offset_x + left * scale))
        x1 = int(round(offset_x + (left + rect_width) * scale))
        # Image rows grow downward; world y grows upward
        y1 = int(round(img_h - bottom * scale))
        y0 = int(round(img_h - (bottom + rect_height) * scale))

        x0, x1 = max(0, x0), min(img_w, x1)
        y0, y1 = max(0, y0), min(img_h, y1)
        if x0 >= x1 or y0 >= y1:
            return

        img[y0:y1, x0:x1] = color

    def close(self) -> None:
        """Nothing to release."""
