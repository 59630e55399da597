"""
Human Play Mode
================

Play the stacking game interactively.

Controls:
    - Click/Space: Drop block
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--width WIDTH] [--height HEIGHT] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from stacker.stack_core.config_loader import load_config, GameConfig
from stacker.stack_core.events import BlockCut, GameOver, SessionEvent
from stacker.stack_core.render_solid import SolidRenderer
from stacker.stack_core.session import GameSession


@dataclass
class FallingPiece:
    """A trimmed strip sliding out of view."""
    left: float
    width: float
    bottom: float
    alpha: float = 255.0


class StackerRenderer:
    """Draws the session with pygame primitives."""

    FALL_SPEED = 6.0      # world px per frame
    FADE_SPEED = 8.0      # alpha per frame

    def __init__(self, config: GameConfig, window_width: int, window_height: int):
        self._config = config
        self._window_width = window_width
        self._window_height = window_height

        self._bg_color = (30, 30, 40)
        self._base_color = (90, 90, 110)
        self._moving_color = (255, 200, 80)
        self._text_color = (240, 240, 240)
        self._overlay_color = (0, 0, 0, 160)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 32)
        self._font_small = pygame.font.Font(None, 22)

        self._top_ui_height = 60
        board = config.board
        view_height = (board.visible_rows + 2) * board.block_height
        available_height = window_height - self._top_ui_height
        self._scale = min(window_width / board.container_width, available_height / view_height)
        self._board_x = (window_width - board.container_width * self._scale) / 2

        self.falling: List[FallingPiece] = []

    def _rect(self, left: float, bottom: float, width: float, scroll: float) -> pygame.Rect:
        """World rectangle to screen rectangle (Y is flipped)."""
        block_height = self._config.board.block_height
        x = self._board_x + left * self._scale
        y = self._window_height - (bottom - scroll + block_height) * self._scale
        return pygame.Rect(int(x), int(y), max(1, int(width * self._scale)), int(block_height * self._scale))

    def render(self, screen: pygame.Surface, render_data: dict, game_over: bool) -> None:
        screen.fill(self._bg_color)
        scroll = render_data["scroll_offset"]

        for block in render_data["stack"]:
            color = self._base_color if block["level"] == 0 else SolidRenderer.level_color(block["level"])
            pygame.draw.rect(screen, color, self._rect(block["left"], block["bottom"], block["width"], scroll))

        self._render_falling(screen, scroll)

        moving = render_data["moving"]
        if moving is not None:
            pygame.draw.rect(
                screen, self._moving_color,
                self._rect(moving["left"], moving["bottom"], moving["width"], scroll)
            )

        score_text = self._font_medium.render(
            f"Score: {render_data['score']}   Best: {render_data['best_score']}",
            True, self._text_color
        )
        screen.blit(score_text, (16, 16))

        if game_over:
            self._render_game_over(screen, render_data["score"])

    def _render_falling(self, screen: pygame.Surface, scroll: float) -> None:
        alive = []
        for piece in self.falling:
            rect = self._rect(piece.left, piece.bottom, piece.width, scroll)
            surface = pygame.Surface(rect.size, pygame.SRCALPHA)
            surface.fill((*self._moving_color, int(piece.alpha)))
            screen.blit(surface, rect.topleft)

            piece.bottom -= self.FALL_SPEED
            piece.alpha -= self.FADE_SPEED
            if piece.alpha > 0:
                alive.append(piece)
        self.falling = alive

    def _render_game_over(self, screen: pygame.Surface, final_score: int) -> None:
        overlay = pygame.Surface((self._window_width, self._window_height), pygame.SRCALPHA)
        overlay.fill(self._overlay_color)
        screen.blit(overlay, (0, 0))

        title = self._font_large.render("GAME OVER", True, self._text_color)
        score = self._font_medium.render(f"Final score: {final_score}", True, self._text_color)
        hint = self._font_small.render("Click or press R to play again", True, self._text_color)

        center_x = self._window_width // 2
        center_y = self._window_height // 2
        screen.blit(title, title.get_rect(center=(center_x, center_y - 40)))
        screen.blit(score, score.get_rect(center=(center_x, center_y + 10)))
        screen.blit(hint, hint.get_rect(center=(center_x, center_y + 50)))


class HumanPlayer:
    """Human-playable stacker driven by the pygame frame clock."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        window_width: int = 450,
        window_height: int = 640,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Stacker")
        self._clock = pygame.time.Clock()

        self._renderer = StackerRenderer(config, window_width, window_height)

        self._session = GameSession(config=config)
        self._session.events.subscribe(self._on_event)
        self._session.reset()

        self._running = True
        self._last_time = time.perf_counter()

    def _on_event(self, event: SessionEvent) -> None:
        if isinstance(event, BlockCut):
            self._renderer.falling.append(FallingPiece(event.left, event.width, event.bottom))
        elif isinstance(event, GameOver):
            print(f"\nGAME OVER - Score: {event.final_score}")

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Stacker ===")
        print("Click or Space to drop the block")
        print("R to restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()

            current_time = time.perf_counter()
            frame_dt = current_time - self._last_time
            self._last_time = current_time
            self._session.tick(frame_dt)

            self._renderer.render(
                self._screen,
                self._session.get_render_data(),
                game_over=self._session.is_over
            )
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._session.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_SPACE:
                    self._drop_or_restart()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._drop_or_restart()

    def _drop_or_restart(self) -> None:
        if self._session.is_over:
            self._restart()
            return

        outcome = self._session.drop()
        if outcome is not None and outcome.success:
            print(f"  Level {self._session.level}: width {outcome.new_width:.0f}")

    def _restart(self) -> None:
        self._renderer.falling.clear()
        self._session.reset()
        print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Stacker interactively")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--width", type=int, default=450, help="Window width (default: 450)")
    parser.add_argument("--height", type=int, default=640, help="Window height (default: 640)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
