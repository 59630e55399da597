"""
Game Session
============

Session state machine combining oscillation, drop resolution, scoring and
tick scheduling.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from stacker.stack_core.alignment import CutPiece, DropOutcome, resolve_drop
from stacker.stack_core.block import Block, MovingBlock
from stacker.stack_core.config_loader import GameConfig, get_config
from stacker.stack_core.events import (
    BlockCut,
    BlockPlaced,
    BlockSpawned,
    EventBus,
    GameOver,
    SessionReset,
)
from stacker.stack_core.oscillator import advance, spawn_left
from stacker.stack_core.scheduler import TickScheduler
from stacker.stack_core.scoring import ScoreTracker
from stacker.stack_core.state_snapshot import GameSnapshot, SnapshotBuilder


class SessionStatus(Enum):
    IDLE = 0
    RUNNING = 1
    GAME_OVER = 2


class GameSession:
    """
    Main stacking session.

    Lifecycle:
        IDLE -> RUNNING         reset()
        RUNNING -> RUNNING      drop() that lands
        RUNNING -> GAME_OVER    drop() that misses
        any -> IDLE -> RUNNING  reset()

    While RUNNING exactly one oscillation tick is pending on the scheduler.
    The tick source drives it through `tick()`; input drives `drop()`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[TickScheduler] = None,
        debug: bool = False
    ):
        """
        Initialize session in the IDLE state. Call `reset()` to start.

        Args:
            config: Game configuration. Uses default if None.
            scheduler: Tick scheduler to run the oscillation on.
            debug: If True, prints state transitions.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._debug = debug
        self._scheduler = scheduler if scheduler is not None else TickScheduler()
        self._scorer = ScoreTracker()
        self._snapshot_builder = SnapshotBuilder(config)
        self.events = EventBus()

        self._status = SessionStatus.IDLE
        self._stack: List[Block] = [self._make_base()]
        self._moving: Optional[MovingBlock] = None
        self._level: int = 0
        self._width: float = config.board.initial_width
        self._speed: float = config.motion.min_speed
        self._direction: bool = config.motion.start_moving_right
        self._accept_drop_input: bool = False
        self._last_cut: Optional[CutPiece] = None
        self._ticks: int = 0
        self._tick_handle: Optional[int] = None

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_over(self) -> bool:
        """True once a drop has missed."""
        return self._status is SessionStatus.GAME_OVER

    @property
    def level(self) -> int:
        """Number of blocks placed on top of the base."""
        return self._level

    @property
    def width(self) -> float:
        """Width of the most recently committed block."""
        return self._width

    @property
    def speed(self) -> float:
        """Current oscillation speed in pixels per tick."""
        return self._speed

    @property
    def direction(self) -> bool:
        """True while the block moves right."""
        return self._direction

    @property
    def stack(self) -> Tuple[Block, ...]:
        """Committed blocks, base first."""
        return tuple(self._stack)

    @property
    def base_block(self) -> Block:
        return self._stack[0]

    @property
    def top_block(self) -> Block:
        return self._stack[-1]

    @property
    def moving_block(self) -> Optional[MovingBlock]:
        return self._moving

    @property
    def accept_drop_input(self) -> bool:
        """True while a drop would be processed."""
        return self._accept_drop_input

    @property
    def last_cut(self) -> Optional[CutPiece]:
        """Piece trimmed by the most recent drop, if any."""
        return self._last_cut

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def best_score(self) -> int:
        return self._scorer.best_score

    @property
    def ticks(self) -> int:
        """Oscillation ticks since the last reset."""
        return self._ticks

    @property
    def scroll_offset(self) -> float:
        """Vertical view offset that keeps the active row on screen."""
        threshold = self._config.board.visible_rows
        if self._level > threshold:
            return (self._level - threshold) * self._config.board.block_height
        return 0.0

    def _make_base(self) -> Block:
        board = self._config.board
        return Block.at_level(0, board.base_left, board.initial_width, board.block_height)

    def reset(self) -> GameSnapshot:
        """
        Return to the initial state and start oscillating a new block.

        Returns:
            Snapshot of the fresh session.
        """
        self._cancel_tick()
        self._status = SessionStatus.IDLE

        motion = self._config.motion
        self._stack = [self._make_base()]
        self._moving = None
        self._level = 0
        self._width = self._config.board.initial_width
        self._speed = motion.min_speed
        self._direction = motion.start_moving_right
        self._accept_drop_input = False
        self._last_cut = None
        self._ticks = 0
        self._scorer.reset()

        self._status = SessionStatus.RUNNING
        spawned = self._spawn_block()

        if self._debug:
            print(f"[DEBUG] Session reset: width={self._width}, speed={self._speed}")

        # Handlers only see fully committed state
        self.events.emit(SessionReset(base=self._stack[0]))
        self.events.emit(spawned)

        return self.snapshot()

    def _spawn_block(self) -> BlockSpawned:
        """Create the next moving block and start its oscillation loop."""
        board = self._config.board
        level = self._level + 1
        self._moving = MovingBlock(
            level=level,
            left=spawn_left(self._width, self._direction, board.container_width),
            width=self._width,
            bottom=level * board.block_height,
            moving_right=self._direction
        )
        self._tick_handle = self._scheduler.schedule(self._on_tick)
        self._accept_drop_input = True

        return BlockSpawned(
            level=level,
            left=self._moving.left,
            width=self._moving.width,
            moving_right=self._moving.moving_right
        )

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._scheduler.cancel(self._tick_handle)
            self._tick_handle = None

    def tick(self, dt: Optional[float] = None) -> bool:
        """
        Run the pending oscillation tick.

        Args:
            dt: Seconds since the previous frame. Only used when
                `motion.normalize_to_tick_rate` is enabled.

        Returns:
            True if the block moved.
        """
        return self._scheduler.fire(dt)

    def _on_tick(self, dt: Optional[float]) -> None:
        if self._status is not SessionStatus.RUNNING or self._moving is None:
            return

        moving = self._moving
        moving.left, moving.moving_right = advance(
            moving.left,
            moving.width,
            self._tick_speed(dt),
            moving.moving_right,
            self._config.board.container_width
        )
        self._direction = moving.moving_right
        self._ticks += 1

        self._tick_handle = self._scheduler.schedule(self._on_tick)

    def _tick_speed(self, dt: Optional[float]) -> float:
        motion = self._config.motion
        if motion.normalize_to_tick_rate and dt is not None:
            # A clock stepping backwards must not reverse the motion
            return self._speed * max(dt, 0.0) * motion.tick_rate_hz
        return self._speed

    def drop(self) -> Optional[DropOutcome]:
        """
        Drop the moving block onto the top of the stack.

        Returns:
            The drop outcome, or None if no drop was accepted.
        """
        if (
            self._status is not SessionStatus.RUNNING
            or not self._accept_drop_input
            or self._moving is None
        ):
            return None

        # Stop motion first so the drop sees the last completed tick
        self._cancel_tick()
        self._accept_drop_input = False

        outcome = resolve_drop(
            self._moving,
            self._stack[-1],
            self._config.rules.miss_epsilon
        )

        if not outcome.success:
            self._end_game(outcome)
            return outcome

        self._last_cut = outcome.cut_piece
        block = self._moving.settle(outcome.new_left, outcome.new_width)
        self._stack.append(block)
        self._level = block.level
        self._width = outcome.new_width

        motion = self._config.motion
        self._speed = min(self._speed + motion.speed_increment, motion.max_speed)

        self._scorer.apply_placement(block.level, outcome.is_perfect)

        if self._debug:
            print(f"[DEBUG] Placed level {block.level}: left={block.left:.1f}, "
                  f"width={block.width:.1f}, speed={self._speed:.1f}")

        spawned = self._spawn_block()

        cut = outcome.cut_piece
        if cut is not None:
            self.events.emit(BlockCut(left=cut.left, width=cut.width, bottom=cut.bottom))
        self.events.emit(BlockPlaced(block=block, speed=self._speed, is_perfect=outcome.is_perfect))
        self.events.emit(spawned)

        return outcome

    def _end_game(self, outcome: DropOutcome) -> None:
        """Discard the moving block and halt."""
        self._cancel_tick()
        self._status = SessionStatus.GAME_OVER
        self._moving = None
        self._accept_drop_input = False
        self._last_cut = None

        if self._debug:
            print(f"[DEBUG] GAME OVER at level {self._level}: "
                  f"offset={outcome.offset:.1f}, overlap={outcome.overlap:.1f}")

        self.events.emit(GameOver(final_score=self._level, level=self._level))

    def snapshot(self) -> GameSnapshot:
        """Build current session snapshot."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "best_score": self._scorer.best_score,
            "level": self._level,
            "width": self._width,
            "speed": self._speed,
            "ticks": self._ticks,
            "perfect_drops": self._scorer.perfect_drops,
            "status": self._status.name.lower(),
            "terminated_reason": "miss" if self.is_over else "",
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with block rectangles and board info.
        """
        moving = None
        if self._moving is not None:
            moving = {
                "left": self._moving.left,
                "width": self._moving.width,
                "bottom": self._moving.bottom,
            }

        cut = None
        if self._last_cut is not None:
            cut = {
                "left": self._last_cut.left,
                "width": self._last_cut.width,
                "bottom": self._last_cut.bottom,
            }

        return {
            "container_width": self._config.board.container_width,
            "block_height": self._config.board.block_height,
            "visible_rows": self._config.board.visible_rows,
            "scroll_offset": self.scroll_offset,
            "stack": [
                {"level": b.level, "left": b.left, "width": b.width, "bottom": b.bottom}
                for b in self._stack
            ],
            "moving": moving,
            "cut_piece": cut,
            "score": self._scorer.score,
            "best_score": self._scorer.best_score,
            "level": self._level,
            "status": self._status.name.lower(),
        }
