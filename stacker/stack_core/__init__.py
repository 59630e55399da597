"""
Stack Core - The heart of the stacking game.

This module provides the session state machine, the oscillation and drop
resolution engine, and the collaborators built on them.

Main exports:
- GameSession: Stacking session (tick / drop / reset)
- resolve_drop: Overlap and cut computation for a single drop
- advance: One oscillation tick
- StackerEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from stacker.stack_core.config_loader import GameConfig, load_config
from stacker.stack_core.block import Block, MovingBlock
from stacker.stack_core.oscillator import advance, spawn_left
from stacker.stack_core.alignment import CutPiece, DropOutcome, resolve_drop
from stacker.stack_core.events import (
    BlockCut,
    BlockPlaced,
    BlockSpawned,
    EventBus,
    GameOver,
    SessionReset,
)
from stacker.stack_core.scheduler import TickScheduler
from stacker.stack_core.session import GameSession, SessionStatus
from stacker.stack_core.env_gym import StackerEnv
from stacker.stack_core.replay_recorder import (
    ReplayRecorder,
    record_episode,
    generate_replay_filename,
)

__all__ = [
    "GameConfig",
    "load_config",
    "Block",
    "MovingBlock",
    "advance",
    "spawn_left",
    "CutPiece",
    "DropOutcome",
    "resolve_drop",
    "BlockCut",
    "BlockPlaced",
    "BlockSpawned",
    "EventBus",
    "GameOver",
    "SessionReset",
    "TickScheduler",
    "GameSession",
    "SessionStatus",
    "StackerEnv",
    "ReplayRecorder",
    "record_episode",
    "generate_replay_filename",
]
