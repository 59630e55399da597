"""
Session Events
==============

Typed events published by the session and a synchronous bus for
render/audio collaborators to subscribe to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Union

from stacker.stack_core.block import Block


@dataclass(frozen=True)
class SessionReset:
    """Session returned to its initial state."""
    base: Block


@dataclass(frozen=True)
class BlockSpawned:
    """A new moving block entered the play area."""
    level: int
    left: float
    width: float
    moving_right: bool


@dataclass(frozen=True)
class BlockCut:
    """A strip was trimmed off the dropped block."""
    left: float
    width: float
    bottom: float


@dataclass(frozen=True)
class BlockPlaced:
    """A block was committed to the stack."""
    block: Block
    speed: float
    is_perfect: bool


@dataclass(frozen=True)
class GameOver:
    """The drop missed; the session is finished."""
    final_score: int
    level: int


SessionEvent = Union[SessionReset, BlockSpawned, BlockCut, BlockPlaced, GameOver]
EventHandler = Callable[[SessionEvent], None]


class EventBus:
    """
    Delivers events to subscribers in subscription order.

    Handlers run synchronously inside the call that produced the event.
    """

    def __init__(self):
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler.

        Returns:
            A function that removes the handler again.
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(handler)

        return unsubscribe

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, event: SessionEvent) -> None:
        for handler in list(self._handlers):
            handler(event)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
