"""
Tests for the single-slot tick scheduler.
"""

import pytest

from stacker.stack_core.scheduler import TickScheduler


@pytest.fixture
def scheduler():
    return TickScheduler()


class TestTickScheduler:
    """Test scheduling, cancellation and firing."""

    def test_fire_without_pending(self, scheduler):
        assert not scheduler.fire()
        assert scheduler.ticks_fired == 0

    def test_fire_runs_once(self, scheduler):
        calls = []
        scheduler.schedule(calls.append)

        assert scheduler.fire(0.016)
        assert not scheduler.fire()
        assert calls == [0.016]

    def test_schedule_replaces_pending(self, scheduler):
        """Only the newest callback survives."""
        calls = []
        scheduler.schedule(lambda dt: calls.append("old"))
        scheduler.schedule(lambda dt: calls.append("new"))

        scheduler.fire()
        scheduler.fire()

        assert calls == ["new"]

    def test_cancel_is_idempotent(self, scheduler):
        scheduler.schedule(lambda dt: None)
        scheduler.cancel()
        scheduler.cancel()
        assert not scheduler.pending

    def test_stale_handle_does_not_cancel(self, scheduler):
        old = scheduler.schedule(lambda dt: None)
        scheduler.schedule(lambda dt: None)

        scheduler.cancel(old)

        assert scheduler.pending

    def test_self_rescheduling_loop(self, scheduler):
        count = []

        def loop(dt):
            count.append(dt)
            if len(count) < 3:
                scheduler.schedule(loop)

        scheduler.schedule(loop)
        while scheduler.fire():
            pass

        assert len(count) == 3
        assert scheduler.ticks_fired == 3
