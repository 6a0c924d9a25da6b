import asyncio

import pytest

from clauseradar.session.scheduler import AsyncioScheduler, VirtualScheduler


class TestVirtualScheduler:
    def test_fires_only_when_due(self) -> None:
        scheduler = VirtualScheduler()
        fired: list[str] = []
        scheduler.call_later(1.0, lambda: fired.append("a"))

        scheduler.advance(0.5)
        assert fired == []

        scheduler.advance(0.5)
        assert fired == ["a"]

    def test_fires_in_due_order(self) -> None:
        scheduler = VirtualScheduler()
        fired: list[str] = []
        scheduler.call_later(2.0, lambda: fired.append("late"))
        scheduler.call_later(1.0, lambda: fired.append("early"))
        scheduler.call_later(1.0, lambda: fired.append("early-second"))

        scheduler.advance(5)

        assert fired == ["early", "early-second", "late"]

    def test_cancelled_timer_does_not_fire(self) -> None:
        scheduler = VirtualScheduler()
        fired: list[str] = []
        handle = scheduler.call_later(1.0, lambda: fired.append("x"))

        handle.cancel()
        scheduler.advance(2)

        assert fired == []
        assert scheduler.pending == 0

    def test_rescheduling_callback_runs_within_same_advance(self) -> None:
        scheduler = VirtualScheduler()
        ticks: list[float] = []

        def tick() -> None:
            ticks.append(scheduler.now())
            scheduler.call_later(0.25, tick)

        scheduler.call_later(0.25, tick)
        scheduler.advance(1.0)

        assert ticks == [0.25, 0.5, 0.75, 1.0]
        assert scheduler.now() == 1.0


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_runs_callback_on_loop(self) -> None:
        scheduler = AsyncioScheduler()
        done = asyncio.Event()

        scheduler.call_later(0.01, done.set)

        await asyncio.wait_for(done.wait(), 1)
        assert scheduler.now() > 0
