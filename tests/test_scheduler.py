"""Tests for the frame-driven scheduler"""

import pytest

from neon_arena.scheduler import Scheduler


class TestCallLater:
    def test_fires_once_when_due(self):
        sched = Scheduler()
        hits = []
        sched.call_later(100, lambda: hits.append(sched.now))

        sched.advance(99)
        assert hits == []
        sched.advance(1)
        assert hits == [100]
        sched.advance(500)
        assert hits == [100]
        assert sched.pending == []

    def test_cancel_before_due(self):
        sched = Scheduler()
        hits = []
        task = sched.call_later(100, lambda: hits.append(1))
        task.cancel()
        sched.advance(200)
        assert hits == []

    def test_cancelled_by_earlier_task_in_same_advance(self):
        sched = Scheduler()
        hits = []
        later = sched.call_later(50, lambda: hits.append("later"))
        sched.call_later(10, later.cancel)
        sched.advance(100)
        assert hits == []

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().call_later(-1, lambda: None)


class TestCallEvery:
    def test_repeats(self):
        sched = Scheduler()
        hits = []
        sched.call_every(100, lambda: hits.append(sched.now))
        for _ in range(10):
            sched.advance(50)
        assert hits == [100, 200, 300, 400, 500]

    def test_no_catch_up_after_stall(self):
        sched = Scheduler()
        hits = []
        task = sched.call_every(100, lambda: hits.append(1))
        sched.advance(1000)
        assert len(hits) == 1
        assert task.due == 1100

    def test_cancel_stops_repeating(self):
        sched = Scheduler()
        hits = []
        task = sched.call_every(100, lambda: hits.append(1))
        sched.advance(100)
        task.cancel()
        sched.advance(1000)
        assert hits == [1]
        assert not task.active

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().call_every(0, lambda: None)

    def test_cancel_all(self):
        sched = Scheduler()
        a = sched.call_every(10, lambda: None)
        b = sched.call_later(10, lambda: None)
        sched.cancel_all()
        assert not a.active and not b.active
        assert sched.pending == []

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().advance(-5)
