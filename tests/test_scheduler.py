"""Tests for the cancellable advance timer."""

from PySide6.QtTest import QTest

from core.scheduler import AdvanceTimer


class TestAdvanceTimer:
    """Tests for AdvanceTimer arm / cancel / fire."""

    def test_fires_once_after_delay(self, qapp):
        """An armed timer emits fired exactly once."""
        timer = AdvanceTimer(10)
        hits = []
        timer.fired.connect(lambda: hits.append(1))
        timer.arm()
        assert timer.is_pending
        QTest.qWait(100)
        assert hits == [1]
        assert not timer.is_pending

    def test_cancel_prevents_fire(self, qapp):
        """A cancelled timer never emits fired."""
        timer = AdvanceTimer(10)
        hits = []
        timer.fired.connect(lambda: hits.append(1))
        timer.arm()
        timer.cancel()
        QTest.qWait(100)
        assert hits == []
        assert not timer.is_pending

    def test_rearm_fires_once(self, qapp):
        """Arming twice restarts the countdown instead of stacking."""
        timer = AdvanceTimer(10)
        hits = []
        timer.fired.connect(lambda: hits.append(1))
        timer.arm()
        timer.arm()
        QTest.qWait(100)
        assert hits == [1]

    def test_cancel_when_idle_is_noop(self, qapp):
        """Cancelling with nothing pending emits nothing."""
        timer = AdvanceTimer(10)
        cancelled = []
        timer.cancelled.connect(lambda: cancelled.append(1))
        timer.cancel()
        assert cancelled == []

    def test_set_delay(self, qapp):
        """Negative delays clamp to zero."""
        timer = AdvanceTimer(10)
        timer.set_delay(-5)
        assert timer.delay_ms == 0
