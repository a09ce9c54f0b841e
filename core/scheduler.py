# core/scheduler.py
from PySide6.QtCore import QObject, QTimer, Signal


class AdvanceTimer(QObject):
    """
    Single-shot "advance to the next chunk" timer owned by the caller.
    cancel() guarantees that `fired` is not emitted for the cancelled arm,
    even if the timeout was already queued.
    """

    fired = Signal()
    armed = Signal()
    cancelled = Signal()

    def __init__(self, delay_ms: int = 1000, parent=None):
        super().__init__(parent)
        self._generation = 0
        self._pending_generation = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(delay_ms)))
        self._timer.timeout.connect(self._on_timeout)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    def set_delay(self, delay_ms: int):
        self._timer.setInterval(max(0, int(delay_ms)))

    @property
    def is_pending(self) -> bool:
        return self._pending_generation is not None

    def arm(self):
        self._generation += 1
        self._pending_generation = self._generation
        self._timer.start()
        self.armed.emit()

    def cancel(self):
        if self._pending_generation is None:
            return
        self._timer.stop()
        self._pending_generation = None
        self.cancelled.emit()

    def _on_timeout(self):
        if self._pending_generation != self._generation:
            return
        self._pending_generation = None
        self.fired.emit()
