# services/typing_engine.py
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import time

from app.calculation import compute_stats
from app.state import SessionPhase, TypingSessionState, TypingStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputResult:
    stats: TypingStats
    completed: bool
    # False when the value was ignored (overtype, or chunk already complete)
    accepted: bool = True


class TypingSession:
    """
    Per-chunk typing state machine: IDLE -> IN_PROGRESS -> COMPLETE.

    The caller feeds the full current input value on every change. Stats are
    recomputed over the entire value each time, so a backspace followed by a
    different character changes earlier results. Once the input matches the
    reference exactly the session freezes until reset().
    """

    def __init__(self, reference_text: str = "", clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.state = TypingSessionState()
        self._completion_stats: Optional[TypingStats] = None
        self.reset(reference_text)

    @property
    def reference_text(self) -> str:
        return self.state.reference_text

    @property
    def user_input(self) -> str:
        return self.state.user_input

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def completed(self) -> bool:
        return self.state.completed

    @property
    def completion_stats(self) -> Optional[TypingStats]:
        """Snapshot taken at the moment of completion, if any."""
        return self._completion_stats

    def reset(self, reference_text: Optional[str] = None):
        text = self.state.reference_text if reference_text is None else reference_text
        self.state.reset(text or "")
        self._completion_stats = None

    def stats(self, now: Optional[float] = None) -> TypingStats:
        if self._completion_stats is not None:
            return self._completion_stats
        s = self.state
        return compute_stats(s.reference_text, s.user_input, s.start_time,
                             self._clock() if now is None else now)

    def on_input(self, new_value: str) -> InputResult:
        s = self.state
        if s.completed:
            return InputResult(self._completion_stats, completed=False, accepted=False)
        if len(new_value) > len(s.reference_text):
            logger.debug("Rejected input of length %d past chunk end %d",
                         len(new_value), len(s.reference_text))
            return InputResult(self.stats(), completed=False, accepted=False)

        now = self._clock()
        if s.start_time is None:
            s.start_time = now

        s.user_input = new_value
        stats = compute_stats(s.reference_text, new_value, s.start_time, now)
        s.correct_chars = stats.correct_chars
        s.incorrect_chars = stats.incorrect_chars

        if new_value == s.reference_text:
            s.completed = True
            self._completion_stats = stats
            logger.info("Chunk complete: %d wpm, %d%% accuracy", stats.wpm, stats.accuracy)
            return InputResult(stats, completed=True)
        return InputResult(stats, completed=False)
