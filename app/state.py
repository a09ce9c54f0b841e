from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SessionPhase(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TypingStats:
    wpm: int = 0
    accuracy: int = 100
    correct_chars: int = 0
    incorrect_chars: int = 0
    total_chars: int = 0
    time_elapsed: float = 0.0


@dataclass
class TypingSessionState:
    reference_text: str = ""
    user_input: str = ""
    start_time: Optional[float] = None
    correct_chars: int = 0
    incorrect_chars: int = 0
    completed: bool = False

    @property
    def phase(self) -> SessionPhase:
        if self.completed:
            return SessionPhase.COMPLETE
        if self.start_time is None:
            return SessionPhase.IDLE
        return SessionPhase.IN_PROGRESS

    def reset(self, text: str):
        self.reference_text = text
        self.user_input = ""
        self.start_time = None
        self.correct_chars = 0
        self.incorrect_chars = 0
        self.completed = False


@dataclass(frozen=True)
class ChunkResult:
    chunk_id: int
    page_number: int
    stats: TypingStats
