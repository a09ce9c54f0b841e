from enum import Enum
import math
from typing import Iterable, List, Optional, Tuple

from app.state import TypingStats

CHARS_PER_WORD = 5
SENTENCE_TERMINALS = frozenset(".!?")


class CharMark(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURRENT = "current"
    PENDING = "pending"


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def is_sentence_terminal(ch: str) -> bool:
    return ch in SENTENCE_TERMINALS


def count_matches(reference: str, typed: str) -> Tuple[int, int]:
    """
    Position-wise comparison of the whole typed string against the reference.
    Returns (correct, incorrect); anything past the reference end is incorrect.
    """
    correct = 0
    for i, ch in enumerate(typed):
        if i < len(reference) and ch == reference[i]:
            correct += 1
    return correct, len(typed) - correct


def char_marks(reference: str, typed: str) -> List[CharMark]:
    marks: List[CharMark] = []
    for i, ch in enumerate(reference):
        if i < len(typed):
            marks.append(CharMark.CORRECT if typed[i] == ch else CharMark.INCORRECT)
        elif i == len(typed):
            marks.append(CharMark.CURRENT)
        else:
            marks.append(CharMark.PENDING)
    return marks


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def accuracy_percent(correct: int, total: int) -> int:
    # nothing typed yet counts as perfect
    if total <= 0:
        return 100
    return round_half_up(correct / total * 100)


def words_per_minute(correct: int, seconds: float) -> int:
    if seconds <= 0:
        return 0
    return round_half_up((correct / CHARS_PER_WORD) / (seconds / 60.0))


def compute_stats(reference: str, typed: str, start_time: Optional[float], now: float) -> TypingStats:
    """
    Stats for one chunk as a pure function of (reference, typed, start, now).
    Elapsed time is zero before the first keystroke and never negative.
    """
    elapsed = max(0.0, now - start_time) if start_time is not None else 0.0
    correct, incorrect = count_matches(reference, typed)
    total = len(typed)
    return TypingStats(
        wpm=words_per_minute(correct, elapsed),
        accuracy=accuracy_percent(correct, total),
        correct_chars=correct,
        incorrect_chars=incorrect,
        total_chars=total,
        time_elapsed=elapsed,
    )


def combine_stats(stats: Iterable[TypingStats]) -> TypingStats:
    """Aggregate per-chunk results, e.g. into a page summary."""
    correct = incorrect = total = 0
    elapsed = 0.0
    for s in stats:
        correct += s.correct_chars
        incorrect += s.incorrect_chars
        total += s.total_chars
        elapsed += s.time_elapsed
    return TypingStats(
        wpm=words_per_minute(correct, elapsed),
        accuracy=accuracy_percent(correct, total),
        correct_chars=correct,
        incorrect_chars=incorrect,
        total_chars=total,
        time_elapsed=elapsed,
    )


def wpm_series(stats: Iterable[TypingStats]) -> List[float]:
    return [float(s.wpm) for s in stats]
