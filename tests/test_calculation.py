"""Tests for text metrics and stats math."""

import pytest

from app.calculation import (
    CharMark,
    accuracy_percent,
    char_marks,
    combine_stats,
    compute_stats,
    count_matches,
    count_words,
    is_sentence_terminal,
    words_per_minute,
    wpm_series,
)
from app.state import TypingStats


class TestCountWords:
    """Tests for count_words."""

    @pytest.mark.parametrize(
        "text,expected",
        [("", 0), ("   ", 0), ("one", 1), ("  one   two\tthree\n", 3), ("a\n\nb", 2)],
    )
    def test_counts(self, text, expected):
        """Runs of whitespace separate words; empty tokens are dropped."""
        assert count_words(text) == expected


class TestCharacterClassification:
    """Tests for is_sentence_terminal and char_marks."""

    def test_terminals(self):
        """Only . ! ? end sentences."""
        assert all(is_sentence_terminal(c) for c in ".!?")
        assert not any(is_sentence_terminal(c) for c in ",;: a")

    def test_marks(self):
        """Typed chars are correct/incorrect, then caret, then pending."""
        marks = char_marks("cats", "cb")
        assert marks == [CharMark.CORRECT, CharMark.INCORRECT, CharMark.CURRENT, CharMark.PENDING]

    def test_marks_complete(self):
        """Fully typed reference has no caret mark."""
        assert CharMark.CURRENT not in char_marks("ab", "ab")


class TestStatsMath:
    """Tests for accuracy, WPM and compute_stats."""

    def test_count_matches_position_wise(self):
        """Characters compare at the same index only."""
        assert count_matches("cat", "bat") == (2, 1)
        assert count_matches("cat", "act") == (1, 2)

    def test_count_matches_past_end(self):
        """Characters past the reference end are incorrect."""
        assert count_matches("ab", "abc") == (2, 1)

    def test_accuracy_empty_is_100(self):
        """Nothing typed counts as full accuracy."""
        assert accuracy_percent(0, 0) == 100

    def test_accuracy_rounds_half_up(self):
        """12.5 rounds to 13."""
        assert accuracy_percent(1, 8) == 13

    def test_wpm_zero_time(self):
        """Zero elapsed time reports zero WPM."""
        assert words_per_minute(50, 0.0) == 0

    def test_wpm_formula(self):
        """60 correct chars in 60 seconds is 12 WPM."""
        assert words_per_minute(60, 60.0) == 12

    def test_compute_stats_unstarted(self):
        """No start time means zero elapsed."""
        stats = compute_stats("cat", "", None, 500.0)
        assert stats == TypingStats(wpm=0, accuracy=100, correct_chars=0,
                                    incorrect_chars=0, total_chars=0, time_elapsed=0.0)

    def test_compute_stats_never_negative(self):
        """A clock behind the start time clamps to zero."""
        assert compute_stats("cat", "c", 10.0, 5.0).time_elapsed == 0.0

    def test_compute_stats(self):
        """Stats combine counts, accuracy and WPM."""
        stats = compute_stats("hello world", "hello worle", 0.0, 6.0)
        assert stats.correct_chars == 10
        assert stats.incorrect_chars == 1
        assert stats.total_chars == 11
        assert stats.accuracy == 91
        assert stats.wpm == 20
        assert stats.time_elapsed == 6.0


class TestCombineStats:
    """Tests for aggregating chunk results."""

    def test_combine(self):
        """Totals are summed and rates recomputed."""
        a = TypingStats(wpm=10, accuracy=100, correct_chars=30, incorrect_chars=0,
                        total_chars=30, time_elapsed=20.0)
        b = TypingStats(wpm=20, accuracy=75, correct_chars=30, incorrect_chars=10,
                        total_chars=40, time_elapsed=10.0)
        total = combine_stats([a, b])
        assert total.correct_chars == 60
        assert total.total_chars == 70
        assert total.accuracy == 86
        assert total.wpm == 24
        assert total.time_elapsed == 30.0

    def test_combine_nothing(self):
        """No results combine to the empty stats."""
        assert combine_stats([]) == TypingStats()

    def test_wpm_series(self):
        """One value per chunk, as floats."""
        assert wpm_series([TypingStats(wpm=3), TypingStats(wpm=7)]) == [3.0, 7.0]
