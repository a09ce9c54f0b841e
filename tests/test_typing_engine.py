"""Tests for the per-chunk typing state machine."""

from app.state import SessionPhase
from services.typing_engine import TypingSession


class TestPhases:
    """Tests for Idle -> InProgress -> Complete transitions."""

    def test_starts_idle(self, clock):
        """A fresh session has no start time."""
        session = TypingSession("cat", clock=clock)
        assert session.phase is SessionPhase.IDLE
        assert session.state.start_time is None

    def test_first_input_latches_start(self, clock):
        """The first accepted input sets the start time."""
        session = TypingSession("cat", clock=clock)
        session.on_input("c")
        assert session.phase is SessionPhase.IN_PROGRESS
        assert session.state.start_time == clock.now

    def test_start_time_not_moved_later(self, clock):
        """Later inputs keep the original start time."""
        session = TypingSession("cat", clock=clock)
        session.on_input("c")
        start = clock.now
        clock.tick(3)
        session.on_input("ca")
        assert session.state.start_time == start

    def test_reset_returns_to_idle(self, clock):
        """reset() clears input, timer and completion."""
        session = TypingSession("cat", clock=clock)
        session.on_input("cat")
        session.reset("dog")
        assert session.phase is SessionPhase.IDLE
        assert session.reference_text == "dog"
        assert session.user_input == ""
        assert session.completion_stats is None

    def test_reset_keeps_text_by_default(self, clock):
        """reset() without text restarts the same chunk."""
        session = TypingSession("cat", clock=clock)
        session.on_input("ca")
        session.reset()
        assert session.reference_text == "cat"
        assert session.phase is SessionPhase.IDLE


class TestScoring:
    """Tests for live stats on input."""

    def test_exact_match(self, clock):
        """Typing the whole chunk is 100% and completes."""
        result = TypingSession("cat", clock=clock).on_input("cat")
        assert result.stats.accuracy == 100
        assert result.stats.correct_chars == 3
        assert result.completed is True

    def test_two_of_three_correct(self, clock):
        """'bat' against 'cat' matches at two of three positions."""
        result = TypingSession("cat", clock=clock).on_input("bat")
        assert result.stats.correct_chars == 2
        assert result.stats.accuracy == 67
        assert result.completed is False

    def test_only_last_char_correct(self, clock):
        """'xyt' against 'cat' is 1 of 3 correct, about 33%."""
        result = TypingSession("cat", clock=clock).on_input("xyt")
        assert result.stats.accuracy == 33
        assert result.completed is False

    def test_first_keystroke_wpm_zero(self, clock):
        """With no elapsed time WPM is 0, not a division error."""
        result = TypingSession("cat", clock=clock).on_input("c")
        assert result.stats.wpm == 0
        assert result.stats.time_elapsed == 0.0

    def test_wpm_counts_correct_chars_only(self, clock):
        """Incorrect keystrokes do not add to WPM."""
        session = TypingSession("abcdefghij", clock=clock)
        session.on_input("a")
        clock.tick(6)
        result = session.on_input("abcdexxxxx")
        # 5 correct chars = 1 word in 0.1 minutes
        assert result.stats.wpm == 10
        assert result.stats.incorrect_chars == 5

    def test_backspace_rescores(self, clock):
        """Retyping an earlier character changes its correctness."""
        session = TypingSession("cat", clock=clock)
        session.on_input("x")
        assert session.on_input("xa").stats.incorrect_chars == 1
        session.on_input("")
        result = session.on_input("c")
        assert result.stats.correct_chars == 1
        assert result.stats.incorrect_chars == 0

    def test_completion_is_case_sensitive(self, clock):
        """'Cat' does not complete 'cat'."""
        result = TypingSession("cat", clock=clock).on_input("Cat")
        assert result.completed is False


class TestOvertype:
    """Tests for input longer than the chunk."""

    def test_overtype_rejected(self, clock):
        """'cats' against 'cat' leaves state unchanged."""
        session = TypingSession("cat", clock=clock)
        session.on_input("ca")
        before = (session.user_input, session.state.start_time,
                  session.state.correct_chars, session.state.incorrect_chars, session.completed)
        result = session.on_input("cats")
        after = (session.user_input, session.state.start_time,
                 session.state.correct_chars, session.state.incorrect_chars, session.completed)
        assert result.accepted is False
        assert before == after

    def test_overtype_does_not_start_timer(self, clock):
        """A rejected first input leaves the session idle."""
        session = TypingSession("cat", clock=clock)
        session.on_input("cats")
        assert session.phase is SessionPhase.IDLE


class TestCompletion:
    """Tests for single-fire completion."""

    def test_fires_once(self, clock):
        """Further input after completion never completes again."""
        session = TypingSession("cat", clock=clock)
        assert session.on_input("cat").completed is True
        assert session.on_input("cat").completed is False
        assert session.on_input("ca").completed is False

    def test_frozen_after_completion(self, clock):
        """Input after completion is ignored."""
        session = TypingSession("cat", clock=clock)
        session.on_input("cat")
        result = session.on_input("ca")
        assert result.accepted is False
        assert session.user_input == "cat"
        assert session.phase is SessionPhase.COMPLETE

    def test_snapshot_is_completion_time(self, clock):
        """Stats after completion are the ones taken at completion."""
        session = TypingSession("abcde", clock=clock)
        session.on_input("a")
        clock.tick(6)
        done = session.on_input("abcde").stats
        clock.tick(60)
        assert session.stats() == done
        assert session.completion_stats == done

    def test_fires_again_after_reset(self, clock):
        """A reset chunk can complete again."""
        session = TypingSession("cat", clock=clock)
        session.on_input("cat")
        session.reset()
        assert session.on_input("cat").completed is True
