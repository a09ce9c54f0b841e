# core/reading_controller.py
from __future__ import annotations
from typing import Callable, Dict, List, Optional
import logging
import time

from PySide6.QtCore import QObject, Signal, Slot

from app.calculation import combine_stats
from app.config import SessionConfig
from app.state import ChunkResult, SessionPhase, TypingStats
from core.scheduler import AdvanceTimer
from services.reading_session import AdvanceKind, PageSource, ReadingSession
from services.typing_engine import TypingSession

logger = logging.getLogger(__name__)


class ReadingController(QObject):
    """
    Glue between the typing surface and the core.
    Input values come in through submit_input(); stats, completion and
    advancement go out as signals. The settle delay between chunks is an
    AdvanceTimer owned here and cancelled on restart or dispose.
    """

    statsChanged = Signal(object)          # TypingStats
    chunkLoaded = Signal(object, object)   # Chunk, ReadingProgress
    chunkCompleted = Signal(object)        # ChunkResult
    pageCompleted = Signal(int, object)    # page number, combined TypingStats
    chapterFinished = Signal()

    def __init__(
        self,
        source: PageSource,
        config: Optional[SessionConfig] = None,
        start_page: int = 1,
        clock: Callable[[], float] = time.monotonic,
        parent=None,
    ):
        super().__init__(parent)
        self.config = config or SessionConfig()
        self.reading = ReadingSession(source, start_page=start_page)
        self.engine = TypingSession(clock=clock)
        # keyed by chunk id so a retyped chunk replaces its earlier result
        self._page_results: Dict[int, ChunkResult] = {}
        self._run_results: Dict[int, ChunkResult] = {}
        self._disposed = False

        self.timer = AdvanceTimer(self.config.advance_delay_ms, parent=self)
        self.timer.fired.connect(self._on_advance)

    @property
    def current_chunk(self):
        return self.reading.current_chunk

    @property
    def phase(self) -> SessionPhase:
        return self.engine.phase

    def start(self):
        """Load the first chunk and announce it."""
        chunk = self.reading.current_chunk
        if chunk is None:
            self.chapterFinished.emit()
            return
        self._load(chunk)

    @Slot(str)
    def submit_input(self, value: str):
        if self._disposed or self.reading.current_chunk is None:
            return
        result = self.engine.on_input(value)
        if not result.accepted:
            return
        self.statsChanged.emit(result.stats)
        if result.completed:
            chunk = self.reading.current_chunk
            done = ChunkResult(chunk.id, self.reading.page_number, result.stats)
            self._page_results[chunk.id] = done
            self._run_results[chunk.id] = done
            self.chunkCompleted.emit(done)
            self.timer.arm()

    def restart_chunk(self):
        """Abandon the active chunk and type it again from scratch."""
        self.timer.cancel()
        self.engine.reset()
        self.statsChanged.emit(self.engine.stats())

    def go_to_page(self, page_number: int):
        self.timer.cancel()
        self._page_results.clear()
        chunk = self.reading.go_to_page(page_number)
        if chunk is None:
            self.chapterFinished.emit()
            return
        self._load(chunk)

    def dispose(self):
        self._disposed = True
        self.timer.cancel()

    def _load(self, chunk):
        self.engine.reset(chunk.text)
        self.chunkLoaded.emit(chunk, self.reading.progress())
        self.statsChanged.emit(self.engine.stats())

    def _on_advance(self):
        if self._disposed or not self.engine.completed:
            return
        step = self.reading.advance()
        if step.finished_page is not None:
            page_stats = combine_stats(r.stats for r in self._page_results.values())
            self._page_results.clear()
            logger.info("Page %d complete: %d wpm, %d%% accuracy",
                        step.finished_page, page_stats.wpm, page_stats.accuracy)
            self.pageCompleted.emit(step.finished_page, page_stats)

        if step.kind is AdvanceKind.CHAPTER_DONE:
            self.chapterFinished.emit()
            return
        self._load(step.chunk)

    def page_stats(self) -> TypingStats:
        return combine_stats(r.stats for r in self._page_results.values())

    def run_results(self) -> List[ChunkResult]:
        """Latest result per chunk typed with this controller, in chapter order."""
        return [self._run_results[k] for k in sorted(self._run_results)]

    def has_next_page(self) -> bool:
        r = self.reading
        return not r.finished and r.page_number < r.source.page_count()

    def next_page(self) -> bool:
        """Skip to the next page; never finishes the chapter."""
        if not self.has_next_page():
            return False
        self.go_to_page(self.reading.page_number + 1)
        return True

    def previous_page(self) -> bool:
        if self.reading.finished or self.reading.page_number <= 1:
            return False
        self.go_to_page(self.reading.page_number - 1)
        return True
