# services/reading_session.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence
import logging

from app.calculation import round_half_up
from services.paginator import Chunk, Page

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    """Where pages come from once the current one is used up."""

    def page_count(self) -> int: ...

    def get_page(self, page_number: int) -> Optional[Page]: ...

    def chunks_before(self, page_number: int) -> int: ...

    def total_chunks(self) -> int: ...


class ListPageSource:
    def __init__(self, pages: Sequence[Page]):
        self._pages: List[Page] = list(pages)

    def page_count(self) -> int:
        return len(self._pages)

    def get_page(self, page_number: int) -> Optional[Page]:
        idx = page_number - 1
        return self._pages[idx] if 0 <= idx < len(self._pages) else None

    def chunks_before(self, page_number: int) -> int:
        return sum(len(p.chunks) for p in self._pages[:max(0, page_number - 1)])

    def total_chunks(self) -> int:
        return sum(len(p.chunks) for p in self._pages)


class AdvanceKind(Enum):
    NEXT_CHUNK = "next_chunk"
    NEXT_PAGE = "next_page"
    CHAPTER_DONE = "chapter_done"


@dataclass(frozen=True)
class Advance:
    kind: AdvanceKind
    chunk: Optional[Chunk] = None
    page_number: Optional[int] = None
    # page that was finished by this advance, for NEXT_PAGE / CHAPTER_DONE
    finished_page: Optional[int] = None


@dataclass(frozen=True)
class ReadingProgress:
    page_number: int
    page_count: int
    chunk_position: int
    chunks_on_page: int
    chunk_number: int
    total_chunks: int

    @property
    def percent(self) -> int:
        if self.total_chunks <= 0:
            return 0
        return round_half_up((self.chunk_number - 1) / self.total_chunks * 100)


class ReadingSession:
    """
    Cursor over a chapter's pages. Knows which chunk is active and how to move
    to the next one; pulls a new page from the source when a page runs out.
    """

    def __init__(self, source: PageSource, start_page: int = 1):
        self.source = source
        self.page: Optional[Page] = None
        self.chunk_index = 0
        self.finished = False
        self.go_to_page(start_page)

    @property
    def current_chunk(self) -> Optional[Chunk]:
        if self.page is None or self.finished:
            return None
        return self.page.chunks[self.chunk_index]

    @property
    def page_number(self) -> int:
        return self.page.page_number if self.page else 0

    def go_to_page(self, page_number: int) -> Optional[Chunk]:
        page = self.source.get_page(page_number)
        # skip pages with nothing to type
        while page is not None and not page.chunks:
            page_number += 1
            page = self.source.get_page(page_number)
        self.page = page
        self.chunk_index = 0
        self.finished = page is None
        if page is not None:
            logger.info("Now on page %d", page.page_number)
        return self.current_chunk

    def previous_page(self) -> Optional[Chunk]:
        if self.page is None or self.page.page_number <= 1:
            return None
        return self.go_to_page(self.page.page_number - 1)

    def advance(self) -> Advance:
        if self.page is None or self.finished:
            return Advance(AdvanceKind.CHAPTER_DONE)

        if self.chunk_index < len(self.page.chunks) - 1:
            self.chunk_index += 1
            return Advance(AdvanceKind.NEXT_CHUNK, self.current_chunk, self.page.page_number)

        done = self.page.page_number
        chunk = self.go_to_page(done + 1)
        if chunk is None:
            logger.info("Chapter finished after page %d", done)
            return Advance(AdvanceKind.CHAPTER_DONE, finished_page=done)
        return Advance(AdvanceKind.NEXT_PAGE, chunk, self.page.page_number, finished_page=done)

    def progress(self) -> ReadingProgress:
        count = self.source.page_count()
        total = self.source.total_chunks()
        before = self.source.chunks_before(self.page_number)

        if self.page is None:
            return ReadingProgress(count, count, 0, 0, total + 1, total)
        return ReadingProgress(
            page_number=self.page.page_number,
            page_count=count,
            chunk_position=self.chunk_index + 1,
            chunks_on_page=len(self.page.chunks),
            chunk_number=before + self.chunk_index + 1,
            total_chunks=total,
        )
