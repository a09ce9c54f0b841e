# services/paginator.py
"""
Chapter segmentation: raw text -> sentences -> chunks -> pages.

Everything here is pure. The same text and config always produce the same
pages, so a chapter can be paginated once at import time and the result
stored and replayed.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging
import re

from app.calculation import SENTENCE_TERMINALS, count_words
from app.config import PaginationConfig

logger = logging.getLogger(__name__)

_PARAGRAPH_RUNS = re.compile(r"\n{3,}")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_LINE_WRAP = re.compile(r"[ \t]*\n[ \t]*")
_SENTENCE_SPLIT = re.compile(r"(?<=[%s])\s+" % re.escape("".join(sorted(SENTENCE_TERMINALS))))


@dataclass(frozen=True)
class Sentence:
    text: str
    ends_paragraph: bool = False

    @property
    def word_count(self) -> int:
        return count_words(self.text)


@dataclass(frozen=True)
class Chunk:
    id: int
    text: str
    word_count: int
    # sentence indexes (within this chunk) that close a paragraph
    paragraph_breaks: Tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "wordCount": self.word_count,
            "paragraphBreaks": list(self.paragraph_breaks),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Chunk":
        return cls(
            id=int(d["id"]),
            text=str(d["text"]),
            word_count=int(d["wordCount"]),
            paragraph_breaks=tuple(int(i) for i in d.get("paragraphBreaks", ())),
        )


@dataclass(frozen=True)
class Page:
    page_number: int
    chunks: Tuple[Chunk, ...] = field(default_factory=tuple)

    @property
    def id(self) -> int:
        return self.page_number

    @property
    def word_count(self) -> int:
        return sum(c.word_count for c in self.chunks)

    def to_dict(self) -> dict:
        return {
            "pageNumber": self.page_number,
            "chunks": [c.to_dict() for c in self.chunks],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Page":
        return cls(
            page_number=int(d["pageNumber"]),
            chunks=tuple(Chunk.from_dict(c) for c in d.get("chunks", [])),
        )


def normalize_text(raw_text: str) -> str:
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    return _PARAGRAPH_RUNS.sub("\n\n", text).strip()


def split_sentences(raw_text: str) -> List[Sentence]:
    """
    Split text into sentences on . ! ? followed by whitespace.
    The last sentence of every paragraph is tagged with ends_paragraph.
    """
    sentences: List[Sentence] = []
    text = normalize_text(raw_text or "")
    if not text:
        return sentences

    for paragraph in _PARAGRAPH_SPLIT.split(text):
        # hard wraps inside a paragraph are layout, not content
        paragraph = _LINE_WRAP.sub(" ", paragraph).strip()
        if not paragraph:
            continue
        parts = [p.strip() for p in _SENTENCE_SPLIT.split(paragraph)]
        parts = [p for p in parts if p]
        for i, part in enumerate(parts):
            sentences.append(Sentence(part, ends_paragraph=(i == len(parts) - 1)))
    return sentences


def build_chunks(sentences: Sequence[Sentence], config: PaginationConfig) -> List[Chunk]:
    """
    Greedy accumulation: a sentence joins the open chunk unless that would
    push it past words_per_chunk or max_chunk_chars. Sentences are never
    split, so a single oversized sentence becomes a chunk of its own.
    """
    chunks: List[Chunk] = []
    buf: List[Sentence] = []
    buf_words = 0
    buf_chars = 0

    def seal():
        breaks = tuple(i for i, s in enumerate(buf) if s.ends_paragraph)
        chunks.append(Chunk(
            id=len(chunks) + 1,
            text=" ".join(s.text for s in buf),
            word_count=buf_words,
            paragraph_breaks=breaks,
        ))

    for sentence in sentences:
        words = sentence.word_count
        joined_chars = buf_chars + (1 if buf else 0) + len(sentence.text)
        too_many_words = buf_words + words > config.words_per_chunk
        too_long = joined_chars > config.max_chunk_chars

        if buf and (too_many_words or too_long):
            seal()
            buf, buf_words, buf_chars = [sentence], words, len(sentence.text)
        else:
            buf.append(sentence)
            buf_words += words
            buf_chars = joined_chars

    if buf:
        seal()
    return chunks


def group_pages(chunks: Sequence[Chunk], chunks_per_page: int) -> List[Page]:
    pages: List[Page] = []
    for start in range(0, len(chunks), chunks_per_page):
        pages.append(Page(
            page_number=len(pages) + 1,
            chunks=tuple(chunks[start:start + chunks_per_page]),
        ))
    return pages


def paginate(raw_text: str, config: Optional[PaginationConfig] = None) -> List[Page]:
    """
    Turn a chapter's raw text into pages of typing chunks.
    Empty or whitespace-only text yields an empty list; no string raises.
    """
    config = config or PaginationConfig()
    sentences = split_sentences(raw_text)
    chunks = build_chunks(sentences, config)
    pages = group_pages(chunks, config.chunks_per_page)
    logger.debug(
        "Paginated %d sentences into %d chunks on %d pages",
        len(sentences), len(chunks), len(pages),
    )
    return pages


def next_page(pages: Sequence[Page], current_page_number: int) -> Optional[Page]:
    # page numbers are 1-indexed, so the next page sits at index == current
    idx = current_page_number
    return pages[idx] if 0 <= idx < len(pages) else None


def previous_page(pages: Sequence[Page], current_page_number: int) -> Optional[Page]:
    idx = current_page_number - 2
    return pages[idx] if 0 <= idx < len(pages) else None


def all_chunks(pages: Sequence[Page]) -> List[Chunk]:
    return [c for p in pages for c in p.chunks]


def total_words(pages: Sequence[Page]) -> int:
    return sum(p.word_count for p in pages)
