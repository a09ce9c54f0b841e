import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import List, Optional, Sequence

from app.errors import DatabaseError
from app.state import ChunkResult, TypingStats
from app.validation import sanitize_title
from services.paginator import Page, total_words

logger = logging.getLogger(__name__)

DB_PATH = "data/typereader.db"


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS chapters(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        raw_text TEXT NOT NULL,
        word_count INTEGER NOT NULL,
        page_count INTEGER NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """)
    conn.execute("""
    CREATE TABLE IF NOT EXISTS pages(
        chapter_id INTEGER NOT NULL,
        page_number INTEGER NOT NULL,
        chunk_count INTEGER NOT NULL,
        chunks_json TEXT NOT NULL,
        PRIMARY KEY(chapter_id, page_number),
        FOREIGN KEY(chapter_id) REFERENCES chapters(id)
    );
    """)
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        chapter_id INTEGER,
        page_number INTEGER,
        chunk_id INTEGER,
        wpm INTEGER,
        accuracy INTEGER,
        correct_chars INTEGER,
        incorrect_chars INTEGER,
        total_chars INTEGER,
        time_elapsed REAL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY(chapter_id) REFERENCES chapters(id)
    );
    """)


def get_conn(db_path: str = DB_PATH):
    folder = os.path.dirname(db_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(db_path)
    _ensure_schema(conn)
    return conn


@contextmanager
def _session(db_path: str):
    try:
        conn = get_conn(db_path)
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Progress store error on %s: %s", db_path, e)
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()


def save_chapter(title: str, raw_text: str, pages: Sequence[Page], db_path: str = DB_PATH) -> int:
    """Persist a chapter and its pagination; returns the chapter id."""
    with _session(db_path) as conn:
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO chapters(title, raw_text, word_count, page_count) VALUES (?,?,?,?)",
            (sanitize_title(title), raw_text, total_words(pages), len(pages)),
        )
        chapter_id = cur.lastrowid
        cur.executemany(
            "INSERT INTO pages(chapter_id, page_number, chunk_count, chunks_json) VALUES (?,?,?,?)",
            [
                (chapter_id, p.page_number, len(p.chunks), json.dumps(p.to_dict()["chunks"]))
                for p in pages
            ],
        )
    logger.info("Saved chapter %d (%d pages)", chapter_id, len(pages))
    return chapter_id


def list_chapters(db_path: str = DB_PATH) -> List[dict]:
    with _session(db_path) as conn:
        rows = conn.execute(
            "SELECT id, title, word_count, page_count FROM chapters ORDER BY id"
        ).fetchall()
    return [
        {"id": r[0], "title": r[1], "word_count": r[2], "page_count": r[3]}
        for r in rows
    ]


def load_page(chapter_id: int, page_number: int, db_path: str = DB_PATH) -> Optional[Page]:
    with _session(db_path) as conn:
        row = conn.execute(
            "SELECT chunks_json FROM pages WHERE chapter_id=? AND page_number=?",
            (chapter_id, page_number),
        ).fetchone()
    if row is None:
        return None
    return Page.from_dict({"pageNumber": page_number, "chunks": json.loads(row[0])})


def load_chapter_pages(chapter_id: int, db_path: str = DB_PATH) -> List[Page]:
    with _session(db_path) as conn:
        rows = conn.execute(
            "SELECT page_number, chunks_json FROM pages WHERE chapter_id=? ORDER BY page_number",
            (chapter_id,),
        ).fetchall()
    return [Page.from_dict({"pageNumber": n, "chunks": json.loads(js)}) for n, js in rows]


def insert_chunk_result(chapter_id: int, result: ChunkResult, db_path: str = DB_PATH):
    s = result.stats
    with _session(db_path) as conn:
        conn.execute(
            "INSERT INTO results(chapter_id, page_number, chunk_id, wpm, accuracy, "
            "correct_chars, incorrect_chars, total_chars, time_elapsed) VALUES (?,?,?,?,?,?,?,?,?)",
            (chapter_id, result.page_number, result.chunk_id, s.wpm, s.accuracy,
             s.correct_chars, s.incorrect_chars, s.total_chars, s.time_elapsed),
        )


def chapter_results(chapter_id: int, db_path: str = DB_PATH) -> List[ChunkResult]:
    with _session(db_path) as conn:
        rows = conn.execute(
            "SELECT chunk_id, page_number, wpm, accuracy, correct_chars, incorrect_chars, "
            "total_chars, time_elapsed FROM results WHERE chapter_id=? ORDER BY id",
            (chapter_id,),
        ).fetchall()
    return [
        ChunkResult(
            chunk_id=r[0],
            page_number=r[1],
            stats=TypingStats(wpm=r[2], accuracy=r[3], correct_chars=r[4],
                              incorrect_chars=r[5], total_chars=r[6], time_elapsed=r[7]),
        )
        for r in rows
    ]


class DatabasePageSource:
    """Pages of a stored chapter, fetched one at a time as reading advances."""

    def __init__(self, chapter_id: int, db_path: str = DB_PATH):
        self.chapter_id = chapter_id
        self.db_path = db_path
        with _session(db_path) as conn:
            rows = conn.execute(
                "SELECT chunk_count FROM pages WHERE chapter_id=? ORDER BY page_number",
                (chapter_id,),
            ).fetchall()
        self._chunk_counts = [r[0] for r in rows]

    def page_count(self) -> int:
        return len(self._chunk_counts)

    def get_page(self, page_number: int) -> Optional[Page]:
        if not 1 <= page_number <= len(self._chunk_counts):
            return None
        return load_page(self.chapter_id, page_number, self.db_path)

    def chunks_before(self, page_number: int) -> int:
        return sum(self._chunk_counts[:max(0, page_number - 1)])

    def total_chunks(self) -> int:
        return sum(self._chunk_counts)
