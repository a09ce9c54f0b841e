"""Shared test fixtures for Typereader tests."""

import pytest
from PySide6.QtCore import QCoreApplication

from app.config import PaginationConfig
from services.paginator import paginate


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def qapp():
    """A core application so Qt timers and queued signals can run."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def small_config() -> PaginationConfig:
    return PaginationConfig(words_per_chunk=6, max_chunk_chars=40, chunks_per_page=2)


@pytest.fixture
def chapter_text() -> str:
    return (
        "The cat sat. The dog ran far away.\n\n"
        "A bird sang a song. Rain fell all night long. Morning came.\n\n\n\n"
        "The end."
    )


@pytest.fixture
def chapter_pages(chapter_text, small_config):
    return paginate(chapter_text, small_config)


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "data" / "test.db")
