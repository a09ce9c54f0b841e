# core/threads.py
from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from app.config import PaginationConfig
from app.errors import TextLoadError
from services.paginator import paginate
from utils.file_handler import read_text_file


class ChapterLoadWorkerSignals(QObject):
    loaded = Signal(str, str, object)   # path, raw text, list[Page]
    failed = Signal(str)


class ChapterLoadWorker(QRunnable):
    """Read a text file and paginate it off the UI thread."""

    def __init__(self, path: str, config: PaginationConfig):
        super().__init__()
        self.path = path
        self.config = config
        self.signals = ChapterLoadWorkerSignals()

    def run(self):
        try:
            data = read_text_file(self.path)
        except TextLoadError as e:
            self.signals.failed.emit(str(e))
            return
        self.signals.loaded.emit(self.path, data, paginate(data, self.config))


class Workers:
    pool = QThreadPool.globalInstance()
