# ui/main_window.py
import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QFileDialog, QMessageBox, QPushButton, QInputDialog,
)
from PySide6.QtCore import Qt

from app.config import Settings
from app.errors import DatabaseError
from core.reading_controller import ReadingController
from core.threads import ChapterLoadWorker, Workers
from services.paginator import paginate
from services.reading_session import ListPageSource
from ui.session_summary import ChapterSummary
from ui.typing_panel import TypingPanel
from utils.db_helper import (
    DatabasePageSource, insert_chunk_result, list_chapters, save_chapter,
)
from utils.file_handler import chapter_title_from_path, load_default_text

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: Settings):
        super().__init__()
        self.settings = settings
        self.setWindowTitle("Typereader")
        self.resize(1200, 720)

        self.controller = None
        self.chapter_id = None
        self.chapter_title = ""

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 40, 16, 16)
        root_v.setSpacing(24)
        self._build_top_bar(root_v)

        self.panel = TypingPanel(self)
        panel_h = QHBoxLayout()
        panel_h.addStretch(1)
        panel_h.addWidget(self.panel, 1)
        panel_h.addStretch(1)
        root_v.addLayout(panel_h, 1)
        self.setCentralWidget(root)
        self.menuBar().setVisible(False)

        self._open_source(
            ListPageSource(paginate(load_default_text(), settings.pagination)),
            title="Sample passage",
            chapter_id=None,
        )

    # ---------------- Top Bar ----------------
    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("TopBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 16, 14, 16)
        h.setSpacing(10)

        for text, handler in [
            ("Load chapter…", self._on_load),
            ("Library…", self._on_library),
            ("Restart chunk", self._on_restart),
            ("Previous page", self._on_prev_page),
            ("Next page", self._on_next_page),
        ]:
            btn = QPushButton(text, bar)
            btn.clicked.connect(handler)
            btn.setObjectName("TopBtn")
            # keep keyboard focus on the typing panel
            btn.setFocusPolicy(Qt.NoFocus)
            h.addWidget(btn)
        h.addStretch(1)
        parent_layout.addWidget(bar)

    # ---------------- Session wiring ----------------
    def _open_source(self, source, title, chapter_id):
        if self.controller is not None:
            self.controller.dispose()
            self.panel.inputChanged.disconnect(self.controller.submit_input)
            self.controller.deleteLater()

        self.chapter_id = chapter_id
        self.chapter_title = title

        c = ReadingController(source, self.settings.session, parent=self)
        c.chunkLoaded.connect(self.panel.show_chunk)
        c.statsChanged.connect(self.panel.show_stats)
        c.chunkCompleted.connect(self._on_chunk_completed)
        c.pageCompleted.connect(self._on_page_completed)
        c.chapterFinished.connect(self._on_chapter_finished)
        self.panel.inputChanged.connect(c.submit_input)
        self.controller = c
        self.setWindowTitle(f"Typereader — {title}")
        c.start()

    def _on_chunk_completed(self, result):
        self.panel.freeze()
        if self.chapter_id is None:
            return
        try:
            insert_chunk_result(self.chapter_id, result, self.settings.db_path)
        except DatabaseError as e:
            logger.exception("Could not save chunk result")
            QMessageBox.warning(self, "Progress", f"Could not save progress: {e}")

    def _on_page_completed(self, page_number, stats):
        self.statusBar().showMessage(
            f"Page {page_number} done: {stats.wpm} WPM, {stats.accuracy}% accuracy", 5000
        )

    def _on_chapter_finished(self):
        self.panel.show_message("Chapter complete.")
        # this run only; the store keeps every attempt as history
        results = self.controller.run_results()
        if results:
            ChapterSummary(self.chapter_title, results, self).exec()

    # ---------------- Controls ----------------
    def _on_restart(self):
        if self.controller is not None:
            self.controller.restart_chunk()
            self.panel.clear_input()

    def _on_prev_page(self):
        if self.controller is not None:
            self.controller.previous_page()

    def _on_next_page(self):
        if self.controller is not None and not self.controller.next_page():
            self.statusBar().showMessage("Already on the last page", 3000)

    # ---------------- Chapter Loading ----------------
    def _on_load(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open chapter", "", "Text (*.txt)")
        if not path:
            return
        worker = ChapterLoadWorker(path, self.settings.pagination)
        worker.signals.loaded.connect(self._on_chapter_loaded)
        worker.signals.failed.connect(self._on_load_failed)
        Workers.pool.start(worker)

    def _on_chapter_loaded(self, path, raw_text, pages):
        if not pages:
            QMessageBox.information(self, "Load chapter", "That file has no text to type.")
            return
        title = chapter_title_from_path(path)
        try:
            chapter_id = save_chapter(title, raw_text, pages, self.settings.db_path)
            source = DatabasePageSource(chapter_id, self.settings.db_path)
        except DatabaseError as e:
            logger.exception("Could not store chapter %s", path)
            QMessageBox.warning(self, "Load chapter", f"Could not store chapter: {e}")
            return
        self._open_source(source, title, chapter_id)

    def _on_load_failed(self, msg):
        logger.warning("Chapter load failed: %s", msg)
        QMessageBox.warning(self, "Load chapter", msg)

    def _on_library(self):
        try:
            chapters = list_chapters(self.settings.db_path)
        except DatabaseError as e:
            QMessageBox.warning(self, "Library", str(e))
            return
        if not chapters:
            QMessageBox.information(self, "Library", "No chapters imported yet.")
            return
        labels = [f'{c["id"]}: {c["title"]} ({c["word_count"]} words)' for c in chapters]
        choice, ok = QInputDialog.getItem(self, "Library", "Chapter:", labels, 0, False)
        if not ok:
            return
        chapter = chapters[labels.index(choice)]
        try:
            source = DatabasePageSource(chapter["id"], self.settings.db_path)
        except DatabaseError as e:
            QMessageBox.warning(self, "Library", str(e))
            return
        self._open_source(source, chapter["title"], chapter["id"])

    def closeEvent(self, ev):
        if self.controller is not None:
            self.controller.dispose()
        super().closeEvent(ev)
