# ui/session_summary.py
from __future__ import annotations
from typing import Sequence

from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QPushButton
import pyqtgraph as pg

from app.calculation import combine_stats, wpm_series
from app.state import ChunkResult
from utils.graph_helper import setup_wpm_plot, update_curve


class ChapterSummary(QDialog):
    """Totals for a finished chapter plus WPM per chunk."""

    def __init__(self, title: str, results: Sequence[ChunkResult], parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"Chapter Summary — {title}")
        self.resize(720, 420)

        stats = [r.stats for r in results]
        total = combine_stats(stats)

        root = QVBoxLayout(self)
        root.addWidget(QLabel(f"Chunks typed: {len(results)}"))
        root.addWidget(QLabel(f"WPM: {total.wpm}"))
        root.addWidget(QLabel(f"Accuracy: {total.accuracy}%"))
        root.addWidget(QLabel(f"Time: {total.time_elapsed:.1f}s"))

        plot = pg.PlotWidget()
        curve = setup_wpm_plot(plot, "#eab308")
        update_curve(curve, wpm_series(stats))
        root.addWidget(plot, stretch=1)

        btn = QPushButton("OK", self)
        btn.clicked.connect(self.accept)
        root.addWidget(btn)
