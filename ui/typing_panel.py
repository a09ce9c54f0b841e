from __future__ import annotations
from html import escape

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QProgressBar, QSizePolicy

from app.calculation import CharMark, char_marks


class TypingPanel(QWidget):
    """
    Renders the active chunk and turns key presses into full input values.
    Holds no scoring logic: every change goes out through inputChanged and the
    numbers come back through show_stats().
    """

    inputChanged = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 30, 0, 30)
        root.setSpacing(24)

        self.lblProgress = QLabel("", self)
        self.lblProgress.setObjectName("lblProgress")
        self.lblProgress.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblProgress)

        self.barChunk = QProgressBar(self)
        self.barChunk.setRange(0, 100)
        self.barChunk.setTextVisible(False)
        self.barChunk.setFixedHeight(6)
        root.addWidget(self.barChunk)

        stats = QHBoxLayout()
        stats.setSpacing(40)
        self.lblWPM = QLabel("0 WPM", self)
        self.lblWPM.setObjectName("lblWPM")
        self.lblAcc = QLabel("100 %", self)
        self.lblAcc.setObjectName("lblAcc")
        self.lblCorrect = QLabel("0 correct", self)
        self.lblErrors = QLabel("0 errors", self)
        for lab in (self.lblWPM, self.lblAcc, self.lblCorrect, self.lblErrors):
            lab.setAlignment(Qt.AlignCenter)
            stats.addWidget(lab)
        root.addLayout(stats)

        self.lblLine = QLabel("", self)
        self.lblLine.setObjectName("lblLine")
        self.lblLine.setTextFormat(Qt.RichText)
        self.lblLine.setWordWrap(True)
        self.lblLine.setAlignment(Qt.AlignCenter)
        self.lblLine.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.lblLine.setMinimumWidth(900)
        self.lblLine.setMaximumWidth(1100)
        self.lblLine.setMinimumHeight(140)
        self.lblLine.setStyleSheet("font-size: 28px; line-height: 1.35;")
        root.addWidget(self.lblLine, stretch=1, alignment=Qt.AlignHCenter)

        self.lblHint = QLabel("Start typing to begin.", self)
        self.lblHint.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblHint)

        self._reference = ""
        self._typed = ""
        self._frozen = False
        self._caret_on = True
        self._caret_timer = QTimer(self)
        self._caret_timer.setInterval(500)
        self._caret_timer.timeout.connect(self._toggle_caret)
        self._caret_timer.start()

        self._colors = {
            "ok": "#22c55e",
            "err": "#ef4444",
            "mut": "#9aa1a9",
            "caret": "#eab308",
        }

    @Slot(object, object)
    def show_chunk(self, chunk, progress):
        self._reference = chunk.text
        self._typed = ""
        self._frozen = False
        self.lblProgress.setText(
            f"Page {progress.page_number} of {progress.page_count}  ·  "
            f"Chunk {progress.chunk_position} of {progress.chunks_on_page}  ·  "
            f"{progress.percent}% of chapter"
        )
        self.lblHint.setText("Start typing to begin.")
        self._render()
        self.setFocus()

    @Slot(object)
    def show_stats(self, stats):
        self.lblWPM.setText(f"{stats.wpm} WPM")
        self.lblAcc.setText(f"{stats.accuracy} %")
        self.lblCorrect.setText(f"{stats.correct_chars} correct")
        self.lblErrors.setText(f"{stats.incorrect_chars} errors")

    def freeze(self, message: str = "Chunk completed!"):
        self._frozen = True
        self.lblHint.setText(message)
        self._render()

    def clear_input(self):
        self._typed = ""
        self._frozen = False
        self.lblHint.setText("Start typing to begin.")
        self._render()

    def show_message(self, text: str):
        self._reference = ""
        self._typed = ""
        self._frozen = True
        self.lblLine.setText(escape(text))
        self.lblHint.setText("")
        self.barChunk.setValue(0)

    def keyPressEvent(self, ev):
        if self._frozen or not self._reference:
            return super().keyPressEvent(ev)
        if ev.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
            return super().keyPressEvent(ev)

        if ev.key() == Qt.Key_Backspace:
            candidate = self._typed[:-1]
        else:
            t = ev.text()
            if not t or t < " ":
                return super().keyPressEvent(ev)
            candidate = self._typed + t

        # never let the caret run past the end of the chunk
        if len(candidate) > len(self._reference) or candidate == self._typed:
            return
        self._typed = candidate
        self._render()
        self.inputChanged.emit(candidate)

    def _toggle_caret(self):
        self._caret_on = not self._caret_on
        if not self._frozen and self._reference:
            self._render()

    def _render(self):
        ref = self._reference
        if not ref:
            return
        self.barChunk.setValue(round(len(self._typed) / len(ref) * 100))
        parts: list[str] = []
        for ch, mark in zip(ref, char_marks(ref, self._typed)):
            glyph = escape(ch) if ch != " " else "&nbsp;"
            if mark is CharMark.CORRECT:
                parts.append(f'<span style="color:{self._colors["ok"]}">{glyph}</span>')
            elif mark is CharMark.INCORRECT:
                parts.append(
                    f'<span style="color:{self._colors["err"]};'
                    f'background:rgba(239,68,68,0.20)">{glyph}</span>'
                )
            elif mark is CharMark.CURRENT and self._caret_on and not self._frozen:
                parts.append(f'<span style="color:{self._colors["caret"]};'
                             f'text-decoration:underline">{glyph}</span>')
            else:
                parts.append(f'<span style="color:{self._colors["mut"]}">{glyph}</span>')
        self.lblLine.setText("".join(parts))
