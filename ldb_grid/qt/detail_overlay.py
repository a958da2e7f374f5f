"""Overlay panel that shows every field of one row."""

import logging
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QColor, QKeyEvent, QKeySequence, QMouseEvent, QPainter
from PyQt5.QtWidgets import (
    QApplication,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ldb_grid.events import CANCEL_KEY
from ldb_grid.projections import DetailOverlay

logger = logging.getLogger(__name__)

_BACKDROP = QColor(0, 0, 0, 96)


def key_name(event: QKeyEvent) -> str:
    """Name of the pressed key as used by the key event stream."""
    if event.key() == Qt.Key.Key_Escape:
        return CANCEL_KEY
    return QKeySequence(event.key()).toString()


class RowDetailOverlay(QWidget):
    """Dimmed backdrop covering the parent with a centered detail panel.

    Signals:
        close_requested: The close button was pressed or the backdrop
            outside the panel was clicked.
        key_pressed: A key was pressed while the overlay had focus; the
            argument is the key name.

    Attributes:
        _panel: The frame holding the fields.
        _title: Label with the row title.
        _form: Form with one read-only editor per field.
        _detail: The overlay being shown.
    """

    close_requested = pyqtSignal()
    key_pressed = pyqtSignal(str)

    _panel: QFrame
    _title: QLabel
    _form: QFormLayout
    _detail: Optional[DetailOverlay]

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self._detail = None
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setup_ui()
        self.hide()

    def setup_ui(self) -> None:
        outer = QVBoxLayout(self)
        outer.setContentsMargins(40, 30, 40, 30)

        self._panel = QFrame(self)
        self._panel.setFrameShape(QFrame.Shape.StyledPanel)
        self._panel.setAutoFillBackground(True)
        outer.addWidget(self._panel)

        ly = QVBoxLayout(self._panel)
        self._title = QLabel(self._panel)
        font = self._title.font()
        font.setBold(True)
        self._title.setFont(font)
        ly.addWidget(self._title)

        scroll = QScrollArea(self._panel)
        scroll.setWidgetResizable(True)
        body = QWidget(scroll)
        self._form = QFormLayout(body)
        scroll.setWidget(body)
        ly.addWidget(scroll, 1)

        buttons = QHBoxLayout()
        bt_json = QPushButton("Copy as JSON", self._panel)
        bt_json.clicked.connect(self.copy_as_json)
        buttons.addWidget(bt_json)
        bt_yaml = QPushButton("Copy as YAML", self._panel)
        bt_yaml.clicked.connect(self.copy_as_yaml)
        buttons.addWidget(bt_yaml)
        buttons.addStretch(1)
        bt_close = QPushButton("Close", self._panel)
        bt_close.clicked.connect(self.close_requested.emit)
        buttons.addWidget(bt_close)
        ly.addLayout(buttons)

    @property
    def detail(self) -> Optional[DetailOverlay]:
        return self._detail

    def set_detail(self, detail: Optional[DetailOverlay]) -> None:
        """Show the given row, or hide the overlay for None."""
        if detail == self._detail:
            return
        self._detail = detail
        while self._form.rowCount() > 0:
            self._form.removeRow(0)
        if detail is None:
            self.hide()
            return

        self._title.setText(detail.title)
        for entry in detail.entries:
            editor = QPlainTextEdit(entry.text)
            editor.setReadOnly(True)
            lines = max(1, min(8, entry.text.count("\n") + 1))
            height = editor.fontMetrics().lineSpacing() * lines + 12
            editor.setFixedHeight(height)
            self._form.addRow(entry.column, editor)

        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())
        self.show()
        self.raise_()
        self.setFocus()

    def copy_as_json(self) -> None:
        if self._detail is None:
            return
        cb = QApplication.clipboard()
        if cb is not None:
            cb.setText(self._detail.as_json())

    def copy_as_yaml(self) -> None:
        if self._detail is None:
            return
        cb = QApplication.clipboard()
        if cb is not None:
            cb.setText(self._detail.as_yaml())

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.fillRect(self.rect(), _BACKDROP)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if not self._panel.geometry().contains(event.pos()):
            event.accept()
            self.close_requested.emit()
            return
        super().mousePressEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        self.key_pressed.emit(key_name(event))
        event.accept()
