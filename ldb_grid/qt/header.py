"""Horizontal header with per-column filter editors and resize handles.

The header does not resize sections by itself. A press on a section edge
emits `resize_started`, subsequent moves and the release are reported
through `pointer_moved` and `pointer_released`, and a double click on an
edge emits `reset_requested`. The owner decides the widths and applies
them back.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, cast

from PyQt5.QtCore import QSize, Qt, pyqtSignal
from PyQt5.QtGui import QMouseEvent
from PyQt5.QtWidgets import QHeaderView, QLineEdit, QWidget

logger = logging.getLogger(__name__)

HANDLE_MARGIN = 4
FILTER_PLACEHOLDER = "Filter"


class GridHeader(QHeaderView):
    """QHeaderView with embedded per-column filter editors.

    Editors are aligned to header sections and follow moves/resizes. They
    are only shown while the column filter panel is visible.

    Signals:
        resize_started: (column, current width, x) on a press over a
            section edge.
        pointer_moved: (x) while a resize is in progress.
        pointer_released: (x) when the resize ends.
        reset_requested: (column) on a double click over a section edge.

    Attributes:
        _editors: One editor per filterable column.
        _on_change: Called with (column, text) when an editor changes.
        _filter_height: Height reserved for the editors.
        _filters_visible: Whether the editors are shown.
        _resizing: A resize press is being tracked.
    """

    resize_started = pyqtSignal(int, int, int)
    pointer_moved = pyqtSignal(int)
    pointer_released = pyqtSignal(int)
    reset_requested = pyqtSignal(int)

    _editors: List[QLineEdit]
    _on_change: Optional[Callable[[int, str], None]]
    _filter_height: int
    _filters_visible: bool
    _resizing: bool

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(Qt.Orientation.Horizontal, parent)
        self._editors = []
        self._on_change = None
        self._filter_height = 24
        self._filters_visible = False
        self._resizing = False

        self.setDefaultAlignment(
            cast(
                Qt.AlignmentFlag,
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
            )
        )
        self.setSectionsClickable(True)
        self.setMouseTracking(True)
        self.sectionResized.connect(self._adjust_positions)
        self.sectionMoved.connect(lambda *_: self._adjust_positions())
        if parent and hasattr(parent, "horizontalScrollBar"):
            parent.horizontalScrollBar().valueChanged.connect(
                self._adjust_positions
            )

    def sizeHint(self) -> QSize:  # type: ignore[override]
        s = super().sizeHint()
        if self._filters_visible:
            s.setHeight(s.height() + self._filter_height)
        return s

    def init_filters(
        self,
        headers: List[str],
        on_text_changed: Callable[[int, str], None],
    ) -> None:
        """Create one editor per column.

        Args:
            headers: Column names; sections beyond these get no editor.
            on_text_changed: Called with (column, text) on every edit.
        """
        self._on_change = on_text_changed
        self._clear_editors()
        count = min(self.count(), len(headers))
        for col in range(count):
            ed = QLineEdit(self)
            ed.setClearButtonEnabled(True)
            ed.setPlaceholderText(f"{FILTER_PLACEHOLDER} [{headers[col]}]")
            ed.textChanged.connect(
                lambda text, c=col: (
                    self._on_change and self._on_change(c, text)
                )
            )
            self._editors.append(ed)
        self._adjust_positions()

    def set_filter_texts(self, texts: Dict[int, str]) -> None:
        """Show the given texts without reporting them back."""
        for col, ed in enumerate(self._editors):
            text = texts.get(col, "")
            if ed.text() != text:
                ed.blockSignals(True)
                ed.setText(text)
                ed.blockSignals(False)

    def filter_editor(self, column: int) -> QLineEdit:
        return self._editors[column]

    def set_filters_visible(self, visible: bool) -> None:
        if visible == self._filters_visible:
            return
        self._filters_visible = visible
        self.updateGeometry()
        self._adjust_positions()

    def _clear_editors(self) -> None:
        for i_ed, ed in enumerate(self._editors):
            try:
                ed.deleteLater()
            except RuntimeError:
                logger.exception("Failed to delete editor %d", i_ed)
        self._editors = []

    def _adjust_positions(self, *args: Any) -> None:
        y = self.height() - self._filter_height + 1
        for col, ed in enumerate(self._editors):
            if not self._filters_visible or self.isSectionHidden(col):
                ed.hide()
                continue
            ed.show()
            x = self.sectionViewportPosition(col)
            w = self.sectionSize(col)
            ed.setGeometry(x + 2, y, max(0, w - 4), self._filter_height - 2)

    def handle_at(self, x: int) -> int:
        """Logical index of the section whose right edge is under `x`.

        Returns:
            The section, or -1 if `x` is not over a resize handle.
        """
        col = self.logicalIndexAt(x)
        if col < 0:
            return -1
        left = self.sectionViewportPosition(col)
        right = left + self.sectionSize(col)
        if right - x <= HANDLE_MARGIN:
            return col
        visual = self.visualIndex(col)
        if x - left <= HANDLE_MARGIN and visual > 0:
            return self.logicalIndex(visual - 1)
        return -1

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        col = self.handle_at(event.pos().x())
        if event.button() == Qt.MouseButton.LeftButton and col >= 0:
            self._resizing = True
            self.resize_started.emit(
                col, self.sectionSize(col), event.pos().x()
            )
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self._resizing:
            self.pointer_moved.emit(event.pos().x())
            event.accept()
            return
        if self.handle_at(event.pos().x()) >= 0:
            self.setCursor(Qt.CursorShape.SplitHCursor)
        else:
            self.unsetCursor()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if self._resizing:
            self._resizing = False
            self.pointer_released.emit(event.pos().x())
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(  # noqa: N802
        self, event: QMouseEvent
    ) -> None:
        col = self.handle_at(event.pos().x())
        if col >= 0:
            self.reset_requested.emit(col)
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._adjust_positions()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._adjust_positions()
