"""Item delegate that draws empty values in a muted style."""

from PyQt5.QtCore import QModelIndex
from PyQt5.QtGui import QColor, QPainter, QPalette
from PyQt5.QtWidgets import (
    QStyle,
    QStyledItemDelegate,
    QStyleOptionViewItem,
)

from ldb_grid.qt.models import NULL_ROLE

_MUTED_TEXT = QColor(128, 128, 128)


class MutedNullDelegate(QStyledItemDelegate):
    """Paint cells flagged through `NULL_ROLE` as italic grey text.

    None values have an empty label so only the style changes for them;
    the "Empty" placeholder of the transposed grid is drawn this way.
    """

    def paint(
        self,
        painter: QPainter,
        option: QStyleOptionViewItem,
        index: QModelIndex,
    ) -> None:
        if not index.isValid() or not index.data(NULL_ROLE):
            super().paint(painter, option, index)
            return

        opt = QStyleOptionViewItem(option)
        self.initStyleOption(opt, index)
        pal = opt.palette
        pal.setColor(
            QPalette.ColorGroup.Normal,
            QPalette.ColorRole.Text,
            _MUTED_TEXT,
        )
        opt.palette = pal
        font = opt.font
        font.setItalic(True)
        opt.font = font
        style = opt.widget.style() if opt.widget else None
        if style is None:
            super().paint(painter, option, index)
            return
        style.drawControl(
            QStyle.ControlElement.CE_ItemViewItem, opt, painter, opt.widget
        )
