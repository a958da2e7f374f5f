"""Qt item models over the composed projections."""

import logging
from typing import Optional

from PyQt5.QtCore import QAbstractTableModel, QModelIndex, Qt

from ldb_grid.projections import (
    FIELD_HEADER,
    RowProjection,
    TransposedProjection,
)

logger = logging.getLogger(__name__)

# True for cells whose value is None or for placeholder cells.
NULL_ROLE = Qt.ItemDataRole.UserRole + 1
# Original index of the row behind a cell of the row table.
ROW_INDEX_ROLE = Qt.ItemDataRole.UserRole + 2

DETAIL_ACTION_TEXT = "⋯"
DETAIL_ACTION_TIP = "Show all fields of this row"


class RowTableModel(QAbstractTableModel):
    """One line per filtered and sorted row plus a trailing detail column.

    Attributes:
        _projection: The projection being shown.
    """

    _projection: Optional[RowProjection]

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._projection = None

    @property
    def projection(self) -> Optional[RowProjection]:
        return self._projection

    def set_projection(self, projection: Optional[RowProjection]) -> None:
        self.beginResetModel()
        self._projection = projection
        self.endResetModel()

    @property
    def data_column_count(self) -> int:
        if self._projection is None:
            return 0
        return len(self._projection.headers)

    def is_action_column(self, column: int) -> bool:
        """True for the trailing column that opens the row detail."""
        return self.data_column_count > 0 and column == self.data_column_count

    def rowCount(
        self, parent: QModelIndex = QModelIndex()
    ) -> int:  # noqa: N802
        if parent.isValid() or self._projection is None:
            return 0
        return len(self._projection.lines)

    def columnCount(
        self, parent: QModelIndex = QModelIndex()
    ) -> int:  # noqa: N802
        if parent.isValid() or self.data_column_count == 0:
            return 0
        return self.data_column_count + 1

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        """Cell text, tooltip and the custom roles.

        Args:
            index: Model index.
            role: Qt role.
        """
        if not index.isValid() or self._projection is None:
            return None
        line = self._projection.lines[index.row()]
        if role == ROW_INDEX_ROLE:
            return line.original_index
        if self.is_action_column(index.column()):
            if role == Qt.ItemDataRole.DisplayRole:
                return DETAIL_ACTION_TEXT
            if role == Qt.ItemDataRole.ToolTipRole:
                return DETAIL_ACTION_TIP
            if role == Qt.ItemDataRole.TextAlignmentRole:
                return int(Qt.AlignmentFlag.AlignCenter)
            return None

        cell = line.cells[index.column()]
        if role == Qt.ItemDataRole.DisplayRole:
            return cell.text
        if role == Qt.ItemDataRole.ToolTipRole:
            return cell.tooltip or None
        if role == NULL_ROLE:
            return cell.is_null
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ):
        """Column names horizontally, 1-based original indexes vertically."""
        if role != Qt.ItemDataRole.DisplayRole or self._projection is None:
            return None
        if orientation == Qt.Orientation.Horizontal:
            if section < self.data_column_count:
                return self._projection.headers[section].name
            return ""
        if 0 <= section < len(self._projection.lines):
            return str(self._projection.lines[section].original_index + 1)
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable


class TransposedTableModel(QAbstractTableModel):
    """One line per field; the first column names the field and each
    following column is one loaded row, in original order.
    """

    _projection: Optional[TransposedProjection]

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._projection = None

    def set_projection(
        self, projection: Optional[TransposedProjection]
    ) -> None:
        self.beginResetModel()
        self._projection = projection
        self.endResetModel()

    def rowCount(
        self, parent: QModelIndex = QModelIndex()
    ) -> int:  # noqa: N802
        if parent.isValid() or self._projection is None:
            return 0
        return len(self._projection.lines)

    def columnCount(
        self, parent: QModelIndex = QModelIndex()
    ) -> int:  # noqa: N802
        if parent.isValid() or self._projection is None:
            return 0
        if not self._projection.lines:
            return 0
        return 1 + len(self._projection.lines[0].cells)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid() or self._projection is None:
            return None
        line = self._projection.lines[index.row()]
        if index.column() == 0:
            if role in (
                Qt.ItemDataRole.DisplayRole,
                Qt.ItemDataRole.ToolTipRole,
            ):
                return line.field
            return None
        cell = line.cells[index.column() - 1]
        if role == Qt.ItemDataRole.DisplayRole:
            return cell.text
        if role == Qt.ItemDataRole.ToolTipRole:
            return cell.tooltip or None
        if role == NULL_ROLE:
            return cell.is_null
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ):
        if (
            role != Qt.ItemDataRole.DisplayRole
            or orientation != Qt.Orientation.Horizontal
            or self._projection is None
        ):
            return None
        if section == 0:
            return FIELD_HEADER
        labels = self._projection.row_labels
        if 0 < section <= len(labels):
            return labels[section - 1]
        return ""

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
