"""Qt widgets of the data grid."""

from ldb_grid.qt.data_table import DataTableWidget
from ldb_grid.qt.detail_overlay import RowDetailOverlay
from ldb_grid.qt.header import GridHeader
from ldb_grid.qt.models import RowTableModel, TransposedTableModel

__all__ = [
    "DataTableWidget",
    "GridHeader",
    "RowDetailOverlay",
    "RowTableModel",
    "TransposedTableModel",
]
