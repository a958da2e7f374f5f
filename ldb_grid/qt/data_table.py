"""Data grid widget: toolbar, row and transposed tables, detail overlay."""

import logging
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from PyQt5.QtCore import QModelIndex, Qt
from PyQt5.QtGui import QKeyEvent
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QButtonGroup,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QStackedWidget,
    QTableView,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from ldb_grid.composer import GridStatus, ViewComposer
from ldb_grid.events import KeyEvent, PointerEvent, PointerKind
from ldb_grid.prefs import Density, PreferenceStore, ViewMode
from ldb_grid.projections import (
    LOADING_MESSAGE,
    NO_DATA_MESSAGE,
    summary_text,
)
from ldb_grid.qt.cell_delegate import MutedNullDelegate
from ldb_grid.qt.detail_overlay import RowDetailOverlay, key_name
from ldb_grid.qt.header import GridHeader
from ldb_grid.qt.models import (
    ROW_INDEX_ROLE,
    RowTableModel,
    TransposedTableModel,
)
from ldb_grid.sorting import SortDirection
from ldb_grid.table_data import TableData

logger = logging.getLogger(__name__)
VERBOSE = 10

ROW_HEIGHTS = {Density.STANDARD: 30, Density.COMPACT: 22}
ACTION_COLUMN_WIDTH = 36

PAGE_MESSAGE = 0
PAGE_ROWS = 1
PAGE_COLUMNS = 2


class DataTableWidget(QWidget):
    """Interactive grid over one page of table rows.

    The widget only forwards user input to its `ViewComposer` and redraws
    itself whenever the composer reports a change.

    Attributes:
        composer: The state owner.

    Private Attributes:
        _stack: Message page, row table page and transposed table page.
        _row_view: Table view of the row projection.
        _row_model: Model behind `_row_view`.
        _header: Header of `_row_view`.
        _col_view: Table view of the transposed projection.
        _col_model: Model behind `_col_view`.
        _overlay: The row detail overlay.
        _shown_data: Table whose projection is currently in the models.
        _shown_key: Other inputs of that projection.
        _shown_columns: Columns the filter editors were created for.
    """

    composer: ViewComposer

    _stack: QStackedWidget
    _message: QLabel
    _empty_label: QLabel
    _footer: QLabel
    _row_view: QTableView
    _row_model: RowTableModel
    _header: GridHeader
    _col_view: QTableView
    _col_model: TransposedTableModel
    _overlay: RowDetailOverlay
    _global_filter: QLineEdit
    _bt_filters: QToolButton
    _mode_buttons: Dict[ViewMode, QToolButton]
    _density_buttons: Dict[Density, QToolButton]
    _shown_data: Optional[TableData]
    _shown_key: Optional[Tuple[Any, ...]]
    _shown_columns: Optional[Tuple[str, ...]]

    def __init__(
        self,
        store: PreferenceStore,
        parent: Optional[QWidget] = None,
    ) -> None:
        """Build the widget.

        Args:
            store: Where per-table view preferences are kept.
            parent: Optional parent widget.
        """
        super().__init__(parent)
        self.composer = ViewComposer(store=store)
        self._shown_data = None
        self._shown_key = None
        self._shown_columns = None
        self.setup_ui()
        self.composer.add_listener(self.refresh)
        self.destroyed.connect(self.composer.dispose)
        self.refresh()

    # Construction.

    def _toggle_group(
        self,
        ly: QHBoxLayout,
        label: str,
        items: Iterable[Tuple[Any, str]],
        on_pick: Callable[[Any], None],
    ) -> Dict[Any, QToolButton]:
        """Exclusive group of checkable tool buttons."""
        ly.addWidget(QLabel(label, self))
        group = QButtonGroup(self)
        group.setExclusive(True)
        buttons: Dict[Any, QToolButton] = {}
        for value, text in items:
            bt = QToolButton(self)
            bt.setText(text)
            bt.setCheckable(True)
            bt.clicked.connect(lambda _=False, v=value: on_pick(v))
            group.addButton(bt)
            ly.addWidget(bt)
            buttons[value] = bt
        return buttons

    def setup_ui(self) -> None:
        ly = QVBoxLayout(self)
        ly.setContentsMargins(2, 2, 2, 2)

        toolbar = QHBoxLayout()
        self._mode_buttons = self._toggle_group(
            toolbar,
            "View:",
            ((ViewMode.ROW, "Row"), (ViewMode.COLUMN, "Column")),
            self.composer.set_view_mode,
        )
        toolbar.addSpacing(12)
        self._density_buttons = self._toggle_group(
            toolbar,
            "Density:",
            (
                (Density.STANDARD, "Standard"),
                (Density.COMPACT, "Compact"),
            ),
            self.composer.set_density,
        )
        toolbar.addSpacing(12)
        self._global_filter = QLineEdit(self)
        self._global_filter.setClearButtonEnabled(True)
        self._global_filter.setPlaceholderText("Filter rows…")
        self._global_filter.textChanged.connect(
            self.composer.set_global_filter
        )
        toolbar.addWidget(self._global_filter, 1)
        self._bt_filters = QToolButton(self)
        self._bt_filters.setText("Column filters")
        self._bt_filters.setCheckable(True)
        self._bt_filters.toggled.connect(
            self.composer.set_column_filters_visible
        )
        toolbar.addWidget(self._bt_filters)
        ly.addLayout(toolbar)

        self._stack = QStackedWidget(self)
        self._message = QLabel(self._stack)
        self._message.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._stack.addWidget(self._message)

        rows_page = QWidget(self._stack)
        rows_ly = QVBoxLayout(rows_page)
        rows_ly.setContentsMargins(0, 0, 0, 0)
        self._row_view = QTableView(rows_page)
        self._row_model = RowTableModel(self._row_view)
        self._row_view.setModel(self._row_model)
        self._header = GridHeader(self._row_view)
        self._row_view.setHorizontalHeader(self._header)
        self._header.setModel(self._row_model)
        self._header.sectionClicked.connect(self._on_section_clicked)
        self._header.resize_started.connect(self._on_resize_started)
        self._header.pointer_moved.connect(
            lambda x: self.composer.pointer_events.emit(
                PointerEvent(PointerKind.MOVE, x)
            )
        )
        self._header.pointer_released.connect(
            lambda x: self.composer.pointer_events.emit(
                PointerEvent(PointerKind.RELEASE, x)
            )
        )
        self._header.reset_requested.connect(self._on_reset_requested)
        self._setup_view(self._row_view)
        self._row_view.clicked.connect(self._on_row_clicked)
        rows_ly.addWidget(self._row_view, 1)
        self._empty_label = QLabel(rows_page)
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        rows_ly.addWidget(self._empty_label)
        self._stack.addWidget(rows_page)

        self._col_view = QTableView(self._stack)
        self._col_model = TransposedTableModel(self._col_view)
        self._col_view.setModel(self._col_model)
        self._col_view.verticalHeader().hide()
        self._col_view.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.ResizeToContents
        )
        self._setup_view(self._col_view)
        self._stack.addWidget(self._col_view)
        ly.addWidget(self._stack, 1)

        self._footer = QLabel(self)
        ly.addWidget(self._footer)

        self._overlay = RowDetailOverlay(self)
        self._overlay.close_requested.connect(self.composer.close_detail)
        self._overlay.key_pressed.connect(
            lambda key: self.composer.key_events.emit(KeyEvent(key))
        )

    def _setup_view(self, view: QTableView) -> None:
        view.setItemDelegate(MutedNullDelegate(view))
        view.setSelectionBehavior(
            QAbstractItemView.SelectionBehavior.SelectRows
        )
        view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        view.setAlternatingRowColors(True)
        view.setSortingEnabled(False)
        view.setWordWrap(False)

    # Inputs.

    def set_table(self, db_path: str, table_name: str) -> None:
        self.composer.set_table(db_path, table_name)

    def set_data(
        self, data: Optional[TableData], loading: bool = False
    ) -> None:
        self.composer.set_data(data, loading)

    # User interaction.

    def _column_name(self, section: int) -> Optional[str]:
        data = self.composer.data
        if data is None or not 0 <= section < len(data.columns):
            return None
        return data.columns[section]

    def _on_section_clicked(self, section: int) -> None:
        name = self._column_name(section)
        if name is not None:
            self.composer.toggle_sort(name)

    def _on_resize_started(self, section: int, width: int, x: int) -> None:
        name = self._column_name(section)
        if name is not None:
            self.composer.begin_resize(name, width, x)

    def _on_reset_requested(self, section: int) -> None:
        name = self._column_name(section)
        if name is not None:
            self.composer.reset_column_width(name)

    def _on_column_filter(self, section: int, text: str) -> None:
        name = self._column_name(section)
        if name is not None:
            self.composer.set_column_filter(name, text)

    def _on_row_clicked(self, index: QModelIndex) -> None:
        if not self._row_model.is_action_column(index.column()):
            return
        row_index = index.data(ROW_INDEX_ROLE)
        if row_index is not None:
            self.composer.open_detail(int(row_index))

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if self.composer.key_events.emit(KeyEvent(key_name(event))):
            event.accept()
            return
        super().keyPressEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._overlay.setGeometry(self.rect())

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.composer.dispose()
        super().closeEvent(event)

    # Rendering.

    def refresh(self) -> None:
        """Bring every child widget in line with the composer state."""
        composer = self.composer
        prefs = composer.prefs
        session = composer.session

        self._mode_buttons[prefs.view_mode].setChecked(True)
        self._density_buttons[prefs.density].setChecked(True)
        if self._global_filter.text() != session.global_filter:
            self._global_filter.blockSignals(True)
            self._global_filter.setText(session.global_filter)
            self._global_filter.blockSignals(False)
        if self._bt_filters.isChecked() != session.column_filters_visible:
            self._bt_filters.blockSignals(True)
            self._bt_filters.setChecked(session.column_filters_visible)
            self._bt_filters.blockSignals(False)

        status = composer.status
        data = composer.data
        if status is not GridStatus.READY or data is None:
            self._message.setText(
                LOADING_MESSAGE
                if status is GridStatus.LOADING
                else NO_DATA_MESSAGE
            )
            self._stack.setCurrentIndex(PAGE_MESSAGE)
            self._footer.hide()
            self._overlay.set_detail(None)
            return

        self._footer.setText(summary_text(data))
        self._footer.show()
        height = ROW_HEIGHTS[prefs.density]
        for view in (self._row_view, self._col_view):
            view.verticalHeader().setDefaultSectionSize(height)

        if prefs.view_mode is ViewMode.ROW:
            self._refresh_rows(data)
            self._stack.setCurrentIndex(PAGE_ROWS)
        else:
            self._refresh_columns(data)
            self._stack.setCurrentIndex(PAGE_COLUMNS)

        self._overlay.set_detail(composer.detail_overlay())

    def _refresh_rows(self, data: TableData) -> None:
        session = self.composer.session
        key = (
            ViewMode.ROW,
            session.global_filter,
            tuple(sorted(session.column_filters.items())),
            session.sort_spec,
        )
        if data is not self._shown_data or key != self._shown_key:
            projection = self.composer.row_projection()
            self._row_model.set_projection(projection)
            self._shown_data = data
            self._shown_key = key
            logger.log(VERBOSE, "DataTableWidget: row model rebuilt")
            if projection is not None:
                self._empty_label.setText(projection.empty_message or "")
                self._empty_label.setVisible(
                    projection.empty_message is not None
                )

        columns = tuple(data.columns)
        if columns != self._shown_columns:
            self._header.init_filters(list(columns), self._on_column_filter)
            self._shown_columns = columns
        self._header.set_filter_texts(
            {
                i: session.column_filters.get(col, "")
                for i, col in enumerate(columns)
            }
        )
        self._header.set_filters_visible(session.column_filters_visible)

        spec = session.sort_spec
        if spec is not None and spec.column in columns:
            self._header.setSortIndicatorShown(True)
            self._header.setSortIndicator(
                columns.index(spec.column),
                (
                    Qt.SortOrder.AscendingOrder
                    if spec.direction is SortDirection.ASCENDING
                    else Qt.SortOrder.DescendingOrder
                ),
            )
        else:
            self._header.setSortIndicatorShown(False)

        widths = self.composer.prefs.column_widths
        for i, col in enumerate(columns):
            width = widths.get(col)
            if width is None:
                self._header.setSectionResizeMode(
                    i, QHeaderView.ResizeMode.ResizeToContents
                )
            else:
                self._header.setSectionResizeMode(
                    i, QHeaderView.ResizeMode.Fixed
                )
                self._header.resizeSection(i, width)
        if columns:
            self._header.setSectionResizeMode(
                len(columns), QHeaderView.ResizeMode.Fixed
            )
            self._header.resizeSection(len(columns), ACTION_COLUMN_WIDTH)

    def _refresh_columns(self, data: TableData) -> None:
        key = (ViewMode.COLUMN,)
        if data is not self._shown_data or key != self._shown_key:
            self._col_model.set_projection(
                self.composer.transposed_projection()
            )
            self._shown_data = data
            self._shown_key = key
            logger.log(VERBOSE, "DataTableWidget: transposed model rebuilt")
