"""Renderable projections of the table state.

These records carry everything the presentation layer draws; they hold
text only, never widgets.
"""

import json
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from attrs import define

from ldb_grid.filtering import filter_rows
from ldb_grid.formatting import (
    format_cell_value,
    format_detail_value,
    format_tooltip_value,
)
from ldb_grid.sorting import SortDirection, SortSpec, sort_rows
from ldb_grid.table_data import TableData

LOADING_MESSAGE = "Loading data..."
NO_DATA_MESSAGE = "No data loaded."
EMPTY_TABLE_MESSAGE = "No data (or empty table)"
NO_MATCH_MESSAGE = "No rows match the current filters."
EMPTY_FIELD_PLACEHOLDER = "Empty"
FIELD_HEADER = "Field"


def row_label(row_index: int) -> str:
    """1-based label of a row in the original sequence."""
    return f"Row {row_index + 1}"


def summary_text(data: TableData) -> str:
    return (
        f"Showing first {data.row_count} rows. "
        f"Total rows: {data.total_rows}"
    )


@define(frozen=True)
class Cell:
    """One rendered cell.

    Attributes:
        text: Short label from `format_cell_value`.
        tooltip: Expanded text from `format_tooltip_value`.
        is_null: The underlying value is None or absent.
    """

    text: str
    tooltip: str
    is_null: bool


def make_cell(value: Any) -> Cell:
    return Cell(
        text=format_cell_value(value),
        tooltip=format_tooltip_value(value),
        is_null=value is None,
    )


@define(frozen=True)
class ColumnHeader:
    """Header of one column in the row projection.

    Attributes:
        name: Column name.
        width: Explicit width; None means intrinsic width.
        sort: Direction if this column is the sorted one.
        filter_text: Raw text of the column filter.
    """

    name: str
    width: Optional[int]
    sort: Optional[SortDirection]
    filter_text: str


@define(frozen=True)
class RowLine:
    """One visual row of the row projection.

    Attributes:
        original_index: Index of the row in the loaded rows; the row's
            detail action opens the overlay for this index.
        cells: One cell per column, in column order.
    """

    original_index: int
    cells: Tuple[Cell, ...]


@define(frozen=True)
class RowProjection:
    """The filtered and sorted table.

    Attributes:
        headers: One header per column.
        lines: The visible rows, in display order.
        empty_message: Why there are no lines, or None if there are.
    """

    headers: Tuple[ColumnHeader, ...]
    lines: Tuple[RowLine, ...]
    empty_message: Optional[str]


@define(frozen=True)
class TransposedLine:
    """One field of the transposed grid.

    Attributes:
        field: Column name.
        cells: One cell per original row; a single placeholder cell when
            the table has no rows.
        placeholder: True when `cells` holds the "Empty" placeholder.
    """

    field: str
    cells: Tuple[Cell, ...]
    placeholder: bool


@define(frozen=True)
class TransposedProjection:
    """Fields as rows and records as columns, in original order.

    Attributes:
        row_labels: "Row 1".."Row N"; empty when the table has no rows.
        lines: One line per column of the table.
    """

    row_labels: Tuple[str, ...]
    lines: Tuple[TransposedLine, ...]


@define(frozen=True)
class DetailEntry:
    column: str
    text: str


@define(frozen=True)
class DetailOverlay:
    """Every field of one row, fully expanded.

    Attributes:
        row_index: Index in the loaded rows.
        title: "Row N" label.
        entries: One entry per column.
        record: The raw record restricted to the table's columns.
    """

    row_index: int
    title: str
    entries: Tuple[DetailEntry, ...]
    record: Dict[str, Any]

    def as_json(self) -> str:
        return json.dumps(
            self.record, indent=2, ensure_ascii=False, default=str
        )

    def as_yaml(self) -> str:
        # Round trip through JSON so that only plain types reach the dumper.
        plain = json.loads(json.dumps(self.record, default=str))
        return yaml.safe_dump(
            plain, default_flow_style=False, sort_keys=False, allow_unicode=True
        )


def build_row_projection(
    data: TableData,
    column_widths: Mapping[str, int],
    global_filter: str,
    column_filters: Mapping[str, str],
    sort_spec: Optional[SortSpec],
) -> RowProjection:
    """Filter, sort and format the rows.

    Args:
        data: The table.
        column_widths: Explicit widths.
        global_filter: Raw global filter text.
        column_filters: Raw per-column filter texts.
        sort_spec: The active sort, if any.

    Returns:
        The row projection.
    """
    headers = tuple(
        ColumnHeader(
            name=col,
            width=column_widths.get(col),
            sort=(
                sort_spec.direction
                if sort_spec is not None and sort_spec.column == col
                else None
            ),
            filter_text=column_filters.get(col, ""),
        )
        for col in data.columns
    )
    pairs = filter_rows(data.rows, data.columns, global_filter, column_filters)
    pairs = sort_rows(pairs, sort_spec)
    lines = tuple(
        RowLine(
            original_index=index,
            cells=tuple(make_cell(row.get(col)) for col in data.columns),
        )
        for index, row in pairs
    )

    empty_message: Optional[str] = None
    if not data.rows:
        empty_message = EMPTY_TABLE_MESSAGE
    elif not lines:
        empty_message = NO_MATCH_MESSAGE
    return RowProjection(
        headers=headers, lines=lines, empty_message=empty_message
    )


def build_transposed_projection(data: TableData) -> TransposedProjection:
    """Transpose the loaded rows; filters and sort do not apply."""
    placeholder = Cell(text=EMPTY_FIELD_PLACEHOLDER, tooltip="", is_null=True)
    lines = []
    for col in data.columns:
        if data.rows:
            cells = tuple(make_cell(row.get(col)) for row in data.rows)
        else:
            cells = (placeholder,)
        lines.append(
            TransposedLine(field=col, cells=cells, placeholder=not data.rows)
        )
    return TransposedProjection(
        row_labels=tuple(row_label(i) for i in range(data.row_count)),
        lines=tuple(lines),
    )


def build_detail_overlay(data: TableData, row_index: int) -> DetailOverlay:
    """Expand one row for the detail overlay.

    Raises:
        IndexError: The index is outside the loaded rows.
    """
    if not 0 <= row_index < data.row_count:
        raise IndexError(f"row {row_index} is not loaded")
    row = data.rows[row_index]
    return DetailOverlay(
        row_index=row_index,
        title=row_label(row_index),
        entries=tuple(
            DetailEntry(column=col, text=format_detail_value(row.get(col)))
            for col in data.columns
        ),
        record={col: row.get(col) for col in data.columns},
    )
