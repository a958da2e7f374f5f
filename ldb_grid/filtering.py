"""Global and per-column substring filters over the loaded rows."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ldb_grid.formatting import to_filter_text
from ldb_grid.table_data import Row

logger = logging.getLogger(__name__)
VERBOSE = 10


def normalize_filter_text(text: Optional[str]) -> str:
    """Trim and lower-case free filter text."""
    return (text or "").strip().lower()


def active_column_filters(
    column_filters: Mapping[str, str], columns: Sequence[str]
) -> Dict[str, str]:
    """Normalized column filters that take part in matching.

    Empty entries and entries for columns the table does not have are
    left out.

    Args:
        column_filters: Column name to raw filter text.
        columns: The columns of the current table.

    Returns:
        Column name to normalized, non-empty filter text.
    """
    known = set(columns)
    result: Dict[str, str] = {}
    for col, text in column_filters.items():
        needle = normalize_filter_text(text)
        if needle and col in known:
            result[col] = needle
    return result


def row_matches(
    row: Row,
    columns: Sequence[str],
    needle: str,
    column_needles: Mapping[str, str],
) -> bool:
    """Decide whether a row satisfies all active predicates.

    Args:
        row: The row to test.
        columns: Columns searched by the global filter.
        needle: Normalized global filter text; empty means inactive.
        column_needles: Normalized per-column filters, all active.

    Returns:
        True if the row is kept.
    """
    for col, col_needle in column_needles.items():
        if col_needle not in to_filter_text(row.get(col)):
            return False
    if not needle:
        return True
    return any(needle in to_filter_text(row.get(col)) for col in columns)


def filter_rows(
    rows: Sequence[Row],
    columns: Sequence[str],
    global_filter: Optional[str],
    column_filters: Mapping[str, str],
) -> List[Tuple[int, Row]]:
    """Stable filter of the rows.

    Args:
        rows: All loaded rows, in their original order.
        columns: Columns of the table.
        global_filter: Raw global filter text.
        column_filters: Column name to raw filter text.

    Returns:
        The `(original_index, row)` pairs that match, in original order.
    """
    needle = normalize_filter_text(global_filter)
    column_needles = active_column_filters(column_filters, columns)
    if not needle and not column_needles:
        return list(enumerate(rows))

    result = [
        (i, row)
        for i, row in enumerate(rows)
        if row_matches(row, columns, needle, column_needles)
    ]
    logger.log(
        VERBOSE,
        "filter_rows: %d of %d rows match global=%r columns=%r",
        len(result),
        len(rows),
        needle,
        column_needles,
    )
    return result
