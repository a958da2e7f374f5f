"""Page of tabular rows handed to the grid by the data-access layer."""

import logging
from typing import Any, Dict, List, Mapping

from attrs import define, field

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@define(frozen=True)
class TableIdentity:
    """Identifies the table whose view preferences apply.

    Attributes:
        db_path: Path of the database that holds the table.
        table_name: Name of the table inside the database.
    """

    db_path: str
    table_name: str

    @property
    def is_complete(self) -> bool:
        """Both parts are non-empty."""
        return bool(self.db_path) and bool(self.table_name)


@define
class TableData:
    """A fetched window of rows.

    Attributes:
        columns: Column names in display order.
        rows: The loaded rows, each a mapping from column name to value.
        total_rows: Number of rows in the full table; may exceed the
            number of loaded rows.
    """

    columns: List[str] = field(factory=list)
    rows: List[Row] = field(factory=list)
    total_rows: int = 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TableData":
        """Create the value from the backend's JSON payload.

        Args:
            raw: Mapping with `columns`, `rows` and `totalRows` keys.

        Returns:
            The parsed table data.
        """
        columns: List[str] = []
        for col in raw.get("columns") or []:
            name = str(col)
            if name in columns:
                logger.warning("Duplicate column %r ignored", name)
                continue
            columns.append(name)

        rows: List[Row] = []
        for i, row in enumerate(raw.get("rows") or []):
            if isinstance(row, Mapping):
                rows.append(dict(row))
            else:
                logger.warning(
                    "Row %d is a %s, not an object; shown empty",
                    i,
                    type(row).__name__,
                )
                rows.append({})

        total = raw.get("totalRows", raw.get("total_rows"))
        if not isinstance(total, int) or isinstance(total, bool):
            total = len(rows)
        return cls(columns=columns, rows=rows, total_rows=total)

    @property
    def row_count(self) -> int:
        return len(self.rows)
