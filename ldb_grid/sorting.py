"""Single-column sort with a three-state header toggle."""

import logging
from enum import StrEnum
from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

from attrs import define

from ldb_grid.formatting import compare_values
from ldb_grid.table_data import Row

logger = logging.getLogger(__name__)


class SortDirection(StrEnum):
    """Direction of the active sort."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @property
    def sign(self) -> int:
        return 1 if self is SortDirection.ASCENDING else -1


@define(frozen=True)
class SortSpec:
    """The active sort.

    Attributes:
        column: Name of the sorted column.
        direction: Sort direction.
    """

    column: str
    direction: SortDirection = SortDirection.ASCENDING


def toggle_sort(
    current: Optional[SortSpec], column: str
) -> Optional[SortSpec]:
    """Next sort state after the user activates a column header.

    A new column starts ascending, the same column flips to descending and
    a descending column goes back to the original order.

    Args:
        current: The active sort, if any.
        column: The activated column.

    Returns:
        The new sort, or None for "no active sort".
    """
    if current is None or current.column != column:
        return SortSpec(column, SortDirection.ASCENDING)
    if current.direction is SortDirection.ASCENDING:
        return SortSpec(column, SortDirection.DESCENDING)
    return None


def sort_rows(
    pairs: Sequence[Tuple[int, Row]], spec: Optional[SortSpec]
) -> List[Tuple[int, Row]]:
    """Stable sort of `(original_index, row)` pairs.

    The direction sign multiplies the whole comparison, including the
    branch that places None last. None values therefore end up last when
    ascending and first when descending.

    Args:
        pairs: Filtered pairs in original order.
        spec: The active sort; None keeps the given order.

    Returns:
        A new, ordered list.
    """
    if spec is None:
        return list(pairs)

    column = spec.column
    sign = spec.direction.sign

    def cmp(left: Tuple[int, Row], right: Tuple[int, Row]) -> int:
        result = sign * compare_values(
            left[1].get(column), right[1].get(column)
        )
        return (result > 0) - (result < 0)

    return sorted(pairs, key=cmp_to_key(cmp))
