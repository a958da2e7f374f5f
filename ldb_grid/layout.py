"""User-driven column widths."""

import logging
import math
from typing import Any, Dict, Optional

from attrs import define, field

logger = logging.getLogger(__name__)
VERBOSE = 10

MIN_COLUMN_WIDTH = 80
MAX_COLUMN_WIDTH = 1000


def clamp_width(width: float) -> int:
    """Round a width to whole pixels inside the allowed range."""
    return int(min(MAX_COLUMN_WIDTH, max(MIN_COLUMN_WIDTH, round(width))))


def sanitize_widths(raw: Any) -> Dict[str, int]:
    """Keep the usable entries of a stored width mapping.

    Non-numeric and non-finite values are dropped, the rest are clamped.

    Args:
        raw: Whatever was found in storage.

    Returns:
        A clean column name to width mapping; empty if `raw` is not a
        mapping.
    """
    if not isinstance(raw, dict):
        return {}
    result: Dict[str, int] = {}
    for col, width in raw.items():
        if isinstance(width, bool) or not isinstance(width, (int, float)):
            logger.debug("Dropping width %r for column %r", width, col)
            continue
        if not math.isfinite(width):
            logger.debug("Dropping width %r for column %r", width, col)
            continue
        result[str(col)] = clamp_width(width)
    return result


@define(frozen=True)
class DragBaseline:
    """Where a resize drag started.

    Attributes:
        column: The column being resized.
        width: Effective width of the column when the drag started.
        x: Horizontal pointer position when the drag started.
    """

    column: str
    width: int
    x: int


@define
class ColumnLayout:
    """Column widths chosen by the user.

    A column without an entry is rendered at its intrinsic width.

    Attributes:
        widths: Column name to width in pixels, always clamped.
    """

    widths: Dict[str, int] = field(factory=dict)

    def width_of(self, column: str) -> Optional[int]:
        return self.widths.get(column)

    def begin_drag(
        self, column: str, rendered_width: int, x: int
    ) -> DragBaseline:
        """Capture the starting point of a resize drag.

        Args:
            column: The column whose handle was pressed.
            rendered_width: Width the column is currently drawn with; used
                when the column has no explicit width.
            x: Pointer position.

        Returns:
            The baseline for subsequent `drag_to` calls.
        """
        width = self.widths.get(column)
        if width is None:
            width = rendered_width
        return DragBaseline(column=column, width=int(width), x=int(x))

    def drag_to(self, baseline: DragBaseline, x: int) -> int:
        """Apply a pointer move to the column being dragged.

        Returns:
            The new, clamped width.
        """
        width = clamp_width(baseline.width + (x - baseline.x))
        self.widths[baseline.column] = width
        logger.log(
            VERBOSE, "ColumnLayout: %s width=%d", baseline.column, width
        )
        return width

    def reset(self, column: str) -> bool:
        """Forget the explicit width of a column.

        Returns:
            True if the column had an explicit width.
        """
        return self.widths.pop(column, None) is not None
