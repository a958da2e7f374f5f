"""States of the pointer/keyboard interaction machine.

Only one interaction can be active at a time. Entering `Dragging` holds a
subscription to the pointer stream and entering `OverlayOpen` holds one to
the key stream; every exit transition releases it.
"""

from typing import Union

from attrs import define

from ldb_grid.layout import DragBaseline


@define(frozen=True)
class Idle:
    """No interaction in progress."""


@define(frozen=True)
class Dragging:
    """A column resize drag is in progress."""

    baseline: DragBaseline


@define(frozen=True)
class OverlayOpen:
    """The row detail overlay is shown.

    Attributes:
        row_index: Index of the row in the original row sequence.
    """

    row_index: int


Interaction = Union[Idle, Dragging, OverlayOpen]
