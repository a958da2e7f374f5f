"""State owner of the data grid.

The composer keeps two records apart:

- `PersistedViewPrefs` (view mode, density, column widths) is reloaded from
  the preference store whenever the table identity changes and written
  back on every change;
- `SessionInteractionState` (filters, sort, selection, filter panel) is
  rebuilt from scratch on every identity change and never stored.

It also runs the pointer/keyboard interaction machine: a resize drag
listens to the pointer stream and the detail overlay listens to the key
stream, each only while it is active.
"""

import logging
from enum import StrEnum
from typing import Callable, Dict, List, Optional

from attrs import define, field

from ldb_grid.events import (
    CANCEL_KEY,
    EventStream,
    KeyEvent,
    PointerEvent,
    PointerKind,
    Subscription,
)
from ldb_grid.interaction import Dragging, Idle, Interaction, OverlayOpen
from ldb_grid.layout import ColumnLayout
from ldb_grid.prefs import (
    Density,
    PersistedViewPrefs,
    PreferenceStore,
    ViewMode,
)
from ldb_grid.projections import (
    DetailOverlay,
    RowProjection,
    TransposedProjection,
    build_detail_overlay,
    build_row_projection,
    build_transposed_projection,
)
from ldb_grid.sorting import SortSpec, toggle_sort
from ldb_grid.table_data import TableData, TableIdentity

logger = logging.getLogger(__name__)
VERBOSE = 10


class GridStatus(StrEnum):
    """What the surface should show."""

    LOADING = "loading"
    NO_DATA = "no_data"
    READY = "ready"


@define
class SessionInteractionState:
    """Interaction state that lives only as long as one table is shown.

    Attributes:
        global_filter: Raw global filter text.
        column_filters: Column name to raw filter text.
        sort_spec: The active sort; None keeps the loaded order.
        selected_row_index: Original index of the row in the detail
            overlay, if open.
        column_filters_visible: Whether the column filter panel is shown.
    """

    global_filter: str = ""
    column_filters: Dict[str, str] = field(factory=dict)
    sort_spec: Optional[SortSpec] = None
    selected_row_index: Optional[int] = None
    column_filters_visible: bool = False


@define(eq=False)
class ViewComposer:
    """Owns the view state of one data grid and composes its projections.

    Attributes:
        store: Where per-table preferences are kept.
        pointer_events: Window-wide pointer move/release stream.
        key_events: Window-wide key press stream.
        data: The current table; None while nothing is loaded.
        loading: True while the data-access layer fetches rows.
        identity: The current table identity, if any.
        prefs: The persisted part of the state.
        session: The ephemeral part of the state.
        interaction: The current state of the interaction machine.
    """

    store: PreferenceStore
    pointer_events: EventStream[PointerEvent] = field(
        factory=lambda: EventStream("pointer")
    )
    key_events: EventStream[KeyEvent] = field(
        factory=lambda: EventStream("keys")
    )
    data: Optional[TableData] = None
    loading: bool = False
    identity: Optional[TableIdentity] = None
    prefs: PersistedViewPrefs = field(factory=PersistedViewPrefs)
    session: SessionInteractionState = field(factory=SessionInteractionState)
    interaction: Interaction = field(factory=Idle)
    _subscription: Optional[Subscription] = field(default=None, init=False)
    _listeners: List[Callable[[], None]] = field(factory=list, init=False)

    # Change notification.

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call `callback` after every state change."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # Inputs from the data-access layer.

    def set_table(self, db_path: str, table_name: str) -> None:
        """Switch to another table identity.

        The ephemeral state is reset unconditionally. The persisted state
        is reloaded from the store, or reset to defaults if the table has
        no stored record. An incomplete identity loads nothing.

        Args:
            db_path: Path of the database.
            table_name: Name of the table.
        """
        identity = TableIdentity(db_path or "", table_name or "")
        if identity == self.identity:
            return
        logger.debug(
            "ViewComposer: table %r in %r",
            identity.table_name,
            identity.db_path,
        )
        self._leave_interaction()
        self.identity = identity
        self.session = SessionInteractionState()
        stored = self.store.load(identity) if identity.is_complete else None
        self.prefs = stored if stored is not None else PersistedViewPrefs()
        self._notify()

    def set_data(
        self, data: Optional[TableData], loading: bool = False
    ) -> None:
        """Replace the rows shown for the current table.

        Filters and sort are kept; a selected row that is no longer
        loaded closes the overlay.
        """
        self.data = data
        self.loading = loading
        selected = self.session.selected_row_index
        if selected is not None and (
            data is None or not 0 <= selected < data.row_count
        ):
            self.session.selected_row_index = None
            self._leave_interaction()
        self._notify()

    @property
    def status(self) -> GridStatus:
        if self.loading:
            return GridStatus.LOADING
        if self.data is None:
            return GridStatus.NO_DATA
        return GridStatus.READY

    # Persisted preferences.

    def _save_prefs(self) -> None:
        if self.identity is None or not self.identity.is_complete:
            return
        self.store.save(self.identity, self.prefs)

    def set_view_mode(self, mode: ViewMode) -> None:
        """Switch layouts; filters, sort and selection are kept."""
        if self.prefs.view_mode == mode:
            return
        self.prefs.view_mode = mode
        self._save_prefs()
        self._notify()

    def set_density(self, density: Density) -> None:
        if self.prefs.density == density:
            return
        self.prefs.density = density
        self._save_prefs()
        self._notify()

    @property
    def column_layout(self) -> ColumnLayout:
        return ColumnLayout(self.prefs.column_widths)

    def reset_column_width(self, column: str) -> None:
        """Go back to the intrinsic width of a column."""
        if self.column_layout.reset(column):
            self._save_prefs()
            self._notify()

    # Ephemeral state.

    def set_global_filter(self, text: str) -> None:
        if self.session.global_filter == text:
            return
        self.session.global_filter = text
        self._notify()

    def set_column_filter(self, column: str, text: str) -> None:
        if text:
            self.session.column_filters[column] = text
        elif self.session.column_filters.pop(column, None) is None:
            return
        self._notify()

    def set_column_filters_visible(self, visible: bool) -> None:
        if self.session.column_filters_visible == visible:
            return
        self.session.column_filters_visible = visible
        self._notify()

    def toggle_sort(self, column: str) -> Optional[SortSpec]:
        """Advance the sort of a column: ascending, descending, none.

        Returns:
            The new sort.
        """
        self.session.sort_spec = toggle_sort(self.session.sort_spec, column)
        logger.log(VERBOSE, "ViewComposer: sort %s", self.session.sort_spec)
        self._notify()
        return self.session.sort_spec

    # Interaction machine.

    def _enter(self, state: Interaction, sub: Optional[Subscription]) -> None:
        self._leave_interaction()
        self.interaction = state
        self._subscription = sub

    def _leave_interaction(self) -> None:
        """Exit the current interaction and release its subscription."""
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        self.interaction = Idle()

    def begin_resize(self, column: str, rendered_width: int, x: int) -> None:
        """Start dragging the resize handle of a column.

        Args:
            column: The column whose handle was pressed.
            rendered_width: Width the column is drawn with right now.
            x: Pointer position.

        Raises:
            KeyError: The column is not part of the table.
        """
        if self.data is None or column not in self.data.columns:
            raise KeyError(column)
        baseline = self.column_layout.begin_drag(column, rendered_width, x)
        overlay_closed = self.session.selected_row_index is not None
        self.session.selected_row_index = None
        sub = self.pointer_events.subscribe(self._on_pointer)
        self._enter(Dragging(baseline), sub)
        logger.log(VERBOSE, "ViewComposer: drag started %s", baseline)
        if overlay_closed:
            self._notify()

    def _on_pointer(self, event: PointerEvent) -> None:
        state = self.interaction
        if not isinstance(state, Dragging):
            return
        if event.kind is PointerKind.RELEASE:
            self._leave_interaction()
            self._notify()
            return
        self.column_layout.drag_to(state.baseline, event.x)
        self._save_prefs()
        self._notify()

    def open_detail(self, row_index: int) -> None:
        """Show every field of a row in the detail overlay.

        Args:
            row_index: Index in the original row sequence.

        Raises:
            IndexError: The row is not loaded.
        """
        if self.data is None or not 0 <= row_index < self.data.row_count:
            raise IndexError(f"row {row_index} is not loaded")
        sub = self.key_events.subscribe(self._on_key)
        self._enter(OverlayOpen(row_index), sub)
        self.session.selected_row_index = row_index
        self._notify()

    def _on_key(self, event: KeyEvent) -> None:
        if event.key == CANCEL_KEY:
            self.close_detail()

    def close_detail(self) -> None:
        """Dismiss the detail overlay; no effect if it is not open."""
        if self.session.selected_row_index is None:
            return
        self.session.selected_row_index = None
        if isinstance(self.interaction, OverlayOpen):
            self._leave_interaction()
        self._notify()

    def dispose(self) -> None:
        """Release every listener; the composer is not used afterwards."""
        self._leave_interaction()
        self._listeners.clear()

    # Projections.

    def row_projection(self) -> Optional[RowProjection]:
        if self.data is None:
            return None
        return build_row_projection(
            self.data,
            self.prefs.column_widths,
            self.session.global_filter,
            self.session.column_filters,
            self.session.sort_spec,
        )

    def transposed_projection(self) -> Optional[TransposedProjection]:
        if self.data is None:
            return None
        return build_transposed_projection(self.data)

    def detail_overlay(self) -> Optional[DetailOverlay]:
        index = self.session.selected_row_index
        if self.data is None or index is None:
            return None
        return build_detail_overlay(self.data, index)
