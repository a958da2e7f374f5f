"""Interactive data grid for browsing pages of table rows.

The engine is free of Qt; `ldb_grid.qt` holds the widgets.
"""

from ldb_grid.composer import GridStatus, SessionInteractionState, ViewComposer
from ldb_grid.prefs import (
    Density,
    MemoryStore,
    PersistedViewPrefs,
    PreferenceStore,
    ViewMode,
)
from ldb_grid.sorting import SortDirection, SortSpec
from ldb_grid.table_data import TableData, TableIdentity

__version__ = "0.1.0"

__all__ = [
    "Density",
    "GridStatus",
    "MemoryStore",
    "PersistedViewPrefs",
    "PreferenceStore",
    "SessionInteractionState",
    "SortDirection",
    "SortSpec",
    "TableData",
    "TableIdentity",
    "ViewComposer",
    "ViewMode",
]
