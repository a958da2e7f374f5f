"""View preferences that survive table switches and restarts.

Only the view mode, the density and the column widths are stored, one
JSON record per table identity. Storage problems never reach the user:
they are logged and treated as "no stored preference".
"""

import json
import logging
from enum import StrEnum
from typing import Any, Dict, Optional, Protocol

from attrs import define, field

from ldb_grid.layout import sanitize_widths
from ldb_grid.table_data import TableIdentity

logger = logging.getLogger(__name__)

KEY_PREFIX = "ldb-view-"


class ViewMode(StrEnum):
    """Row shows one line per record, column shows the transposed grid."""

    ROW = "row"
    COLUMN = "column"


class Density(StrEnum):
    """Rendering hint for row height."""

    STANDARD = "standard"
    COMPACT = "compact"


class KeyValueStore(Protocol):
    """String key-value storage used for preferences.

    Both methods may raise; callers are expected to cope.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


@define
class MemoryStore:
    """Key-value store kept in memory; used by tests and previews."""

    data: Dict[str, str] = field(factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


def preference_key(identity: TableIdentity) -> str:
    """Storage key for a table.

    The pair is JSON-encoded so that no separator inside a path can make
    two different tables share a key.
    """
    pair = json.dumps([identity.db_path, identity.table_name])
    return f"{KEY_PREFIX}{pair}"


def _parse_enum(enum_cls: Any, raw: Any, default: Any) -> Any:
    if isinstance(raw, str):
        try:
            return enum_cls(raw)
        except ValueError:
            pass
    if raw is not None:
        logger.debug("Ignoring stored %s value %r", enum_cls.__name__, raw)
    return default


@define
class PersistedViewPrefs:
    """The part of the view state that is stored per table.

    Attributes:
        view_mode: Row or column (transposed) layout.
        density: Standard or compact rows.
        column_widths: Column name to width in pixels.
    """

    view_mode: ViewMode = ViewMode.ROW
    density: Density = Density.STANDARD
    column_widths: Dict[str, int] = field(factory=dict)

    def to_record(self) -> Dict[str, Any]:
        """The JSON-ready record that is written to storage."""
        return {
            "viewMode": str(self.view_mode),
            "density": str(self.density),
            "columnWidths": dict(self.column_widths),
        }

    @classmethod
    def from_record(cls, record: Any) -> "PersistedViewPrefs":
        """Build preferences from a stored record, field by field.

        Missing or malformed fields fall back to their defaults; a record
        that is not a mapping yields all defaults.
        """
        if not isinstance(record, dict):
            logger.warning(
                "Stored view preferences are a %s, not an object",
                type(record).__name__,
            )
            return cls()
        return cls(
            view_mode=_parse_enum(
                ViewMode, record.get("viewMode"), ViewMode.ROW
            ),
            density=_parse_enum(
                Density, record.get("density"), Density.STANDARD
            ),
            column_widths=sanitize_widths(record.get("columnWidths")),
        )


@define
class PreferenceStore:
    """Reads and writes `PersistedViewPrefs` through a key-value store.

    Attributes:
        backend: The storage collaborator.
    """

    backend: KeyValueStore

    def load(self, identity: TableIdentity) -> Optional[PersistedViewPrefs]:
        """Stored preferences of a table.

        Returns:
            The preferences, or None if nothing is stored or the store
            could not be read.
        """
        key = preference_key(identity)
        try:
            stored = self.backend.get(key)
            if stored is None:
                return None
            record = json.loads(stored)
        except Exception:
            logger.warning(
                "Failed to load view preferences for %s", key, exc_info=True
            )
            return None
        return PersistedViewPrefs.from_record(record)

    def save(self, identity: TableIdentity, prefs: PersistedViewPrefs) -> bool:
        """Write preferences of a table.

        Returns:
            True if the store accepted the write.
        """
        key = preference_key(identity)
        try:
            self.backend.set(key, json.dumps(prefs.to_record()))
        except Exception:
            logger.warning(
                "Failed to save view preferences for %s", key, exc_info=True
            )
            return False
        return True
