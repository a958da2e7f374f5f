import json
import unittest
from unittest.mock import MagicMock

from ldb_grid.prefs import (
    Density,
    MemoryStore,
    PersistedViewPrefs,
    PreferenceStore,
    ViewMode,
    preference_key,
)
from ldb_grid.table_data import TableIdentity


class TestPreferenceKey(unittest.TestCase):
    def test_prefix(self):
        key = preference_key(TableIdentity("/tmp/db", "items"))
        self.assertTrue(key.startswith("ldb-view-"))
        pair = json.loads(key[len("ldb-view-") :])
        self.assertEqual(pair, ["/tmp/db", "items"])

    def test_separator_in_path_does_not_collide(self):
        first = preference_key(TableIdentity("a::b", "c"))
        second = preference_key(TableIdentity("a", "b::c"))
        self.assertNotEqual(first, second)


class TestPersistedViewPrefs(unittest.TestCase):
    def test_defaults(self):
        prefs = PersistedViewPrefs()
        self.assertEqual(prefs.view_mode, ViewMode.ROW)
        self.assertEqual(prefs.density, Density.STANDARD)
        self.assertEqual(prefs.column_widths, {})

    def test_record_uses_camel_case(self):
        prefs = PersistedViewPrefs(
            view_mode=ViewMode.COLUMN,
            density=Density.COMPACT,
            column_widths={"a": 120},
        )
        self.assertEqual(
            prefs.to_record(),
            {
                "viewMode": "column",
                "density": "compact",
                "columnWidths": {"a": 120},
            },
        )

    def test_from_record_validates_each_field(self):
        prefs = PersistedViewPrefs.from_record(
            {
                "viewMode": "diagonal",
                "density": "compact",
                "columnWidths": {"a": 10, "b": "wide"},
            }
        )
        self.assertEqual(prefs.view_mode, ViewMode.ROW)
        self.assertEqual(prefs.density, Density.COMPACT)
        self.assertEqual(prefs.column_widths, {"a": 80})

    def test_from_record_not_a_mapping(self):
        with self.assertLogs("ldb_grid.prefs", level="WARNING"):
            prefs = PersistedViewPrefs.from_record([1, 2])
        self.assertEqual(prefs, PersistedViewPrefs())


class TestPreferenceStore(unittest.TestCase):
    def setUp(self):
        self.identity = TableIdentity("/db", "t")

    def test_missing_record(self):
        store = PreferenceStore(MemoryStore())
        self.assertIsNone(store.load(self.identity))

    def test_save_then_load(self):
        backend = MemoryStore()
        store = PreferenceStore(backend)
        prefs = PersistedViewPrefs(
            view_mode=ViewMode.COLUMN, column_widths={"x": 300}
        )
        self.assertTrue(store.save(self.identity, prefs))
        self.assertEqual(list(backend.data), [preference_key(self.identity)])
        self.assertEqual(store.load(self.identity), prefs)

    def test_unparseable_record(self):
        backend = MemoryStore({preference_key(self.identity): "{not json"})
        store = PreferenceStore(backend)
        with self.assertLogs("ldb_grid.prefs", level="WARNING"):
            self.assertIsNone(store.load(self.identity))

    def test_backend_read_failure(self):
        backend = MagicMock()
        backend.get.side_effect = OSError("denied")
        store = PreferenceStore(backend)
        with self.assertLogs("ldb_grid.prefs", level="WARNING"):
            self.assertIsNone(store.load(self.identity))

    def test_backend_write_failure(self):
        backend = MagicMock()
        backend.set.side_effect = OSError("quota")
        store = PreferenceStore(backend)
        with self.assertLogs("ldb_grid.prefs", level="WARNING"):
            self.assertFalse(store.save(self.identity, PersistedViewPrefs()))
