import unittest
from unittest.mock import MagicMock

import pytest

from ldb_grid.composer import GridStatus, ViewComposer
from ldb_grid.events import KeyEvent, PointerEvent, PointerKind
from ldb_grid.interaction import Dragging, Idle, OverlayOpen
from ldb_grid.prefs import (
    Density,
    MemoryStore,
    PersistedViewPrefs,
    PreferenceStore,
    ViewMode,
)
from ldb_grid.sorting import SortDirection, SortSpec
from ldb_grid.table_data import TableData, TableIdentity


@pytest.fixture
def composer(pref_store, people) -> ViewComposer:
    result = ViewComposer(pref_store)
    result.set_table("/data/a.db", "people")
    result.set_data(people)
    return result


def test_status():
    composer = ViewComposer(PreferenceStore(MemoryStore()))
    assert composer.status == GridStatus.NO_DATA
    composer.set_data(None, loading=True)
    assert composer.status == GridStatus.LOADING
    composer.set_data(TableData(columns=["a"]), loading=True)
    assert composer.status == GridStatus.LOADING
    composer.set_data(TableData(columns=["a"]))
    assert composer.status == GridStatus.READY
    assert composer.row_projection() is not None


def test_no_projection_without_data(pref_store):
    composer = ViewComposer(pref_store)
    assert composer.row_projection() is None
    assert composer.transposed_projection() is None
    assert composer.detail_overlay() is None


def test_identity_switch_resets_session(composer, pref_store, people):
    pref_store.save(
        TableIdentity("/data/a.db", "other"),
        PersistedViewPrefs(view_mode=ViewMode.COLUMN),
    )
    composer.set_global_filter("row")
    composer.set_column_filter("name", "9")
    composer.set_column_filters_visible(True)
    composer.toggle_sort("age")
    composer.open_detail(1)

    composer.set_table("/data/a.db", "other")

    session = composer.session
    assert session.global_filter == ""
    assert session.column_filters == {}
    assert session.sort_spec is None
    assert session.column_filters_visible is False
    assert session.selected_row_index is None
    assert isinstance(composer.interaction, Idle)
    assert composer.key_events.listener_count == 0
    assert composer.prefs.view_mode == ViewMode.COLUMN


def test_identity_switch_without_record_resets_prefs(composer):
    composer.set_view_mode(ViewMode.COLUMN)
    composer.set_density(Density.COMPACT)

    composer.set_table("/data/b.db", "people")

    assert composer.prefs == PersistedViewPrefs()


def test_prefs_come_back_with_identity(composer):
    composer.set_view_mode(ViewMode.COLUMN)
    composer.set_table("/data/b.db", "people")
    composer.set_table("/data/a.db", "people")
    assert composer.prefs.view_mode == ViewMode.COLUMN


def test_same_identity_keeps_session(composer):
    composer.set_global_filter("row")
    composer.set_table("/data/a.db", "people")
    assert composer.session.global_filter == "row"


def test_changes_are_written_through(composer, memory_store, pref_store):
    composer.set_density(Density.COMPACT)
    stored = pref_store.load(TableIdentity("/data/a.db", "people"))
    assert stored.density == Density.COMPACT
    assert len(memory_store.data) == 1


def test_ephemeral_state_is_never_written(composer, memory_store):
    composer.set_global_filter("x")
    composer.set_column_filter("name", "y")
    composer.toggle_sort("name")
    composer.set_column_filters_visible(True)
    assert memory_store.data == {}


def test_incomplete_identity_skips_store(people):
    backend = MagicMock()
    composer = ViewComposer(PreferenceStore(backend))
    composer.set_table("", "people")
    composer.set_data(people)
    composer.set_view_mode(ViewMode.COLUMN)

    backend.get.assert_not_called()
    backend.set.assert_not_called()
    assert composer.prefs.view_mode == ViewMode.COLUMN


def test_store_failure_leaves_defaults(people, caplog):
    backend = MagicMock()
    backend.get.side_effect = OSError("gone")
    backend.set.side_effect = OSError("gone")
    composer = ViewComposer(PreferenceStore(backend))

    composer.set_table("/db", "t")
    composer.set_data(people)
    composer.set_density(Density.COMPACT)

    assert composer.prefs.view_mode == ViewMode.ROW
    assert composer.prefs.density == Density.COMPACT
    assert "Failed to load" in caplog.text
    assert "Failed to save" in caplog.text


def test_view_mode_switch_keeps_session(composer):
    composer.set_global_filter("row")
    composer.toggle_sort("name")
    composer.open_detail(0)

    composer.set_view_mode(ViewMode.COLUMN)

    assert composer.session.global_filter == "row"
    assert composer.session.sort_spec == SortSpec("name")
    assert composer.session.selected_row_index == 0


def test_toggle_sort_cycle(composer):
    assert composer.toggle_sort("age") == SortSpec("age")
    assert composer.toggle_sort("age") == SortSpec(
        "age", SortDirection.DESCENDING
    )
    assert composer.toggle_sort("age") is None


def test_column_filter_removal(composer):
    composer.set_column_filter("name", "row")
    assert composer.session.column_filters == {"name": "row"}
    composer.set_column_filter("name", "")
    assert composer.session.column_filters == {}


def test_refresh_keeps_filters_and_drops_stale_selection(composer):
    composer.set_global_filter("row")
    composer.open_detail(2)

    composer.set_data(TableData(columns=["name"], rows=[{"name": "row1"}]))

    assert composer.session.global_filter == "row"
    assert composer.session.selected_row_index is None
    assert isinstance(composer.interaction, Idle)
    assert composer.key_events.listener_count == 0


def test_listeners_are_notified(composer):
    callback = MagicMock()
    composer.add_listener(callback)
    composer.set_global_filter("abc")
    composer.set_global_filter("abc")
    assert callback.call_count == 1

    composer.remove_listener(callback)
    composer.set_global_filter("")
    assert callback.call_count == 1


class TestResizeDrag(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryStore()
        self.composer = ViewComposer(PreferenceStore(self.backend))
        self.composer.set_table("/db", "t")
        self.composer.set_data(
            TableData(columns=["a", "b"], rows=[{"a": 1, "b": 2}])
        )

    def move(self, x):
        self.composer.pointer_events.emit(PointerEvent(PointerKind.MOVE, x))

    def release(self, x):
        self.composer.pointer_events.emit(
            PointerEvent(PointerKind.RELEASE, x)
        )

    def test_drag_updates_and_saves_width(self):
        self.composer.begin_resize("a", rendered_width=120, x=100)
        self.assertIsInstance(self.composer.interaction, Dragging)
        self.assertEqual(self.composer.pointer_events.listener_count, 1)

        self.move(150)
        self.assertEqual(self.composer.prefs.column_widths, {"a": 170})
        stored = PreferenceStore(self.backend).load(TableIdentity("/db", "t"))
        self.assertEqual(stored.column_widths, {"a": 170})

        self.move(-5000)
        self.assertEqual(self.composer.prefs.column_widths["a"], 80)
        self.move(5000)
        self.assertEqual(self.composer.prefs.column_widths["a"], 1000)

    def test_release_ends_drag_and_unsubscribes(self):
        self.composer.begin_resize("b", rendered_width=200, x=0)
        self.move(10)
        self.release(10)

        self.assertIsInstance(self.composer.interaction, Idle)
        self.assertEqual(self.composer.pointer_events.listener_count, 0)

        self.move(500)
        self.assertEqual(self.composer.prefs.column_widths, {"b": 210})

    def test_reset_width(self):
        self.composer.begin_resize("a", rendered_width=120, x=0)
        self.move(30)
        self.release(30)

        self.composer.reset_column_width("a")

        self.assertEqual(self.composer.prefs.column_widths, {})
        stored = PreferenceStore(self.backend).load(TableIdentity("/db", "t"))
        self.assertEqual(stored.column_widths, {})

    def test_unknown_column(self):
        with self.assertRaises(KeyError):
            self.composer.begin_resize("zzz", rendered_width=100, x=0)
        self.assertEqual(self.composer.pointer_events.listener_count, 0)

    def test_resize_closes_overlay(self):
        self.composer.open_detail(0)
        self.composer.begin_resize("a", rendered_width=100, x=0)
        self.assertIsNone(self.composer.session.selected_row_index)
        self.assertEqual(self.composer.key_events.listener_count, 0)
        self.assertEqual(self.composer.pointer_events.listener_count, 1)

    def test_dispose_releases_drag(self):
        self.composer.begin_resize("a", rendered_width=100, x=0)
        self.composer.dispose()
        self.assertEqual(self.composer.pointer_events.listener_count, 0)


class TestDetailOverlay(unittest.TestCase):
    def setUp(self):
        self.composer = ViewComposer(PreferenceStore(MemoryStore()))
        self.composer.set_table("/db", "t")
        self.composer.set_data(
            TableData(columns=["a"], rows=[{"a": 1}, {"a": [1, 2]}])
        )

    def test_open_and_escape(self):
        self.composer.open_detail(1)
        self.assertEqual(self.composer.interaction, OverlayOpen(1))
        self.assertEqual(self.composer.detail_overlay().title, "Row 2")
        self.assertEqual(self.composer.key_events.listener_count, 1)

        self.composer.key_events.emit(KeyEvent("a"))
        self.assertEqual(self.composer.session.selected_row_index, 1)

        self.composer.key_events.emit(KeyEvent("Escape"))
        self.assertIsNone(self.composer.session.selected_row_index)
        self.assertIsNone(self.composer.detail_overlay())
        self.assertEqual(self.composer.key_events.listener_count, 0)

    def test_reopen_keeps_single_subscription(self):
        self.composer.open_detail(0)
        self.composer.open_detail(1)
        self.assertEqual(self.composer.key_events.listener_count, 1)
        self.assertEqual(self.composer.session.selected_row_index, 1)

    def test_close_when_closed(self):
        listener = MagicMock()
        self.composer.add_listener(listener)
        self.composer.close_detail()
        listener.assert_not_called()

    def test_bad_index(self):
        with self.assertRaises(IndexError):
            self.composer.open_detail(2)
        self.assertIsInstance(self.composer.interaction, Idle)
