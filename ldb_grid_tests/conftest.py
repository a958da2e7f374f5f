import os

import pytest

from ldb_grid.prefs import MemoryStore, PreferenceStore
from ldb_grid.table_data import TableData

# Ensure headless Qt on CI/CLI runs.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qt_app():
    """Ensure a single QApplication exists for Qt-based tests."""
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def pref_store(memory_store) -> PreferenceStore:
    return PreferenceStore(memory_store)


@pytest.fixture
def people() -> TableData:
    """A small table with mixed value types."""
    return TableData(
        columns=["name", "age", "notes", "embedding"],
        rows=[
            {
                "name": "row9",
                "age": 30,
                "notes": "ABCdef",
                "embedding": [0.5, 1.5],
            },
            {"name": "row10", "age": None, "notes": "plain"},
            {
                "name": "Alpha",
                "age": 5,
                "notes": {"k": "Zed"},
                "embedding": [1, 2, 3],
            },
        ],
        total_rows=120,
    )
