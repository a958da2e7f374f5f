import json

import yaml
from click.testing import CliRunner

from ldb_grid import __version__
from ldb_grid.cli import cli
from ldb_grid.local_settings import LocalSettings
from ldb_grid.prefs import (
    Density,
    PersistedViewPrefs,
    PreferenceStore,
    ViewMode,
)
from ldb_grid.table_data import TableIdentity


def run(*args):
    return CliRunner().invoke(cli, list(args))


def test_version():
    result = run("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_prefs_without_record(tmp_path):
    result = run(
        "--config-dir",
        str(tmp_path),
        "prefs",
        "--db-path",
        "/x.db",
        "--table-name",
        "t",
    )
    assert result.exit_code == 0, result.output
    assert "No view preferences stored" in result.output


def test_prefs_prints_record(tmp_path):
    settings = LocalSettings(config_dir=str(tmp_path))
    PreferenceStore(settings).save(
        TableIdentity("/x.db", "t"),
        PersistedViewPrefs(
            view_mode=ViewMode.COLUMN,
            density=Density.COMPACT,
            column_widths={"a": 120},
        ),
    )
    settings.flush()

    result = run(
        "--config-dir",
        str(tmp_path),
        "prefs",
        "--db-path",
        "/x.db",
        "--table-name",
        "t",
    )

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(result.output) == {
        "viewMode": "column",
        "density": "compact",
        "columnWidths": {"a": 120},
    }


def test_show_rejects_non_object(tmp_path):
    data_file = tmp_path / "rows.json"
    data_file.write_text(json.dumps([1, 2]), "utf-8")
    result = run(
        "--config-dir",
        str(tmp_path),
        "show",
        str(data_file),
        "--db-path",
        "/x.db",
        "--table-name",
        "t",
    )
    assert result.exit_code == 1
    assert "does not hold an object" in result.output


def test_show_rejects_bad_json(tmp_path):
    data_file = tmp_path / "rows.json"
    data_file.write_text("{oops", "utf-8")
    result = run(
        "--config-dir",
        str(tmp_path),
        "show",
        str(data_file),
        "--db-path",
        "/x.db",
        "--table-name",
        "t",
    )
    assert result.exit_code == 1
    assert "Can not read" in result.output
