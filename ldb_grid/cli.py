import json
import locale
import logging
import sys

import click
import yaml

from ldb_grid import __version__
from ldb_grid.local_settings import LocalSettings
from ldb_grid.prefs import PreferenceStore
from ldb_grid.table_data import TableData, TableIdentity

logger = logging.getLogger(__name__)


def create_context_obj(debug: bool, config_dir: str):
    """Sets up the logging and the collation locale and prepares the
    context for the CLI.

    Args:
        debug: If True, sets the logging level to DEBUG.
        config_dir: Directory of the settings file; empty for the default.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.debug("Debug mode is on")
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning('Collation locale not available; using "C"')
    return {"settings": LocalSettings(config_dir=config_dir or None)}


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.option(
    "--config-dir",
    default="",
    envvar="LDB_GRID_CONFIG_DIR",
    help="Directory of the settings file.",
)
@click.version_option(__version__, prog_name="ldb-grid")
@click.pass_context
def cli(context: click.Context, debug: bool, config_dir: str):
    context.obj = create_context_obj(debug, config_dir)


@cli.command()
@click.argument(
    "data_file", type=click.Path(exists=True, dir_okay=False, readable=True)
)
@click.option("--db-path", required=True, help="Database the rows come from.")
@click.option("--table-name", required=True, help="Table the rows come from.")
@click.pass_context
def show(
    context: click.Context, data_file: str, db_path: str, table_name: str
):
    """Open the grid on a JSON dump of a page of rows."""
    from PyQt5.QtWidgets import QApplication

    from ldb_grid.qt.data_table import DataTableWidget

    try:
        with open(data_file, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Can not read {data_file}: {e}")
    if not isinstance(raw, dict):
        raise click.ClickException(f"{data_file} does not hold an object")

    settings: LocalSettings = context.obj["settings"]
    app = QApplication.instance() or QApplication(sys.argv)
    widget = DataTableWidget(store=PreferenceStore(settings))
    widget.setWindowTitle(f"{table_name} - {db_path}")
    widget.set_table(db_path, table_name)
    widget.set_data(TableData.from_dict(raw))
    widget.resize(1000, 640)
    widget.show()
    try:
        code = app.exec_()
    finally:
        settings.flush()
    context.exit(code)


@cli.command()
@click.option("--db-path", required=True, help="Database of the table.")
@click.option("--table-name", required=True, help="Name of the table.")
@click.pass_context
def prefs(context: click.Context, db_path: str, table_name: str):
    """Print the view preferences stored for a table."""
    settings: LocalSettings = context.obj["settings"]
    stored = PreferenceStore(settings).load(TableIdentity(db_path, table_name))
    if stored is None:
        click.echo("No view preferences stored for this table.")
        return
    click.echo(
        yaml.safe_dump(stored.to_record(), default_flow_style=False).rstrip()
    )


if __name__ == "__main__":
    cli()
