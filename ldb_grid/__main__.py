from ldb_grid.cli import cli

cli(prog_name="ldb-grid")
