"""Command-line entry point.

Reads a schema from a live database (``--conn``) or from a YAML/JSON
description (``--schema-file``) and prints it as a tree, a flat listing or
an ASCII diagram.

Example:
    $ dbtree --conn postgresql://localhost/shop --shape graph
    $ dbtree --schema-file shop.yaml --format json --shape flat
"""

from __future__ import annotations

import logging

import click
import yaml
from pydantic import ValidationError

from dbtree.architecture.graph import build_graph
from dbtree.architecture.schema import Database
from dbtree.config import LOG_LEVELS, DbtreeSettings
from dbtree.db.inspector import SchemaInspector
from dbtree.errors import DbtreeError
from dbtree.onto import OutputFormat, OutputShape
from dbtree.render import render

logger = logging.getLogger(__name__)


def load_database(
    conn: str | None, schema_file: str | None, schema_name: str | None
) -> Database:
    """Load the schema model from a description file or a live database."""
    if schema_file is not None:
        logger.info(f"Loading schema description from {schema_file}")
        return Database.from_yaml(schema_file)
    return SchemaInspector(conn).inspect_schema(schema=schema_name)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--conn", help="Database connection URL (or SQLite file path).")
@click.option(
    "--schema-file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML/JSON schema description to render instead of a live database.",
)
@click.option("--schema", "schema_name", help="Catalog schema to inspect.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output format.",
)
@click.option(
    "--shape",
    type=click.Choice([s.value for s in OutputShape]),
    help="Output shape.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level.",
)
def main(conn, schema_file, schema_name, output_format, shape, log_level):
    """dbtree - visualize database schemas."""
    try:
        settings = DbtreeSettings()
    except ValidationError as e:
        raise click.UsageError(f"invalid DBTREE_ setting: {e}") from e
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        handlers=[logging.StreamHandler()],
    )

    if conn is not None and schema_file is not None:
        raise click.UsageError("--conn and --schema-file are mutually exclusive")
    if schema_file is None:
        conn = conn or settings.conn
        if not conn:
            raise click.UsageError("either --conn or --schema-file is required")

    try:
        database = load_database(conn, schema_file, schema_name or settings.schema_name)
        output = render(
            build_graph(database),
            output_format or settings.format,
            shape or settings.shape,
        )
    except (DbtreeError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(output.rstrip("\n"))


if __name__ == "__main__":
    main()
