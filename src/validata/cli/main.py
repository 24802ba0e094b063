"""validata CLI entry point."""

import click


@click.group()
def cli():
    """validata: validate nested data against declarative schemas."""
    pass


# Register subcommands
from validata.cli.schema_cmd import check_schema, show, validate  # noqa: E402

cli.add_command(validate)
cli.add_command(check_schema)
cli.add_command(show)
