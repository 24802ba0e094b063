"""Schema CLI commands: validate data, check and show schemas."""

import importlib
import logging
from typing import Any

import click
import yaml

from validata.config import ValidationOptions
from validata.errors import InvalidSchemaError
from validata.pretty import format_schema
from validata.spec import Selector, Spec, Thunk, Union
from validata.validator import validate as validate_value
from validata.validator import validate_schema


def load_schema(reference: str) -> Any:
    """Import a schema from a ``module:attribute`` reference.

    The attribute is either a schema or a zero-argument function returning
    one.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise click.BadParameter(
            f"Expected 'module:attribute', got '{reference}'", param_hint="--schema"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {e}") from e

    try:
        schema = getattr(module, attribute)
    except AttributeError as e:
        raise click.BadParameter(f"Module '{module_name}' has no attribute '{attribute}'") from e

    if callable(schema) and not isinstance(schema, (Spec, Union, Thunk, Selector)):
        schema = schema()
    return schema


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _report_errors(errors) -> None:
    for error in errors:
        click.echo(click.style(str(error), fg="red"))
    click.echo(click.style(f"\n{len(errors)} error(s) found", fg="red", bold=True))


@click.command()
@click.argument("data_file", type=click.File("r"))
@click.option("--schema", "schema_ref", required=True, help="Schema reference, as module:attribute.")
@click.option("--stop-early", is_flag=True, default=False, help="Stop at the first errors of each element.")
@click.option("--no-group", is_flag=True, default=False, help="Do not merge errors sharing a path.")
@click.option("--no-check-schema", is_flag=True, default=False, help="Skip the schema check.")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def validate(data_file, schema_ref: str, stop_early: bool, no_group: bool, no_check_schema: bool, verbose: bool):
    """Validate a YAML or JSON document against a schema.

    Defaults come from the VALIDATA_* environment variables.
    """
    _configure_logging(verbose)
    schema = load_schema(schema_ref)

    try:
        data = yaml.safe_load(data_file)
    except yaml.YAMLError as e:
        click.echo(click.style(f"Cannot parse {data_file.name}: {e}", fg="red"), err=True)
        raise SystemExit(1)

    options = ValidationOptions.from_env().merge(
        stop_early=True if stop_early else None,
        group_errors=False if no_group else None,
        check_schema=False if no_check_schema else None,
    )

    try:
        errors = validate_value(data, schema, options=options)
    except InvalidSchemaError as e:
        click.echo(click.style("Invalid schema:", fg="red", bold=True), err=True)
        for error in e.errors:
            click.echo(f"  {error}", err=True)
        raise SystemExit(2)

    if errors:
        _report_errors(errors)
        raise SystemExit(1)

    click.echo(click.style("Valid.", fg="green", bold=True))


@click.command("check-schema")
@click.argument("schema_ref")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def check_schema(schema_ref: str, verbose: bool):
    """Check a schema against the meta-schema."""
    _configure_logging(verbose)
    errors = validate_schema(load_schema(schema_ref))

    if errors:
        _report_errors(errors)
        raise SystemExit(1)

    click.echo(click.style("Schema is valid.", fg="green", bold=True))


@click.command()
@click.argument("schema_ref")
def show(schema_ref: str):
    """Print a readable rendering of a schema."""
    click.echo(format_schema(load_schema(schema_ref)))
