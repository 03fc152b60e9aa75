"""CLI entry point for schema-bridge."""

from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from schema_bridge.config import get_settings
from schema_bridge.generator.document import build_document, dump_document, load_shell
from schema_bridge.generator.validator import validate_document
from schema_bridge.log import configure_logging
from schema_bridge.parser.loader import LoaderError, load_route_table


def _build(routes_path: Path, shell_path: Path | None) -> dict:
    """Load the route table and shell, then build the document."""
    try:
        routes = load_route_table(routes_path)
        shell = load_shell(shell_path)
    except (LoaderError, ValidationError, yaml.YAMLError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Found {len(routes)} routes.", err=True)
    return build_document(routes, shell)


@click.group()
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False), help="Logging level (defaults to SCHEMA_BRIDGE_LOG_LEVEL).")
def main(log_level: str | None):
    """Schema Bridge — generate OpenAPI documents from route declarations."""
    configure_logging(log_level or get_settings().log_level)


@main.command()
@click.argument("routes_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Output file for the document (stdout if omitted).")
@click.option("--shell", "shell_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Document shell to merge paths into.")
@click.option("--format", "fmt", default=None, type=click.Choice(["yaml", "json"]), help="Output format (defaults to SCHEMA_BRIDGE_OUTPUT_FORMAT).")
@click.option("--check", is_flag=True, help="Verify OUTPUT is up to date instead of writing it.")
def build(routes_path: Path, output: Path | None, shell_path: Path | None, fmt: str | None, check: bool):
    """Generate an OpenAPI document from a route table."""
    fmt = fmt or get_settings().output_format
    click.echo(f"Parsing {routes_path}...", err=True)
    text = dump_document(_build(routes_path, shell_path), fmt)

    if check:
        if output is None:
            raise click.UsageError("--check requires --output.")
        current = output.read_text(encoding="utf-8") if output.exists() else None
        if current != text:
            click.echo(f"{output} is out of date.", err=True)
            raise SystemExit(1)
        click.echo(f"{output} is up to date.", err=True)
        return

    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Document saved to {output}", err=True)


@main.command()
@click.argument("routes_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--shell", "shell_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Document shell to merge paths into.")
def check(routes_path: Path, shell_path: Path | None):
    """Build the document and report structural problems."""
    document = _build(routes_path, shell_path)
    errors = validate_document(document)
    if not errors:
        click.echo("No problems found.")
        return

    click.echo(f"Found {len(errors)} problems:")
    for location, err in errors.items():
        click.echo(f"  {location}: {err}")
    raise SystemExit(1)
