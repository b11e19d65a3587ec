"""CLI entry point: validate a JSON document against a JSON schema definition."""

import json
import sys
from pathlib import Path

import click
from loguru import logger

from .config import SchemaSettings
from .definitions import schema_from_dict
from .errors import DefinitionError
from .interop import to_json_schema

log = logger.bind(component="cli")


def _load_json(path: Path, what: str):
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise click.UsageError(f"{what} {path} is not valid JSON: {exc}") from exc


@click.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "data_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Print issues as JSON.")
@click.option("--abort-early", is_flag=True, help="Stop at the first issue.")
@click.option(
    "--json-schema", is_flag=True, help="Print the schema as JSON Schema and exit."
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to .env file.",
)
def main(
    schema_file: Path,
    data_file: Path | None,
    as_json: bool,
    abort_early: bool,
    json_schema: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Validate DATA_FILE (JSON) against the schema definition in SCHEMA_FILE.

    Exit status: 0 valid, 1 invalid, 2 bad definition or usage.
    """
    # CLI flags are passed as kwargs so they win over env and .env
    settings_kwargs: dict[str, object] = {}
    if config_file:
        settings_kwargs["_env_file"] = config_file
    if verbose:
        settings_kwargs["log_level"] = "DEBUG"
    if abort_early:
        settings_kwargs["abort_early"] = True

    settings = SchemaSettings(**settings_kwargs)  # type: ignore[arg-type]
    settings.setup_logging()

    try:
        schema = schema_from_dict(_load_json(schema_file, "schema file"))
        log.debug(f"Loaded schema from {schema_file}")
        if json_schema:
            click.echo(json.dumps(to_json_schema(schema), indent=2, default=str))
            return
    except DefinitionError as exc:
        raise click.UsageError(str(exc)) from exc

    if data_file is None:
        raise click.UsageError("DATA_FILE is required unless --json-schema is given.")

    data = _load_json(data_file, "data file")
    result = schema.safe_parse(data, settings.parse_context())

    if result.success:
        log.info(f"{data_file} is valid")
        click.echo("OK")
        return

    error = result.error
    log.info(f"{data_file} failed validation with {len(error)} issue(s)")
    if as_json:
        click.echo(error.to_json())
    else:
        click.echo(error.format())
    sys.exit(1)
