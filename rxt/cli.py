"""RXT CLI - Command-line interface for the record export tool."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import typer
from typing_extensions import Annotated

from rxt import __version__
from rxt.core.config import config
from rxt.core.export_runner import ExportRunner
from rxt.core.registry import EncoderRegistry, create_default_registry
from rxt.exceptions import ConfigurationError, ValidationError
from rxt.models.options import ExportConfig, ExportOptions
from rxt.models.request import ExportRequest
from rxt.models.results import ExportOutcome
from rxt.utils.logging import configure_logging
from rxt.utils.yaml_parser import load_export_config, load_records

app = typer.Typer(
    name="rxt",
    help="RXT - The Record Export Tool",
    add_completion=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"rxt version {__version__}")
        raise typer.Exit()


def _parse_filter_value(raw: str) -> Any:
    """Interpret a filter value as a JSON scalar, falling back to text."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_filters(items: List[str]) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Filter must look like field=value, got: {item}", param_hint="--filter")
        filters[key.strip()] = _parse_filter_value(value)
    return filters


def _build_registry(export_config: ExportConfig) -> EncoderRegistry:
    registry = create_default_registry()
    for kind, class_path in export_config.encoders.items():
        registry.register_from_path(kind, class_path)
    return registry


def _display_outcome(outcome: ExportOutcome) -> None:
    """Display export outcome to console."""
    if outcome.success:
        typer.secho(f"✓ {outcome.format}: {outcome.file_path}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"✗ {outcome.format}: {outcome.diagnostic}", fg=typer.colors.RED)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (defaults to RXT_LOG_LEVEL)"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format: text or json (defaults to RXT_LOG_FORMAT)"),
    ] = None,
) -> None:
    """RXT - Export record collections to CSV, JSON and PDF."""
    configure_logging(log_level, log_format)


@app.command()
def export(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Record file (.json, .jsonl, .yaml)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    formats: Annotated[
        Optional[List[str]],
        typer.Option("--format", "-f", help="Output format; repeat for several"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Target file (one format) or path prefix without extension (several formats)",
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Export configuration YAML", exists=True, dir_okay=False),
    ] = None,
    fields: Annotated[
        Optional[str],
        typer.Option("--fields", help="Comma-separated field selection, in output order"),
    ] = None,
    filters: Annotated[
        Optional[List[str]],
        typer.Option("--filter", help="Exact-match filter field=value (value parsed as JSON if possible)"),
    ] = None,
    include_metadata: Annotated[
        Optional[bool],
        typer.Option("--include-metadata/--no-metadata", help="Stamp records with export metadata"),
    ] = None,
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Artifact base name when --output is not given"),
    ] = "export",
) -> None:
    """Export a record file to one or more formats."""
    try:
        export_config = load_export_config(config_path) if config_path else ExportConfig(format=config.default_format)

        option_updates: dict[str, Any] = {}
        if fields:
            option_updates["fields"] = [f.strip() for f in fields.split(",") if f.strip()]
        if filters:
            option_updates["filters"] = _parse_filters(filters)
        if include_metadata is not None:
            option_updates["include_metadata"] = include_metadata
        options = ExportOptions(**{**export_config.options.model_dump(), **option_updates})

        kinds = [f.strip().lower() for f in formats] if formats else [export_config.format]
        records = load_records(input_path)
        registry = _build_registry(export_config)
    except (ValidationError, ConfigurationError, ValueError) as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Loaded {len(records)} records from {input_path}")

    if output is None:
        runner = ExportRunner(registry)
        outcomes = runner.export_many(records, export_config.model_copy(update={"options": options}), kinds, name=name)
    elif len(kinds) == 1:
        outcomes = {
            kinds[0]: registry.dispatch(
                ExportRequest(records=records, format=kinds[0], output_path=output, options=options)
            )
        }
    else:
        results = registry.export_multiple(records, output, kinds, options)
        outcomes = {
            kind: ExportOutcome(
                success=ok,
                format=kind,
                file_path=f"{output}.{kind}" if ok else None,
                diagnostic=None if ok else "Export failed (see log)",
                records_received=len(records),
                started_at=datetime.now(),
            )
            for kind, ok in results.items()
        }

    for outcome in outcomes.values():
        _display_outcome(outcome)

    if not all(outcome.success for outcome in outcomes.values()):
        raise typer.Exit(code=1)


@app.command()
def formats() -> None:
    """List the registered output formats."""
    registry = create_default_registry()
    for kind in registry.formats:
        encoder = registry.get_encoder(kind)
        typer.echo(f"{kind:<8} {type(encoder).__name__}")


@app.command()
def validate(
    config_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the export configuration YAML",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
) -> None:
    """Validate an export configuration file."""
    try:
        typer.echo(f"Validating export configuration: {config_path}")
        export_config = load_export_config(config_path)
        registry = _build_registry(export_config)

        if export_config.format not in registry:
            raise ConfigurationError(
                f"Unsupported export format: {export_config.format}. "
                f"Registered formats: {', '.join(registry.formats)}"
            )

        typer.secho("✓ Configuration is valid!", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"\nFormat: {export_config.format}")
        options = export_config.options
        typer.echo(f"Include metadata: {options.include_metadata}")
        if options.fields:
            typer.echo(f"Fields: {', '.join(options.fields)}")
        if options.filters:
            for key, value in options.filters.items():
                typer.echo(f"Filter: {key} = {value!r}")
        for kind, class_path in export_config.encoders.items():
            typer.echo(f"Encoder: {kind} -> {class_path}")

    except (ValidationError, ConfigurationError) as e:
        typer.secho(f"✗ Validation failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
