"""Command line interface for building and running Apicalypse queries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from apicalypse import __version__
from apicalypse.client import ApicalypseClient
from apicalypse.config import Config
from apicalypse.errors import ApiClientError, ConfigError, MissingInputError, OptionError
from apicalypse.filters import (
    FuncOption,
    exclude,
    fields,
    limit,
    new_filters,
    offset,
    search,
    sort,
    where,
)
from apicalypse.logging_setup import configure_logging
from apicalypse.serializer import encode, render


class ExitCode(int):
    """Enumerated exit codes for the CLI."""

    OK = 0
    VALIDATION_ERROR = 1
    HTTP_ERROR = 2


app = typer.Typer(help="Build and run Apicalypse queries", no_args_is_help=True)

FieldsOption = typer.Option(None, "--fields", "-f", help="Field to include; repeat for several.")
ExcludeOption = typer.Option(None, "--exclude", "-e", help="Field to exclude; repeat for several.")
WhereOption = typer.Option(None, "--where", "-w", help="Filter predicate; repeated predicates are AND'd.")
LimitOption = typer.Option(None, "--limit", help="Maximum number of results.")
OffsetOption = typer.Option(None, "--offset", help="Index of the first result.")
SortOption = typer.Option(None, "--sort", help="Field to sort by.")
OrderOption = typer.Option("asc", "--order", help="Sort order, asc or desc.")
SearchOption = typer.Option(None, "--search", help="Term to search for.")
SearchColumnOption = typer.Option("", "--search-column", help="Column to search in; requires --search.")


def _collect_options(
    *,
    field_names: Optional[List[str]],
    excluded: Optional[List[str]],
    predicates: Optional[List[str]],
    limit_value: Optional[int],
    offset_value: Optional[int],
    sort_field: Optional[str],
    order: str,
    term: Optional[str],
    column: str,
) -> list[FuncOption]:
    options: list[FuncOption] = []
    if field_names:
        options.append(fields(*field_names))
    if excluded:
        options.append(exclude(*excluded))
    if predicates:
        options.append(where(*predicates))
    if limit_value is not None:
        options.append(limit(limit_value))
    if offset_value is not None:
        options.append(offset(offset_value))
    if sort_field is not None:
        options.append(sort(sort_field, order))
    if term is not None:
        options.append(search(column, term))
    elif column:
        raise MissingInputError("--search-column requires --search", option="search")
    return options


@app.command("render")
def render_command(
    field_names: Optional[List[str]] = FieldsOption,
    excluded: Optional[List[str]] = ExcludeOption,
    predicates: Optional[List[str]] = WhereOption,
    limit_value: Optional[int] = LimitOption,
    offset_value: Optional[int] = OffsetOption,
    sort_field: Optional[str] = SortOption,
    order: str = OrderOption,
    term: Optional[str] = SearchOption,
    column: str = SearchColumnOption,
    encoded: bool = typer.Option(False, "--encoded", help="Escape the query for use in a URL."),
) -> None:
    """Print the query built from the given filters."""

    try:
        options = _collect_options(
            field_names=field_names,
            excluded=excluded,
            predicates=predicates,
            limit_value=limit_value,
            offset_value=offset_value,
            sort_field=sort_field,
            order=order,
            term=term,
            column=column,
        )
        filters = new_filters(*options)
    except OptionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ExitCode.VALIDATION_ERROR) from exc

    typer.echo(encode(filters) if encoded else render(filters))


@app.command("query")
def query_command(
    endpoint: str = typer.Argument(..., help="Endpoint to query, e.g. games."),
    field_names: Optional[List[str]] = FieldsOption,
    excluded: Optional[List[str]] = ExcludeOption,
    predicates: Optional[List[str]] = WhereOption,
    limit_value: Optional[int] = LimitOption,
    offset_value: Optional[int] = OffsetOption,
    sort_field: Optional[str] = SortOption,
    order: str = OrderOption,
    term: Optional[str] = SearchOption,
    column: str = SearchColumnOption,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the YAML configuration file.",
        dir_okay=False,
        resolve_path=True,
    ),
    overrides: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Configuration override as KEY=VALUE, e.g. client.timeout=10.",
    ),
) -> None:
    """Run a query against the configured API and print the results as JSON."""

    try:
        cli_overrides = Config.parse_cli_overrides(overrides or [])
        settings = Config.load(config, cli_overrides=cli_overrides)
    except (ConfigError, FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ExitCode.VALIDATION_ERROR) from exc

    configure_logging(settings.logging.level, settings.logging.format)
    client = ApicalypseClient(settings.client)
    try:
        options = _collect_options(
            field_names=field_names,
            excluded=excluded,
            predicates=predicates,
            limit_value=limit_value,
            offset_value=offset_value,
            sort_field=sort_field,
            order=order,
            term=term,
            column=column,
        )
        records = client.query(endpoint, *options)
    except OptionError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ExitCode.VALIDATION_ERROR) from exc
    except ApiClientError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=ExitCode.HTTP_ERROR) from exc

    typer.echo(json.dumps(records, indent=2, ensure_ascii=False))


@app.command("version")
def version() -> None:
    """Print the package version."""

    typer.echo(__version__)


def main() -> None:
    app()


__all__ = ["ExitCode", "app", "main"]
