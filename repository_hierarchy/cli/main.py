"""Repository Hierarchy CLI - Main entry point.

This module provides the command-line interface for browsing the repositories
of a GEDCOM file and exporting their call number hierarchy as EAD/XML.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from repository_hierarchy.config import settings
from repository_hierarchy.dates.formatting import format_iso
from repository_hierarchy.dates.locale import (
    DEFAULT_RANGE_TOKENS,
    RangeTokens,
    resolve_range_tokens,
)
from repository_hierarchy.exceptions import RepositoryHierarchyError
from repository_hierarchy.export.download import write_document
from repository_hierarchy.export.ead import build_ead_document
from repository_hierarchy.facts import (
    call_number_for_source,
    default_repository_xref,
    display_date_range_for_source,
    iso_date_range_for_source,
    repository_address_lines,
    sort_sources_by_call_number,
)
from repository_hierarchy.hierarchy import CallNumberCategory, build_hierarchy
from repository_hierarchy.ingestion.gedcom import GedcomFile
from repository_hierarchy.schemas.records import REPOSITORY_RECORD_TYPE, GedcomRecord
from repository_hierarchy.utils import remove_html_tags

app = typer.Typer(
    name="rh",
    help="Repository Hierarchy - Archival repositories and their sources as a finding aid",
    add_completion=False,
)
console = Console()

GEDCOM_OPTION = typer.Option(
    None, "--gedcom", "-g", help="Path to GEDCOM file (default: GEDCOM_PATH)"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug log messages"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_records(gedcom: Path | None) -> GedcomFile:
    """Read the GEDCOM file given on the command line or in the settings."""
    path = gedcom or settings.gedcom_path
    if path is None:
        console.print("[red]No GEDCOM file given. Use --gedcom or set GEDCOM_PATH.[/red]")
        raise typer.Exit(1)
    if not Path(path).is_file():
        console.print(f"[red]GEDCOM file not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        return GedcomFile.from_path(path)
    except (RepositoryHierarchyError, OSError) as e:
        console.print(f"[red]Error reading {path}: {e!s}[/red]")
        raise typer.Exit(1) from e


def select_repository(records: GedcomFile, xref: str | None) -> GedcomRecord:
    """Get the requested repository, or the first one if none is requested."""
    xref = xref or default_repository_xref(records)
    if xref is None:
        console.print("[red]The GEDCOM file contains no repositories.[/red]")
        raise typer.Exit(1)

    try:
        repository = records.record(xref)
    except RepositoryHierarchyError as e:
        console.print(f"[red]{e!s}[/red]")
        raise typer.Exit(1) from e
    if repository.record_type != REPOSITORY_RECORD_TYPE:
        console.print(f"[red]{xref} is not a repository[/red]")
        raise typer.Exit(1)
    return repository


@app.command()
def repositories(gedcom: Path | None = GEDCOM_OPTION) -> None:
    """List the repositories of a GEDCOM file."""
    records = load_records(gedcom)

    table = Table(show_header=True, header_style="bold cyan", title="Repositories")
    table.add_column("Xref", style="dim")
    table.add_column("Name")
    table.add_column("Address")
    table.add_column("Sources", justify="right")

    for repository in records.repositories():
        address_lines = repository_address_lines(repository)
        address = address_lines.get("REPO:ADDR")
        table.add_row(
            repository.xref,
            repository.name,
            address.unescape() if address else "",
            str(len(records.sources_for_repository(repository.xref))),
        )

    console.print(table)


def _add_category_branch(branch: Tree, category: CallNumberCategory, tokens: RangeTokens) -> None:
    for sub_category in category.sub_categories:
        label = f"[bold]{sub_category.name}[/bold]"
        date_range = sub_category.date_range()
        if date_range is not None:
            label += f" [dim]{format_iso(date_range, tokens)}[/dim]"
        _add_category_branch(branch.add(label), sub_category, tokens)
    for source in category.sources:
        date_range = display_date_range_for_source(source, tokens)
        label = source.name
        if date_range:
            label += f" [dim]({remove_html_tags(date_range)})[/dim]"
        branch.add(label)


@app.command()
def hierarchy(
    xref: str | None = typer.Argument(None, help="Repository xref (default: first repository)"),
    gedcom: Path | None = GEDCOM_OPTION,
    delimiter: list[str] | None = typer.Option(
        None, "--delimiter", "-d", help="Call number delimiter (repeatable)"
    ),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Locale of date ranges"),
) -> None:
    """Show the call number hierarchy of a repository."""
    records = load_records(gedcom)
    repository = select_repository(records, xref)

    root = build_hierarchy(repository, records, delimiters=delimiter or None)
    tree = Tree(f"[bold cyan]{repository.name}[/bold cyan] [dim]({repository.xref})[/dim]")
    tokens = resolve_range_tokens(locale) if locale else DEFAULT_RANGE_TOKENS
    _add_category_branch(tree, root, tokens)
    console.print(tree)


@app.command()
def sources(
    xref: str | None = typer.Argument(None, help="Repository xref (default: first repository)"),
    gedcom: Path | None = GEDCOM_OPTION,
) -> None:
    """List the sources of a repository sorted by call number."""
    records = load_records(gedcom)
    repository = select_repository(records, xref)
    tokens = DEFAULT_RANGE_TOKENS

    table = Table(show_header=True, header_style="bold cyan", title=repository.name)
    table.add_column("Call Number", style="dim")
    table.add_column("Title")
    table.add_column("Date Range", justify="right")
    table.add_column("Xref", style="dim")

    repository_sources = records.sources_for_repository(repository.xref)
    for source in sort_sources_by_call_number(repository_sources, repository):
        table.add_row(
            call_number_for_source(source, repository) or "",
            source.name,
            iso_date_range_for_source(source, tokens) or "",
            source.xref,
        )

    console.print(table)


@app.command()
def export(
    xref: str | None = typer.Argument(None, help="Repository xref (default: first repository)"),
    gedcom: Path | None = GEDCOM_OPTION,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (default: EAD_<xref>.xml)"
    ),
) -> None:
    """Export the hierarchy of a repository as EAD/XML."""
    records = load_records(gedcom)
    repository = select_repository(records, xref)
    output = output or Path(f"EAD_{repository.xref}.xml")

    tree = build_ead_document(repository, records, tokens=DEFAULT_RANGE_TOKENS)
    try:
        size = write_document(tree, output)
    except OSError as e:
        console.print(f"[red]Error writing {output}: {e!s}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[bold green]✓[/bold green] Wrote {output} ({size} bytes)")


@app.command()
def version() -> None:
    """Display version information."""
    from repository_hierarchy import __version__

    console.print(f"\n[bold cyan]Repository Hierarchy[/bold cyan] version {__version__}\n")


if __name__ == "__main__":
    app()
