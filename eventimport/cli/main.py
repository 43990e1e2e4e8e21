"""CLI for importing events.

Usage:
    eventimport preview https://www.eventbrite.com/e/jazz-night-123456789012
    eventimport preview https://example.com/event --json
    eventimport batch urls.txt
    eventimport parse details.txt --source meetup
    eventimport commit https://www.eventbrite.com/e/jazz-night-123456789012 --dry-run
    eventimport summary https://www.eventbrite.com/e/jazz-night-123456789012
"""

import asyncio
import json
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from eventimport import __version__
from eventimport.config import get_settings
from eventimport.core.event_model import EventDraft, EventSource, TextImport, UrlImport
from eventimport.core.exceptions import DuplicateEventError, EventImportError
from eventimport.core.pipeline import ImportPipeline
from eventimport.logging import setup_logging
from eventimport.utils.summary import format_cost, format_summary

app = typer.Typer(
    name="eventimport",
    help="Import events from URLs or pasted text as drafts",
    add_completion=False,
)
console = Console()


def get_pipeline() -> ImportPipeline:
    return ImportPipeline()


def fail(error: EventImportError) -> NoReturn:
    """Print an importer error and exit non-zero."""
    console.print(f"[red]Error:[/red] {error.message}")
    raise typer.Exit(1)


def print_draft(draft: EventDraft) -> None:
    """Print a draft as a two-column table."""
    if draft.warning:
        console.print(f"[yellow]Warning:[/yellow] {draft.warning}")

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", draft.title or "-")
    table.add_row("Start", draft.start_time.isoformat())
    table.add_row("End", draft.end_time.isoformat() if draft.end_time else "-")
    table.add_row("Venue", draft.venue.name if draft.venue else "-")
    table.add_row("Host", draft.host.name if draft.host else "-")
    table.add_row("Cost", format_cost(draft))
    table.add_row("Source", f"{draft.source.value} ({draft.source_id or 'no id'})")
    table.add_row("Ticket URL", draft.ticket_url or "-")
    table.add_row("Image", draft.image_url or "-")
    table.add_row("Description", (draft.description or "-")[:300])

    console.print(table)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info-level logs"),
):
    """Configure logging for every command."""
    settings = get_settings()
    setup_logging("INFO" if verbose else "WARNING", settings.log_format, settings.log_file)


@app.command()
def preview(
    url: str = typer.Argument(..., help="Event page URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the draft as JSON"),
):
    """Preview the draft extracted from a URL. Nothing is stored."""
    try:
        draft = asyncio.run(get_pipeline().preview(UrlImport(url=url)))
    except EventImportError as e:
        fail(e)

    if as_json:
        typer.echo(draft.model_dump_json(indent=2))
    else:
        print_draft(draft)


@app.command()
def batch(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File with one URL per line"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Preview every URL listed in a file."""
    urls = file.read_text(encoding="utf-8").splitlines()
    result = asyncio.run(get_pipeline().preview_urls(urls))

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("URL")
    table.add_column("Title")
    table.add_column("Status")

    for draft in result.drafts:
        status = "[yellow]MANUAL[/yellow]" if draft.warning else "[green]OK[/green]"
        table.add_row(draft.source_url[:60], draft.title[:40], status)
    for failure in result.failures:
        table.add_row(failure.url[:60], "-", f"[red]ERR[/red] {failure.error[:60]}")

    console.print(table)
    console.print(
        f"[bold]TOTALS:[/bold] Previewed: {result.success_count}, Failed: {result.failure_count}"
    )


@app.command()
def parse(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text file with labeled lines"),
    source: EventSource = typer.Option(EventSource.MANUAL, "--source", "-s", help="Source platform"),
    as_json: bool = typer.Option(False, "--json", help="Print the draft as JSON"),
):
    """Preview the draft parsed from pasted event details."""
    text = file.read_text(encoding="utf-8")
    if not text.strip():
        console.print("[red]Error:[/red] File is empty")
        raise typer.Exit(1)

    draft = asyncio.run(get_pipeline().preview(TextImport(text=text, source=source)))

    if as_json:
        typer.echo(draft.model_dump_json(indent=2))
    else:
        print_draft(draft)


@app.command()
def commit(
    url: str = typer.Argument(..., help="Event page URL"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the row without inserting it"),
):
    """Import a URL straight into Supabase as a draft.

    Examples:
        eventimport commit https://www.eventbrite.com/e/jazz-night-123456789012
        eventimport commit https://example.com/event --dry-run
    """
    pipeline = get_pipeline()

    if dry_run or get_settings().dry_run:
        try:
            draft = asyncio.run(pipeline.preview(UrlImport(url=url)))
        except EventImportError as e:
            fail(e)
        print_draft(draft)
        console.print("[yellow]DRY RUN:[/yellow] event row that would be inserted:")
        console.print_json(json.dumps(draft.to_supabase_dict()))
        return

    try:
        result = asyncio.run(pipeline.import_url(url))
    except DuplicateEventError as e:
        console.print(f"[yellow]Already imported:[/yellow] event {e.existing_id}")
        raise typer.Exit(1)
    except EventImportError as e:
        fail(e)

    console.print(f"[green]Imported[/green] event {result.event_id}")
    if result.venue_id:
        console.print(f"  venue: {result.venue_id} ({'created' if result.created_venue else 'reused'})")
    if result.host_id:
        console.print(f"  host: {result.host_id} ({'created' if result.created_host else 'reused'})")
    for warning in result.warnings:
        console.print(f"[yellow]Check:[/yellow] {warning}")


@app.command()
def summary(url: str = typer.Argument(..., help="Event page URL")):
    """Print the copyable plain-text summary of a URL's draft."""
    try:
        draft = asyncio.run(get_pipeline().preview(UrlImport(url=url)))
    except EventImportError as e:
        fail(e)

    typer.echo(format_summary(draft))


@app.command()
def version():
    """Show version information."""
    console.print("[bold]Event Importer[/bold]")
    console.print(f"Version: {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
