"""
Command-line interface for Page Splitter.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from page_splitter import __version__
from page_splitter.config import SplitterSettings
from page_splitter.destinations import STORAGE_STRATEGIES, create_allocator, folder_name_for
from page_splitter.exceptions import InvalidRangeError, PageSplitterException
from page_splitter.pipeline import SplitPipeline
from page_splitter.ranges import (
    format_selection,
    is_valid_range,
    parse_page_range,
    parse_page_range_report,
)
from page_splitter.utils import (
    configure_logging,
    format_file_size,
    format_pdf_date,
    get_pdf_info,
    open_source,
    validate_pdf,
)

console = Console()


def _fail(message):
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


def _validated(input_pdf, password=None):
    is_valid, error_msg = validate_pdf(input_pdf, password=password)
    if not is_valid:
        _fail(error_msg)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """
    Page Splitter - Split a PDF into one file per selected page.
    """
    try:
        settings = SplitterSettings.from_env()
    except ValueError as e:
        raise click.UsageError(str(e))
    configure_logging(logging.DEBUG if verbose else settings.log_level)
    ctx.obj = settings


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', default=None, help='Password for encrypted PDFs')
def show_info(input_pdf, password):
    """
    Display information about a PDF file.

    Example:

        page-splitter info input.pdf
    """
    _validated(input_pdf, password)
    try:
        info = get_pdf_info(input_pdf, password=password)
    except PageSplitterException as e:
        _fail(e)

    table = Table(title=f"PDF Information: {info.file_name}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("File Path", os.path.abspath(input_pdf))
    table.add_row("File Size", format_file_size(info.file_size))
    table.add_row("Number of Pages", str(info.num_pages))
    if info.title:
        table.add_row("Title", info.title)
    table.add_row("Author", info.author or "Unknown")
    table.add_row("Creator", info.creator or "Unknown")
    table.add_row("Producer", info.producer or "Unknown")
    table.add_row("Created", format_pdf_date(info.creation_date))
    table.add_row("Modified", format_pdf_date(info.modification_date))

    console.print()
    console.print(table)
    console.print()


@cli.command(name="check-range")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.argument('expression')
@click.option('--password', default=None, help='Password for encrypted PDFs')
@click.option('--strict/--lenient', default=None, help='Fail when any token is dropped')
@click.pass_obj
def check_range(settings, input_pdf, expression, password, strict):
    """
    Show which pages a range expression selects.

    Example:

        page-splitter check-range input.pdf "1-3,5"
    """
    strict = settings.strict_ranges if strict is None else strict
    _validated(input_pdf, password)
    with open_source(input_pdf, password=password) as document:
        total_pages = document.page_count

    report = parse_page_range_report(expression, total_pages)
    if report.selection:
        console.print(
            f"[bold green]✓ {len(report.selection)} page(s):[/bold green] {format_selection(report.selection)}"
        )
    for token in report.dropped:
        console.print(f"[yellow]⚠ Ignored token:[/yellow] {token}")

    if not is_valid_range(expression, total_pages):
        _fail(f"'{expression}' does not select any of the {total_pages} pages")
    if strict and report.dropped:
        _fail(InvalidRangeError(report.dropped))


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--pages', '-p',
    default='',
    help='Page range expression, e.g. "1-3,5". Empty selects every page'
)
@click.option(
    '--output-dir', '-o',
    default=None,
    type=click.Path(file_okay=False),
    help='Storage root for split pages'
)
@click.option(
    '--storage',
    type=click.Choice(STORAGE_STRATEGIES),
    default=None,
    help='Output layout strategy'
)
@click.option('--strict/--lenient', default=None, help='Fail when any range token is dropped')
@click.option('--rollback/--keep-partial', default=None, help='Remove written pages if the split fails')
@click.option('--password', default=None, help='Password for encrypted PDFs')
@click.pass_obj
def split(settings, input_pdf, pages, output_dir, storage, strict, rollback, password):
    """
    Split a PDF into one single-page PDF per selected page.

    Examples:

        page-splitter split input.pdf

        page-splitter split input.pdf --pages "1-3,5" -o my_pages

        page-splitter split input.pdf --storage scoped --rollback
    """
    settings = settings.with_overrides(
        output_dir=output_dir,
        storage=storage,
        strict_ranges=strict,
        rollback_on_failure=rollback,
    )

    console.print("\n[bold cyan]Validating PDF...[/bold cyan]")
    _validated(input_pdf, password)

    try:
        with open_source(input_pdf, password=password) as document:
            total_pages = document.page_count

            selection = None
            if pages.strip():
                try:
                    selection = parse_page_range(pages, total_pages, strict=settings.strict_ranges)
                except InvalidRangeError as e:
                    _fail(e)
                if not is_valid_range(pages, total_pages):
                    _fail(f"'{pages}' does not select any of the {total_pages} pages")

            allocator = create_allocator(settings.storage, settings.output_dir)
            pipeline = SplitPipeline(allocator, rollback_on_failure=settings.rollback_on_failure)
            selected = total_pages if selection is None else len(selection)

            console.print(f"\n[bold cyan]Splitting {selected} page(s)...[/bold cyan]")
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeRemainingColumn(),
                console=console
            ) as progress:
                task = progress.add_task("Initializing", total=selected)

                def update_progress(event):
                    progress.update(
                        task,
                        completed=max(event.current_index - 1, 0),
                        description=event.current_file_name or "Initializing",
                    )

                outcome = pipeline.run(
                    document,
                    selection,
                    folder_name=folder_name_for(input_pdf),
                    progress_callback=update_progress,
                )
                if outcome.success:
                    progress.update(task, completed=selected, description="Done")
    except PageSplitterException as e:
        _fail(e)

    if not outcome.success:
        if outcome.artifacts and not outcome.rolled_back:
            console.print(
                f"[yellow]⚠ {len(outcome.artifacts)} page file(s) were written before the failure[/yellow]"
            )
        _fail(outcome.error_message)

    console.print(f"\n[bold green]✓ Successfully split into {outcome.page_count} pages[/bold green]")
    console.print(f"[dim]Saved to: {outcome.output_location}[/dim]")

    console.print("\n[bold]Created files:[/bold]")
    sample_size = min(5, len(outcome.artifacts))
    for artifact in outcome.artifacts[:sample_size]:
        console.print(f"  • {artifact.file_name}")
    if len(outcome.artifacts) > sample_size:
        console.print(f"  ... and {len(outcome.artifacts) - sample_size} more")
    console.print()


if __name__ == "__main__":
    cli()
