"""Command-line interface for the HEIC to JPEG converter."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from heic2jpeg import __version__
from heic2jpeg.config import create_config
from heic2jpeg.logging_config import setup_logging
from heic2jpeg.models import BatchResults, ConversionResult, ConversionStatus
from heic2jpeg.orchestrator import ConversionOrchestrator

# Create console for rich output
console = Console()


def display_progress_bar(
    source: Path, destination: Path | None, orchestrator: ConversionOrchestrator
) -> BatchResults:
    """Display one progress bar per directory during a directory conversion.

    Args:
        source: Directory to convert
        destination: Optional output directory
        orchestrator: Orchestrator instance to use for conversion

    Returns:
        BatchResults from the conversion
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        tasks: dict[Path, TaskID] = {}

        def progress_callback(directory: Path, current: int, total: int, filename: str) -> None:
            if directory not in tasks:
                tasks[directory] = progress.add_task(f"[cyan]{directory.name}", total=total)
            progress.update(
                tasks[directory],
                completed=current,
                description=f"[cyan]{directory.name}: {filename}",
            )

        orchestrator.progress_callback = progress_callback
        results = orchestrator.convert_directory(source, destination)

        for directory, task in tasks.items():
            progress.update(task, description=f"[green]{directory.name}: done")

    return results


def display_summary(results: BatchResults) -> None:
    """Display a summary table with one row per directory processed.

    Args:
        results: BatchResults to display
    """
    table = Table(title="Conversion Summary", show_header=True, header_style="bold")
    table.add_column("Directory", style="cyan")
    table.add_column("Found", style="magenta")
    table.add_column("Successful")
    table.add_column("Failed")
    table.add_column("Success Rate")

    all_results = list(results.iter_all())
    for directory_results in all_results:
        table.add_row(
            str(directory_results.directory),
            str(directory_results.total_files),
            f"[green]{directory_results.successful}[/green]",
            f"[red]{directory_results.failed}[/red]",
            f"{directory_results.success_rate():.1f}%",
        )

    console.print()
    console.print(table)

    total = sum(r.total_files for r in all_results)
    successful = sum(r.successful for r in all_results)
    failed = sum(r.failed for r in all_results)

    console.print()
    if total == 0:
        console.print("[yellow]No HEIC/HEIF files found.[/yellow]")
    elif failed == 0:
        console.print(f"[green]All {total} file(s) converted successfully.[/green]")
    else:
        console.print(
            f"[yellow]Converted {successful} of {total} file(s); {failed} failed.[/yellow]"
        )
        console.print()
        console.print("[bold red]Failed Conversions:[/bold red]")
        for directory_results in all_results:
            for result in directory_results.results:
                if result.status == ConversionStatus.FAILED:
                    console.print(f"  [red]✗[/red] {result.input_path}: {result.error_message}")


def display_single_result(result: ConversionResult) -> None:
    """Display the result of a single file conversion.

    Args:
        result: ConversionResult to display
    """
    if result.status == ConversionStatus.SUCCESS:
        console.print(
            f"[green]✓[/green] Successfully converted: {result.input_path.name} → "
            f"{result.output_path.name if result.output_path else 'N/A'} "
            f"({result.processing_time:.2f}s)"
        )
        if not result.timestamps_preserved:
            console.print("[yellow]![/yellow] File timestamps could not be preserved")
    else:
        console.print(f"[red]✗[/red] Failed: {result.input_path.name} - {result.error_message}")


def handle_error(error: Exception) -> None:
    """Display a formatted error message.

    Args:
        error: Exception to display
    """
    console.print(f"[bold red]Error:[/bold red] {str(error)}", style="red")


@click.command()
@click.argument("input_path", type=click.Path(path_type=Path), required=False)
@click.argument("output_path", type=click.Path(path_type=Path), required=False)
@click.option(
    "--dir",
    "directory_mode",
    is_flag=True,
    default=False,
    help="Treat INPUT_PATH as a directory and convert every HEIC/HEIF file in it.",
)
@click.option(
    "--quality",
    "-q",
    type=str,
    default=None,
    help="JPEG quality level (1-100). Default: HEIC_QUALITY or 90.",
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    default=False,
    help="With --dir, also convert subdirectories, mirroring them under the output directory.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the log to this file.",
)
@click.option(
    "--version",
    is_flag=True,
    default=False,
    help="Show version information and exit.",
)
@click.help_option("--help", "-h")
def main(
    input_path: Path | None,
    output_path: Path | None,
    directory_mode: bool,
    quality: str | None,
    recursive: bool,
    verbose: bool,
    log_file: Path | None,
    version: bool,
) -> None:
    """Convert HEIC/HEIF images to JPEG.

    INPUT_PATH: HEIC file to convert, or a directory with --dir.

    OUTPUT_PATH: Optional output JPEG file, or output directory with --dir.

    Examples:

        # Convert a single file next to the original
        heic2jpeg photo.heic

        # Convert to an explicit path with custom quality
        heic2jpeg photo.heic out.jpg --quality=95

        # Convert a directory into another directory
        heic2jpeg --dir ./photos ./converted

        # Convert a directory tree
        heic2jpeg --dir ./photos ./converted --recursive
    """
    if version:
        console.print(f"HEIC to JPEG Converter v{__version__}")
        sys.exit(0)

    if input_path is None:
        console.print("[bold red]Error:[/bold red] No input specified.", style="red")
        console.print("Usage: heic2jpeg <input> [output] [--quality=N]")
        console.print("       heic2jpeg --dir <input_dir> [output_dir] [--quality=N] [--recursive]")
        sys.exit(1)

    try:
        # Quality is validated here, before any file is touched
        config = create_config(
            quality=quality,
            output_dir=output_path,
            recursive=recursive,
            verbose=verbose,
            log_file=log_file,
        )

        logger = setup_logging(verbose=verbose, log_file=log_file)

        if recursive and not directory_mode:
            logger.warning("--recursive only applies together with --dir; ignoring it")

        orchestrator = ConversionOrchestrator(config, logger)

        if verbose:
            console.print(f"[cyan]Quality:[/cyan] {config.quality}")
            console.print(
                f"[cyan]Output:[/cyan] {config.output_dir if config.output_dir else 'Same as input'}"
            )
            if directory_mode:
                console.print(f"[cyan]Recursive:[/cyan] {config.recursive}")
            console.print()

        if directory_mode:
            console.print(f"Converting directory: [cyan]{input_path}[/cyan]")
            results = display_progress_bar(input_path, config.output_dir, orchestrator)
            display_summary(results)
        else:
            console.print(f"Converting: [cyan]{input_path.name}[/cyan]")
            result = orchestrator.convert_single(input_path)
            display_single_result(result)

    except Exception as e:
        handle_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
