"""
CLI Entry Point: Exposes the ladderkit functionality via command line.
"""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .exceptions import LadderIOError, LadderKitError
from .io.output import copy_text_file
from .models.core import LadderConfig
from .pipeline import Pipeline

app = typer.Typer(help="ladderkit: STR ladder kit file generator")

console = Console()


@app.callback()
def main():
    """
    ladderkit: STR ladder kit file generator
    """
    pass


@app.command()
def version():
    """Print the version."""
    console.print(f"py-ladderkit {__version__}")


@app.command()
def build(
    panels_file: Path = typer.Option(..., "--panels", "-p", help="Panels file (tab-delimited)"),
    bins_file: Path = typer.Option(..., "--bins", "-b", help="Bins file (tab-delimited)"),
    channel_map_file: Path = typer.Option(
        ..., "--channel-map", "-c", help="JSON file mapping kit channels to fsa channel, color and dye"
    ),
    output_file: Path = typer.Option(..., "--output", "-o", help="Kit description file to write"),
    marker_set_name: str | None = typer.Option(
        None, "--name", "-n", help="Marker set name (defaults to the panel name)"
    ),
    ils_names: list[str] = typer.Option(
        ..., "--ils", help="Internal lane standard name. Can be specified multiple times."
    ),
    ils_channel: int = typer.Option(..., "--ils-channel", help="Kit channel of the lane standard"),
    suffix: str = typer.Option("", "--suffix", help="File name / genotype suffix"),
    volume_template: Path | None = typer.Option(
        None, "--volume-template", help="Default volume file to copy alongside the kit file"
    ),
    volume_output: Path | None = typer.Option(
        None, "--volume-output", help="Destination of the copied volume file"
    ),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write log records to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose debug logging"),
):
    """
    Build a ladder kit file from panels and bins.
    """
    # Configure logging
    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=verbose)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    try:
        config = LadderConfig(
            panels_file=panels_file,
            bins_file=bins_file,
            channel_map_file=channel_map_file,
            output_file=output_file,
            marker_set_name=marker_set_name,
            ils_names=ils_names,
            ils_channel=ils_channel,
            suffix=suffix,
            volume_template=volume_template,
            volume_output=volume_output,
            verbose=verbose,
        )

        Pipeline(config).run()

    except (LadderKitError, ValidationError, ValueError) as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e


@app.command()
def copy(
    source: Path = typer.Argument(..., help="Text file to copy"),
    destination: Path = typer.Argument(..., help="File to create"),
):
    """
    Copy a text file verbatim (e.g. a default volume file).
    """
    try:
        copy_text_file(source, destination)
    except LadderIOError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
