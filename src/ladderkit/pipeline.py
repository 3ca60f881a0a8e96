"""
Pipeline Orchestrator: Manages the execution flow of a ladder file build.

This module handles:
1. Reading the channel map, panels and bins inputs.
2. Building the kit ladder and the anchor (source) ladder.
3. Merging anchor data into the kit ladder and repairing search windows.
4. Writing the kit description document (and an optional volume copy).
"""

import logging
import time
from contextlib import contextmanager

from rich.console import Console

from .builder import build_ladders
from .io.input import BinsReader, PanelsReader, read_channel_map
from .io.output import copy_text_file, write_kit_file
from .models.core import Ladder, LadderConfig

logger = logging.getLogger(__name__)


@contextmanager
def _stage(name: str):
    """Log the duration of one pipeline stage at DEBUG."""
    start = time.perf_counter()
    logger.debug("Starting: %s", name)
    try:
        yield
    finally:
        logger.debug("Completed: %s (%.3fs)", name, time.perf_counter() - start)


class Pipeline:
    def __init__(self, config: LadderConfig):
        self.config = config
        self.console = Console()

    def run(self) -> Ladder:
        """Execute the pipeline and return the merged kit ladder."""
        self.console.print("[bold blue]Starting ladder build[/bold blue]")

        # 1. Load inputs
        with self.console.status("[bold green]Reading inputs...[/bold green]"):
            with _stage("Reading channel map"):
                channel_map = read_channel_map(self.config.channel_map_file)

            with _stage("Reading panels"):
                panels_reader = PanelsReader(self.config.panels_file)
                panels = panels_reader.read()

            with _stage("Reading bins"):
                bins = BinsReader(self.config.bins_file).read()

        self.console.print(
            f"Loaded [bold]{len(panels)}[/bold] panel markers and "
            f"[bold]{sum(len(b) for b in bins.values())}[/bold] bins."
        )

        name = self.config.marker_set_name or panels_reader.panel_name
        if not name:
            raise ValueError("No marker set name given and the panels file names no panel")

        # 2. Build ladders
        kit, source = build_ladders(
            panels,
            bins,
            channel_map,
            marker_set_name=name,
            ils_names=self.config.ils_names,
            ils_channel=self.config.ils_channel,
            suffix=self.config.suffix,
        )

        # 3. Merge
        with _stage("Merging ladders"):
            unresolved = source.merge_into(kit)

        for locus_name in unresolved:
            self.console.print(f"[yellow]Warning: no kit locus for {locus_name}[/yellow]")

        if not kit.all_loci_merged():
            logger.warning("Loci not merged: %s", ", ".join(kit.unmerged_loci()))

        # 4. Write outputs
        self.config.output_file.parent.mkdir(parents=True, exist_ok=True)
        write_kit_file(self.config.output_file, kit, channel_map)

        if self.config.volume_template is not None:
            copy_text_file(self.config.volume_template, self.config.volume_output)

        self.console.print(
            f"[bold green]Wrote {kit.num_loci} loci to {self.config.output_file}[/bold green]"
        )
        return kit
