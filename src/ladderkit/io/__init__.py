"""
I/O module for ladderkit.

Provides readers for panels, bins and channel map files and the kit document writer.
"""

from .input import BinRecord, BinsReader, PanelRecord, PanelsReader, read_channel_map
from .output import KitDocumentWriter, copy_text_file, round_half_up, write_kit_file

__all__ = [
    "BinRecord",
    "BinsReader",
    "KitDocumentWriter",
    "PanelRecord",
    "PanelsReader",
    "copy_text_file",
    "read_channel_map",
    "round_half_up",
    "write_kit_file",
]
