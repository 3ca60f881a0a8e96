"""
ladderkit - Ladder kit file generator for forensic STR typing.

This package builds the kit description of an allelic ladder: loci, their
ladder alleles and the base pair positions they occupy relative to the
internal lane standard, merged from panels and bins exports.

Example usage:
    $ ladderkit build -p panels.txt -b bins.txt -c channels.json -o kit.xml --ils ILS500 --ils-channel 5
"""

__version__ = "1.0.0"

from .core.label import AlleleLabel
from .models.core import Allele, ChannelMap, Ladder, LadderConfig, Locus
from .pipeline import Pipeline

__all__ = [
    "__version__",
    "Allele",
    "AlleleLabel",
    "ChannelMap",
    "Ladder",
    "LadderConfig",
    "Locus",
    "Pipeline",
]
