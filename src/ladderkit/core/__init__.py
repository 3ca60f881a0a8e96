"""
Core module for ladderkit.

Provides the allele label kernel and the ladder merge engine.
"""

from .label import AlleleLabel
from .merge import merge_ladder_into, merge_locus_into_ladder, repair_search_overlaps

__all__ = [
    "AlleleLabel",
    "merge_ladder_into",
    "merge_locus_into_ladder",
    "repair_search_overlaps",
]
