"""
Data models for ladderkit.

Provides Pydantic models for alleles, loci, ladders, channel maps and configuration.
"""

from .core import Allele, ChannelInfo, ChannelMap, Ladder, LadderConfig, Locus

__all__ = [
    "Allele",
    "ChannelInfo",
    "ChannelMap",
    "Ladder",
    "LadderConfig",
    "Locus",
]
