"""
Merge Engine: applies anchor data from a source ladder onto a kit ladder.

The source ladder carries, per locus, the BP of the first core allele, the
extended allele range and the ILS search window. Merging copies these onto
the same-named locus of the target, recomputes every allele BP, widens the
search window and finally separates overlapping windows of neighboring
loci that share a channel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import LadderKitError, UnresolvedMergeTargetError

if TYPE_CHECKING:
    from ..models.core import Ladder, Locus

logger = logging.getLogger(__name__)

# Padding added outside the unwidened window when splitting an overlap
BOUNDARY_PADDING = 0.55


def merge_locus_into_ladder(locus: Locus, ladder: Ladder) -> Locus:
    """
    Merge one source locus into the matching locus of ``ladder``.

    Args:
        locus: Source locus carrying anchor data and search window.
        ladder: Target ladder containing a locus of the same name.

    Returns:
        The updated target locus.

    Raises:
        UnresolvedMergeTargetError: If ``ladder`` has no locus of that name.
        EmptyLocusError: If the target locus has no alleles.
        MalformedLabelError: If an allele or extended allele label does not parse.

    A failed BP computation leaves the target locus as it was.
    """
    target = ladder.find_locus(locus.name)
    if target is None:
        raise UnresolvedMergeTargetError(locus.name)

    previous = (
        target.first_core_locus_bp,
        target.first_extended_allele,
        target.last_extended_allele,
    )
    target.first_core_locus_bp = locus.first_core_locus_bp
    target.first_extended_allele = locus.first_extended_allele
    target.last_extended_allele = locus.last_extended_allele
    try:
        target.compute_all_bps()
    except LadderKitError:
        (
            target.first_core_locus_bp,
            target.first_extended_allele,
            target.last_extended_allele,
        ) = previous
        raise
    target.set_min_max_search_ils_bp(locus.min_search_ils_bp, locus.max_search_ils_bp)
    target.adjust_search_region()
    target.is_merged = True

    logger.debug(
        "Merged %s: BP %s-%s, search %.2f-%.2f",
        target.name,
        target.min_locus_bp,
        target.max_locus_bp,
        target.min_search_ils_bp,
        target.max_search_ils_bp,
    )
    return target


def repair_search_overlaps(loci: list[Locus]) -> int:
    """
    Separate overlapping search windows of consecutive same-channel loci.

    Only immediate neighbors in list order are compared, so loci must be
    ordered by channel and position for every overlap to be seen.

    Returns:
        Number of overlaps repaired.

    Raises:
        ValueError: If a split leaves either locus with min > max, as when
            one window lies inside its neighbor's.
    """
    repaired = 0
    prev = None

    for locus in loci:
        if prev is None or locus.channel != prev.channel:
            prev = locus
            continue

        prev_max = prev.max_search_ils_bp
        next_min = locus.min_search_ils_bp

        if prev_max <= next_min:
            prev = locus
            continue

        prev_boundary = prev.original_max_search_ils_bp + BOUNDARY_PADDING
        next_boundary = locus.original_min_search_ils_bp - BOUNDARY_PADDING

        if prev_boundary > next_boundary:
            prev_boundary = next_boundary = 0.5 * (prev_boundary + next_boundary)

        if prev_max >= next_boundary:
            prev.max_search_ils_bp = next_boundary

        if next_min <= prev_boundary:
            locus.min_search_ils_bp = prev_boundary

        logger.info(
            "Search windows of %s and %s overlapped on channel %d; split at %.2f / %.2f",
            prev.name,
            locus.name,
            locus.channel,
            prev.max_search_ils_bp,
            locus.min_search_ils_bp,
        )
        prev.check_search_window()
        locus.check_search_window()
        repaired += 1
        prev = locus

    return repaired


def merge_ladder_into(source: Ladder, target: Ladder) -> list[str]:
    """
    Merge every locus of ``source`` into ``target``, then repair overlaps.

    Loci without a counterpart in ``target`` are logged and skipped. The
    overlap repair walks the merged target loci in the source's list order.

    Returns:
        Names of the source loci that could not be resolved in ``target``.
    """
    unresolved = []
    merged = []

    for locus in source.loci.values():
        try:
            merged.append(merge_locus_into_ladder(locus, target))
        except UnresolvedMergeTargetError as e:
            logger.warning("%s", e)
            unresolved.append(e.locus_name)

    repaired = repair_search_overlaps(merged)
    logger.debug(
        "Merged %d loci into %s (%d unresolved, %d overlaps repaired)",
        len(merged),
        target.marker_set_name,
        len(unresolved),
        repaired,
    )
    return unresolved
