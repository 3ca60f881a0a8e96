"""
Ladder Builder: turns panels and bins records into the two ladders to merge.

The kit ladder holds the ladder alleles of every marker. The source ladder
holds, for the same markers, the anchor data that positions those alleles:
the size of the first bin, the extended allele range and the panel's search
window.
"""

import logging

from .exceptions import LadderInputError
from .io.input import BinRecord, PanelRecord
from .models.core import Allele, ChannelMap, Ladder

logger = logging.getLogger(__name__)


def build_ladders(
    panels: list[PanelRecord],
    bins: dict[str, list[BinRecord]],
    channel_map: ChannelMap,
    marker_set_name: str,
    ils_names: list[str],
    ils_channel: int,
    suffix: str = "",
) -> tuple[Ladder, Ladder]:
    """
    Build the kit ladder and the source ladder.

    Args:
        panels: Panel records in file order.
        bins: Bin records grouped by marker name.
        channel_map: Kit channel assignments used to resolve dye colors.
        marker_set_name: Name of the marker set.
        ils_names: Internal lane standard names.
        ils_channel: Kit channel of the internal lane standard.
        suffix: File name / genotype suffix of the kit.

    Returns:
        (kit ladder, source ladder)

    Raises:
        LadderInputError: If a marker's dye color is not in the channel map.
    """
    kit = Ladder(
        marker_set_name=marker_set_name,
        number_of_channels=channel_map.number_of_channels,
        channel_for_ils=ils_channel,
        suffix=suffix,
    )
    for name in ils_names:
        kit.add_ils(name)

    source = Ladder(marker_set_name=marker_set_name, number_of_channels=channel_map.number_of_channels)

    for record in panels:
        channel = channel_map.kit_channel_for_color(record.color)
        if channel is None:
            raise LadderInputError(
                f"Dye color {record.color!r} of locus {record.locus} is not in the channel map",
                record.line_number,
            )

        marker_bins = bins.get(record.locus)
        if not marker_bins:
            logger.warning("No bins found for locus %s; skipping", record.locus)
            continue

        locus = kit.new_locus(record.locus, channel, record.core_repeat)
        for curve_number, bin_record in enumerate(marker_bins, start=1):
            allele = Allele(
                name=bin_record.allele,
                curve_number=curve_number,
                bp=bin_record.bp,
                is_virtual=bin_record.is_virtual,
                relative_height=bin_record.relative_height,
            )
            if not locus.add_allele(allele):
                logger.warning("Duplicate allele %s in locus %s skipped", allele.name, locus.name)

        for control in record.control_alleles:
            if locus.find_allele(control) is None:
                logger.warning("Control allele %s of locus %s has no bin", control, locus.name)

        if not kit.add_locus(locus):
            logger.warning("Duplicate locus %s skipped", record.locus)
            continue

        anchor = source.new_locus(record.locus, channel, record.core_repeat)
        anchor.first_core_locus_bp = marker_bins[0].bp
        anchor.first_extended_allele = record.first_extended_allele or marker_bins[0].allele
        anchor.last_extended_allele = record.last_extended_allele or marker_bins[-1].allele
        anchor.set_min_max_search_ils_bp(record.min_size, record.max_size)
        source.add_locus(anchor)

    unused = set(bins) - set(kit.loci)
    for marker in sorted(unused):
        logger.warning("Bins for marker %s have no panel entry; ignored", marker)

    logger.info("Built %s with %d loci", marker_set_name, kit.num_loci)
    return kit, source
