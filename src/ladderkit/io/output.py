"""
Output Writers: the kit description document and plain file copies.

The kit document is a fixed-order XML layout:
KitData -> Kits -> Set (marker set header, LS block, suffixes, channel map)
-> Locus* -> LadderAlleles -> Allele*.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import TextIO
from xml.sax.saxutils import escape

from ..exceptions import LadderIOError
from ..models.core import (
    DEFAULT_CORE_REPEAT,
    DEFAULT_MAX_EXPECTED_ALLELES,
    DEFAULT_MIN_EXPECTED_ALLELES,
    Allele,
    ChannelMap,
    Ladder,
    Locus,
)

logger = logging.getLogger(__name__)

KIT_DATA_VERSION = "2.0"
SCHEMA_INSTANCE = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = "MarkerSet.xsd"


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to ``places`` decimals with ties away from zero.

    Works on the shortest decimal form of ``value`` so that 117.005 rounds
    to 117.01 even though its binary value is slightly below the tie.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Locale-independent text for a number; integral values lose the decimal point."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return format(value, ".10g")


class KitDocumentWriter:
    """Writes a Ladder as a kit description document to a text sink."""

    def __init__(self, sink: TextIO):
        self.sink = sink

    def _line(self, depth: int, text: str) -> None:
        self.sink.write("\t" * depth + text + "\n")

    def _element(self, depth: int, tag: str, value) -> None:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            text = format_number(value)
        else:
            text = escape(str(value))
        self._line(depth, f"<{tag}>{text}</{tag}>")

    def write(self, ladder: Ladder, channel_map: ChannelMap) -> None:
        self.sink.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        self._line(
            0,
            f'<KitData xmlns:xsi="{SCHEMA_INSTANCE}" xsi:noNamespaceSchemaLocation="{SCHEMA_LOCATION}">',
        )
        self._element(1, "Version", KIT_DATA_VERSION)
        self._line(1, "<Kits>")
        self._line(2, "<Set>")
        self._element(3, "Name", ladder.marker_set_name)
        self._element(3, "NChannels", ladder.number_of_channels)

        self._line(3, "<LS>")
        for name in ladder.ils_names:
            self._element(4, "LSName", name)
        self._element(4, "ChannelNo", ladder.channel_for_ils)
        self._line(3, "</LS>")

        self._element(3, "FileNameSuffix", ladder.suffix)
        self._element(3, "GenotypeSuffix", ladder.suffix)
        self._element(3, "DirectorySearchString", ladder.suffix)
        self.write_channel_map(ladder, channel_map)

        for locus in ladder.loci.values():
            self.write_locus(locus)

        self._line(2, "</Set>")
        self._line(1, "</Kits>")
        self.sink.write("</KitData>")

    def write_channel_map(self, ladder: Ladder, channel_map: ChannelMap) -> None:
        self._line(3, "<FsaChannelMap>")
        for i in range(1, ladder.number_of_channels + 1):
            self._line(4, "<Channel>")
            self._element(5, "KitChannelNumber", i)
            self._element(5, "fsaChannelNumber", channel_map.get_fsa_channel_for_kit_channel(i))
            self._element(5, "Color", channel_map.get_color_name(i))
            self._element(5, "DyeName", channel_map.get_dye_name(i))
            self._line(4, "</Channel>")
        self._line(3, "</FsaChannelMap>")

    def write_locus(self, locus: Locus) -> None:
        self._line(3, "<Locus>")
        self._element(4, "Name", locus.name)
        self._element(4, "Channel", locus.channel)
        self._element(4, "MinBP", locus.min_locus_bp)
        self._element(4, "MaxBP", locus.max_locus_bp)
        self._element(4, "MinGridLSBasePair", round_half_up(locus.min_search_ils_bp))
        self._element(4, "MaxGridLSBasePair", round_half_up(locus.max_search_ils_bp))

        if locus.core_repeat != DEFAULT_CORE_REPEAT:
            self._element(4, "CoreRepeatNumber", locus.core_repeat)

        if locus.y_linked:
            self._element(4, "YLinked", "true")

        if locus.max_expected_alleles != DEFAULT_MAX_EXPECTED_ALLELES:
            self._element(4, "MaxExpectedAlleles", locus.max_expected_alleles)

        if locus.min_expected_alleles != DEFAULT_MIN_EXPECTED_ALLELES:
            self._element(4, "MinExpectedAlleles", locus.min_expected_alleles)

        self._line(4, "<LadderAlleles>")
        for allele in locus.alleles.values():
            self.write_allele(allele)
        self._line(4, "</LadderAlleles>")
        self._line(3, "</Locus>")

    def write_allele(self, allele: Allele) -> None:
        self._line(5, "<Allele>")
        self._element(6, "Name", allele.name)
        self._element(6, "CurveNo", allele.curve_number)
        self._element(6, "BP", allele.bp)

        if allele.relative_height:
            self._element(6, "RelativeHeight", allele.relative_height)

        self._line(5, "</Allele>")


def write_kit_file(path: Path, ladder: Ladder, channel_map: ChannelMap) -> None:
    """Write the kit document for ``ladder`` to ``path``."""
    try:
        f = open(path, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        logger.error("Could not create %s", path)
        raise LadderIOError("Could not create output file", path) from e

    with f:
        KitDocumentWriter(f).write(ladder, channel_map)

    logger.info("Wrote %d loci to %s", ladder.num_loci, path)


def copy_text_file(source: Path, destination: Path) -> None:
    """
    Copy a text file verbatim.

    Raises:
        LadderIOError: If ``source`` cannot be read or ``destination`` written.
    """
    try:
        with open(source, "r", newline="") as f:
            contents = f.read()
    except OSError as e:
        logger.error("Could not read %s", source)
        raise LadderIOError("Could not read", source) from e

    try:
        with open(destination, "w", newline="") as f:
            f.write(contents)
    except OSError as e:
        logger.error("Could not create %s", destination)
        raise LadderIOError("Could not create", destination) from e

    logger.debug("Copied %s to %s", source, destination)
