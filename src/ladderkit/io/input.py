"""
Input Adapters: panels, bins and channel map files.

Panels and bins are tab-delimited GeneMapper-style exports. The panels file
names each marker with its dye color, size range and repeat length; the bins
file lists the ladder alleles of each marker in ascending size order. The
channel map is a JSON document describing the kit's dye channels.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import LadderInputError
from ..models.core import ChannelMap

logger = logging.getLogger(__name__)

# Header keys written by GeneMapper that carry no marker data
_IGNORED_KEYS = {"version", "kit type:", "chemistry kit", "binset name"}


class PanelRecord(BaseModel):
    """One marker line of a panels file."""
    locus: str
    color: str
    min_size: float
    max_size: float
    control_alleles: list[str] = Field(default_factory=list)
    core_repeat: int = Field(ge=1)
    first_extended_allele: str | None = None
    last_extended_allele: str | None = None
    line_number: int | None = None


class BinRecord(BaseModel):
    """One allele bin of a bins file."""
    marker: str
    allele: str
    bp: float
    is_virtual: bool = False
    relative_height: str | None = None


def _rows(path: Path) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, stripped fields) for non-blank, non-comment lines."""
    try:
        f = open(path, "r", newline="")
    except OSError as e:
        raise LadderInputError(f"Could not read {path}: {e}") from e

    with f:
        for line_number, row in enumerate(csv.reader(f, delimiter="\t"), start=1):
            fields = [field.strip() for field in row]
            while fields and not fields[-1]:
                fields.pop()
            if not fields or fields[0].startswith("#"):
                continue
            if fields[0].lower() in _IGNORED_KEYS:
                continue
            yield line_number, fields


def _float(value: str, what: str, line_number: int, fields: list[str]) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise LadderInputError(
            f"{what} {value!r} is not a number", line_number, "\t".join(fields)
        ) from e


class PanelsReader:
    """Reads marker definitions from a panels file."""

    MIN_COLUMNS = 6

    def __init__(self, path: Path):
        self.path = path
        self.panel_name: str | None = None

    def __iter__(self) -> Iterator[PanelRecord]:
        for line_number, fields in _rows(self.path):
            if fields[0].lower() == "panel":
                if len(fields) < 2:
                    raise LadderInputError("Panel line has no name", line_number, "\t".join(fields))
                self.panel_name = fields[1]
                continue

            if len(fields) < self.MIN_COLUMNS:
                raise LadderInputError(
                    f"Expected at least {self.MIN_COLUMNS} columns, found {len(fields)}",
                    line_number,
                    "\t".join(fields),
                )

            control = [a.strip() for a in fields[4].split(",") if a.strip()]
            try:
                core_repeat = int(fields[5])
            except ValueError as e:
                raise LadderInputError(
                    f"Core repeat {fields[5]!r} is not an integer", line_number, "\t".join(fields)
                ) from e

            try:
                yield PanelRecord(
                    locus=fields[0],
                    color=fields[1],
                    min_size=_float(fields[2], "Min size", line_number, fields),
                    max_size=_float(fields[3], "Max size", line_number, fields),
                    control_alleles=control,
                    core_repeat=core_repeat,
                    first_extended_allele=fields[6] if len(fields) > 6 and fields[6] else None,
                    last_extended_allele=fields[7] if len(fields) > 7 and fields[7] else None,
                    line_number=line_number,
                )
            except ValidationError as e:
                raise LadderInputError(str(e), line_number, "\t".join(fields)) from e

    def read(self) -> list[PanelRecord]:
        return list(self)


class BinsReader:
    """Reads ladder allele bins from a bins file."""

    def __init__(self, path: Path):
        self.path = path
        self.panel_name: str | None = None

    def __iter__(self) -> Iterator[BinRecord]:
        marker = None

        for line_number, fields in _rows(self.path):
            key = fields[0].lower()
            if key == "panel name":
                self.panel_name = fields[1] if len(fields) > 1 else None
                continue
            if key == "marker name":
                if len(fields) < 2:
                    raise LadderInputError("Marker line has no name", line_number, "\t".join(fields))
                marker = fields[1]
                continue

            if marker is None:
                raise LadderInputError("Bin found before any marker", line_number, "\t".join(fields))
            if len(fields) < 2:
                raise LadderInputError("Bin has no size", line_number, "\t".join(fields))

            extra = fields[4:]
            is_virtual = bool(extra) and extra[0].lower() == "virtual"
            if is_virtual:
                extra = extra[1:]

            yield BinRecord(
                marker=marker,
                allele=fields[0],
                bp=_float(fields[1], "Bin size", line_number, fields),
                is_virtual=is_virtual,
                relative_height=extra[0] if extra else None,
            )

    def read(self) -> dict[str, list[BinRecord]]:
        """Group bins by marker, preserving file order."""
        grouped: dict[str, list[BinRecord]] = {}
        for record in self:
            grouped.setdefault(record.marker, []).append(record)
        return grouped


def read_channel_map(path: Path) -> ChannelMap:
    """
    Load a channel map from JSON.

    Expected form: {"channels": [{"kit_channel": 1, "fsa_channel": 1,
    "color": "blue", "dye": "FL"}, ...]}
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise LadderInputError(f"Could not read channel map {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise LadderInputError(f"Channel map {path} is not valid JSON: {e}") from e

    try:
        channel_map = ChannelMap.model_validate(data)
    except ValidationError as e:
        raise LadderInputError(f"Invalid channel map {path}: {e}") from e

    logger.debug("Loaded %d channels from %s", channel_map.number_of_channels, path)
    return channel_map
