"""
Core data models for ladderkit.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.label import AlleleLabel
from ..core.merge import merge_ladder_into, merge_locus_into_ladder
from ..exceptions import EmptyLocusError

logger = logging.getLogger(__name__)

DEFAULT_CORE_REPEAT = 4
DEFAULT_MIN_EXPECTED_ALLELES = 1
DEFAULT_MAX_EXPECTED_ALLELES = 2


def _check_window(name: str, min_bp: float, max_bp: float) -> None:
    if min_bp > max_bp:
        raise ValueError(f"Search window for {name} is inverted: min {min_bp} > max {max_bp}")


class Allele(BaseModel):
    """
    One named ladder marker at a BP position within a locus.

    Two alleles are equal when their names are equal.
    """
    model_config = ConfigDict(validate_assignment=True)

    name: str
    curve_number: int = 0
    bp: float = 0
    is_virtual: bool = False
    relative_height: str | None = None

    @property
    def label(self) -> AlleleLabel:
        return AlleleLabel.parse(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Allele):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


class Locus(BaseModel):
    """
    Ordered, name-unique collection of alleles for one genetic marker.

    The first allele inserted is the anchor for BP computation. The search
    window bounds are in ILS base pairs; the ``original_*`` bounds keep the
    window as first assigned, before any widening or overlap repair.
    """
    model_config = ConfigDict(validate_assignment=True)

    name: str
    channel: int = Field(default=0, ge=0)
    core_repeat: int = Field(default=DEFAULT_CORE_REPEAT, ge=1)
    alleles: dict[str, Allele] = Field(default_factory=dict)

    min_locus_bp: float = 0
    max_locus_bp: float = 0
    min_search_ils_bp: float = 0.0
    max_search_ils_bp: float = 0.0
    original_min_search_ils_bp: float | None = None
    original_max_search_ils_bp: float | None = None

    y_linked: bool = False
    min_expected_alleles: int = Field(default=DEFAULT_MIN_EXPECTED_ALLELES, ge=0)
    max_expected_alleles: int = Field(default=DEFAULT_MAX_EXPECTED_ALLELES, ge=0)
    is_merged: bool = False

    # Anchor data supplied at merge time
    first_core_locus_bp: float = 0
    first_extended_allele: str | None = None
    last_extended_allele: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locus):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __len__(self) -> int:
        return len(self.alleles)

    def add_allele(self, allele: Allele) -> bool:
        """
        Append an allele unless one with the same name is already present.

        Returns:
            True if inserted, False if rejected as a duplicate.
        """
        if allele.name in self.alleles:
            logger.debug("Duplicate allele %s rejected in locus %s", allele.name, self.name)
            return False
        self.alleles[allele.name] = allele
        return True

    def find_allele(self, name: str) -> Allele | None:
        return self.alleles.get(name)

    def set_min_max_search_ils_bp(self, min_bp: float, max_bp: float) -> None:
        """
        Set the ILS search window.

        The original bounds are captured on the first assignment made before
        the locus is merged and are never overwritten afterwards.
        """
        _check_window(self.name, min_bp, max_bp)
        self.min_search_ils_bp = min_bp
        self.max_search_ils_bp = max_bp

        if not self.is_merged and self.original_min_search_ils_bp is None:
            self.original_min_search_ils_bp = min_bp
            self.original_max_search_ils_bp = max_bp

    def check_search_window(self) -> None:
        """Raise ValueError if the current search window is inverted."""
        _check_window(self.name, self.min_search_ils_bp, self.max_search_ils_bp)

    def adjust_search_region(self) -> None:
        """Widen the search window by (core_repeat - 1) BP on each side."""
        correction = self.core_repeat - 1
        self.min_search_ils_bp -= correction
        self.max_search_ils_bp += correction

    def compute_all_bps(self) -> None:
        """
        Assign BP positions to every allele from ``first_core_locus_bp``.

        The first allele is the anchor. The locus span runs from the first
        extended allele to the last extended allele; either defaults to the
        outermost ladder allele when unset.

        Raises:
            EmptyLocusError: If the locus has no alleles.
            MalformedLabelError: If any label does not parse.
        """
        if not self.alleles:
            raise EmptyLocusError(self.name)

        # Parse every label before assigning so a bad label leaves the locus untouched
        alleles = list(self.alleles.values())
        labels = [allele.label for allele in alleles]
        anchor = labels[0]
        last_extended = AlleleLabel.parse(self.last_extended_allele or alleles[-1].name)
        first_extended = AlleleLabel.parse(self.first_extended_allele or alleles[0].name)

        for allele, label in zip(alleles, labels):
            allele.bp = label.bp_difference_from(anchor, self.core_repeat) + self.first_core_locus_bp

        self.max_locus_bp = (
            last_extended.bp_difference_from(anchor, self.core_repeat) + self.first_core_locus_bp
        )
        self.min_locus_bp = self.first_core_locus_bp - anchor.bp_difference_from(
            first_extended, self.core_repeat
        )


class Ladder(BaseModel):
    """
    A marker set: ordered, name-unique loci plus ILS and channel metadata.
    """
    model_config = ConfigDict(validate_assignment=True)

    marker_set_name: str = ""
    number_of_channels: int = Field(default=0, ge=0)
    loci: dict[str, Locus] = Field(default_factory=dict)
    ils_names: list[str] = Field(default_factory=list)
    channel_for_ils: int = Field(default=0, ge=0)
    suffix: str = ""

    default_y_linked: bool = False
    default_min_expected_alleles: int = DEFAULT_MIN_EXPECTED_ALLELES
    default_max_expected_alleles: int = DEFAULT_MAX_EXPECTED_ALLELES

    @property
    def num_loci(self) -> int:
        return len(self.loci)

    def new_locus(self, name: str, channel: int, core_repeat: int = DEFAULT_CORE_REPEAT) -> Locus:
        """Create a locus carrying this ladder's defaults (not inserted)."""
        return Locus(
            name=name,
            channel=channel,
            core_repeat=core_repeat,
            y_linked=self.default_y_linked,
            min_expected_alleles=self.default_min_expected_alleles,
            max_expected_alleles=self.default_max_expected_alleles,
        )

    def add_locus(self, locus: Locus) -> bool:
        """
        Append a locus unless one with the same name is already present.

        Returns:
            True if inserted, False if rejected as a duplicate.
        """
        if locus.name in self.loci:
            logger.debug("Duplicate locus %s rejected in %s", locus.name, self.marker_set_name)
            return False
        self.loci[locus.name] = locus
        return True

    def find_locus(self, name: str) -> Locus | None:
        return self.loci.get(name)

    def add_ils(self, name: str) -> bool:
        if name in self.ils_names:
            return False
        self.ils_names.append(name)
        return True

    def merge_locus(self, locus: Locus) -> None:
        """Merge anchor data from ``locus`` into the same-named locus of this ladder."""
        merge_locus_into_ladder(locus, self)

    def merge_into(self, target: "Ladder") -> list[str]:
        """
        Merge every locus of this ladder into ``target`` and repair overlaps.

        Returns:
            Names of loci that had no counterpart in ``target``.
        """
        return merge_ladder_into(self, target)

    def all_loci_merged(self) -> bool:
        return all(locus.is_merged for locus in self.loci.values())

    def unmerged_loci(self) -> list[str]:
        return [name for name, locus in self.loci.items() if not locus.is_merged]


class ChannelInfo(BaseModel):
    """Dye and fsa channel assignment of one kit channel."""
    kit_channel: int = Field(ge=1)
    fsa_channel: int = Field(ge=1)
    color: str
    dye: str


class ChannelMap(BaseModel):
    """
    Kit channel -> fsa channel / color / dye lookup.
    """
    channels: list[ChannelInfo]

    @model_validator(mode="after")
    def validate_unique_channels(self) -> "ChannelMap":
        seen = set()
        for info in self.channels:
            if info.kit_channel in seen:
                raise ValueError(f"Kit channel {info.kit_channel} is defined more than once")
            seen.add(info.kit_channel)
        if seen != set(range(1, len(self.channels) + 1)):
            raise ValueError(f"Kit channels must be numbered 1..{len(self.channels)}")
        return self

    @property
    def number_of_channels(self) -> int:
        return len(self.channels)

    def _channel(self, kit_channel: int) -> ChannelInfo:
        for info in self.channels:
            if info.kit_channel == kit_channel:
                return info
        raise KeyError(f"No channel map entry for kit channel {kit_channel}")

    def get_fsa_channel_for_kit_channel(self, kit_channel: int) -> int:
        return self._channel(kit_channel).fsa_channel

    def get_color_name(self, kit_channel: int) -> str:
        return self._channel(kit_channel).color

    def get_dye_name(self, kit_channel: int) -> str:
        return self._channel(kit_channel).dye

    def kit_channel_for_color(self, color: str) -> int | None:
        wanted = color.strip().lower()
        for info in self.channels:
            if info.color.lower() == wanted:
                return info.kit_channel
        return None


class LadderConfig(BaseModel):
    """
    Configuration for one ladder-file build.
    """
    # Input
    panels_file: Path
    bins_file: Path
    channel_map_file: Path

    # Output
    output_file: Path
    volume_template: Path | None = None
    volume_output: Path | None = None

    # Marker set
    marker_set_name: str | None = None
    ils_names: list[str] = Field(default_factory=list, min_length=1)
    ils_channel: int = Field(ge=1)
    suffix: str = ""

    verbose: bool = False

    @field_validator("panels_file", "bins_file", "channel_map_file")
    @classmethod
    def validate_file_exists(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @field_validator("output_file")
    @classmethod
    def validate_output_file(cls, v: Path) -> Path:
        if v.is_dir():
            raise ValueError(f"Output path must be a file, not a directory: {v}")
        if v.parent.exists() and not v.parent.is_dir():
            raise ValueError(f"Output directory is not a directory: {v.parent}")
        return v

    @model_validator(mode="after")
    def validate_volume(self) -> "LadderConfig":
        if (self.volume_template is None) != (self.volume_output is None):
            raise ValueError("--volume-template and --volume-output must be given together")
        return self
