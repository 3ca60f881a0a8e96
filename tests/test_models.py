"""Tests for allele, locus, ladder and channel map models."""

import pytest
from pydantic import ValidationError

from ladderkit.exceptions import EmptyLocusError, MalformedLabelError
from ladderkit.models.core import Allele, ChannelInfo, ChannelMap, Ladder, Locus


def make_locus(names, core_repeat=4, channel=1, name="D8S1179"):
    locus = Locus(name=name, channel=channel, core_repeat=core_repeat)
    for i, allele_name in enumerate(names, start=1):
        locus.add_allele(Allele(name=allele_name, curve_number=i))
    return locus


class TestLocus:
    def test_add_allele_rejects_duplicate(self):
        locus = make_locus(["9", "10"])
        assert locus.add_allele(Allele(name="10", curve_number=7)) is False
        assert len(locus) == 2
        assert locus.find_allele("10").curve_number == 2

    def test_allele_order_preserved(self):
        locus = make_locus(["10", "9", "11", "9.3"])
        assert list(locus.alleles) == ["10", "9", "11", "9.3"]

    def test_allele_equality_by_name(self):
        assert Allele(name="9", bp=10) == Allele(name="9", bp=20)
        assert Allele(name="9") != Allele(name="10")

    def test_compute_all_bps_anchors_on_first_allele(self):
        # "10" is inserted first and is the anchor
        locus = make_locus(["10", "9", "11"])
        locus.first_core_locus_bp = 100
        locus.compute_all_bps()

        bps = {name: allele.bp for name, allele in locus.alleles.items()}
        assert bps == {"10": 100, "9": 96, "11": 104}

    def test_compute_all_bps_microvariants(self):
        locus = make_locus(["9", "9.3", "10", "10.2"])
        locus.first_core_locus_bp = 120
        locus.compute_all_bps()

        assert [a.bp for a in locus.alleles.values()] == [120, 123, 124, 126]

    def test_compute_locus_span_from_extended_alleles(self):
        locus = make_locus(["9", "10", "11"])
        locus.first_core_locus_bp = 100
        locus.first_extended_allele = "6"
        locus.last_extended_allele = "13.3"
        locus.compute_all_bps()

        assert locus.min_locus_bp == 88
        assert locus.max_locus_bp == 100 + 4 * 4 + 3

    def test_compute_locus_span_defaults_to_ladder_ends(self):
        locus = make_locus(["9", "10", "11"])
        locus.first_core_locus_bp = 100
        locus.compute_all_bps()

        assert locus.min_locus_bp == 100
        assert locus.max_locus_bp == 108

    def test_compute_all_bps_empty_locus(self):
        locus = Locus(name="TPOX", channel=2)
        with pytest.raises(EmptyLocusError):
            locus.compute_all_bps()

    def test_compute_all_bps_malformed_extended_allele(self):
        locus = make_locus(["9", "10"])
        locus.find_allele("10").bp = 55
        locus.first_core_locus_bp = 100
        locus.last_extended_allele = "OL"
        with pytest.raises(MalformedLabelError):
            locus.compute_all_bps()

        # Nothing is assigned when any label fails to parse
        assert [a.bp for a in locus.alleles.values()] == [0, 55]
        assert locus.max_locus_bp == 0

    def test_check_search_window(self):
        locus = make_locus(["9"])
        locus.set_min_max_search_ils_bp(100.0, 110.0)
        locus.check_search_window()

        locus.min_search_ils_bp = 111.0
        with pytest.raises(ValueError):
            locus.check_search_window()

    def test_adjust_search_region(self):
        locus = make_locus(["9"])
        locus.set_min_max_search_ils_bp(118.0, 122.0)
        locus.adjust_search_region()
        assert (locus.min_search_ils_bp, locus.max_search_ils_bp) == (115.0, 125.0)

    def test_adjust_search_region_pentanucleotide(self):
        locus = make_locus(["9"], core_repeat=5)
        locus.set_min_max_search_ils_bp(200.0, 260.0)
        locus.adjust_search_region()
        assert (locus.min_search_ils_bp, locus.max_search_ils_bp) == (196.0, 264.0)

    def test_original_window_set_once(self):
        locus = make_locus(["9"])
        locus.set_min_max_search_ils_bp(100.0, 110.0)
        locus.set_min_max_search_ils_bp(101.0, 111.0)

        assert locus.min_search_ils_bp == 101.0
        assert locus.original_min_search_ils_bp == 100.0
        assert locus.original_max_search_ils_bp == 110.0

    def test_original_window_not_captured_after_merge(self):
        locus = make_locus(["9"])
        locus.is_merged = True
        locus.set_min_max_search_ils_bp(100.0, 110.0)

        assert locus.original_min_search_ils_bp is None
        assert locus.original_max_search_ils_bp is None

    def test_inverted_window_rejected(self):
        locus = make_locus(["9"])
        with pytest.raises(ValueError):
            locus.set_min_max_search_ils_bp(120.0, 110.0)

    def test_defaults(self):
        locus = Locus(name="vWA", channel=3)
        assert locus.core_repeat == 4
        assert locus.min_expected_alleles == 1
        assert locus.max_expected_alleles == 2
        assert locus.y_linked is False
        assert locus.is_merged is False


class TestLadder:
    def test_add_locus_rejects_duplicate(self):
        ladder = Ladder(marker_set_name="Kit")
        assert ladder.add_locus(Locus(name="CSF1PO", channel=1)) is True
        assert ladder.add_locus(Locus(name="CSF1PO", channel=2)) is False
        assert ladder.num_loci == 1
        assert ladder.find_locus("CSF1PO").channel == 1

    def test_find_locus_missing(self):
        assert Ladder().find_locus("FGA") is None

    def test_add_ils_preserves_order(self):
        ladder = Ladder()
        ladder.add_ils("ILS600")
        ladder.add_ils("ILS500")
        assert ladder.add_ils("ILS600") is False
        assert ladder.ils_names == ["ILS600", "ILS500"]

    def test_new_locus_inherits_defaults(self):
        ladder = Ladder(
            marker_set_name="YKit",
            default_y_linked=True,
            default_min_expected_alleles=0,
            default_max_expected_alleles=1,
        )
        locus = ladder.new_locus("DYS391", channel=2, core_repeat=4)

        assert locus.y_linked is True
        assert locus.min_expected_alleles == 0
        assert locus.max_expected_alleles == 1
        assert ladder.num_loci == 0


class TestChannelMap:
    def make_map(self):
        return ChannelMap(
            channels=[
                ChannelInfo(kit_channel=1, fsa_channel=1, color="Blue", dye="FL"),
                ChannelInfo(kit_channel=2, fsa_channel=3, color="yellow", dye="TMR"),
            ]
        )

    def test_lookups(self):
        channel_map = self.make_map()
        assert channel_map.number_of_channels == 2
        assert channel_map.get_fsa_channel_for_kit_channel(2) == 3
        assert channel_map.get_color_name(1) == "Blue"
        assert channel_map.get_dye_name(2) == "TMR"

    def test_unknown_kit_channel(self):
        with pytest.raises(KeyError):
            self.make_map().get_dye_name(5)

    def test_kit_channel_for_color_ignores_case(self):
        channel_map = self.make_map()
        assert channel_map.kit_channel_for_color("blue") == 1
        assert channel_map.kit_channel_for_color("YELLOW ") == 2
        assert channel_map.kit_channel_for_color("red") is None

    def test_duplicate_kit_channel(self):
        with pytest.raises(ValidationError):
            ChannelMap(
                channels=[
                    ChannelInfo(kit_channel=1, fsa_channel=1, color="blue", dye="FL"),
                    ChannelInfo(kit_channel=1, fsa_channel=2, color="green", dye="JOE"),
                ]
            )

    def test_kit_channels_must_be_contiguous(self):
        with pytest.raises(ValidationError):
            ChannelMap(
                channels=[
                    ChannelInfo(kit_channel=1, fsa_channel=1, color="blue", dye="FL"),
                    ChannelInfo(kit_channel=3, fsa_channel=2, color="green", dye="JOE"),
                ]
            )
