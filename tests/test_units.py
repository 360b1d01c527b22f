"""Tests for unit conversions and attribute parsing."""

import pytest

from deckcodec import units


# region conversions
class TestConversions:
    def test_one_pixel_is_9525_emu(self) -> None:
        assert units.emu_to_pixels(9525) == 1
        assert units.pixels_to_emu(1) == 9525

    def test_pixels_survive_a_trip_through_emu(self) -> None:
        for pixels in [*range(-50, 5000), 12_345, 99_999, 1_000_000, 52_000_000]:
            assert units.emu_to_pixels(units.pixels_to_emu(pixels)) == pixels, pixels

    @pytest.mark.parametrize("emu", [0, 1, 4762, 4763, 9524, 12_700, 914_400, 6_858_001, 51_206_399])
    def test_emu_through_pixels_stays_within_one_pixel(self, emu: int) -> None:
        assert abs(units.pixels_to_emu(units.emu_to_pixels(emu)) - emu) <= units.EMU_PER_PIXEL

    def test_default_slide_size_is_960_by_720_pixels(self) -> None:
        assert units.emu_to_pixels(9144000) == 960
        assert units.emu_to_pixels(6858000) == 720

    def test_emu_to_pixels_rounds_to_nearest(self) -> None:
        assert units.emu_to_pixels(9525 * 10 + 4000) == 10
        assert units.emu_to_pixels(9525 * 10 + 6000) == 11

    def test_points_and_pixels(self) -> None:
        assert units.points_to_pixels(72) == 96
        assert units.pixels_to_points(96) == 72
        assert units.emu_to_points(12700) == 1
        assert units.points_to_emu(1) == 12700

    def test_centipoints(self) -> None:
        assert units.centipoints_to_pixels(1800) == 24

    def test_inches(self) -> None:
        assert units.pixels_to_inches(96) == 1
        assert units.inches_to_pixels(0.5) == 48


# endregion


# region parse_int / parse_rotation
class TestParseInt:
    @pytest.mark.parametrize(
        "raw,expected",
        [("42", 42), ("-7", -7), ("12.9", 12), (None, 5), ("", 5), ("abc", 5), ("inf", 5)],
    )
    def test_parse_int(self, raw: str | None, expected: int) -> None:
        assert units.parse_int(raw, 5) == expected


class TestParseRotation:
    def test_quarter_turn_is_whole_degrees(self) -> None:
        rotation = units.parse_rotation("5400000")
        assert rotation == 90
        assert isinstance(rotation, int)

    def test_fractional_degrees_are_kept(self) -> None:
        assert units.parse_rotation("30000") == 0.5

    @pytest.mark.parametrize("raw", [None, "", "0", "not-a-number"])
    def test_absent_or_invalid_rotation_is_zero(self, raw: str | None) -> None:
        assert units.parse_rotation(raw) == 0


# endregion
