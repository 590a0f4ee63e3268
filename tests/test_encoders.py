import unittest
from typing import List, Sequence

from src.surface_renderer.encoders import (
    DEFAULT_DITHER,
    SHADES,
    DitherTable,
    ascii_frame,
    dither,
    hex_block,
    oled_frame,
    oled_grid,
    pack_bits,
    shade_index,
)
from src.surface_renderer.engine import FrameBuffer


def unpack_bits(bands: Sequence[Sequence[int]], rows: int) -> List[List[bool]]:
    columns = len(bands[0]) if bands else 0
    return [
        [bool(bands[row // 8][column] >> (row % 8) & 1) for column in range(columns)]
        for row in range(rows)
    ]


def small_frame(width: int, height: int) -> FrameBuffer:
    return FrameBuffer.blank(width, height, 1000.0)


class AsciiEncoderTests(unittest.TestCase):
    def test_shade_index_in_range(self) -> None:
        for step in range(1001):
            index = shade_index(step / 1000.0)
            self.assertGreaterEqual(index, 0)
            self.assertLess(index, len(SHADES))
        self.assertEqual(shade_index(0.0), 0)
        self.assertEqual(shade_index(1.0), 11)

    def test_frame_is_flipped_both_ways(self) -> None:
        frame = small_frame(2, 3)
        frame.brightness[frame.index(0, 0)] = 1.0
        frame.brightness[frame.index(1, 2)] = 0.5
        self.assertEqual(ascii_frame(frame), "; \n  \n #\n")

    def test_line_shape(self) -> None:
        text = ascii_frame(small_frame(32, 64))
        lines = text.split("\n")
        self.assertEqual(lines[-1], "")
        self.assertEqual(len(lines[:-1]), 64)
        self.assertTrue(all(len(line) == 32 for line in lines[:-1]))


class DitherTests(unittest.TestCase):
    def test_black_is_always_off_and_white_always_on(self) -> None:
        for x in range(12):
            for y in range(12):
                self.assertFalse(dither(0.0, x, y))
                self.assertTrue(dither(1.0, x, y))
                self.assertTrue(dither(1.5, x, y))

    def test_nearest_threshold_is_selected(self) -> None:
        self.assertEqual(DEFAULT_DITHER.select(0.5), 4)
        self.assertEqual(DEFAULT_DITHER.select(0.27), 2)
        self.assertEqual(DEFAULT_DITHER.select(0.3), 3)
        self.assertEqual(DEFAULT_DITHER.select(0.9), 7)
        self.assertIsNone(DEFAULT_DITHER.select(1.0))

    def test_half_grey_is_a_checkerboard(self) -> None:
        for x in range(6):
            for y in range(6):
                self.assertEqual(dither(0.5, x, y), (x + y) % 2 == 0)

    def test_ties_go_to_lower_threshold(self) -> None:
        table = DitherTable(
            [
                (1.0, lambda x, y: True),
                (0.0, lambda x, y: False),
                (0.5, lambda x, y: x == y),
            ]
        )
        self.assertEqual(table.thresholds, (0.0, 0.5, 1.0))
        for _ in range(3):
            self.assertEqual(table.select(0.25), 0)
            self.assertEqual(table.select(0.75), 1)
        self.assertFalse(table.is_on(0.25, 2, 2))
        self.assertTrue(table.is_on(0.75, 2, 2))
        self.assertFalse(table.is_on(0.75, 1, 2))

    def test_below_first_threshold_uses_first_pattern(self) -> None:
        table = DitherTable([(0.2, lambda x, y: True), (1.0, lambda x, y: True)])
        self.assertEqual(table.select(0.0), 0)

    def test_empty_table_rejected(self) -> None:
        with self.assertRaises(ValueError):
            DitherTable([])

    def test_oled_frame_layout(self) -> None:
        frame = small_frame(2, 2)
        frame.brightness[frame.index(0, 0)] = 1.0
        self.assertEqual(oled_frame(frame), "  \n #\n")

    def test_oled_grid_orientation(self) -> None:
        frame = small_frame(3, 5)
        frame.brightness[frame.index(0, 0)] = 1.0
        grid = oled_grid(frame)
        self.assertEqual(len(grid), 3)
        self.assertTrue(all(len(row) == 5 for row in grid))
        lit = [(r, c) for r, row in enumerate(grid) for c, on in enumerate(row) if on]
        self.assertEqual(lit, [(2, 4)])


class PackingTests(unittest.TestCase):
    def test_alternating_columns(self) -> None:
        grid = [[column % 2 == 0 for column in range(4)] for _ in range(16)]
        self.assertEqual(pack_bits(grid), [[0xFF, 0x00, 0xFF, 0x00], [0xFF, 0x00, 0xFF, 0x00]])
        self.assertEqual(unpack_bits(pack_bits(grid), 16), grid)

    def test_bit_order_follows_rows(self) -> None:
        grid = [[row == 3 for _ in range(2)] for row in range(8)]
        self.assertEqual(pack_bits(grid), [[0x08, 0x08]])

    def test_partial_band_round_trip(self) -> None:
        grid = [[(row * 7 + column * 3) % 5 == 0 for column in range(5)] for row in range(12)]
        bands = pack_bits(grid)
        self.assertEqual(len(bands), 2)
        self.assertTrue(all(len(band) == 5 for band in bands))
        self.assertEqual(unpack_bits(bands, 12), grid)

    def test_hex_block_format(self) -> None:
        grid = [[row == 0, True] for row in range(8)]
        self.assertEqual(hex_block(grid), "{0x01 , 0xff , \n}")

    def test_reference_frame_token_count(self) -> None:
        grid = oled_grid(small_frame(32, 64))
        block = hex_block(grid)
        self.assertEqual(block.count("0x"), 4 * 64)
        self.assertEqual(block.count("\n"), 4)


if __name__ == "__main__":
    unittest.main()
