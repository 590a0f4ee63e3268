"""Encoders turning a finished frame buffer into text, dithered pixels or packed bytes."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Callable, List, Sequence, Tuple

from .engine import FrameBuffer

SHADES = " ,-~:;=!*$@#"

Pattern = Callable[[int, int], bool]
BoolGrid = List[List[bool]]


def shade_index(brightness: float) -> int:
    return math.floor(brightness * (len(SHADES) - 0.01))


def _flipped_text(frame: FrameBuffer, glyph: Callable[[float, int, int], str]) -> str:
    # Rows come out bottom-to-top and each row right-to-left.
    lines: List[str] = []
    for y in range(frame.height - 1, -1, -1):
        chars = [glyph(frame.brightness_at(x, y), x, y) for x in range(frame.width - 1, -1, -1)]
        lines.append("".join(chars) + "\n")
    return "".join(lines)


def ascii_frame(frame: FrameBuffer) -> str:
    return _flipped_text(frame, lambda b, _x, _y: SHADES[shade_index(b)])


class DitherTable:
    """Ascending brightness thresholds, each bound to an on/off pixel pattern."""

    def __init__(self, entries: Sequence[Tuple[float, Pattern]]) -> None:
        if not entries:
            raise ValueError("DitherTable requires at least one threshold")
        ordered = sorted(entries, key=lambda entry: entry[0])
        self._thresholds: Tuple[float, ...] = tuple(key for key, _ in ordered)
        self._patterns: Tuple[Pattern, ...] = tuple(pattern for _, pattern in ordered)

    @property
    def thresholds(self) -> Tuple[float, ...]:
        return self._thresholds

    def select(self, brightness: float) -> int | None:
        """Index of the nearest threshold, or ``None`` above the last one."""
        upper = bisect_right(self._thresholds, brightness)
        if upper == len(self._thresholds):
            return None
        if upper == 0:
            return 0
        lower = upper - 1
        # Only a strictly closer upper threshold wins.
        if brightness - self._thresholds[lower] > self._thresholds[upper] - brightness:
            return upper
        return lower

    def is_on(self, brightness: float, x: int, y: int) -> bool:
        index = self.select(brightness)
        if index is None:
            return True
        return self._patterns[index](x, y)


DEFAULT_DITHER = DitherTable(
    (
        (0.0, lambda x, y: False),
        (0.11, lambda x, y: x % 3 == 0 and y % 3 == 0),
        (0.25, lambda x, y: x % 2 == 0 and y % 2 == 0),
        (0.33, lambda x, y: (x + y) % 3 == 0),
        (0.5, lambda x, y: (x + y) % 2 == 0),
        (0.66, lambda x, y: (x + y) % 3 != 0),
        (0.75, lambda x, y: x % 2 == 0 or y % 2 == 0),
        (0.88, lambda x, y: x % 3 != 0 or y % 3 != 0),
        (1.0, lambda x, y: True),
    )
)


def dither(brightness: float, x: int, y: int, table: DitherTable = DEFAULT_DITHER) -> bool:
    return table.is_on(brightness, x, y)


def oled_frame(frame: FrameBuffer, table: DitherTable = DEFAULT_DITHER) -> str:
    return _flipped_text(frame, lambda b, x, y: "#" if table.is_on(b, x, y) else " ")


def oled_grid(frame: FrameBuffer, table: DitherTable = DEFAULT_DITHER) -> BoolGrid:
    """On/off grid in display orientation.

    Display row ``r`` is frame column ``width - 1 - r`` and display column
    ``c`` is frame row ``height - 1 - c``, so a 32x64 frame fills a display
    that is 32 pixels tall and 64 wide.
    """
    grid: BoolGrid = []
    for r in range(frame.width):
        x = frame.width - 1 - r
        row = []
        for c in range(frame.height):
            y = frame.height - 1 - c
            row.append(table.is_on(frame.brightness_at(x, y), x, y))
        grid.append(row)
    return grid


def pack_bits(grid: Sequence[Sequence[bool]]) -> List[List[int]]:
    """Pack rows into bands of eight: bit ``k`` of a byte is row ``band * 8 + k``."""
    rows = len(grid)
    columns = len(grid[0]) if rows else 0
    bands: List[List[int]] = []
    for band in range((rows + 7) // 8):
        packed = []
        for column in range(columns):
            byte = 0
            for bit in range(8):
                row = band * 8 + bit
                if row < rows and grid[row][column]:
                    byte |= 1 << bit
            packed.append(byte)
        bands.append(packed)
    return bands


def hex_block(grid: Sequence[Sequence[bool]]) -> str:
    lines = ["".join(f"0x{byte:02x} , " for byte in band) + "\n" for band in pack_bits(grid)]
    return "{" + "".join(lines) + "}"
