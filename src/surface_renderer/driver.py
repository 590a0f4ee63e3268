"""Frame loops: batch hex export and live terminal rendering."""

from __future__ import annotations

import math
import time
from typing import Callable, Dict, Iterator, Optional, Protocol, TextIO

from .encoders import DEFAULT_DITHER, DitherTable, ascii_frame, hex_block, oled_frame, oled_grid
from .engine import FrameBuffer, RasterStats, RenderEngine
from .surfaces import ParametricSurface

DEFAULT_EXPORT_PATH = "HexDump.txt"

FrameEncoder = Callable[[FrameBuffer], str]

ENCODERS: Dict[str, FrameEncoder] = {
    "ascii": ascii_frame,
    "oled": oled_frame,
}


class ExportError(RuntimeError):
    """The export sink could not be opened or written."""


class Display(Protocol):
    def draw(self, frame: str) -> None: ...


def phase_angles(num_frames: int, count: Optional[int] = None) -> Iterator[float]:
    """Yield k * pi / num_frames for k = 1, 2, ... (``count`` values, or forever)."""
    if num_frames < 1:
        raise ValueError("num_frames must be >= 1")
    step = math.pi / num_frames
    phi = 0.0
    produced = 0
    while count is None or produced < count:
        phi += step
        produced += 1
        yield phi


def write_hex_frames(
    engine: RenderEngine,
    surface: ParametricSurface,
    sink: TextIO,
    num_frames: int,
    table: DitherTable = DEFAULT_DITHER,
    stats: Optional[RasterStats] = None,
) -> int:
    written = 0
    for phi in phase_angles(num_frames, num_frames):
        frame = engine.render(phi, surface)
        if stats is not None:
            stats.merge(frame.stats)
        sink.write(hex_block(oled_grid(frame, table)))
        sink.write(",\n")
        written += 1
    return written


def export_hex(
    engine: RenderEngine,
    surface: ParametricSurface,
    path: str = DEFAULT_EXPORT_PATH,
    num_frames: int = 32,
    table: DitherTable = DEFAULT_DITHER,
    stats: Optional[RasterStats] = None,
) -> int:
    try:
        with open(path, "w", encoding="ascii") as sink:
            return write_hex_frames(engine, surface, sink, num_frames, table, stats)
    except OSError as exc:
        raise ExportError(f"cannot write '{path}': {exc}") from exc


def run_live(
    engine: RenderEngine,
    surface: ParametricSurface,
    encode: FrameEncoder,
    display: Display,
    *,
    num_frames: int = 32,
    delay: float = 0.016,
    max_frames: int = 0,
    should_stop: Optional[Callable[[], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Render and draw frames until ``max_frames`` is reached or ``should_stop`` fires."""
    frame_counter = 0
    for phi in phase_angles(num_frames):
        if should_stop is not None and should_stop():
            break

        display.draw(encode(engine.render(phi, surface)))

        frame_counter += 1
        if max_frames and frame_counter >= max_frames:
            break
        if delay > 0:
            sleep(delay)
    return frame_counter
