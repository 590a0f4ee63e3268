"""Software rasterizer for rotating parametric surfaces on tiny displays."""

from .driver import ENCODERS, ExportError, export_hex, phase_angles, run_live, write_hex_frames
from .encoders import DEFAULT_DITHER, DitherTable, ascii_frame, dither, hex_block, oled_frame, oled_grid, pack_bits
from .engine import FrameBuffer, RasterStats, RenderConfig, RenderEngine, Vec3
from .surfaces import ParametricSurface, make_surface, strip_surface, torus_surface
from .terminal import TerminalController

__all__ = [
    "DEFAULT_DITHER",
    "DitherTable",
    "ENCODERS",
    "ExportError",
    "FrameBuffer",
    "ParametricSurface",
    "RasterStats",
    "RenderConfig",
    "RenderEngine",
    "TerminalController",
    "Vec3",
    "ascii_frame",
    "dither",
    "export_hex",
    "hex_block",
    "make_surface",
    "oled_frame",
    "oled_grid",
    "pack_bits",
    "phase_angles",
    "run_live",
    "strip_surface",
    "torus_surface",
    "write_hex_frames",
]
