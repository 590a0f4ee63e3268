"""Entry point for the rotating parametric surface renderer."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Sequence

from .surface_renderer.driver import DEFAULT_EXPORT_PATH, ENCODERS, ExportError, export_hex, run_live
from .surface_renderer.engine import RasterStats, RenderConfig, RenderEngine, Vec3
from .surface_renderer.surfaces import SURFACES, ParametricSurface, make_surface
from .surface_renderer.terminal import TerminalController


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rotating parametric surface renderer")
    parser.add_argument(
        "--mode",
        type=str,
        default="ascii",
        choices=["export", "ascii", "oled"],
        help="Write a hex dump, or render ASCII shades / dithered pixels live (default: ascii)",
    )
    parser.add_argument(
        "--surface",
        type=str,
        default="torus",
        choices=sorted(SURFACES),
        help="Which surface to render (default: torus)",
    )
    parser.add_argument(
        "--patches",
        type=int,
        default=1,
        help="Number of sheets for the strip surface (default: 1)",
    )
    parser.add_argument(
        "--num-frames",
        type=int,
        default=32,
        help="Frames per half turn; also the number of exported frames (default: 32)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Stop live rendering after this many frames (0 = infinite)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=16.0,
        help="Pause between live frames in milliseconds (default: 16)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_EXPORT_PATH,
        help=f"Hex dump destination for export mode (default: {DEFAULT_EXPORT_PATH})",
    )
    parser.add_argument(
        "--light",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=(0.0, -2.0, 1.2),
        help="Point light position",
    )
    return parser.parse_args(argv)


@dataclass
class RuntimeConfig:
    mode: str
    surface: ParametricSurface
    render: RenderConfig
    num_frames: int
    max_frames: int
    delay: float
    output: str
    warnings: list[str]


def _setup_runtime(args: argparse.Namespace) -> RuntimeConfig:
    warnings: list[str] = []

    num_frames = args.num_frames
    if num_frames < 1:
        warnings.append(f"num-frames {num_frames} is not positive; using 1")
        num_frames = 1

    patches = args.patches
    if patches < 1:
        warnings.append(f"patches {patches} is not positive; using 1")
        patches = 1
    elif patches != 1 and args.surface != "strip":
        warnings.append(f"--patches is ignored for the {args.surface} surface")

    delay_ms = max(0.0, args.delay)
    max_frames = max(0, args.frames)
    if args.mode == "export" and args.frames:
        warnings.append("--frames is ignored in export mode; use --num-frames")

    return RuntimeConfig(
        mode=args.mode,
        surface=make_surface(args.surface, patches=patches),
        render=RenderConfig(light=Vec3(*args.light)),
        num_frames=num_frames,
        max_frames=max_frames,
        delay=delay_ms / 1000.0,
        output=args.output,
        warnings=warnings,
    )


def _emit_warnings(warnings: Sequence[str]) -> None:
    if not warnings:
        return
    for warning in warnings:
        sys.stderr.write(f"[renderer] {warning}\n")
    sys.stderr.flush()


def _run_export(config: RuntimeConfig) -> None:
    engine = RenderEngine(config.render)
    stats = RasterStats()
    try:
        count = export_hex(engine, config.surface, config.output, config.num_frames, stats=stats)
    except ExportError as exc:
        raise SystemExit(f"[renderer] export failed: {exc}") from exc

    notes = [f"wrote {count} frames to {config.output}"]
    if stats.skipped:
        notes.append(
            f"skipped {stats.out_of_bounds} off-screen and {stats.degenerate} behind-camera samples"
        )
    _emit_warnings(notes)


def _run_live(config: RuntimeConfig) -> None:
    engine = RenderEngine(config.render)
    controller = TerminalController()

    with controller:
        try:
            run_live(
                engine,
                config.surface,
                ENCODERS[config.mode],
                controller,
                num_frames=config.num_frames,
                delay=config.delay,
                max_frames=config.max_frames,
                should_stop=controller.stop_requested,
            )
        except KeyboardInterrupt:  # pragma: no cover - interactive loop
            controller.restore()
            sys.stdout.write("\nInterrupted. Bye!\n")
            sys.stdout.flush()


def run(argv: Sequence[str] | None = None) -> None:
    args = parse_arguments(argv)
    config = _setup_runtime(args)
    _emit_warnings(config.warnings)

    if config.mode == "export":
        _run_export(config)
    else:
        _run_live(config)


def main() -> None:
    run()


if __name__ == "__main__":
    main()
