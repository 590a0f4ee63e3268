"""Predefined parametric surfaces."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict

from .engine import Vec3, magnitude

PositionFn = Callable[[float, float, int], Vec3]
NormalFn = Callable[[Vec3, int], Vec3]


@dataclass(frozen=True)
class ParametricSurface:
    """A surface given by ``position(u, v, patch)`` and ``normal(point, patch)``.

    ``u`` and ``v`` range over [-1, 1]; ``patch`` selects a sheet of a
    multi-sheet surface. Normals are unit length, or zero at singular points.
    """

    name: str
    position: PositionFn
    normal: NormalFn
    patches: int = 1

    def __post_init__(self) -> None:
        if self.patches < 1:
            raise ValueError("ParametricSurface requires at least one patch")


def strip_surface(patches: int = 1, width_scale: float = 0.8) -> ParametricSurface:
    """Return a twisted strip that pinches to a point at both ends of ``v``."""

    patches = max(1, patches)
    strip_width = math.pi / patches

    def position(u: float, v: float, patch: int) -> Vec3:
        alpha = 2.0 * strip_width * patch
        r = width_scale * (math.cos(math.pi * v) + 1.0) / 2.0
        theta = 2.0 * math.pi * v + strip_width * u / 2.0 + alpha
        return Vec3(r * math.cos(theta), r * math.sin(theta), v)

    def normal(point: Vec3, patch: int) -> Vec3:
        if point.x == 0 and point.y == 0:
            return Vec3(0.0, 0.0, 0.0)
        slope = width_scale * math.pi / 2.0 * math.sin(math.pi * point.z)
        return Vec3(point.x, point.y, magnitude(point.x, point.y) * slope).normalized()

    return ParametricSurface("strip", position, normal, patches)


def torus_surface(r0: float = 1.0, r1: float = 0.5) -> ParametricSurface:
    """Return a torus whose ring lies in the y/z plane, facing the camera."""

    def position(u: float, v: float, patch: int) -> Vec3:
        r = r0 + r1 * math.cos(math.pi * v)
        theta = math.pi * u
        return Vec3(r1 * math.sin(math.pi * v), r * math.cos(theta), r * math.sin(theta))

    def normal(point: Vec3, patch: int) -> Vec3:
        theta = math.atan2(point.z, point.y)
        return Vec3(
            point.x,
            point.y - r0 * math.cos(theta),
            point.z - r0 * math.sin(theta),
        ).normalized()

    return ParametricSurface("torus", position, normal)


SURFACES: Dict[str, Callable[[int], ParametricSurface]] = {
    "strip": lambda patches: strip_surface(patches),
    "torus": lambda _patches: torus_surface(),
}


def make_surface(name: str, *, patches: int = 1) -> ParametricSurface:
    try:
        factory = SURFACES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown surface '{name}'") from exc
    return factory(patches)
