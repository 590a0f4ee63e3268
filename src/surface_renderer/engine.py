"""Vector math and the z-buffered rasterizer for rotating parametric surfaces."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from .surfaces import ParametricSurface


@dataclass(frozen=True, slots=True)
class Vec3:
    """Lightweight immutable 3D vector."""

    x: float
    y: float
    z: float

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __truediv__(self, scalar: float) -> "Vec3":
        if scalar == 0:
            raise ZeroDivisionError("Division by zero in Vec3")
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        length = self.length()
        if length <= 1e-8:
            return Vec3(0.0, 0.0, 0.0)
        return self / length

    def rotated_z(self, cos_phi: float, sin_phi: float) -> "Vec3":
        """Rotate about the z-axis given the angle's cosine and sine."""
        return Vec3(
            cos_phi * self.x - sin_phi * self.y,
            sin_phi * self.x + cos_phi * self.y,
            self.z,
        )


def magnitude(a: float, b: float) -> float:
    return math.sqrt(a * a + b * b)


def light_curve(cos_theta: float) -> float:
    """Stylised reflectance: lit faces keep a 0.3 floor, shadowed faces ramp from 0.1."""
    if cos_theta > 0:
        return 0.3 + 0.7 * cos_theta
    return 0.1 - 0.4 * cos_theta


@dataclass(frozen=True)
class RenderConfig:
    """Fixed rendering constants shared by the rasterizer and the shading model."""

    width: int = 32
    height: int = 64
    u_step: float = 0.01
    v_step: float = 0.01
    screen_distance: float = 3.0
    object_distance: float = 8.0
    light: Vec3 = Vec3(0.0, -2.0, 1.2)
    far_depth: float = math.inf

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("RenderConfig requires width and height >= 1")
        if self.u_step <= 0 or self.v_step <= 0:
            raise ValueError("Parameter steps must be positive")
        if self.screen_distance <= 0:
            raise ValueError("Screen distance must be positive")
        if self.far_depth <= self.object_distance:
            raise ValueError("far_depth must lie beyond the object distance")


@dataclass
class RasterStats:
    samples: int = 0
    written: int = 0
    occluded: int = 0
    out_of_bounds: int = 0
    degenerate: int = 0

    def merge(self, other: "RasterStats") -> None:
        self.samples += other.samples
        self.written += other.written
        self.occluded += other.occluded
        self.out_of_bounds += other.out_of_bounds
        self.degenerate += other.degenerate

    @property
    def skipped(self) -> int:
        return self.out_of_bounds + self.degenerate


@dataclass
class FrameBuffer:
    """Row-major brightness grid plus the depth buffer that produced it."""

    width: int
    height: int
    brightness: List[float]
    depth: List[float]
    stats: RasterStats = field(default_factory=RasterStats)

    @classmethod
    def blank(cls, width: int, height: int, far_depth: float) -> "FrameBuffer":
        size = width * height
        return cls(width, height, [0.0] * size, [far_depth] * size)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def brightness_at(self, x: int, y: int) -> float:
        return self.brightness[self.index(x, y)]

    def depth_at(self, x: int, y: int) -> float:
        return self.depth[self.index(x, y)]


def parameter_range(step: float) -> Iterator[float]:
    """Yield -1, -1 + step, ... while below 1."""
    count = int(round(2.0 / step))
    for k in range(count):
        value = -1.0 + k * step
        if value >= 1.0:
            break
        yield value


class RenderEngine:
    """Software rasterizer turning a parametric surface into a brightness frame."""

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config if config is not None else RenderConfig()
        self.width = self.config.width
        self.height = self.config.height

    def transform_point(self, point: Vec3, cos_phi: float, sin_phi: float) -> Vec3:
        """Rotate an object-space point about z and push it in front of the camera."""
        rotated = point.rotated_z(cos_phi, sin_phi)
        return Vec3(rotated.x + self.config.object_distance, rotated.y, rotated.z)

    def project_point(self, point: Vec3) -> Optional[Tuple[float, float]]:
        """Perspective-project a camera-space point; ``None`` when it is not in front."""
        if point.x <= 0.0:
            return None
        scale = self.config.screen_distance / point.x
        return (point.y * scale, point.z * scale)

    def pixel_for(self, screen: Tuple[float, float]) -> Optional[Tuple[int, int]]:
        if not (math.isfinite(screen[0]) and math.isfinite(screen[1])):
            return None
        px = math.floor((screen[0] / 2.0 + 0.5) * self.width)
        py = math.floor((screen[1] / 2.0 + 0.5) * self.height)
        if px < 0 or px >= self.width or py < 0 or py >= self.height:
            return None
        return px, py

    def shade(self, point: Vec3, normal: Vec3, cos_phi: float, sin_phi: float) -> float:
        to_light = (self.config.light - point).normalized()
        rotated_normal = normal.rotated_z(cos_phi, sin_phi)
        cos_theta = to_light.dot(rotated_normal)
        return max(0.0, min(1.0, light_curve(cos_theta)))

    def render(self, phi: float, surface: "ParametricSurface") -> FrameBuffer:
        config = self.config
        cos_phi = math.cos(phi)
        sin_phi = math.sin(phi)

        frame = FrameBuffer.blank(self.width, self.height, config.far_depth)
        stats = frame.stats
        depth = frame.depth
        brightness = frame.brightness
        width = self.width

        position_fn = surface.position
        normal_fn = surface.normal
        v_values = list(parameter_range(config.v_step))
        u_values = list(parameter_range(config.u_step))

        for patch in range(surface.patches):
            for v in v_values:
                for u in u_values:
                    stats.samples += 1
                    object_point = position_fn(u, v, patch)
                    point = self.transform_point(object_point, cos_phi, sin_phi)

                    screen = self.project_point(point)
                    if screen is None:
                        stats.degenerate += 1
                        continue
                    pixel = self.pixel_for(screen)
                    if pixel is None:
                        stats.out_of_bounds += 1
                        continue

                    index = pixel[1] * width + pixel[0]
                    # Equal depths let the newer sample win.
                    if depth[index] < point.x:
                        stats.occluded += 1
                        continue
                    depth[index] = point.x
                    brightness[index] = self.shade(
                        point, normal_fn(object_point, patch), cos_phi, sin_phi
                    )
                    stats.written += 1

        return frame
