"""Primitive shape records for scene generation.

A scene is a tuple of PlacedPrimitive records. Records are frozen: every
change (regeneration, animation) produces new records, so consumers can
detect changes by identity alone.

Coordinate convention:
    - Y-up
    - Ground plane at y=0, centered on the origin
    - A primitive's position is its center; it rests on the plane, so
      position.y == scale.y / 2

Size convention:
    - Every kind is modelled at unit size and stretched by the record's
      per-axis scale. All kinds fit a 1x1x1 box except the torus, whose
      tube reaches 0.7 from the center in its ring plane.
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from enum import Enum

import numpy as np

Vec3 = tuple[float, float, float]

# Extra clearance between bounding spheres (scene units)
COLLISION_BUFFER = 0.5


class PrimitiveKind(Enum):
    """Shape types the composer picks from."""

    BOX = "box"
    SPHERE = "sphere"
    CYLINDER = "cylinder"
    CONE = "cone"
    TORUS = "torus"


class ViewMode(Enum):
    """Which material property the renderer visualizes."""

    STANDARD = "standard"
    NORMAL = "normal"
    BASECOLOR = "basecolor"
    METALLIC = "metallic"
    ROUGHNESS = "roughness"
    DEPTH = "depth"


@dataclass(frozen=True)
class Hsl:
    """Hue in degrees [0, 360), saturation and lightness in [0, 1]."""

    hue: float
    saturation: float
    lightness: float

    def to_rgb(self) -> tuple[float, float, float]:
        r, g, b = colorsys.hls_to_rgb(
            (self.hue % 360.0) / 360.0, self.lightness, self.saturation
        )
        return (r, g, b)

    def to_css(self) -> str:
        return (
            f"hsl({self.hue:.0f}, {self.saturation * 100:.0f}%, "
            f"{self.lightness * 100:.0f}%)"
        )


@dataclass(frozen=True)
class PlacedPrimitive:
    """A single primitive shape resting on the ground plane.

    Attributes:
        kind: Shape type
        position: Center (x, y, z); y is half the vertical extent
        rotation: Euler angles (x, y, z) in radians, applied in XYZ order
        scale: Per-axis size of the unit shape
        color: Base color
        roughness: Material roughness in [0, 1]
        metalness: Material metalness in [0, 1]
        id: Opaque identifier, stable for the lifetime of one generated scene
    """

    kind: PrimitiveKind
    position: Vec3
    rotation: Vec3
    scale: Vec3
    color: Hsl
    roughness: float
    metalness: float
    id: str

    @property
    def max_radius(self) -> float:
        return max_radius(self.scale)

    @property
    def yaw(self) -> float:
        return self.rotation[1]


# ---------------------------------------------------------------------------
# Footprint / collision
# ---------------------------------------------------------------------------


def max_radius(scale: Vec3) -> float:
    """Bounding-sphere radius from the largest scale axis."""
    return max(scale) / 2


def collides(pos_a: Vec3, scale_a: Vec3, pos_b: Vec3, scale_b: Vec3) -> bool:
    """Footprint overlap test on the ground plane.

    Each object is approximated by the sphere around its largest axis, so
    elongated objects are treated conservatively. Only x and z are
    compared: objects never collide by height.
    """
    dx = pos_a[0] - pos_b[0]
    dz = pos_a[2] - pos_b[2]
    distance = float(np.hypot(dx, dz))
    return distance < max_radius(scale_a) + max_radius(scale_b) + COLLISION_BUFFER


# ---------------------------------------------------------------------------
# Rotation utilities (for rendering rotated primitives)
# ---------------------------------------------------------------------------


def _axis_quat(axis: int, angle: float) -> np.ndarray:
    q = np.zeros(4)
    q[0] = np.cos(angle / 2)
    q[1 + axis] = np.sin(angle / 2)
    return q


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product of two quaternions (w, x, y, z)."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def euler_to_quat(rx: float, ry: float, rz: float) -> np.ndarray:
    """Euler angles (XYZ order, R = Rx @ Ry @ Rz) to quaternion (w, x, y, z)."""
    q = quat_multiply(_axis_quat(0, rx), _axis_quat(1, ry))
    return quat_multiply(q, _axis_quat(2, rz))


def euler_to_matrix(rx: float, ry: float, rz: float) -> np.ndarray:
    """Euler angles (XYZ order) to a 3x3 rotation matrix."""
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)
    rot_x = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    rot_y = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rot_z = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return rot_x @ rot_y @ rot_z


def look_at_matrix(eye: Vec3, target: Vec3) -> np.ndarray:
    """Camera rotation (columns: right, down, forward) looking from eye to target.

    Matches the RDF camera convention (X right, Y down, Z forward) with
    world +Y as up.
    """
    forward = np.asarray(target, dtype=np.float64) - np.asarray(eye, dtype=np.float64)
    norm = np.linalg.norm(forward)
    if norm < 1e-9:
        return np.eye(3)
    forward /= norm
    right = np.cross(forward, [0.0, 1.0, 0.0])
    if np.linalg.norm(right) < 1e-9:
        # Looking straight up or down
        right = np.array([1.0, 0.0, 0.0])
    right /= np.linalg.norm(right)
    down = np.cross(forward, right)
    return np.column_stack([right, down, forward])
