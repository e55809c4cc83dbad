"""Unit triangle meshes for each primitive kind.

The renderer draws every primitive as a mesh stretched by the record's
scale, so each kind is built once at unit size and cached.

Convention:
    - Centered at the origin, Y-up
    - Box: 1 x 1 x 1
    - Sphere: radius 0.5
    - Cylinder: radius 0.5, height 1 (y from -0.5 to +0.5)
    - Cone: base radius 0.5 at y=-0.5, apex at y=+0.5
    - Torus: ring radius 0.5, tube radius 0.2, lying in the XY plane
"""

from __future__ import annotations

from functools import lru_cache
from typing import NamedTuple

import numpy as np

from primscene.primitives import PrimitiveKind

# Polygon counts
N_SIDES = 32  # cylinder / cone
SPHERE_RINGS = 16
SPHERE_SEGMENTS = 32
TORUS_RADIUS = 0.5
TORUS_TUBE = 0.2
TORUS_TUBE_SIDES = 16
TORUS_SEGMENTS = 100


class Mesh(NamedTuple):
    """Indexed triangle mesh. Arrays are read-only (shared via the cache)."""

    vertices: np.ndarray  # (N, 3)
    normals: np.ndarray  # (N, 3), unit length
    faces: np.ndarray  # (M, 3) vertex indices


def _freeze(vertices, normals, faces) -> Mesh:
    vertices = np.asarray(vertices, dtype=np.float64)
    normals = np.asarray(normals, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.uint32).reshape(-1, 3)
    for arr in (vertices, normals, faces):
        arr.flags.writeable = False
    return Mesh(vertices, normals, faces)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _box() -> Mesh:
    """Four vertices per face so each face gets a flat normal."""
    verts, normals, faces = [], [], []
    for axis in range(3):
        u, v = (axis + 1) % 3, (axis + 2) % 3
        for sign in (-1.0, 1.0):
            normal = np.zeros(3)
            normal[axis] = sign
            base = len(verts)
            for a, b in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
                p = np.zeros(3)
                p[axis] = 0.5 * sign
                p[u] = 0.5 * a
                p[v] = 0.5 * b
                verts.append(p)
                normals.append(normal)
            if sign > 0:
                faces.extend([base, base + 1, base + 2, base, base + 2, base + 3])
            else:
                faces.extend([base, base + 2, base + 1, base, base + 3, base + 2])
    return _freeze(verts, normals, faces)


def _sphere() -> Mesh:
    """UV sphere; poles are duplicated per segment."""
    theta = np.linspace(0, np.pi, SPHERE_RINGS + 1)  # polar angle from +Y
    phi = np.linspace(0, 2 * np.pi, SPHERE_SEGMENTS + 1)
    t, p = np.meshgrid(theta, phi, indexing="ij")
    normals = np.stack(
        [np.sin(t) * np.cos(p), np.cos(t), np.sin(t) * np.sin(p)], axis=-1
    ).reshape(-1, 3)
    verts = normals * 0.5

    cols = SPHERE_SEGMENTS + 1
    faces = []
    for r in range(SPHERE_RINGS):
        for s in range(SPHERE_SEGMENTS):
            a = r * cols + s
            b = a + cols
            faces.extend([a, a + 1, b, a + 1, b + 1, b])
    return _freeze(verts, normals, faces)


def _frustum(bottom_r: float, top_r: float, half_h: float) -> Mesh:
    """Capped frustum along Y: bottom ring, top ring, then two cap centers.

    Rings use smooth side normals; a cone is a frustum with top_r=0.
    """
    angles = np.linspace(0, 2 * np.pi, N_SIDES, endpoint=False)
    cos, sin = np.cos(angles), np.sin(angles)

    verts = np.empty((N_SIDES * 2 + 2, 3))
    verts[:N_SIDES] = np.column_stack([cos * bottom_r, np.full(N_SIDES, -half_h), sin * bottom_r])
    verts[N_SIDES : 2 * N_SIDES] = np.column_stack(
        [cos * top_r, np.full(N_SIDES, half_h), sin * top_r]
    )
    verts[-2] = [0, -half_h, 0]
    verts[-1] = [0, half_h, 0]

    # Outward normal perpendicular to the slope in the (r, y) plane
    h = 2 * half_h
    dr = bottom_r - top_r
    mag = np.hypot(h, dr)
    n_r, n_y = h / mag, dr / mag

    normals = np.empty_like(verts)
    normals[: 2 * N_SIDES] = np.tile(
        np.column_stack([cos * n_r, np.full(N_SIDES, n_y), sin * n_r]), (2, 1)
    )
    normals[-2] = [0, -1, 0]
    normals[-1] = [0, 1, 0]

    faces = []
    bc = N_SIDES * 2
    tc = N_SIDES * 2 + 1
    for i in range(N_SIDES):
        j = (i + 1) % N_SIDES
        faces.extend([bc, i, j])  # bottom cap
        faces.extend([tc, j + N_SIDES, i + N_SIDES])  # top cap
        faces.extend([i, j + N_SIDES, j])
        faces.extend([i, i + N_SIDES, j + N_SIDES])
    return _freeze(verts, normals, faces)


def _torus() -> Mesh:
    u = np.linspace(0, 2 * np.pi, TORUS_SEGMENTS + 1)  # around the ring
    v = np.linspace(0, 2 * np.pi, TORUS_TUBE_SIDES + 1)  # around the tube
    uu, vv = np.meshgrid(u, v, indexing="ij")

    normals = np.stack(
        [np.cos(vv) * np.cos(uu), np.cos(vv) * np.sin(uu), np.sin(vv)], axis=-1
    ).reshape(-1, 3)
    ring = np.stack([np.cos(uu), np.sin(uu), np.zeros_like(uu)], axis=-1).reshape(-1, 3)
    verts = ring * TORUS_RADIUS + normals * TORUS_TUBE

    cols = TORUS_TUBE_SIDES + 1
    faces = []
    for a_i in range(TORUS_SEGMENTS):
        for b_i in range(TORUS_TUBE_SIDES):
            a = a_i * cols + b_i
            b = a + cols
            faces.extend([a, b, a + 1, b, b + 1, a + 1])
    return _freeze(verts, normals, faces)


_BUILDERS = {
    PrimitiveKind.BOX: _box,
    PrimitiveKind.SPHERE: _sphere,
    PrimitiveKind.CYLINDER: lambda: _frustum(0.5, 0.5, 0.5),
    PrimitiveKind.CONE: lambda: _frustum(0.5, 0.0, 0.5),
    PrimitiveKind.TORUS: _torus,
}


@lru_cache(maxsize=None)
def mesh_for(kind: PrimitiveKind) -> Mesh:
    """Unit mesh for a primitive kind."""
    return _BUILDERS[kind]()
