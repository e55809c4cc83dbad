"""Per-vertex colors for each view mode.

The renderer has no material system of its own, so every view mode is
expressed as vertex colors over a primitive's world-space mesh. The view
mode is always passed in explicitly.
"""

from __future__ import annotations

import numpy as np

from primscene.meshes import Mesh
from primscene.primitives import PlacedPrimitive, Vec3, ViewMode, euler_to_matrix

# Depth mode maps camera distance [DEPTH_NEAR, DEPTH_FAR] to white..black
DEPTH_NEAR = 1.0
DEPTH_FAR = 25.0

GROUND_COLOR = (0xF0 / 255, 0xF0 / 255, 0xF0 / 255)
GROUND_ROUGHNESS = 1.0
GROUND_METALNESS = 0.0
GROUND_NORMAL = (0.0, 1.0, 0.0)


def world_vertices(prim: PlacedPrimitive, mesh: Mesh) -> np.ndarray:
    """Mesh vertices after scale, rotation and translation."""
    rot = euler_to_matrix(*prim.rotation)
    return (mesh.vertices * np.asarray(prim.scale)) @ rot.T + np.asarray(prim.position)


def world_normals(prim: PlacedPrimitive, mesh: Mesh) -> np.ndarray:
    """Mesh normals transformed by the inverse-transpose of rotation @ scale."""
    rot = euler_to_matrix(*prim.rotation)
    normals = (mesh.normals / np.asarray(prim.scale)) @ rot.T
    return normals / np.linalg.norm(normals, axis=1, keepdims=True)


def _depth_gray(vertices: np.ndarray, camera_position: Vec3 | None) -> np.ndarray:
    if camera_position is None:
        return np.ones(len(vertices))
    dist = np.linalg.norm(vertices - np.asarray(camera_position), axis=1)
    return 1.0 - np.clip((dist - DEPTH_NEAR) / (DEPTH_FAR - DEPTH_NEAR), 0.0, 1.0)


def _solid(rgb, n: int) -> np.ndarray:
    return np.tile(np.asarray(rgb, dtype=np.float64), (n, 1))


def vertex_colors(
    prim: PlacedPrimitive,
    mesh: Mesh,
    view_mode: ViewMode,
    camera_position: Vec3 | None = None,
) -> np.ndarray:
    """(N, 3) RGB floats in [0, 1] for the primitive under a view mode."""
    n = len(mesh.vertices)

    if view_mode in (ViewMode.STANDARD, ViewMode.BASECOLOR):
        return _solid(prim.color.to_rgb(), n)
    if view_mode == ViewMode.METALLIC:
        return _solid((prim.metalness,) * 3, n)
    if view_mode == ViewMode.ROUGHNESS:
        return _solid((prim.roughness,) * 3, n)
    if view_mode == ViewMode.NORMAL:
        return np.clip(world_normals(prim, mesh) * 0.5 + 0.5, 0.0, 1.0)
    if view_mode == ViewMode.DEPTH:
        gray = _depth_gray(world_vertices(prim, mesh), camera_position)
        return np.repeat(gray[:, None], 3, axis=1)
    raise ValueError(f"Unknown view mode: {view_mode}")


def ground_colors(
    vertices: np.ndarray,
    view_mode: ViewMode,
    camera_position: Vec3 | None = None,
) -> np.ndarray:
    """(N, 3) RGB floats for the ground plane vertices (already in world space)."""
    n = len(vertices)

    if view_mode in (ViewMode.STANDARD, ViewMode.BASECOLOR):
        return _solid(GROUND_COLOR, n)
    if view_mode == ViewMode.METALLIC:
        return _solid((GROUND_METALNESS,) * 3, n)
    if view_mode == ViewMode.ROUGHNESS:
        return _solid((GROUND_ROUGHNESS,) * 3, n)
    if view_mode == ViewMode.NORMAL:
        return _solid(np.asarray(GROUND_NORMAL) * 0.5 + 0.5, n)
    if view_mode == ViewMode.DEPTH:
        gray = _depth_gray(np.asarray(vertices, dtype=np.float64), camera_position)
        return np.repeat(gray[:, None], 3, axis=1)
    raise ValueError(f"Unknown view mode: {view_mode}")
