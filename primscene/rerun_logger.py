"""
Rerun logging for primitive scenes.

Acts as the renderer: reads a SceneSession (primitives, view mode, camera,
light) once per frame and logs whatever changed onto the "time" timeline.
"""

from __future__ import annotations

import logging

import numpy as np
import rerun as rr

from primscene.animation import CameraHandle, LightHandle
from primscene.meshes import mesh_for
from primscene.primitives import PlacedPrimitive, ViewMode, euler_to_quat, look_at_matrix
from primscene.session import SceneSession
from primscene.shading import ground_colors, vertex_colors

logger = logging.getLogger(__name__)

LIGHT_COLOR = [255, 220, 120]


def _to_rgb8(colors: np.ndarray) -> np.ndarray:
    return (colors * 255).clip(0, 255).astype(np.uint8)


def _xyzw(quat_wxyz: np.ndarray) -> list[float]:
    w, x, y, z = quat_wxyz
    return [x, y, z, w]


class SceneLogger:
    """Logs a session's scene to Rerun, relogging only what changed.

    Primitives are matched by id. A primitive's transform is relogged when
    its record object changes identity; its mesh colors are relogged when the
    view mode changes, and every frame in depth mode (colors depend on the
    camera). Ids that disappear are cleared.

    Usage:
        rr.init("primscene", spawn=True)
        scene_logger = SceneLogger()
        scene_logger.setup(fov_degrees=75.0, resolution=(1024, 1024))
        for frame in range(n):
            session.tick(dt)
            scene_logger.log_frame(session, frame * dt)
    """

    def __init__(self, namespace: str = "world", ground_size: float = 20.0):
        self.namespace = namespace
        self.ground_size = ground_size
        self._logged: dict[str, PlacedPrimitive] = {}
        self._view_mode: ViewMode | None = None

    def setup(
        self,
        fov_degrees: float = 75.0,
        resolution: tuple[int, int] = (1024, 1024),
    ) -> None:
        """Log static scene elements (coordinates, camera intrinsics)."""
        rr.log(self.namespace, rr.ViewCoordinates.RIGHT_HAND_Y_UP, static=True)

        width, height = resolution
        focal_length = float(height / (2.0 * np.tan(np.radians(fov_degrees) / 2.0)))
        rr.log(
            f"{self.namespace}/camera",
            rr.Pinhole(resolution=[width, height], focal_length=focal_length),
            static=True,
        )

    def reset(self) -> None:
        """Forget what was logged so the next frame logs everything."""
        self._logged = {}
        self._view_mode = None

    def log_frame(self, session: SceneSession, time_s: float) -> int:
        """Log one frame. Returns the number of primitive transforms logged."""
        rr.set_time("time", duration=time_s)

        camera = session.camera
        camera_pos = camera.position if camera is not None else None
        mode = session.view_mode
        mode_changed = mode != self._view_mode
        depth = mode == ViewMode.DEPTH

        if mode_changed or depth:
            self._log_ground(mode, camera_pos)

        current: dict[str, PlacedPrimitive] = {}
        n_transforms = 0
        for prim in session.primitives:
            current[prim.id] = prim
            previous = self._logged.get(prim.id)
            changed = previous is not prim
            if changed:
                self._log_transform(prim)
                n_transforms += 1
            if (
                previous is None
                or mode_changed
                or depth
                or (changed and mode == ViewMode.NORMAL)
            ):
                self._log_mesh(prim, mode, camera_pos)

        stale = self._logged.keys() - current.keys()
        if stale:
            logger.debug("Clearing %d stale primitives", len(stale))
        for stale_id in stale:
            rr.log(self._prim_path(stale_id), rr.Clear(recursive=True))

        self._logged = current
        self._view_mode = mode

        if camera is not None:
            self._log_camera(camera)
        if session.light is not None:
            self._log_light(session.light)

        return n_transforms

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------

    def _prim_path(self, prim_id: str) -> str:
        return f"{self.namespace}/primitives/{prim_id}"

    def _log_transform(self, prim: PlacedPrimitive) -> None:
        rr.log(
            self._prim_path(prim.id),
            rr.Transform3D(
                translation=prim.position,
                rotation=rr.Quaternion(xyzw=_xyzw(euler_to_quat(*prim.rotation))),
                scale=prim.scale,
            ),
        )

    def _log_mesh(self, prim: PlacedPrimitive, mode: ViewMode, camera_pos) -> None:
        mesh = mesh_for(prim.kind)
        colors = vertex_colors(prim, mesh, mode, camera_pos)
        rr.log(
            f"{self._prim_path(prim.id)}/{prim.kind.value}",
            rr.Mesh3D(
                vertex_positions=mesh.vertices,
                triangle_indices=mesh.faces,
                vertex_normals=mesh.normals,
                vertex_colors=_to_rgb8(colors),
            ),
        )

    def _log_ground(self, mode: ViewMode, camera_pos) -> None:
        h = self.ground_size / 2.0
        verts = np.array([[-h, 0, -h], [h, 0, -h], [h, 0, h], [-h, 0, h]], dtype=np.float64)
        colors = ground_colors(verts, mode, camera_pos)
        rr.log(
            f"{self.namespace}/ground",
            rr.Mesh3D(
                vertex_positions=verts,
                triangle_indices=[[0, 2, 1], [0, 3, 2]],
                vertex_normals=np.tile([0.0, 1.0, 0.0], (4, 1)),
                vertex_colors=_to_rgb8(colors),
            ),
        )

    def _log_camera(self, camera: CameraHandle) -> None:
        rr.log(
            f"{self.namespace}/camera",
            rr.Transform3D(
                translation=camera.position,
                mat3x3=look_at_matrix(camera.position, camera.target),
            ),
        )

    def _log_light(self, light: LightHandle) -> None:
        pos = np.asarray(light.position, dtype=np.float64)
        rr.log(
            f"{self.namespace}/light",
            rr.Points3D([pos], colors=[LIGHT_COLOR], radii=[0.3], labels=["light"]),
        )
        # Directional light: shine from its position toward the origin
        rr.log(
            f"{self.namespace}/light_direction",
            rr.Arrows3D(origins=[pos], vectors=[-pos * 0.5], colors=[LIGHT_COLOR]),
        )
