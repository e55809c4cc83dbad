"""Tests for meshes, view-mode shading and the Rerun scene logger."""

import dataclasses

import numpy as np
import pytest
import rerun as rr

from primscene import CameraHandle, LightHandle, SceneSession
from primscene.composer import generate
from primscene.meshes import mesh_for
from primscene.primitives import PrimitiveKind, ViewMode
from primscene.shading import (
    GROUND_COLOR,
    ground_colors,
    vertex_colors,
    world_normals,
    world_vertices,
)
from primscene.rerun_logger import SceneLogger

# ---------------------------------------------------------------------------
# Meshes
# ---------------------------------------------------------------------------


class TestMeshes:
    @pytest.fixture(params=list(PrimitiveKind), ids=lambda k: k.value)
    def kind(self, request):
        return request.param

    def test_shapes(self, kind):
        mesh = mesh_for(kind)
        assert mesh.vertices.ndim == 2 and mesh.vertices.shape[1] == 3
        assert mesh.normals.shape == mesh.vertices.shape
        assert mesh.faces.shape[1] == 3
        assert mesh.faces.max() < len(mesh.vertices)

    def test_unit_normals(self, kind):
        norms = np.linalg.norm(mesh_for(kind).normals, axis=1)
        assert np.allclose(norms, 1.0)

    def test_fits_unit_box(self, kind):
        verts = mesh_for(kind).vertices
        limit = 0.7 if kind is PrimitiveKind.TORUS else 0.5
        assert np.all(np.abs(verts) <= limit + 1e-9)

    def test_cached_and_read_only(self, kind):
        mesh = mesh_for(kind)
        assert mesh_for(kind) is mesh
        with pytest.raises(ValueError):
            mesh.vertices[0, 0] = 1.0

    def test_cone_apex_up(self):
        verts = mesh_for(PrimitiveKind.CONE).vertices
        top = verts[np.isclose(verts[:, 1], 0.5)]
        assert np.allclose(top[:, [0, 2]], 0.0)

    def test_torus_extent(self):
        verts = mesh_for(PrimitiveKind.TORUS).vertices
        assert verts[:, 0].max() == pytest.approx(0.7)
        assert np.abs(verts[:, 2]).max() == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# Shading
# ---------------------------------------------------------------------------


class TestShading:
    @pytest.fixture
    def prim(self):
        return generate(1, seed=5)[0]

    @pytest.fixture(params=list(ViewMode), ids=lambda m: m.value)
    def mode(self, request):
        return request.param

    def test_colors_in_range(self, prim, mode):
        mesh = mesh_for(prim.kind)
        colors = vertex_colors(prim, mesh, mode, camera_position=(0.0, 5.0, 10.0))
        assert colors.shape == (len(mesh.vertices), 3)
        assert colors.min() >= 0.0 and colors.max() <= 1.0

    def test_ground_in_range(self, mode):
        verts = np.array([[-10, 0, -10], [10, 0, -10], [10, 0, 10], [-10, 0, 10]], dtype=float)
        colors = ground_colors(verts, mode, camera_position=(0.0, 5.0, 10.0))
        assert colors.shape == (4, 3)
        assert colors.min() >= 0.0 and colors.max() <= 1.0

    def test_base_color(self, prim):
        colors = vertex_colors(prim, mesh_for(prim.kind), ViewMode.BASECOLOR)
        assert np.allclose(colors, prim.color.to_rgb())

    def test_material_grayscale(self, prim):
        mesh = mesh_for(prim.kind)
        assert np.allclose(vertex_colors(prim, mesh, ViewMode.METALLIC), prim.metalness)
        assert np.allclose(vertex_colors(prim, mesh, ViewMode.ROUGHNESS), prim.roughness)

    def test_ground_materials(self):
        verts = np.zeros((4, 3))
        assert np.allclose(ground_colors(verts, ViewMode.METALLIC), 0.0)
        assert np.allclose(ground_colors(verts, ViewMode.ROUGHNESS), 1.0)
        assert np.allclose(ground_colors(verts, ViewMode.STANDARD), GROUND_COLOR)

    def test_depth_darker_when_far(self, prim):
        mesh = mesh_for(prim.kind)
        near = vertex_colors(prim, mesh, ViewMode.DEPTH, camera_position=prim.position)
        far = vertex_colors(prim, mesh, ViewMode.DEPTH, camera_position=(0.0, 20.0, 40.0))
        assert near.mean() > far.mean()

    def test_world_transform(self, prim):
        mesh = mesh_for(PrimitiveKind.BOX)
        box = dataclasses.replace(prim, kind=PrimitiveKind.BOX, rotation=(0.0, 0.0, 0.0))
        verts = world_vertices(box, mesh)
        assert verts.min(axis=0) == pytest.approx(np.subtract(box.position, np.divide(box.scale, 2)))
        assert verts[:, 1].min() == pytest.approx(0.0)
        assert np.allclose(np.linalg.norm(world_normals(box, mesh), axis=1), 1.0)


# ---------------------------------------------------------------------------
# Rerun logger
# ---------------------------------------------------------------------------


class TestSceneLogger:
    @pytest.fixture
    def recording(self):
        rr.init("primscene_test")
        return rr.memory_recording()

    @pytest.fixture
    def session(self):
        s = SceneSession(
            count=4,
            seed=3,
            camera=CameraHandle(position=(0.0, 5.0, 10.0)),
            light=LightHandle(position=(10.0, 10.0, 5.0)),
        )
        s.regenerate()
        return s

    def test_first_frame_logs_everything(self, recording, session):
        scene_logger = SceneLogger()
        scene_logger.setup()
        assert scene_logger.log_frame(session, 0.0) == len(session.primitives)

    def test_unchanged_records_not_relogged(self, recording, session):
        scene_logger = SceneLogger()
        scene_logger.log_frame(session, 0.0)
        session.select_preset("orbit-camera")
        session.tick(0.1)
        assert scene_logger.log_frame(session, 0.1) == 0

    def test_replaced_records_relogged(self, recording, session):
        scene_logger = SceneLogger()
        scene_logger.log_frame(session, 0.0)
        session.select_preset("rotate-objects")
        session.tick(0.1)
        assert scene_logger.log_frame(session, 0.1) == len(session.primitives)

    @pytest.fixture
    def logged(self, monkeypatch):
        """Record (path, archetype) pairs passed to rr.log."""
        calls = []
        real_log = rr.log

        def spy(path, entity, *args, **kwargs):
            calls.append((path, entity))
            return real_log(path, entity, *args, **kwargs)

        monkeypatch.setattr(rr, "log", spy)
        return calls

    def test_regenerate_clears_stale_ids(self, recording, session, logged, caplog):
        scene_logger = SceneLogger()
        scene_logger.log_frame(session, 0.0)
        old_ids = {p.id for p in session.primitives}

        session.regenerate()
        new_ids = {p.id for p in session.primitives}
        assert old_ids.isdisjoint(new_ids)

        logged.clear()
        with caplog.at_level("DEBUG", logger="primscene.rerun_logger"):
            assert scene_logger.log_frame(session, 0.1) == len(new_ids)

        cleared = {path for path, entity in logged if isinstance(entity, rr.Clear)}
        assert cleared == {f"world/primitives/{i}" for i in old_ids}
        assert set(scene_logger._logged) == new_ids
        assert f"Clearing {len(old_ids)} stale primitives" in caplog.text

    def test_view_mode_change_relogs_ground(self, recording, session, logged):
        scene_logger = SceneLogger()
        scene_logger.log_frame(session, 0.0)
        assert "world/ground" in [path for path, _ in logged]

        logged.clear()
        scene_logger.log_frame(session, 0.1)
        assert "world/ground" not in [path for path, _ in logged]

        for i, mode in enumerate(m for m in ViewMode if m is not ViewMode.STANDARD):
            logged.clear()
            session.select_view_mode(mode)
            assert scene_logger.log_frame(session, 0.2 + 0.1 * i) == 0
            paths = [path for path, _ in logged]
            assert "world/ground" in paths
            # Every primitive's mesh is recolored under the new mode
            meshes = [p for p in paths if p.startswith("world/primitives/") and p.count("/") == 3]
            assert len(meshes) == len(session.primitives)

    def test_reset_forgets(self, recording, session):
        scene_logger = SceneLogger()
        scene_logger.log_frame(session, 0.0)
        scene_logger.reset()
        assert scene_logger.log_frame(session, 0.1) == len(session.primitives)
