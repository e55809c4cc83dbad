"""Tests for SceneSession: regenerate, preset toggling, view modes."""

import pytest

from primscene import (
    AnimationPreset,
    CameraHandle,
    LightHandle,
    SceneSession,
    ViewMode,
)
from primscene.composer import generate


@pytest.fixture
def session():
    s = SceneSession(
        count=5,
        seed=42,
        camera=CameraHandle(position=(0.0, 5.0, 10.0)),
        light=LightHandle(position=(10.0, 10.0, 5.0)),
    )
    s.regenerate()
    return s


class TestRegenerate:
    def test_matches_seeded_generate(self):
        s = SceneSession(count=5, seed=9)
        assert list(s.regenerate()) == generate(5, seed=9)

    def test_replaces_scene(self, session):
        first = session.primitives
        second = session.regenerate()
        assert second is session.primitives
        assert second != first
        assert session.generation == 2

    def test_forces_idle(self, session):
        session.select_preset("translate-objects")
        session.tick(1.0)
        session.regenerate()
        assert session.active_preset is None
        assert session.elapsed == 0.0

    def test_recaptures_snapshot(self, session):
        session.regenerate()
        assert session.snapshot.primitives == session.primitives

    def test_restores_handles_before_recapture(self, session):
        session.select_preset("orbit-camera")
        session.tick(2.0)
        session.regenerate()
        assert session.camera.position == (0.0, 5.0, 10.0)
        assert session.snapshot.camera_position == (0.0, 5.0, 10.0)

    def test_set_primitives(self, session):
        scene = generate(2, seed=1)
        session.select_preset("rotate-objects")
        session.tick(0.5)
        out = session.set_primitives(scene)
        assert out == tuple(scene)
        assert session.active_preset is None
        assert session.snapshot.primitives == tuple(scene)


class TestPresets:
    def test_toggle(self, session):
        assert session.select_preset("rotate-light") is AnimationPreset.ROTATE_LIGHT
        assert session.select_preset("rotate-light") is None

    def test_stop_animation_restores_scene(self, session):
        rest = session.primitives
        session.select_preset("rotate-objects")
        for _ in range(10):
            session.tick(0.1)
        assert session.primitives != rest
        session.stop_animation()
        assert session.primitives == rest
        assert session.elapsed == 0.0

    def test_identity_changes_only_with_content(self, session):
        session.select_preset("orbit-camera")
        before = session.primitives
        session.tick(0.1)
        assert session.primitives is before

        session.select_preset("rotate-objects")
        before = session.primitives
        session.tick(0.1)
        assert session.primitives is not before

    def test_attach_late_handles(self):
        s = SceneSession(count=3, seed=4)
        s.regenerate()
        assert s.snapshot.camera_position is None

        camera = CameraHandle(position=(1.0, 2.0, 3.0))
        s.attach(camera=camera, light=LightHandle())
        assert s.snapshot.camera_position == (1.0, 2.0, 3.0)

        s.select_preset("orbit-camera")
        s.tick(1.0)
        s.select_preset("orbit-camera")
        assert camera.position == (1.0, 2.0, 3.0)

    def test_attach_while_animating_keeps_snapshot(self, session):
        snap = session.snapshot
        session.select_preset("rotate-light")
        session.attach(light=LightHandle(position=(0.0, 1.0, 0.0)))
        assert session.snapshot is snap

    def test_handles_captured_before_regenerate(self):
        s = SceneSession(
            seed=1,
            camera=CameraHandle(position=(0.0, 5.0, 10.0)),
            light=LightHandle(position=(10.0, 10.0, 5.0)),
        )
        assert s.snapshot is not None
        assert s.snapshot.camera_position == (0.0, 5.0, 10.0)

        s.select_preset("orbit-camera")
        s.tick(1.0)
        s.select_preset("rotate-light")
        assert s.camera.position == (0.0, 5.0, 10.0)
        s.tick(1.0)
        s.select_preset("rotate-light")

        assert s.active_preset is None
        assert s.camera.position == (0.0, 5.0, 10.0)
        assert s.light.position == (10.0, 10.0, 5.0)
        assert s.primitives == ()


class TestViewMode:
    def test_default_standard(self, session):
        assert session.view_mode is ViewMode.STANDARD

    @pytest.mark.parametrize("mode", [m.value for m in ViewMode])
    def test_select_view_mode(self, session, mode):
        before = session.primitives
        assert session.select_view_mode(mode) is ViewMode(mode)
        assert session.primitives is before
        assert session.active_preset is None

    def test_view_mode_does_not_touch_animation(self, session):
        session.select_preset("rotate-objects")
        session.tick(0.3)
        session.select_view_mode("depth")
        assert session.active_preset is AnimationPreset.ROTATE_OBJECTS
        assert session.elapsed == pytest.approx(0.3)

    def test_unknown_view_mode(self, session):
        with pytest.raises(ValueError):
            session.select_view_mode("wireframe")
