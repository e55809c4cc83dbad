"""Animation presets: camera, light and object motion over time.

Each preset is a pure function of the elapsed time (and, for some presets,
of the snapshot taken when the scene was set up). The Animator holds the
preset state machine:

    Idle --select(P)--> P --select(Q)--> Q --select(Q)--> Idle

Entering Idle restores the camera, the light and every primitive from the
snapshot; there is no interpolation back to rest.

Object presets never edit records in place: each tick returns a new tuple
of new PlacedPrimitive records. Camera/light presets write the handle
fields directly.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from primscene.composer import PLANE_SIZE
from primscene.primitives import PlacedPrimitive, Vec3

log = logging.getLogger(__name__)

ORIGIN: Vec3 = (0.0, 0.0, 0.0)
TWO_PI = 2 * np.pi

# ---------------------------------------------------------------------------
# Preset constants
# ---------------------------------------------------------------------------

ORBIT_RADIUS = 10.0
ORBIT_SPEED = 0.5  # rad/s
ORBIT_HEIGHT = 5.0

OSCILLATE_AMPLITUDE = 2.0
OSCILLATE_SPEED = 2.0  # rad/s

LIGHT_RADIUS = 15.0
LIGHT_SPEED = 0.5  # rad/s
LIGHT_HEIGHT = 10.0

# rotate-objects: object i spins at SPIN_BASE + SPIN_STEP * i rad/s
SPIN_BASE = 1.0
SPIN_STEP = 0.3

# translate-objects: object i circles at PATH_SPEED + PATH_SPEED_STEP * i rad/s
PATH_SPEED = 0.5
PATH_SPEED_STEP = 0.2
PATH_RADIUS = 3.0
PATH_RADIUS_STEP = 0.7
PATH_CENTER_OFFSET = 2.0
# Keep translated centers this far inside the plane edge
PATH_MARGIN = 0.5


class AnimationPreset(Enum):
    """Mutually exclusive animation modes. Idle is represented by None."""

    ORBIT_CAMERA = "orbit-camera"
    OSCILLATE_CAMERA = "oscillate-camera"
    ROTATE_LIGHT = "rotate-light"
    ROTATE_OBJECTS = "rotate-objects"
    TRANSLATE_OBJECTS = "translate-objects"

    @property
    def drives_camera(self) -> bool:
        """Whether manual camera control is suppressed while active."""
        return self in (AnimationPreset.ORBIT_CAMERA, AnimationPreset.OSCILLATE_CAMERA)


# ---------------------------------------------------------------------------
# Handles owned by the renderer
# ---------------------------------------------------------------------------


@dataclass
class CameraHandle:
    """Mutable camera state shared with the renderer."""

    position: Vec3 = (0.0, 5.0, 10.0)
    target: Vec3 = ORIGIN
    controls_enabled: bool = True

    def look_at(self, point: Vec3) -> None:
        self.target = _vec3(point)


@dataclass
class LightHandle:
    """Mutable directional light state shared with the renderer."""

    position: Vec3 = (10.0, 10.0, 5.0)


def _vec3(v) -> Vec3:
    x, y, z = v
    return (float(x), float(y), float(z))


@dataclass(frozen=True)
class InitialSnapshot:
    """Rest state restored when animation stops.

    All fields are immutable values (tuples of floats, frozen records), so
    the snapshot never aliases anything the animation can change.
    """

    primitives: tuple[PlacedPrimitive, ...]
    camera_position: Vec3 | None = None
    camera_target: Vec3 | None = None
    light_position: Vec3 | None = None

    @classmethod
    def capture(
        cls,
        primitives,
        camera: CameraHandle | None = None,
        light: LightHandle | None = None,
    ) -> InitialSnapshot:
        return cls(
            primitives=tuple(primitives),
            camera_position=_vec3(camera.position) if camera is not None else None,
            camera_target=_vec3(camera.target) if camera is not None else None,
            light_position=_vec3(light.position) if light is not None else None,
        )


# ---------------------------------------------------------------------------
# Preset formulas
# ---------------------------------------------------------------------------


def orbit_camera_position(elapsed: float) -> Vec3:
    """Camera on a horizontal circle around the origin."""
    angle = elapsed * ORBIT_SPEED
    return (
        float(np.sin(angle) * ORBIT_RADIUS),
        ORBIT_HEIGHT,
        float(np.cos(angle) * ORBIT_RADIUS),
    )


def oscillate_camera_position(elapsed: float, initial: Vec3) -> Vec3:
    """Small circular sway around the initial camera position."""
    angle = elapsed * OSCILLATE_SPEED
    return (
        float(initial[0] + np.sin(angle) * OSCILLATE_AMPLITUDE),
        float(initial[1]),
        float(initial[2] + np.cos(angle) * OSCILLATE_AMPLITUDE),
    )


def orbit_light_position(elapsed: float) -> Vec3:
    angle = elapsed * LIGHT_SPEED
    return (
        float(np.sin(angle) * LIGHT_RADIUS),
        LIGHT_HEIGHT,
        float(np.cos(angle) * LIGHT_RADIUS),
    )


def spin_primitives(
    elapsed: float,
    primitives: tuple[PlacedPrimitive, ...],
) -> tuple[PlacedPrimitive, ...]:
    """Spin every primitive about the vertical axis, faster for later indices."""
    spun = []
    for i, prim in enumerate(primitives):
        speed = SPIN_BASE + i * SPIN_STEP
        yaw = float((elapsed * speed) % TWO_PI)
        rx, _, rz = prim.rotation
        spun.append(dataclasses.replace(prim, rotation=(rx, yaw, rz)))
    return tuple(spun)


def translate_primitives(
    elapsed: float,
    primitives: tuple[PlacedPrimitive, ...],
    rest: tuple[PlacedPrimitive, ...],
    plane_size: float = PLANE_SIZE,
) -> tuple[PlacedPrimitive, ...]:
    """Move every primitive along its own circle, clamped to the plane.

    Heights come from the matching rest record so objects never drift
    vertically. Records with no rest counterpart are left as they are.
    Pairwise collisions are not re-checked.
    """
    rest_by_id = {p.id: p for p in rest}
    limit = plane_size / 2 - PATH_MARGIN

    moved = []
    for i, prim in enumerate(primitives):
        rest_prim = rest_by_id.get(prim.id)
        if rest_prim is None:
            moved.append(prim)
            continue

        speed = PATH_SPEED + i * PATH_SPEED_STEP
        radius = PATH_RADIUS + i * PATH_RADIUS_STEP
        angle = elapsed * speed
        cx = np.sin(i) * PATH_CENTER_OFFSET
        cz = np.cos(i) * PATH_CENTER_OFFSET

        x = float(np.clip(cx + np.sin(angle) * radius, -limit, limit))
        z = float(np.clip(cz + np.cos(angle) * radius, -limit, limit))
        moved.append(
            dataclasses.replace(prim, position=(x, rest_prim.position[1], z))
        )
    return tuple(moved)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class Animator:
    """Preset state machine driving camera, light and primitive transforms."""

    def __init__(
        self,
        camera: CameraHandle | None = None,
        light: LightHandle | None = None,
        plane_size: float = PLANE_SIZE,
    ):
        self.camera = camera
        self.light = light
        self.plane_size = plane_size
        self.active_preset: AnimationPreset | None = None
        self.elapsed = 0.0
        self.snapshot: InitialSnapshot | None = None

    @property
    def is_idle(self) -> bool:
        return self.active_preset is None

    def capture(self, primitives) -> InitialSnapshot:
        """Record the rest state that stop() restores."""
        self.snapshot = InitialSnapshot.capture(primitives, self.camera, self.light)
        log.debug(
            "Captured snapshot: %d primitives, camera=%s, light=%s",
            len(self.snapshot.primitives),
            self.snapshot.camera_position,
            self.snapshot.light_position,
        )
        return self.snapshot

    def select(
        self,
        preset: AnimationPreset | str | None,
        primitives: tuple[PlacedPrimitive, ...],
    ) -> tuple[PlacedPrimitive, ...]:
        """Toggle a preset and return the primitive set to publish.

        Selecting the active preset (or None) stops animation. Selecting a
        different preset replaces the current one; the scene is restored to
        rest first so nothing from the old preset leaks into the new one,
        while the elapsed time keeps running.
        """
        if preset is not None:
            preset = AnimationPreset(preset)
        if preset is None or preset == self.active_preset:
            return self.stop(primitives)

        if self.active_preset is not None:
            primitives = self._restore(primitives)
        log.debug("Preset %s -> %s", self.active_preset, preset)
        self.active_preset = preset
        if self.camera is not None:
            self.camera.controls_enabled = not preset.drives_camera
        return primitives

    def stop(
        self, primitives: tuple[PlacedPrimitive, ...]
    ) -> tuple[PlacedPrimitive, ...]:
        """Enter Idle: restore the snapshot and reset the clock."""
        if self.active_preset is None:
            return primitives

        log.debug("Preset %s -> idle (elapsed %.2fs)", self.active_preset, self.elapsed)
        self.active_preset = None
        self.elapsed = 0.0
        if self.camera is not None:
            self.camera.controls_enabled = True
        return self._restore(primitives)

    def tick(
        self, delta: float, primitives: tuple[PlacedPrimitive, ...]
    ) -> tuple[PlacedPrimitive, ...]:
        """Advance the clock by delta seconds and evaluate the active preset.

        Returns a new tuple when object transforms change, otherwise the
        input tuple itself.
        """
        preset = self.active_preset
        if preset is None:
            return primitives

        self.elapsed += delta
        t = self.elapsed
        snap = self.snapshot

        if self.camera is not None:
            self.camera.controls_enabled = not preset.drives_camera

        if preset is AnimationPreset.ORBIT_CAMERA:
            if self.camera is not None:
                self.camera.position = orbit_camera_position(t)
                self.camera.look_at(ORIGIN)

        elif preset is AnimationPreset.OSCILLATE_CAMERA:
            if self.camera is not None and snap is not None:
                if snap.camera_position is not None:
                    self.camera.position = oscillate_camera_position(
                        t, snap.camera_position
                    )
                    self.camera.look_at(ORIGIN)

        elif preset is AnimationPreset.ROTATE_LIGHT:
            if self.light is not None:
                self.light.position = orbit_light_position(t)

        elif preset is AnimationPreset.ROTATE_OBJECTS:
            if primitives:
                return spin_primitives(t, primitives)

        elif preset is AnimationPreset.TRANSLATE_OBJECTS:
            if primitives and snap is not None:
                return translate_primitives(
                    t, primitives, snap.primitives, self.plane_size
                )

        return primitives

    def _restore(
        self, primitives: tuple[PlacedPrimitive, ...]
    ) -> tuple[PlacedPrimitive, ...]:
        """Hard-overwrite camera, light and primitives from the snapshot."""
        snap = self.snapshot
        if snap is None:
            return primitives

        if self.camera is not None and snap.camera_position is not None:
            self.camera.position = snap.camera_position
            self.camera.target = snap.camera_target
        if self.light is not None and snap.light_position is not None:
            self.light.position = snap.light_position
        return snap.primitives
