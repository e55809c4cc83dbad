"""Scene session: owns the current scene, preset and view mode.

The session is the single writer of the primitive tuple. The renderer
reads `primitives`, `view_mode`, `camera` and `light` after each call and
can rely on `primitives` changing identity exactly when its content
changes.

Usage:
    session = SceneSession(count=5, seed=42, camera=CameraHandle(), light=LightHandle())
    session.regenerate()
    session.select_preset("orbit-camera")
    for _ in range(frames):
        session.tick(1 / 30)
        render(session.primitives, session.view_mode, session.camera, session.light)
    session.select_preset("orbit-camera")  # toggles back to idle and resets
"""

from __future__ import annotations

import logging

import numpy as np

from primscene.animation import (
    AnimationPreset,
    Animator,
    CameraHandle,
    InitialSnapshot,
    LightHandle,
)
from primscene.composer import DEFAULT_COUNT, MAX_ATTEMPTS, PLANE_SIZE, generate
from primscene.primitives import PlacedPrimitive, ViewMode

log = logging.getLogger(__name__)


class SceneSession:
    """Wires scene generation, animation and view mode together."""

    def __init__(
        self,
        count: int = DEFAULT_COUNT,
        plane_size: float = PLANE_SIZE,
        max_attempts: int = MAX_ATTEMPTS,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        camera: CameraHandle | None = None,
        light: LightHandle | None = None,
    ):
        if seed is not None:
            rng = np.random.default_rng(seed)
        elif rng is None:
            rng = np.random.default_rng()

        self.count = count
        self.plane_size = plane_size
        self.max_attempts = max_attempts
        self.rng = rng
        self.primitives: tuple[PlacedPrimitive, ...] = ()
        self.view_mode = ViewMode.STANDARD
        self.generation = 0
        self._animator = Animator(camera, light, plane_size)
        self._animator.capture(self.primitives)

    # -------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------

    @property
    def camera(self) -> CameraHandle | None:
        return self._animator.camera

    @property
    def light(self) -> LightHandle | None:
        return self._animator.light

    @property
    def active_preset(self) -> AnimationPreset | None:
        return self._animator.active_preset

    @property
    def elapsed(self) -> float:
        return self._animator.elapsed

    @property
    def snapshot(self) -> InitialSnapshot | None:
        return self._animator.snapshot

    # -------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------

    def attach(
        self,
        camera: CameraHandle | None = None,
        light: LightHandle | None = None,
    ) -> None:
        """Install renderer handles once they exist.

        While idle, the snapshot is re-captured so late handles are part of
        the rest state.
        """
        if camera is not None:
            self._animator.camera = camera
        if light is not None:
            self._animator.light = light
        if self._animator.is_idle:
            self._animator.capture(self.primitives)

    def regenerate(self) -> tuple[PlacedPrimitive, ...]:
        """Replace the scene with a freshly generated one and stop animation."""
        scene = generate(
            self.count,
            rng=self.rng,
            plane_size=self.plane_size,
            max_attempts=self.max_attempts,
        )
        if len(scene) < self.count:
            log.info("Placed %d of %d primitives", len(scene), self.count)
        return self.set_primitives(scene)

    def set_primitives(self, primitives) -> tuple[PlacedPrimitive, ...]:
        """Replace the scene with explicit records and stop animation."""
        self._animator.stop(self.primitives)
        self.primitives = tuple(primitives)
        self.generation += 1
        self._animator.capture(self.primitives)
        return self.primitives

    def select_preset(
        self, preset: AnimationPreset | str | None
    ) -> AnimationPreset | None:
        """Toggle a preset; selecting the active one returns to idle."""
        self.primitives = self._animator.select(preset, self.primitives)
        return self.active_preset

    def stop_animation(self) -> None:
        self.primitives = self._animator.stop(self.primitives)

    def select_view_mode(self, mode: ViewMode | str) -> ViewMode:
        self.view_mode = ViewMode(mode)
        return self.view_mode

    def tick(self, delta: float) -> tuple[PlacedPrimitive, ...]:
        """Advance animation by delta seconds and publish the result."""
        self.primitives = self._animator.tick(delta, self.primitives)
        return self.primitives
