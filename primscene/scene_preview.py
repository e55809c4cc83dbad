"""Scene preview: generate a scene and play animation presets in Rerun.

Opens (or records to an .rrd file) a Rerun stream of a procedurally
generated scene. Each configured preset plays for a fixed duration and is
then stopped, which snaps the camera, light and objects back to rest.

Timeline per preset:
    select preset -> tick for `duration` seconds -> stop -> idle for `rest_duration`

The session clock only advances while a preset is active; the Rerun
"time" timeline is wall-clock time of the preview.
"""

from __future__ import annotations

import logging
import time

import numpy as np
import rerun as rr

from primscene.config import Config
from primscene import CameraHandle, LightHandle, SceneSession
from primscene.composer import describe_scene
from primscene.rerun_logger import SceneLogger

log = logging.getLogger(__name__)


def init_recording(app_id: str, output: str | None) -> None:
    """Start a Rerun recording: save to output if given, else spawn a viewer."""
    rr.init(app_id)
    if output:
        rr.save(output)
        log.info("Recording to %s (view with: rerun %s)", output, output)
    else:
        rr.spawn()


def build_session(cfg: Config, seed: int | None = None) -> SceneSession:
    """Create a session with camera/light handles from the config."""
    session = SceneSession(
        count=cfg.scene.count,
        plane_size=cfg.scene.plane_size,
        max_attempts=cfg.scene.max_attempts,
        seed=seed,
        camera=CameraHandle(position=tuple(cfg.view.camera_position)),
        light=LightHandle(position=tuple(cfg.view.light_position)),
    )
    session.select_view_mode(cfg.view.view_mode)
    return session


class PreviewPlayer:
    """Drives a session through the preview timeline, logging every frame."""

    def __init__(self, session: SceneSession, scene_logger: SceneLogger, cfg: Config):
        self.session = session
        self.scene_logger = scene_logger
        self.cfg = cfg
        self.clock = 0.0
        self.frames = 0

    def _frame(self, dt: float) -> None:
        step_start = time.time()
        self.session.tick(dt)
        self.clock += dt
        self.scene_logger.log_frame(self.session, self.clock)
        self.frames += 1

        if self.cfg.preview.realtime:
            remaining = dt - (time.time() - step_start)
            if remaining > 0:
                time.sleep(remaining)

    def hold(self, seconds: float) -> None:
        dt = 1.0 / self.cfg.preview.fps
        for _ in range(int(round(seconds * self.cfg.preview.fps))):
            self._frame(dt)

    def play(self, preset: str) -> None:
        """Run one preset for the configured duration, then stop it."""
        log.info("Preset %s for %.1fs", preset, self.cfg.preview.duration)
        self.session.select_preset(preset)
        self.hold(self.cfg.preview.duration)
        self.session.stop_animation()
        self.hold(self.cfg.preview.rest_duration)

    def run(self) -> int:
        """Log the rest state, then every preset in order. Returns frame count."""
        self.scene_logger.log_frame(self.session, self.clock)
        self.hold(self.cfg.preview.rest_duration)
        for preset in self.cfg.preview.presets:
            self.play(preset)
        return self.frames


def run_scene_preview(cfg: Config | None = None) -> SceneSession:
    """Generate a scene and stream the preset timeline to Rerun.

    Each scene's seed and description are logged so it can be recreated
    with --seed.
    """
    cfg = cfg or Config()
    cfg.validate()

    seed = cfg.preview.seed
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**32))

    init_recording(cfg.preview.app_id, cfg.preview.output)

    session = build_session(cfg, seed=seed)
    session.regenerate()
    log.info("%s", describe_scene(session.primitives, seed=seed))

    scene_logger = SceneLogger(ground_size=cfg.scene.ground_size)
    scene_logger.setup(fov_degrees=cfg.view.fov_degrees, resolution=cfg.view.resolution)

    player = PreviewPlayer(session, scene_logger, cfg)
    frames = player.run()
    log.info("Logged %d frames (%.1fs)", frames, player.clock)
    return session
