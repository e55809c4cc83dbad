"""
Centralized configuration for scene generation and preview.

All settings in one place.
Automatically converts to a flat dict for logging.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from primscene.animation import AnimationPreset
from primscene.composer import DEFAULT_COUNT, MAX_ATTEMPTS, PLANE_SIZE
from primscene.primitives import ViewMode


@dataclass
class SceneConfig:
    """Scene generation configuration."""

    count: int = DEFAULT_COUNT
    plane_size: float = PLANE_SIZE  # Placement area edge length
    ground_size: float = 20.0  # Rendered ground edge length (larger than placement)
    max_attempts: int = MAX_ATTEMPTS  # Rejection sampling budget per object


@dataclass
class ViewConfig:
    """Camera, light and viewport configuration."""

    camera_position: tuple[float, float, float] = (0.0, 5.0, 10.0)
    light_position: tuple[float, float, float] = (10.0, 10.0, 5.0)
    fov_degrees: float = 75.0
    resolution: tuple[int, int] = (1024, 1024)
    view_mode: str = ViewMode.STANDARD.value


@dataclass
class PreviewConfig:
    """Scripted preview timeline configuration."""

    # Presets played in order; each is followed by a stop (reset to rest)
    presets: tuple[str, ...] = tuple(p.value for p in AnimationPreset)
    duration: float = 8.0  # Seconds per preset
    rest_duration: float = 1.0  # Seconds of idle after each stop
    fps: int = 30
    realtime: bool = True  # Sleep between frames (live viewer only)
    seed: int | None = None
    output: str | None = None  # .rrd path; None = spawn viewer
    app_id: str = "primscene"


@dataclass
class Config:
    """Complete preview configuration."""

    scene: SceneConfig = field(default_factory=SceneConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)

    def to_flat_dict(self) -> dict:
        """
        Convert to flat dict for logging.

        Prefixes each section's keys with section name.
        Example: scene.count -> "scene/count"
        """
        result = {}
        for section_name, section in [
            ("scene", self.scene),
            ("view", self.view),
            ("preview", self.preview),
        ]:
            for key, value in asdict(section).items():
                result[f"{section_name}/{key}"] = value
        return result

    def validate(self) -> None:
        """Raise ValueError for settings outside their domain."""
        if self.scene.count < 0:
            raise ValueError(f"scene.count must be >= 0, got {self.scene.count}")
        if self.scene.plane_size <= 0:
            raise ValueError(f"scene.plane_size must be > 0, got {self.scene.plane_size}")
        if self.scene.max_attempts < 1:
            raise ValueError(
                f"scene.max_attempts must be >= 1, got {self.scene.max_attempts}"
            )
        if self.preview.fps <= 0:
            raise ValueError(f"preview.fps must be > 0, got {self.preview.fps}")
        if self.preview.duration < 0 or self.preview.rest_duration < 0:
            raise ValueError("preview durations must be >= 0")
        # Raises ValueError on unknown names
        ViewMode(self.view.view_mode)
        for name in self.preview.presets:
            AnimationPreset(name)

    @classmethod
    def for_smoketest(cls) -> Config:
        """Config for fast end-to-end validation. Runs in well under a second."""
        return cls(
            scene=SceneConfig(count=3),
            view=ViewConfig(resolution=(64, 64)),
            preview=PreviewConfig(
                duration=0.2,
                rest_duration=0.1,
                fps=10,
                realtime=False,
                seed=0,
            ),
        )
