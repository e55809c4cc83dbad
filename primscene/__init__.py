"""Procedural primitive scenes with preset animations.

Places random, non-overlapping primitives (box, sphere, cylinder, cone,
torus) on a ground plane and animates the camera, the light or the objects
as a function of elapsed time. Rendering lives outside the package (see
rerun_logger.py); it reads the session's primitives, view mode and handles.

Usage:
    from primscene import CameraHandle, LightHandle, SceneSession

    session = SceneSession(seed=42, camera=CameraHandle(), light=LightHandle())
    session.regenerate()                  # random collision-free scene
    session.select_preset("rotate-objects")
    session.tick(1 / 30)                  # new primitive tuple every frame
    session.select_preset("rotate-objects")  # back to idle, scene restored
"""

from primscene.animation import (
    AnimationPreset,
    Animator,
    CameraHandle,
    InitialSnapshot,
    LightHandle,
)
from primscene.composer import describe_scene, generate, scene_id
from primscene.primitives import Hsl, PlacedPrimitive, PrimitiveKind, ViewMode, collides
from primscene.session import SceneSession

__all__ = [
    "AnimationPreset",
    "Animator",
    "CameraHandle",
    "Hsl",
    "InitialSnapshot",
    "LightHandle",
    "PlacedPrimitive",
    "PrimitiveKind",
    "SceneSession",
    "ViewMode",
    "collides",
    "describe_scene",
    "generate",
    "scene_id",
]
