"""Scene composer: places random primitives on the ground plane.

Objects are placed one at a time via rejection sampling: each candidate is
drawn with a random kind, size, pose and material, then checked against
every object already accepted in the batch. A slot that cannot be filled
within the attempt budget is skipped, so a scene may hold fewer objects
than requested.

Usage:
    scene = generate(5, seed=42)
    print(describe_scene(scene, seed=42))
"""

from __future__ import annotations

import logging

import numpy as np

from primscene.primitives import (
    Hsl,
    PlacedPrimitive,
    PrimitiveKind,
    collides,
)

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Placement constants
# ---------------------------------------------------------------------------

# Edge length of the square placement area, centered on the origin
PLANE_SIZE = 10.0
# Rejection sampling budget per object
MAX_ATTEMPTS = 100
# Base size range [low, high)
BASE_SIZE_MIN = 0.5
BASE_SIZE_MAX = 1.5
# Per-axis jitter around the base size (±30%)
SCALE_JITTER = 0.3
# Fixed color saturation/lightness; hue is random
COLOR_SATURATION = 0.7
COLOR_LIGHTNESS = 0.5

DEFAULT_COUNT = 5

_KINDS = tuple(PrimitiveKind)


# ---------------------------------------------------------------------------
# Sampling helpers
# ---------------------------------------------------------------------------


def _sample_scale(rng: np.random.Generator) -> tuple[float, float, float]:
    """Base size with independent ±30% jitter per axis."""
    base = rng.uniform(BASE_SIZE_MIN, BASE_SIZE_MAX)
    jitter = rng.uniform(1.0 - SCALE_JITTER, 1.0 + SCALE_JITTER, size=3)
    sx, sy, sz = (float(base * j) for j in jitter)
    return (sx, sy, sz)


def _sample_position(
    rng: np.random.Generator,
    scale: tuple[float, float, float],
    plane_size: float,
) -> tuple[float, float, float]:
    """Planar position keeping the bounding sphere on the plane; y rests on it."""
    half = plane_size / 2 - max(scale) / 2
    x = float(rng.uniform(-half, half))
    z = float(rng.uniform(-half, half))
    return (x, scale[1] / 2, z)


def _sample_candidate(
    rng: np.random.Generator,
    index: int,
    plane_size: float,
) -> PlacedPrimitive:
    """Draw one fully randomized candidate record."""
    kind = _KINDS[rng.integers(len(_KINDS))]
    scale = _sample_scale(rng)
    position = _sample_position(rng, scale, plane_size)
    yaw = float(rng.uniform(0.0, 2 * np.pi))
    color = Hsl(
        hue=float(rng.uniform(0.0, 360.0)),
        saturation=COLOR_SATURATION,
        lightness=COLOR_LIGHTNESS,
    )
    roughness = float(rng.uniform(0.0, 1.0))
    metalness = float(rng.uniform(0.0, 1.0))
    tag = int(rng.integers(0, 2**32))
    return PlacedPrimitive(
        kind=kind,
        position=position,
        rotation=(0.0, yaw, 0.0),
        scale=scale,
        color=color,
        roughness=roughness,
        metalness=metalness,
        id=f"prim-{index}-{tag:08x}",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate(
    count: int = DEFAULT_COUNT,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    plane_size: float = PLANE_SIZE,
    max_attempts: int = MAX_ATTEMPTS,
) -> list[PlacedPrimitive]:
    """Sample a random, collision-free scene.

    Args:
        count: Number of objects to try to place. The result may be shorter.
        seed: Integer seed for reproducibility. Overrides rng if both given.
        rng: Numpy random generator.
        plane_size: Edge length of the square ground plane.
        max_attempts: Candidates drawn per object before giving up on it.

    Returns:
        Accepted primitives in acceptance order.
    """
    if seed is not None:
        rng = np.random.default_rng(seed)
    elif rng is None:
        rng = np.random.default_rng()

    placed: list[PlacedPrimitive] = []
    for i in range(count):
        accepted = None
        for _attempt in range(max_attempts):
            candidate = _sample_candidate(rng, i, plane_size)
            if not any(
                collides(p.position, p.scale, candidate.position, candidate.scale)
                for p in placed
            ):
                accepted = candidate
                break

        if accepted is None:
            log.warning(
                "Couldn't place primitive %d after %d attempts", i, max_attempts
            )
            continue
        placed.append(accepted)

    return placed


# ---------------------------------------------------------------------------
# Scene description & identity
# ---------------------------------------------------------------------------


def scene_id(seed: int) -> str:
    """Short hex identifier for a scene seed (6 chars)."""
    return f"{seed & 0xFFFFFF:06x}"


def describe_primitive(prim: PlacedPrimitive) -> str:
    """One-line description of a placed primitive."""
    x, _, z = prim.position
    sx, sy, sz = prim.scale
    yaw_deg = np.degrees(prim.yaw)
    return (
        f"{prim.kind.value} at ({x:+.2f}, {z:+.2f}) yaw {yaw_deg:.0f}°"
        f"  (scale={sx:.2f}x{sy:.2f}x{sz:.2f}, {prim.color.to_css()}, "
        f"roughness={prim.roughness:.2f}, metalness={prim.metalness:.2f})"
    )


def describe_scene(
    primitives: list[PlacedPrimitive] | tuple[PlacedPrimitive, ...],
    seed: int | None = None,
) -> str:
    """Multi-line textual description of a full scene.

    Example output:
        Scene #00002a (seed=42)  3 primitives
          [0] cone at (+2.10, -1.30) yaw 45°  (scale=0.81x0.95x0.77, ...)
          [1] torus at (-0.80, +1.50) yaw 180°  (scale=1.20x1.31x1.02, ...)
          [2] box at (+1.20, +0.40) yaw 271°  (scale=0.66x0.59x0.71, ...)
    """
    lines = []

    if seed is not None:
        header = f"Scene #{scene_id(seed)} (seed={seed})  {len(primitives)} primitives"
    else:
        header = f"Scene  {len(primitives)} primitives"
    lines.append(header)

    for i, prim in enumerate(primitives):
        lines.append(f"  [{i}] {describe_primitive(prim)}")

    return "\n".join(lines)
