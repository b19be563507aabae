"""Preset scene factories.

This module provides deterministic, seedable scene builders used by the
example script and the tests:

- ``random_lines_scene``: segments scattered uniformly over the image, each
  independently a light with a fixed probability.
- ``light_curves_scene``: two mirrored cubic Bezier curves lined with short
  emissive segments, plus non-emissive clutter scattered over an area three
  times the image size so that light also arrives from off-screen bounces.

Coordinates are in pixel units, so a scene built for (width, height) fills an
image of that size.

Example:
    >>> from rays2d.scene.presets import light_curves_scene
    >>> scene = light_curves_scene(200, 150, seed=18)
    >>> len(scene)
    76
    >>> scene.light_count()
    26
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from rays2d.core.vector import Vector2, random_in_unit_disk
from rays2d.geometry.line import Line
from rays2d.scene.manager import Scene, SceneObject, make_line_object

# =============================================================================
# Preset Parameters
# =============================================================================

RANDOM_LINE_COUNT = 20
RANDOM_LIGHT_PROBABILITY = 0.33

CURVE_LIGHTS_PER_SIDE = 14
CURVE_CLUTTER_COUNT = 50


def random_lines_scene(
    width: int,
    height: int,
    count: int = RANDOM_LINE_COUNT,
    light_probability: float = RANDOM_LIGHT_PROBABILITY,
    seed: int | None = None,
) -> Scene:
    """Create a scene of randomly placed, randomly colored segments.

    Args:
        width: Width of the area to fill.
        height: Height of the area to fill.
        count: Number of segments.
        light_probability: Chance that each segment is emissive.
        seed: Seed for reproducible layouts.

    Returns:
        The generated scene.

    Raises:
        ValueError: If count is negative or light_probability is outside [0, 1].
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if not 0.0 <= light_probability <= 1.0:
        raise ValueError(f"light_probability must be in [0, 1], got {light_probability}")

    rng = np.random.default_rng(seed)
    scale = np.array([width, height], dtype=np.float64)

    objects = []
    for _ in range(count):
        start = rng.random(2) * scale
        end = rng.random(2) * scale
        color = rng.random(3)
        is_light = bool(rng.random() < light_probability)
        objects.append(make_line_object(start, end, color, is_light))

    return Scene.build(objects)


# =============================================================================
# Bezier Light Curves
# =============================================================================


def bezier_point(p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2, t: float) -> Vector2:
    """Evaluate a cubic Bezier curve at parameter t in [0, 1]."""
    s = 1.0 - t
    return (s * s * s) * p0 + (3.0 * s * s * t) * p1 + (3.0 * s * t * t) * p2 + (t * t * t) * p3


@dataclass(frozen=True)
class Curve:
    """A cubic Bezier curve defined by four control points."""

    p0: Vector2
    p1: Vector2
    p2: Vector2
    p3: Vector2

    def point(self, t: float) -> Vector2:
        return bezier_point(self.p0, self.p1, self.p2, self.p3, t)


def _jittered_endpoint(
    rng: np.random.Generator,
    anchor: Vector2,
    direction: Vector2,
    offset: float,
) -> Vector2:
    # Push 1-5 segment lengths past the anchor, then wobble
    return anchor + direction * (1.0 + rng.random() * 4.0) + random_in_unit_disk(rng) * offset


def _curve_light(
    rng: np.random.Generator,
    curve: Curve,
    index: int,
    lights_per_side: int,
    offset: float,
) -> SceneObject:
    n = float(lights_per_side)
    t1 = index / n + rng.random() / n
    t2 = (index + 1) / n + rng.random() / n

    a = curve.point(t1)
    b = curve.point(t2)
    start = _jittered_endpoint(rng, b, a - b, offset)
    end = _jittered_endpoint(rng, a, b - a, offset)
    return SceneObject(Line(start, end), rng.random(3), is_light=True)


def light_curves_scene(
    width: int,
    height: int,
    lights_per_side: int = CURVE_LIGHTS_PER_SIDE,
    clutter: int = CURVE_CLUTTER_COUNT,
    seed: int | None = None,
) -> Scene:
    """Create a scene of two glowing curves with scattered diffuse clutter.

    The curves start together near the top center, sweep out to the left and
    right edges, and meet again near the bottom center. Each curve carries
    ``lights_per_side - 1`` emissive segments.

    Args:
        width: Image width the scene is laid out for.
        height: Image height the scene is laid out for.
        lights_per_side: Number of curve slices per side.
        clutter: Number of non-emissive segments.
        seed: Seed for reproducible layouts.

    Returns:
        The generated scene (lights first, alternating left and right, then
        clutter).

    Raises:
        ValueError: If lights_per_side < 1 or clutter < 0.
    """
    if lights_per_side < 1:
        raise ValueError(f"lights_per_side must be at least 1, got {lights_per_side}")
    if clutter < 0:
        raise ValueError(f"clutter must be non-negative, got {clutter}")

    rng = np.random.default_rng(seed)
    w = float(width)
    h = float(height)

    center = Vector2(w * 0.5, h * 0.4)
    bottom = Vector2(w * 0.5, h * 0.9)
    left_curve = Curve(center, Vector2(w * 0.2, 0.0), Vector2(0.0, h * 0.5), bottom)
    right_curve = Curve(center, Vector2(w * 0.8, 0.0), Vector2(w, h * 0.5), bottom)

    offset = h / 30.0

    objects: list[SceneObject] = []
    for i in range(lights_per_side - 1):
        objects.append(_curve_light(rng, left_curve, i, lights_per_side, offset))
        objects.append(_curve_light(rng, right_curve, i, lights_per_side, offset))

    # Clutter spans [-w, 2w] x [-h, 2h]
    for _ in range(clutter):
        start = rng.random(2) * (3.0 * w, 3.0 * h) - (w, h)
        end = rng.random(2) * (3.0 * w, 3.0 * h) - (w, h)
        objects.append(make_line_object(start, end, rng.random(3), is_light=False))

    return Scene.build(objects)
