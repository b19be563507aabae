"""Scene module for scene containers and ray-scene queries.

This module handles scene representation and ray-scene queries:

Components:
    intersection: SceneHit record and the closest-hit linear scan
    manager: SceneObject, the immutable Scene container and dict serialization
    presets: Seedable preset scenes (random lines, Bezier light curves)

Scenes are built once and never mutated, so they can be shared read-only by
every render worker for the duration of a render.
"""

from .intersection import T_MAX, T_MIN, SceneHit, closest_hit
from .manager import Scene, SceneConfig, SceneObject, make_line_object
from .presets import (
    Curve,
    bezier_point,
    light_curves_scene,
    random_lines_scene,
)

__all__ = [
    # Intersection module
    "SceneHit",
    "closest_hit",
    "T_MIN",
    "T_MAX",
    # Manager module
    "Scene",
    "SceneObject",
    "SceneConfig",
    "make_line_object",
    # Presets module
    "Curve",
    "bezier_point",
    "light_curves_scene",
    "random_lines_scene",
]
