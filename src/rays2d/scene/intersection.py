"""Scene-level closest-hit queries.

Rays are tested against every object in scene order (an exhaustive linear
scan; scenes are small). The closest hit wins, and only a strictly smaller t
replaces the current best, so equal-t ties resolve to the object that appears
first in the scene.

Example:
    >>> from rays2d.core.ray import Ray
    >>> from rays2d.core.vector import Vector2
    >>> from rays2d.geometry.line import Line
    >>> from rays2d.scene.intersection import closest_hit
    >>> from rays2d.scene.manager import Scene, SceneObject
    >>> scene = Scene.build([
    ...     SceneObject(Line(Vector2(4, -1), Vector2(4, 1)), (1, 1, 1), is_light=True),
    ...     SceneObject(Line(Vector2(2, -1), Vector2(2, 1)), (0.5, 0.5, 0.5)),
    ... ])
    >>> rec = closest_hit(scene, Ray(Vector2(0, 0), Vector2(1, 0)))
    >>> rec.t, rec.obj.is_light
    (2.0, False)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rays2d.core.ray import Ray
from rays2d.geometry.hittable import HitData

if TYPE_CHECKING:
    from rays2d.scene.manager import SceneObject

# Near offset for scene queries to avoid re-hitting the surface a ray left from
T_MIN = 0.001
T_MAX = math.inf


@dataclass(frozen=True)
class SceneHit:
    """Record of a ray-scene intersection.

    Attributes:
        hit: The primitive-level hit data (t, point, normal).
        obj: The scene object that was hit.
    """

    hit: HitData
    obj: SceneObject

    @property
    def t(self) -> float:
        return self.hit.t


def closest_hit(
    objects: Iterable[SceneObject],
    ray: Ray,
    t_min: float = T_MIN,
    t_max: float = T_MAX,
) -> SceneHit | None:
    """Find the closest intersection of a ray with a collection of objects.

    Args:
        objects: The scene objects to test, in scan order (a Scene works).
        ray: The ray to trace.
        t_min: Minimum t value to consider a valid hit.
        t_max: Upper bound on t (exclusive).

    Returns:
        A SceneHit for the object with the smallest valid t, or None if the
        ray hits nothing.
    """
    result: SceneHit | None = None

    for obj in objects:
        rec = obj.geometry.hit(ray, t_min, t_max)
        if rec is None:
            continue
        if result is None or rec.t < result.hit.t:
            result = SceneHit(hit=rec, obj=obj)

    return result
