"""Line segment primitive with ray-segment intersection.

A line segment is defined by two endpoints, ``start`` and ``end``. Its normal
is ``perp(normalize(end - start))``, i.e. the segment direction rotated by
+90 degrees. Which side it points to depends on the endpoint order, not on the
incoming ray.

Ray-segment intersection solves

    origin + t * dir = start + u * s,    s = end - start

for (t, u) using 2D cross products:

    denom = dir x s
    u = ((start - origin) x dir) / denom
    t = ((start - origin) x s) / denom

The hit is valid when 0 <= u <= 1 (inside the segment) and
t_min <= t < t_max (inside the ray interval).

Example:
    >>> from rays2d.core.ray import Ray
    >>> from rays2d.core.vector import Vector2
    >>> from rays2d.geometry.line import Line
    >>> wall = Line(Vector2(5.0, -1.0), Vector2(5.0, 1.0))
    >>> hit = wall.hit(Ray(Vector2(0.0, 0.0), Vector2(1.0, 0.0)), 0.001, float("inf"))
    >>> hit.t
    5.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from rays2d.core.ray import Ray
from rays2d.core.vector import Vector2, cross
from rays2d.geometry.hittable import HitData, Hittable

# Below this |dir x s| the ray and segment are treated as parallel
PARALLEL_EPSILON = 1e-12


@dataclass(frozen=True)
class Line(Hittable):
    """A line segment between two endpoints.

    Attributes:
        start: The first endpoint.
        end: The second endpoint.
    """

    start: Vector2
    end: Vector2

    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitData | None:
        """Test for ray-segment intersection.

        Args:
            ray: The ray to test (direction is unit length).
            t_min: Minimum t value to consider a valid hit.
            t_max: Upper bound on t (exclusive).

        Returns:
            A HitData with the segment normal, or None when the ray is
            parallel to the segment, misses its extent, or the hit lies
            outside [t_min, t_max).
        """
        s = self.end - self.start
        denom = cross(ray.direction, s)

        # Parallel, collinear or zero-length segment
        if abs(denom) <= PARALLEL_EPSILON:
            return None

        q = self.start - ray.origin

        u = cross(q, ray.direction) / denom
        if u < 0.0 or u > 1.0:
            return None

        t = cross(q, s) / denom
        if t < t_min or t >= t_max:
            return None

        return HitData(t=t, point=ray.at(t), normal=s.normalize().perp())

    def translate(self, offset: Vector2) -> Line:
        """Return a copy of this segment moved by ``offset``."""
        return Line(self.start + offset, self.end + offset)

    def rotate(self, angle: float, origin: Vector2 | None = None) -> Line:
        """Return a copy of this segment rotated about a pivot.

        Args:
            angle: Rotation angle in radians (counter-clockwise for a y-up frame).
            origin: The pivot point. Defaults to the coordinate origin.

        Returns:
            The rotated segment.
        """
        if origin is None:
            origin = Vector2(0.0, 0.0)
        rot = Vector2(math.cos(angle), math.sin(angle))
        start = (self.start - origin).rotate(rot) + origin
        end = (self.end - origin).rotate(rot) + origin
        return Line(start, end)

    def length(self) -> float:
        return (self.end - self.start).length()
