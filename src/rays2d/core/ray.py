"""Ray data structure for 2D path tracing.

Example:
    >>> from rays2d.core.ray import Ray
    >>> from rays2d.core.vector import Vector2
    >>> ray = Ray(Vector2(0.0, 0.0), Vector2(3.0, 4.0))
    >>> ray.direction
    Vector2(x=0.6, y=0.8)
    >>> ray.at(5.0)
    Vector2(x=3.0, y=4.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from rays2d.core.vector import Vector2


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and a unit direction.

    The direction is normalized on construction, so ``t`` along the ray is
    always a Euclidean distance from the origin.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.

    Raises:
        ZeroDivisionError: If constructed with a zero direction.
    """

    origin: Vector2
    direction: Vector2

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", self.direction.normalize())

    def at(self, t: float) -> Vector2:
        """Compute the point origin + t * direction."""
        return self.origin + self.direction * t
