"""Hit records and the primitive intersection interface.

Every primitive that can appear in a scene implements :class:`Hittable`,
which answers "where, if anywhere, does this ray first meet me inside the
ray-parameter interval [t_min, t_max)?".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rays2d.core.ray import Ray
    from rays2d.core.vector import Vector2


@dataclass(frozen=True)
class HitData:
    """Record of a ray-primitive intersection.

    Attributes:
        t: The parameter value along the ray where the intersection occurred.
            Producers guarantee t_min <= t < t_max.
        point: The intersection point, equal to ray.at(t).
        normal: The unit surface normal at the intersection point. Its
            orientation is defined by the primitive and is NOT flipped to
            face the incoming ray.
    """

    t: float
    point: Vector2
    normal: Vector2


class Hittable(ABC):
    """A geometric primitive that can be intersected by a ray."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> HitData | None:
        """Test for ray intersection within [t_min, t_max).

        Args:
            ray: The ray to test.
            t_min: Minimum t value to consider a valid hit (avoids
                self-intersection).
            t_max: Upper bound on t (exclusive).

        Returns:
            A HitData for the intersection, or None if there is no valid hit.
            Degenerate configurations return None rather than raising.
        """
