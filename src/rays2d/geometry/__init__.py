"""Geometry module for shape primitives and intersection algorithms.

Components:
    hittable: HitData record and the Hittable interface
    line: Line segment primitive with ray-segment intersection

Every primitive implements ``hit(ray, t_min, t_max)`` and returns either a
HitData or None. There is no acceleration structure; scenes are probed by a
linear scan (see ``rays2d.scene.intersection``).
"""

from .hittable import HitData, Hittable
from .line import PARALLEL_EPSILON, Line

__all__ = [
    "HitData",
    "Hittable",
    "Line",
    "PARALLEL_EPSILON",
]
