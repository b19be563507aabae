"""Core rendering module.

This module contains the fundamental building blocks for 2D path tracing:

Components:
    vector: Vector2 value type, 2D cross product and unit-disk sampling
    ray: Ray data structure with normalized direction
    image: RGB float pixel buffer
    integrator: Recursive light transport (scatter / transmit / emit)
    renderer: Sequential and fork-join parallel rendering drivers

All randomness is drawn from generators passed in explicitly, so renders are
reproducible from a seed and safe to run in independent workers.
"""

from .image import Color, Image, as_color, black
from .ray import Ray
from .vector import RandomSource, Vector2, cross, dot, random_in_unit_disk, vec2

# Note: integrator and renderer are NOT imported here to avoid circular imports
# with rays2d.scene. Import them directly:
#   from rays2d.core.integrator import ray_color
#   from rays2d.core.renderer import render_image, render_parallel

__all__ = [
    "Color",
    "Image",
    "RandomSource",
    "Ray",
    "Vector2",
    "as_color",
    "black",
    "cross",
    "dot",
    "random_in_unit_disk",
    "vec2",
]
