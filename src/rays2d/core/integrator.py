"""Path tracing integrator for Monte Carlo light transport in 2D.

This module implements the radiance estimator used by the renderers. A path
bounces through the scene until it reaches a light, escapes to the
background, or exhausts its bounce budget. Paths are followed in a loop that
carries the product of the colors scattered so far, so the bounce budget is
not limited by the interpreter stack.

At each non-emissive hit exactly one of two events happens:
    - Transmit (probability ``transmit_probability``): the path continues from
      the hit point in the same direction and the object does not tint it.
    - Scatter (otherwise): the path leaves along the ray-facing normal plus a
      random point in the unit disk, and the result is multiplied by the
      object's color.

Key features:
    - Exact depth budget: ``depth <= 0`` returns black without touching the scene
    - Lights terminate the path and return ``color * emission_gain``
    - Self-intersection avoidance with a near offset on scene queries
    - All randomness drawn from an explicitly passed generator

Example:
    >>> import numpy as np
    >>> from rays2d.core.integrator import ray_color
    >>> from rays2d.core.ray import Ray
    >>> from rays2d.core.vector import Vector2
    >>> from rays2d.scene.manager import Scene, make_line_object
    >>> scene = Scene.build([make_line_object((3, -1), (3, 1), (1.0, 0.5, 0.0), is_light=True)])
    >>> ray_color(Ray(Vector2(0, 0), Vector2(1, 0)), scene, 50, np.random.default_rng(7))
    array([1. , 0.5, 0. ])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from rays2d.core.image import Color, as_color, black
from rays2d.core.ray import Ray
from rays2d.core.vector import RandomSource, random_in_unit_disk
from rays2d.scene.intersection import T_MIN, closest_hit

if TYPE_CHECKING:
    from rays2d.scene.manager import Scene

# =============================================================================
# Shading Constants
# =============================================================================

# Probability that a non-emissive hit lets the path pass straight through
P_TRANSMIT = 0.25

# Multiplier applied to the color of an emissive object when a path reaches it
EMISSION_GAIN = 1.0

# Radiance returned by rays that escape the scene
BACKGROUND_COLOR = (0.0, 0.0, 0.0)


@dataclass(frozen=True, eq=False)
class ShadingParams:
    """Fixed shading parameters for a render.

    Attributes:
        background: Radiance returned when a ray hits nothing.
        emission_gain: Multiplier applied to light colors.
        transmit_probability: Chance in [0, 1] that a non-emissive hit
            transmits instead of scattering.
        t_min: Near offset for scene queries.
    """

    background: Color = field(default_factory=lambda: as_color(BACKGROUND_COLOR))
    emission_gain: float = EMISSION_GAIN
    transmit_probability: float = P_TRANSMIT
    t_min: float = T_MIN

    def __post_init__(self) -> None:
        object.__setattr__(self, "background", np.array(as_color(self.background)))
        if not 0.0 <= self.transmit_probability <= 1.0:
            raise ValueError(
                f"transmit_probability must be in [0, 1], got {self.transmit_probability}"
            )
        if self.t_min < 0.0:
            raise ValueError(f"t_min must be non-negative, got {self.t_min}")


DEFAULT_SHADING = ShadingParams()


def ray_color(
    ray: Ray,
    scene: Scene,
    depth: int,
    rng: RandomSource,
    params: ShadingParams = DEFAULT_SHADING,
) -> Color:
    """Estimate the radiance arriving along ``ray``.

    Args:
        ray: The ray to trace.
        scene: The scene to trace against (read-only).
        depth: Remaining bounce budget. Each transmit or scatter event costs
            one; at zero the path contributes black. Any budget is supported.
        rng: Random source for the transmit/scatter choice and the scatter
            direction.
        params: Shading parameters.

    Returns:
        The estimated radiance (RGB). A fresh array the caller may modify.
    """
    # Product of the colors of every surface the path has scattered off
    throughput = np.ones(3, dtype=np.float64)

    while depth > 0:
        rec = closest_hit(scene, ray, params.t_min)
        if rec is None:
            return throughput * params.background

        obj = rec.obj
        if obj.is_light:
            return throughput * (obj.color * params.emission_gain)

        hit = rec.hit
        depth -= 1

        if rng.random() < params.transmit_probability:
            # Pass through without absorption
            ray = Ray(hit.point, ray.direction)
            continue

        normal = hit.normal
        if normal.dot(ray.direction) >= 0.0:
            normal = -normal

        direction = normal + random_in_unit_disk(rng)
        if direction.near_zero():
            direction = normal

        throughput = throughput * obj.color
        ray = Ray(hit.point, direction)

    return black()
