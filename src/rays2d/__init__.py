"""Stochastic 2D path tracer for scenes of line segments.

This package renders scenes of colored, optionally emissive line segments
into a raster image by Monte Carlo sampling of light paths, with support for:
- Exact ray/segment intersection with a closest-hit scene query
- Recursive light transport with diffuse scatter and pass-through transmission
- Stratified-jittered direction sampling per pixel
- Sample-splitting fork-join rendering across independent workers

Subpackages:
    core: Vector math, rays, the path tracer and the rendering drivers
    geometry: Hittable primitives and intersection algorithms
    scene: Scene containers, closest-hit queries and preset scenes
    preview: PPM/PNG export, tone mapping and Matplotlib preview
"""

__version__ = "0.1.0"
