"""Pixel buffer for rendered images.

An Image holds a row-major RGB float buffer of shape (height, width, 3).
Values are linear radiance and are never clamped here; clamping, tone mapping
and quantization belong to ``rays2d.preview``.

The image also records how many samples per pixel went into its buffer, which
lets the parallel renderer report the truncated total it actually traced.

Example:
    >>> from rays2d.core.image import Image
    >>> image = Image(4, 3)
    >>> image.data.shape
    (3, 4, 3)
    >>> image.set_pixel(1, 2, (0.5, 0.25, 1.0))
    >>> image.get_pixel(1, 2)
    array([0.5 , 0.25, 1.  ])
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from rays2d.core.integrator import ShadingParams
    from rays2d.core.vector import RandomSource
    from rays2d.scene.manager import Scene

# Type alias for RGB colors (float64 arrays of shape (3,))
Color = npt.NDArray[np.float64]


def as_color(rgb: Sequence[float] | npt.NDArray[np.floating]) -> Color:
    """Coerce an (r, g, b) triple to a Color array.

    Raises:
        ValueError: If ``rgb`` does not have exactly three components.
    """
    color = np.asarray(rgb, dtype=np.float64)
    if color.shape != (3,):
        raise ValueError(f"Color must have 3 components, got shape {color.shape}")
    return color


def black() -> Color:
    return np.zeros(3, dtype=np.float64)


class Image:
    """An RGB float image buffer.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        data: Array of shape (height, width, 3); ``data[y, x]`` is pixel (x, y).
        sample_count: Samples per pixel accumulated into ``data``.
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image.

        Args:
            width: Image width in pixels (must be positive).
            height: Image height in pixels (must be positive).

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = np.zeros((height, width, 3), dtype=np.float64)
        self.sample_count = 0

    def set_pixel(self, x: int, y: int, color: Sequence[float] | Color) -> None:
        self.data[y, x] = color

    def get_pixel(self, x: int, y: int) -> Color:
        return self.data[y, x].copy()

    def clear(self) -> None:
        """Reset the buffer to black and the sample count to zero."""
        self.data.fill(0.0)
        self.sample_count = 0

    def render(
        self,
        scene: Scene,
        samples: int,
        max_bounces: int,
        rng: RandomSource | None = None,
        **kwargs,
    ) -> None:
        """Render ``scene`` into this image, replacing its contents.

        This is a thin wrapper over ``rays2d.core.renderer.render_into``.
        Extra keyword arguments are forwarded.
        """
        from rays2d.core.renderer import render_into

        render_into(self, scene, samples, max_bounces, rng=rng, **kwargs)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Get a copy of the buffer as a (height, width, 3) array."""
        return self.data.copy()

    @classmethod
    def from_numpy(cls, array: npt.NDArray[np.floating], sample_count: int = 0) -> Image:
        """Create an image from a (height, width, 3) array.

        Raises:
            ValueError: If the array is not of shape (H, W, 3).
        """
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected array of shape (H, W, 3), got {array.shape}")
        image = cls(array.shape[1], array.shape[0])
        image.data[...] = array
        image.sample_count = sample_count
        return image

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height}, samples={self.sample_count})"
