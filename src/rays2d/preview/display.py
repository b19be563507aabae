"""Display transforms and a Matplotlib preview window.

Rendered buffers hold unclamped linear radiance. A path that reaches a light
directly returns the light color times the emission gain, so pixels next to
bright segments can exceed 1.0 while pixels in shadow stay near zero. The
display transform maps that range onto [0, 1] in three steps:

    tone map  ->  gamma  ->  clamp

``process_image_for_display`` is shared by the PNG exporter and the preview
window, so a saved PNG shows exactly what the preview shows.

Example:
    >>> from rays2d.preview.display import show_preview
    >>> show_preview(image, tone_map="reinhard")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from rays2d.core.image import Image

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

FloatImage = npt.NDArray[np.float32]

# Width of the preview figure in inches; the height follows the image aspect
PREVIEW_WIDTH_INCHES = 8.0


def tone_map_reinhard(image: npt.NDArray[np.floating]) -> FloatImage:
    """Compress radiance with L / (1 + L). Negative values map to 0."""
    radiance = np.clip(image, 0.0, None)
    return (radiance / (1.0 + radiance)).astype(np.float32)


def tone_map_exposure(image: npt.NDArray[np.floating], exposure: float = 1.0) -> FloatImage:
    """Map radiance with 1 - exp(-L * exposure).

    Args:
        image: Linear radiance of shape (H, W, 3).
        exposure: Scale applied before the curve. Higher values brighten.

    Returns:
        Values in [0, 1).
    """
    radiance = np.clip(image, 0.0, None)
    return (-np.expm1(-radiance * exposure)).astype(np.float32)


def apply_gamma(image: npt.NDArray[np.floating], gamma: float = 2.2) -> FloatImage:
    """Encode linear values with exponent 1 / gamma.

    With ``gamma == 1`` values are passed through untouched (not clamped).
    Otherwise they are clamped to [0, 1] first.
    """
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(np.clip(image, 0.0, 1.0), 1.0 / gamma).astype(np.float32)


_TONE_MAPS: dict[str, Callable[[FloatImage, float], FloatImage]] = {
    "none": lambda image, exposure: image,
    "reinhard": lambda image, exposure: tone_map_reinhard(image),
    "exposure": tone_map_exposure,
}


def process_image_for_display(
    image: npt.NDArray[np.floating],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> FloatImage:
    """Run the display transform on a linear (H, W, 3) buffer.

    Raises:
        ValueError: If ``tone_map`` is not a known method.
    """
    try:
        mapper = _TONE_MAPS[tone_map]
    except KeyError:
        raise ValueError(f"Unknown tone mapping method: {tone_map!r}") from None

    mapped = mapper(np.asarray(image, dtype=np.float32), exposure)
    return np.clip(apply_gamma(mapped, gamma), 0.0, 1.0).astype(np.float32)


def preview_title(image: Image, tone_map: ToneMapMethod = "none") -> str:
    title = f"{image.width}x{image.height}, {image.sample_count} spp"
    if tone_map != "none":
        title += f", {tone_map}"
    return title


def preview_figure(
    image: Image,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
    title: str | None = None,
) -> Figure:
    """Build a Matplotlib figure showing a rendered image.

    Pixels are drawn without interpolation, with row 0 at the top, so the
    figure matches the PPM and PNG output. The figure is not shown.

    Args:
        image: The rendered image.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure for the "exposure" tone map.
        title: Axes title. Defaults to the size and sample count.

    Returns:
        The new figure.
    """
    import matplotlib.pyplot as plt

    pixels = process_image_for_display(image.data, tone_map=tone_map, gamma=gamma, exposure=exposure)

    height_inches = PREVIEW_WIDTH_INCHES * image.height / image.width
    fig, ax = plt.subplots(figsize=(PREVIEW_WIDTH_INCHES, height_inches))
    ax.imshow(pixels, interpolation="nearest")
    ax.set_axis_off()
    ax.set_title(title if title is not None else preview_title(image, tone_map))
    fig.tight_layout()
    return fig


def show_preview(
    image: Image,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
    title: str | None = None,
    block: bool = True,
) -> Figure:
    """Open a preview window for a rendered image.

    Args:
        image: The rendered image.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure for the "exposure" tone map.
        title: Window title. Defaults to the size and sample count.
        block: Whether to block until the window is closed.

    Returns:
        The displayed figure.
    """
    import matplotlib.pyplot as plt

    fig = preview_figure(image, tone_map=tone_map, gamma=gamma, exposure=exposure, title=title)
    plt.show(block=block)
    return fig
