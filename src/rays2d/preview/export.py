"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3): exact, unclamped quantization of the raw buffer
    - PNG (8-bit via Pillow): tone mapped, gamma corrected and clamped

PPM channels are quantized as ``int(255 * value)``: truncation toward zero,
with no clamping or validation. Values outside [0, 1] therefore produce
integers outside 0-255. PNG export goes through the display pipeline and is
always clamped.

Example:
    >>> from rays2d.preview.export import save_ppm, save_png
    >>> save_ppm(image, "out.ppm")
    >>> save_png(image, "out.png", tone_map="reinhard")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from rays2d.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from rays2d.core.image import Image


def ppm_header(width: int, height: int) -> str:
    return f"P3\n{width} {height}\n255\n"


def to_ppm(image: Image) -> str:
    """Serialize an image as plain-text PPM (P3).

    Pixels are written row-major from the top row, one "R G B" line each.

    Args:
        image: The image to serialize.

    Returns:
        The PPM document as a string.
    """
    # astype truncates toward zero, like int()
    values = (image.data * 255.0).astype(np.int64).reshape(-1, 3)
    lines = [ppm_header(image.width, image.height)]
    lines.extend(f"{r} {g} {b}\n" for r, g, b in values.tolist())
    return "".join(lines)


def save_ppm(image: Image, filepath: str | Path) -> Path:
    """Write an image to ``filepath`` as plain-text PPM.

    Returns:
        The path written.
    """
    path = Path(filepath)
    path.write_text(to_ppm(image), encoding="ascii")
    return path


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for display/export.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return (processed * 255).astype(np.uint8)


def save_png(
    image: Image,
    filepath: str | Path,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> Path:
    """Save a rendered image as an 8-bit PNG file.

    Args:
        image: The rendered image.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        The path written.
    """
    image_uint8 = image_to_uint8(image.data, tone_map=tone_map, gamma=gamma, exposure=exposure)
    path = Path(filepath)
    PILImage.fromarray(image_uint8).save(path)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
