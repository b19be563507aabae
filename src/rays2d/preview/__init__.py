"""Preview module for output and visualization.

Components:
    display: Tone mapping, gamma correction and Matplotlib preview
    export: Plain-text PPM and 8-bit PNG export utilities

Example:
    >>> from rays2d.preview import save_ppm, show_preview
    >>> save_ppm(image, "render.ppm")
    >>> show_preview(image, tone_map="reinhard")
"""

from rays2d.preview.display import (
    ToneMapMethod,
    apply_gamma,
    preview_figure,
    preview_title,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from rays2d.preview.export import (
    compute_rmse,
    image_to_uint8,
    ppm_header,
    save_png,
    save_ppm,
    to_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "preview_figure",
    "preview_title",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "to_ppm",
    "ppm_header",
    "save_ppm",
    "save_png",
    "image_to_uint8",
    "compute_rmse",
]
