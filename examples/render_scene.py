#!/usr/bin/env python3
"""Render a preset 2D scene.

This script demonstrates end-to-end rendering with the rays2d path tracer.
It builds one of the preset scenes, renders it across parallel workers, and
writes the result as a plain-text PPM (and optionally a PNG).

Usage:
    python examples/render_scene.py [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --height HEIGHT         Image height in pixels (default: 300)
    --samples SAMPLES       Samples per pixel (default: 64)
    --max-bounces N         Bounce budget per sample (default: 50)
    --threads THREADS       Parallel workers (default: 8)
    --seed SEED             Seed for the scene layout and the render (default: 18)
    --scene {random,curves} Preset scene (default: curves)
    --output OUTPUT         Output PPM path (default: scene.ppm)
    --png PNG               Also save a tone mapped PNG to this path
    --show                  Open a preview window when the render finishes
    --quiet                 Suppress progress output

Example:
    python examples/render_scene.py --width 200 --height 150 --samples 32 --threads 4
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from rays2d.core.renderer import RenderConfig, render
from rays2d.preview.display import show_preview
from rays2d.preview.export import save_png, save_ppm
from rays2d.scene.presets import light_curves_scene, random_lines_scene

SCENES = {
    "random": random_lines_scene,
    "curves": light_curves_scene,
}


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset 2D scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels (default: 400)")
    parser.add_argument("--height", type=int, default=300, help="Image height in pixels (default: 300)")
    parser.add_argument("--samples", type=int, default=64, help="Samples per pixel (default: 64)")
    parser.add_argument(
        "--max-bounces",
        type=int,
        default=50,
        help="Bounce budget per sample (default: 50)",
    )
    parser.add_argument("--threads", type=int, default=8, help="Parallel workers (default: 8)")
    parser.add_argument(
        "--seed",
        type=int,
        default=18,
        help="Seed for the scene layout and the render (default: 18)",
    )
    parser.add_argument(
        "--scene",
        choices=sorted(SCENES),
        default="curves",
        help="Preset scene (default: curves)",
    )
    parser.add_argument("--output", type=str, default="scene.ppm", help="Output PPM path (default: scene.ppm)")
    parser.add_argument("--png", type=str, default=None, help="Also save a tone mapped PNG to this path")
    parser.add_argument("--show", action="store_true", help="Open a preview window when the render finishes")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_scene(
    config: RenderConfig,
    scene_name: str = "curves",
    output_path: str = "scene.ppm",
    png_path: str | None = None,
    quiet: bool = False,
    show: bool = False,
) -> Path:
    """Render a preset scene and save it.

    Args:
        config: Render parameters. ``config.seed`` also seeds the scene layout.
        scene_name: Key into SCENES.
        output_path: Output PPM path.
        png_path: Optional PNG path.
        quiet: If True, suppress progress output.
        show: If True, open a tone mapped preview window after saving.

    Returns:
        Path to the saved PPM file.
    """
    if not quiet:
        print(f"Creating '{scene_name}' scene ({config.width}x{config.height})...")

    scene = SCENES[scene_name](config.width, config.height, seed=config.seed)

    if not quiet:
        print(f"  {len(scene)} objects, {scene.light_count()} lights")
        print(
            f"Rendering {config.effective_samples} samples per pixel "
            f"on {config.threads} workers..."
        )

    start_time = time.time()
    image = render(config, scene)
    render_time = time.time() - start_time

    output_file = save_ppm(image, output_path)
    if png_path is not None:
        save_png(image, png_path, tone_map="reinhard", gamma=2.2)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        if png_path is not None:
            print(f"Saved PNG to: {Path(png_path).absolute()}")
        print(f"Render time: {render_time:.2f}s")

    if show:
        show_preview(image, tone_map="reinhard")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if not args.quiet:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")

    config = RenderConfig(
        width=args.width,
        height=args.height,
        samples=args.samples,
        max_bounces=args.max_bounces,
        threads=args.threads,
        progress=not args.quiet,
        seed=args.seed,
    )

    try:
        config.validate()
        render_scene(
            config,
            scene_name=args.scene,
            output_path=args.output,
            png_path=args.png,
            quiet=args.quiet,
            show=args.show,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
