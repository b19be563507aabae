"""Sequential and parallel rendering drivers.

This module turns the per-ray estimator in ``rays2d.core.integrator`` into
whole images:

    - ``render_image`` renders every pixel sequentially with a single
      generator, using stratified-jittered sampling over the full circle of
      directions.
    - ``render_parallel`` splits the sample count across a fixed number of
      workers. Each worker renders a complete image at its share of the
      samples with its own generator, then the images are averaged.

Parallel rendering is a plain fork-join: exactly ``threads`` tasks are
submitted to a ``concurrent.futures`` executor and the coordinator waits for
all of them. A failure in any worker is re-raised to the caller and no
partial image is returned.

The per-worker sample count is ``samples // threads``. When ``samples`` is not
divisible by ``threads`` the total traced per pixel is less than requested;
the merged image's ``sample_count`` reports the actual total.

Example:
    >>> from rays2d.core.renderer import render_parallel
    >>> from rays2d.scene.presets import random_lines_scene
    >>> scene = random_lines_scene(64, 48, seed=3)
    >>> image = render_parallel(scene, 64, 48, samples=16, max_bounces=8, threads=4, seed=42)
    >>> image.sample_count
    16
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import asdict, dataclass, fields
from functools import partial
from typing import Any, Literal

import numpy as np

from rays2d.core.image import Color, Image, black
from rays2d.core.integrator import DEFAULT_SHADING, ShadingParams, ray_color
from rays2d.core.ray import Ray
from rays2d.core.vector import RandomSource, Vector2
from rays2d.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callbacks
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]

ExecutorKind = Literal["process", "thread"]

# =============================================================================
# Rendering Constants
# =============================================================================

DEFAULT_SAMPLES = 100
DEFAULT_MAX_BOUNCES = 50
DEFAULT_THREADS = 1

TWO_PI = 2.0 * math.pi


def _validate_render_args(width: int, height: int, samples: int, max_bounces: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    if max_bounces <= 0:
        raise ValueError(f"max_bounces must be positive, got {max_bounces}")


# =============================================================================
# Sequential Rendering
# =============================================================================


def sample_pixel(
    scene: Scene,
    x: int,
    y: int,
    samples: int,
    max_bounces: int,
    rng: RandomSource,
    jitter_origin: bool = True,
    params: ShadingParams = DEFAULT_SHADING,
) -> Color:
    """Estimate the color of one pixel.

    The circle of directions is split into ``samples`` equal slices and
    sample ``i`` shoots at angle ``(i + jitter) * 2*pi / samples``.

    Args:
        scene: The scene to render.
        x: Pixel column.
        y: Pixel row.
        samples: Number of samples to average.
        max_bounces: Bounce budget per sample.
        rng: Random source.
        jitter_origin: If True, each sample starts at a uniformly random
            point inside the pixel square instead of its corner.
        params: Shading parameters.

    Returns:
        The mean of the sample estimates (unclamped).
    """
    total = black()
    slice_angle = TWO_PI / samples

    for i in range(samples):
        if jitter_origin:
            origin = Vector2(x + rng.random(), y + rng.random())
        else:
            origin = Vector2(float(x), float(y))
        theta = (i + rng.random()) * slice_angle
        ray = Ray(origin, Vector2.from_angle(theta))
        total += ray_color(ray, scene, max_bounces, rng, params)

    return total / samples


def render_into(
    image: Image,
    scene: Scene,
    samples: int,
    max_bounces: int,
    rng: RandomSource | None = None,
    *,
    jitter_origin: bool = True,
    params: ShadingParams = DEFAULT_SHADING,
    callback: ProgressCallback | None = None,
) -> Image:
    """Render ``scene`` into an existing image, replacing its contents.

    Pixels are visited row by row from the top. ``callback`` is called after
    each completed row with (rows_completed, image.height).

    Raises:
        ValueError: If samples or max_bounces are not positive.
    """
    _validate_render_args(image.width, image.height, samples, max_bounces)
    if rng is None:
        rng = np.random.default_rng()

    data = image.data
    for y in range(image.height):
        for x in range(image.width):
            data[y, x] = sample_pixel(
                scene, x, y, samples, max_bounces, rng, jitter_origin, params
            )
        if callback is not None:
            callback(y + 1, image.height)

    image.sample_count = samples
    return image


def _log_progress(label: str, rows_done: int, total_rows: int) -> None:
    """Log progress each time another tenth of the rows completes."""
    if rows_done == total_rows or rows_done * 10 // total_rows != (rows_done - 1) * 10 // total_rows:
        logger.info("%s: %d%%", label, rows_done * 100 // total_rows)


def render_image(
    scene: Scene,
    width: int,
    height: int,
    samples: int,
    max_bounces: int,
    rng: RandomSource | None = None,
    *,
    jitter_origin: bool = True,
    params: ShadingParams = DEFAULT_SHADING,
    progress: bool = False,
) -> Image:
    """Render a scene sequentially.

    Args:
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel.
        max_bounces: Bounce budget per sample.
        rng: Random source. Defaults to a freshly seeded numpy Generator.
        jitter_origin: Jitter sample origins within each pixel.
        params: Shading parameters.
        progress: Log progress at INFO level as rows complete.

    Returns:
        The rendered image, with ``sample_count == samples``.

    Raises:
        ValueError: If any dimension or count is not positive.
    """
    _validate_render_args(width, height, samples, max_bounces)
    logger.debug(
        "rendering %dx%d, %d spp, %d bounces over %d objects",
        width, height, samples, max_bounces, len(scene),
    )
    image = Image(width, height)
    callback = partial(_log_progress, "render") if progress else None
    return render_into(
        image,
        scene,
        samples,
        max_bounces,
        rng,
        jitter_origin=jitter_origin,
        params=params,
        callback=callback,
    )


# =============================================================================
# Parallel Rendering
# =============================================================================


def _render_worker(
    worker_index: int,
    scene: Scene,
    width: int,
    height: int,
    samples: int,
    max_bounces: int,
    rng: RandomSource,
    jitter_origin: bool,
    params: ShadingParams,
    progress: bool,
) -> Image:
    """Render one worker's complete image with its own generator and buffer."""
    image = Image(width, height)
    callback = partial(_log_progress, f"worker {worker_index}") if progress else None
    return render_into(
        image,
        scene,
        samples,
        max_bounces,
        rng,
        jitter_origin=jitter_origin,
        params=params,
        callback=callback,
    )


def merge_images(images: list[Image]) -> Image:
    """Average a list of equally sized images pixel by pixel.

    The first image's buffer is reused as the output; the others are only
    read. The result's ``sample_count`` is the sum of the inputs'.

    Args:
        images: The images to merge. Must be non-empty and equally sized.

    Returns:
        The merged image (the first element of ``images``).

    Raises:
        ValueError: If ``images`` is empty or dimensions differ.
    """
    if not images:
        raise ValueError("Cannot merge an empty list of images")

    result = images[0]
    for other in images[1:]:
        if (other.width, other.height) != (result.width, result.height):
            raise ValueError(
                f"Image dimensions must match: {result.width}x{result.height} "
                f"vs {other.width}x{other.height}"
            )

    if len(images) > 1:
        result.data[...] = np.mean(np.stack([image.data for image in images]), axis=0)
    result.sample_count = sum(image.sample_count for image in images)
    return result


def spawn_generators(seed: int | None, count: int) -> list[np.random.Generator]:
    """Create ``count`` statistically independent generators from one seed.

    The same seed always yields the same generators, so parallel renders are
    reproducible for a fixed worker count.
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]


def _make_executor(executor: ExecutorKind | Executor, max_workers: int) -> tuple[Executor, bool]:
    """Resolve an executor argument to an executor and whether we own it."""
    if isinstance(executor, Executor):
        return executor, False
    if executor == "process":
        return ProcessPoolExecutor(max_workers=max_workers), True
    if executor == "thread":
        return ThreadPoolExecutor(max_workers=max_workers), True
    raise ValueError(f"Unknown executor kind: {executor!r}")


def render_parallel(
    scene: Scene,
    width: int,
    height: int,
    samples: int,
    max_bounces: int,
    threads: int,
    progress: bool = False,
    *,
    seed: int | None = None,
    executor: ExecutorKind | Executor = "process",
    jitter_origin: bool = True,
    params: ShadingParams = DEFAULT_SHADING,
) -> Image:
    """Render a scene by splitting samples across independent workers.

    With ``threads <= 1`` this is ``render_image`` with the full sample count
    and a generator seeded from ``seed``. Otherwise each of the ``threads``
    workers renders the whole image at ``samples // threads`` samples per
    pixel and the results are averaged.

    Args:
        scene: The scene to render (shared read-only by all workers).
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Requested samples per pixel. Truncated to a multiple of
            ``threads``. A truncation to zero (``samples < threads``) is
            rejected with ValueError instead of rendering a black image.
        max_bounces: Bounce budget per sample.
        threads: Number of workers.
        progress: Log per-worker progress at INFO level.
        seed: Seed for the per-worker generators. None draws fresh entropy.
        executor: "process" (default), "thread", or an existing
            ``concurrent.futures.Executor``. A passed executor is not shut
            down.
        jitter_origin: Jitter sample origins within each pixel.
        params: Shading parameters.

    Returns:
        The merged image. Its ``sample_count`` is the number of samples
        actually traced per pixel.

    Raises:
        ValueError: If arguments are invalid, or if ``samples < threads`` so
            that workers would have nothing to render.
        Exception: Any exception raised inside a worker is re-raised.
    """
    _validate_render_args(width, height, samples, max_bounces)

    if threads <= 1:
        return render_image(
            scene,
            width,
            height,
            samples,
            max_bounces,
            np.random.default_rng(seed),
            jitter_origin=jitter_origin,
            params=params,
            progress=progress,
        )

    per_worker = samples // threads
    if per_worker == 0:
        raise ValueError(f"samples ({samples}) must be at least threads ({threads})")
    if samples % threads != 0:
        logger.debug(
            "%d samples do not divide across %d workers; tracing %d per pixel",
            samples, threads, per_worker * threads,
        )

    rngs = spawn_generators(seed, threads)
    pool, owns_pool = _make_executor(executor, threads)
    try:
        futures = [
            pool.submit(
                _render_worker,
                i,
                scene,
                width,
                height,
                per_worker,
                max_bounces,
                rngs[i],
                jitter_origin,
                params,
                progress,
            )
            for i in range(threads)
        ]
        images = [future.result() for future in futures]
    finally:
        if owns_pool:
            pool.shutdown(wait=True)

    return merge_images(images)


# =============================================================================
# Render Configuration
# =============================================================================


@dataclass
class RenderConfig:
    """Parameters for a render invocation.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Requested samples per pixel.
        max_bounces: Bounce budget per sample.
        threads: Number of parallel workers (1 renders sequentially).
        progress: Log per-worker progress.
        seed: Seed for reproducible renders, or None.
        executor: "process" or "thread".
    """

    width: int
    height: int
    samples: int = DEFAULT_SAMPLES
    max_bounces: int = DEFAULT_MAX_BOUNCES
    threads: int = DEFAULT_THREADS
    progress: bool = False
    seed: int | None = None
    executor: ExecutorKind = "process"

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If any value is out of range.
        """
        _validate_render_args(self.width, self.height, self.samples, self.max_bounces)
        if self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")
        if self.executor not in ("process", "thread"):
            raise ValueError(f"Unknown executor kind: {self.executor!r}")

    @property
    def effective_samples(self) -> int:
        """Samples per pixel that will actually be traced."""
        if self.threads <= 1:
            return self.samples
        return (self.samples // self.threads) * self.threads

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderConfig:
        """Create a config from a dictionary, ignoring unknown keys.

        Raises:
            ValueError: If a required key is missing or a value is invalid.
        """
        known = {f.name for f in fields(cls)}
        missing = {"width", "height"} - data.keys()
        if missing:
            raise ValueError(f"Missing render config keys: {sorted(missing)}")
        config = cls(**{k: v for k, v in data.items() if k in known})
        config.validate()
        return config


def render(config: RenderConfig, scene: Scene, params: ShadingParams = DEFAULT_SHADING) -> Image:
    """Render ``scene`` as described by ``config``.

    Raises:
        ValueError: If the configuration is invalid.
    """
    config.validate()
    return render_parallel(
        scene,
        config.width,
        config.height,
        config.samples,
        config.max_bounces,
        config.threads,
        config.progress,
        seed=config.seed,
        executor=config.executor,
        params=params,
    )
