"""Pytest configuration for rays2d tests.

This module provides shared fixtures and test doubles for all test modules:
deterministic random sources, instrumented primitives, and small scenes with
known radiance.
"""

from __future__ import annotations

import itertools
import threading

import pytest

from rays2d.core.vector import Vector2
from rays2d.geometry.hittable import HitData, Hittable
from rays2d.geometry.line import Line
from rays2d.scene.manager import Scene, SceneObject

LIGHT_COLOR = (0.5, 0.25, 1.0)


class ConstantRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


class SequenceRandom:
    """Random source that cycles through a fixed list of values."""

    def __init__(self, values) -> None:
        self._values = itertools.cycle(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._values)


class ForbiddenRandom:
    """Random source that fails the test if it is ever used."""

    def random(self) -> float:
        raise AssertionError("random source should not have been used")


class CountingPrimitive(Hittable):
    """Wraps a primitive and counts hit() calls (thread-safe)."""

    def __init__(self, inner: Hittable) -> None:
        self.inner = inner
        self.calls = 0
        self._lock = threading.Lock()

    def hit(self, ray, t_min, t_max) -> HitData | None:
        with self._lock:
            self.calls += 1
        return self.inner.hit(ray, t_min, t_max)


class FailingPrimitive(Hittable):
    """Primitive whose intersection test always raises."""

    def hit(self, ray, t_min, t_max) -> HitData | None:
        raise RuntimeError("intersection failed")


def box_lines(x0: float, y0: float, x1: float, y1: float) -> list[Line]:
    """Four segments forming the rectangle [x0, x1] x [y0, y1]."""
    return [
        Line(Vector2(x0, y0), Vector2(x1, y0)),
        Line(Vector2(x1, y0), Vector2(x1, y1)),
        Line(Vector2(x1, y1), Vector2(x0, y1)),
        Line(Vector2(x0, y1), Vector2(x0, y0)),
    ]


@pytest.fixture
def light_box_scene():
    """A closed box of identical lights around the region [-10, 20]^2.

    Every ray starting inside the box reaches a light on its first hit, so
    every sample returns exactly LIGHT_COLOR regardless of direction.
    """
    return Scene.build(
        SceneObject(line, LIGHT_COLOR, is_light=True) for line in box_lines(-10, -10, 20, 20)
    )


@pytest.fixture
def counting_light_box():
    """Like light_box_scene, but each primitive counts its hit() calls."""
    primitives = [CountingPrimitive(line) for line in box_lines(-10, -10, 20, 20)]
    scene = Scene.build(SceneObject(p, LIGHT_COLOR, is_light=True) for p in primitives)
    return scene, primitives


@pytest.fixture
def mixed_scene():
    """A box with a light ceiling, diffuse walls and a diffuse divider.

    Radiance depends on the random path choices, so renders with different
    random streams produce different images.
    """
    bottom, right, top, left = box_lines(-2, -2, 10, 10)
    return Scene.build(
        [
            SceneObject(top, (1.0, 0.9, 0.8), is_light=True),
            SceneObject(bottom, (0.7, 0.7, 0.7)),
            SceneObject(right, (0.2, 0.8, 0.2)),
            SceneObject(left, (0.8, 0.2, 0.2)),
            SceneObject(Line(Vector2(1.0, 4.0), Vector2(6.0, 5.0)), (0.3, 0.3, 0.9)),
        ]
    )


@pytest.fixture
def agg_pyplot():
    """Pyplot on the non-interactive Agg backend; figures are closed afterwards."""
    import matplotlib.pyplot as plt

    plt.switch_backend("Agg")
    yield plt
    plt.close("all")
