"""Scene containers and scene serialization.

A Scene is an immutable, ordered collection of SceneObjects. Each object pairs
a Hittable primitive with a color and an ``is_light`` flag. Scenes are built
once before rendering and then shared read-only by every render worker:
threads share the same instance, and process workers receive a pickled copy.

Object order matters only for tie-breaking in closest-hit queries.

Example:
    >>> from rays2d.core.vector import Vector2
    >>> from rays2d.geometry.line import Line
    >>> from rays2d.scene.manager import Scene, SceneObject
    >>> scene = Scene.build([
    ...     SceneObject(Line(Vector2(0, 0), Vector2(10, 0)), (1.0, 0.9, 0.8), is_light=True),
    ...     SceneObject(Line(Vector2(0, 5), Vector2(10, 5)), (0.3, 0.6, 0.9)),
    ... ])
    >>> len(scene)
    2
    >>> scene.light_count()
    1
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from rays2d.core.image import Color, as_color
from rays2d.core.ray import Ray
from rays2d.core.vector import Vector2
from rays2d.geometry.hittable import Hittable
from rays2d.geometry.line import Line
from rays2d.scene.intersection import T_MAX, T_MIN, SceneHit, closest_hit


@dataclass(frozen=True, eq=False)
class SceneObject:
    """A primitive with its color and emission flag.

    Attributes:
        geometry: The primitive to intersect against.
        color: RGB color, nominally in [0, 1] per channel. For lights this is
            the emitted radiance; otherwise it tints scattered light.
        is_light: Whether the object is emissive. Light paths end at lights.
    """

    geometry: Hittable
    color: Color
    is_light: bool = False

    def __post_init__(self) -> None:
        color = np.array(as_color(self.color))
        color.setflags(write=False)
        object.__setattr__(self, "color", color)
        object.__setattr__(self, "is_light", bool(self.is_light))


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        objects: List of object configurations, one dict per scene object.
    """

    objects: list[dict[str, Any]] = field(default_factory=list)


def _vec2_from_config(value: Any, name: str) -> Vector2:
    try:
        x, y = value
    except (TypeError, ValueError) as e:
        raise ValueError(f"'{name}' must be a pair of numbers, got {value!r}") from e
    return Vector2(float(x), float(y))


def _object_from_config(obj_config: dict[str, Any]) -> SceneObject:
    geometry_type = str(obj_config.get("type", "line")).lower()
    if geometry_type == "line":
        if "start" not in obj_config or "end" not in obj_config:
            raise ValueError("Line objects require 'start' and 'end'")
        geometry: Hittable = Line(
            _vec2_from_config(obj_config["start"], "start"),
            _vec2_from_config(obj_config["end"], "end"),
        )
    else:
        raise ValueError(f"Unknown geometry type: {geometry_type}")

    color = obj_config.get("color", [0.5, 0.5, 0.5])
    return SceneObject(
        geometry=geometry,
        color=as_color(color),
        is_light=bool(obj_config.get("is_light", False)),
    )


def _object_to_config(obj: SceneObject) -> dict[str, Any]:
    if not isinstance(obj.geometry, Line):
        raise ValueError(f"Cannot serialize geometry of type {type(obj.geometry).__name__}")
    return {
        "type": "line",
        "start": list(obj.geometry.start),
        "end": list(obj.geometry.end),
        "color": [float(c) for c in obj.color],
        "is_light": obj.is_light,
    }


class Scene:
    """An immutable, ordered collection of scene objects.

    The object sequence is stored as a tuple and never mutated after
    construction, so a Scene can be read concurrently without locking.

    Attributes:
        objects: The scene objects, in scan order.
    """

    def __init__(self, objects: Iterable[SceneObject] = ()) -> None:
        self._objects: tuple[SceneObject, ...] = tuple(objects)

    @classmethod
    def build(cls, objects: Iterable[SceneObject]) -> Scene:
        """Build a scene from an iterable of objects, preserving order."""
        return cls(objects)

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self._objects)

    def __getitem__(self, index: int) -> SceneObject:
        return self._objects[index]

    def closest_hit(
        self,
        ray: Ray,
        t_min: float = T_MIN,
        t_max: float = T_MAX,
    ) -> SceneHit | None:
        """Find the closest object hit by ``ray``.

        See ``rays2d.scene.intersection.closest_hit``.
        """
        return closest_hit(self._objects, ray, t_min, t_max)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def light_count(self) -> int:
        """Get the number of emissive objects in the scene."""
        return sum(1 for obj in self._objects if obj.is_light)

    def lights(self) -> list[SceneObject]:
        return [obj for obj in self._objects if obj.is_light]

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Raises:
            ValueError: If the scene contains geometry with no serialized form.
        """
        return SceneConfig(objects=[_object_to_config(obj) for obj in self._objects])

    @classmethod
    def from_config(cls, config: SceneConfig) -> Scene:
        """Build a scene from a configuration object.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        return cls(_object_from_config(obj_config) for obj_config in config.objects)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"objects": self.to_config().objects}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from a dictionary with an 'objects' key."""
        return cls.from_config(SceneConfig(objects=list(data.get("objects", []))))

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)}, lights={self.light_count()})"


def make_line_object(
    start: Sequence[float],
    end: Sequence[float],
    color: Sequence[float],
    is_light: bool = False,
) -> SceneObject:
    """Create a SceneObject wrapping a Line from plain coordinate pairs.

    Convenience for scene authoring code that works with tuples or numpy
    arrays instead of Vector2.
    """
    start_arr = np.asarray(start, dtype=np.float64)
    end_arr = np.asarray(end, dtype=np.float64)
    line = Line(
        Vector2(float(start_arr[0]), float(start_arr[1])),
        Vector2(float(end_arr[0]), float(end_arr[1])),
    )
    return SceneObject(geometry=line, color=as_color(color), is_light=is_light)
