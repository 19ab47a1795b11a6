"""Data components attached to scene entities."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Sequence

import numpy as np

from phoenixengine.camera import SceneCamera


def generate_uuid() -> int:
    """A random unsigned 64-bit identifier."""
    return random.getrandbits(64)


def _vec(values: Sequence[float], size: int) -> np.ndarray:
    array = np.array(values, dtype=np.float64).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"expected {size} components, got {array.shape[0]}")
    return array


def _vec_field(*values: float) -> Any:
    return field(default_factory=lambda: np.array(values, dtype=np.float64))


@dataclass
class IDComponent:
    """Stable identifier of an entity."""

    id: int = field(default_factory=generate_uuid)


@dataclass
class TagComponent:
    """Display name of an entity."""

    tag: str = ""


@dataclass(eq=False)
class TransformComponent:
    """Position, Euler rotation in radians and scale of an entity."""

    translation: np.ndarray = _vec_field(0.0, 0.0, 0.0)
    rotation: np.ndarray = _vec_field(0.0, 0.0, 0.0)
    scale: np.ndarray = _vec_field(1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        self.translation = _vec(self.translation, 3)
        self.rotation = _vec(self.rotation, 3)
        self.scale = _vec(self.scale, 3)

    def transform(self) -> np.ndarray:
        """Model matrix: translation times rotation times scale.

        Row-major mathematical form, multiplying column vectors from the left.
        """
        half = self.rotation * 0.5
        cx, cy, cz = np.cos(half)
        sx, sy, sz = np.sin(half)
        w = cx * cy * cz + sx * sy * sz
        x = sx * cy * cz - cx * sy * sz
        y = cx * sy * cz + sx * cy * sz
        z = cx * cy * sz - sx * sy * cz

        rotation = np.identity(4)
        rotation[:3, :3] = [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
        translation = np.identity(4)
        translation[:3, 3] = self.translation
        scale = np.diag([*self.scale, 1.0])
        return translation @ rotation @ scale


@dataclass(eq=False)
class SpriteRendererComponent:
    """A coloured, optionally textured quad."""

    color: np.ndarray = _vec_field(1.0, 1.0, 1.0, 1.0)
    texture: Optional[Any] = None
    tiling_factor: float = 1.0
    path: str = ""

    def __post_init__(self) -> None:
        self.color = _vec(self.color, 4)


@dataclass(eq=False)
class CircleRendererComponent:
    """A filled or ringed circle."""

    color: np.ndarray = _vec_field(1.0, 1.0, 1.0, 1.0)
    thickness: float = 1.0
    fade: float = 0.005

    def __post_init__(self) -> None:
        self.color = _vec(self.color, 4)


@dataclass(eq=False)
class CameraComponent:
    """A camera that can render the scene."""

    camera: SceneCamera = field(default_factory=SceneCamera)
    primary: bool = True
    fixed_aspect_ratio: bool = False


@dataclass
class ScriptComponent:
    """Names the script class that drives an entity."""

    name: str = ""


@dataclass(eq=False)
class NativeScriptComponent:
    """Holds a script class and the instance made from it."""

    instance: Optional[Any] = None
    script_class: Optional[type] = None

    def bind(self, script_class: type) -> None:
        """Use ``script_class`` for later instantiation."""
        self.script_class = script_class

    def instantiate(self) -> Any:
        """Create, keep and return an instance of the bound script class."""
        if self.script_class is None:
            raise RuntimeError("no script class bound")
        self.instance = self.script_class()
        return self.instance

    def destroy(self) -> None:
        """Drop the current instance."""
        self.instance = None


class BodyType(IntEnum):
    """How a rigid body moves."""

    STATIC = 0
    DYNAMIC = 1
    KINEMATIC = 2


@dataclass(eq=False)
class Rigidbody2DComponent:
    """A 2D physics body."""

    type: BodyType = BodyType.STATIC
    fixed_rotation: bool = False
    awake: bool = True
    runtime_body: Optional[Any] = None
    force: np.ndarray = _vec_field(0.0, 0.0)
    force_to_apply: np.ndarray = _vec_field(0.0, 0.0)

    def __post_init__(self) -> None:
        self.type = BodyType(self.type)
        self.force = _vec(self.force, 2)
        self.force_to_apply = _vec(self.force_to_apply, 2)

    def apply_force(self, force: Sequence[float]) -> None:
        """Queue a force to apply on the next physics step."""
        self.force_to_apply = _vec(force, 2)


@dataclass(eq=False)
class BoxCollider2DComponent:
    """A box-shaped 2D collider; ``size`` holds half extents."""

    offset: np.ndarray = _vec_field(0.0, 0.0)
    size: np.ndarray = _vec_field(0.5, 0.5)
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0
    restitution_threshold: float = 0.5
    is_sensor: bool = False
    show_collider: bool = False
    runtime_fixture: Optional[Any] = None

    def __post_init__(self) -> None:
        self.offset = _vec(self.offset, 2)
        self.size = _vec(self.size, 2)


@dataclass(eq=False)
class CircleCollider2DComponent:
    """A circular 2D collider."""

    offset: np.ndarray = _vec_field(0.0, 0.0)
    radius: float = 0.5
    density: float = 1.0
    friction: float = 0.5
    restitution: float = 0.0
    restitution_threshold: float = 0.5
    is_sensor: bool = False
    show_collider: bool = False
    runtime_fixture: Optional[Any] = None

    def __post_init__(self) -> None:
        self.offset = _vec(self.offset, 2)


ALL_COMPONENTS = (
    TransformComponent,
    SpriteRendererComponent,
    CircleRendererComponent,
    CameraComponent,
    ScriptComponent,
    Rigidbody2DComponent,
    BoxCollider2DComponent,
    CircleCollider2DComponent,
)