"""Scenes holding entities and their components."""

from __future__ import annotations

import copy
import dataclasses
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Type, TypeVar

import numpy as np

from phoenixengine.camera import SceneCamera
from phoenixengine.components import (
    BoxCollider2DComponent,
    CameraComponent,
    CircleCollider2DComponent,
    CircleRendererComponent,
    IDComponent,
    NativeScriptComponent,
    Rigidbody2DComponent,
    ScriptComponent,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
    generate_uuid,
)

C = TypeVar("C")

DEFAULT_ENTITY_NAME = "Entity"

# Components carried over when a scene or an entity is copied; ID and tag
# are set up by entity creation instead.
_COPIED_COMPONENTS: Tuple[type, ...] = (
    TransformComponent,
    SpriteRendererComponent,
    CircleRendererComponent,
    CameraComponent,
    NativeScriptComponent,
    Rigidbody2DComponent,
    BoxCollider2DComponent,
    CircleCollider2DComponent,
    ScriptComponent,
)


class SceneType(Enum):
    """Kinds of scene."""

    SCENE2D = "2D"


def _clone(component: Any) -> Any:
    """Copy of a component whose vectors and camera are not shared with the original."""
    clone = copy.copy(component)
    if dataclasses.is_dataclass(clone):
        for f in dataclasses.fields(clone):
            value = getattr(clone, f.name)
            if isinstance(value, np.ndarray):
                setattr(clone, f.name, value.copy())
            elif isinstance(value, SceneCamera):
                setattr(clone, f.name, copy.deepcopy(value))
    return clone


class Entity:
    """Handle to an entity of a scene; a handle without a scene is null."""

    def __init__(self, handle: Optional[int] = None, scene: Optional["Scene"] = None) -> None:
        self.handle = handle
        self.scene = scene

    def _components(self) -> Dict[type, Any]:
        if self.handle is None or self.scene is None:
            raise ValueError("null entity")
        try:
            return self.scene._registry[self.handle]
        except KeyError:
            raise ValueError(f"entity {self.handle} does not exist in its scene") from None

    def add_component(self, component_type: Type[C], *args: Any, **kwargs: Any) -> C:
        """Create a component of ``component_type`` on this entity and return it."""
        components = self._components()
        if component_type in components:
            raise ValueError(f"Entity already has component {component_type.__name__}")
        component = component_type(*args, **kwargs)
        components[component_type] = component
        assert self.scene is not None
        self.scene._on_component_added(self, component)
        return component

    def add_or_replace_component(self, component: C) -> C:
        """Attach ``component``, replacing one of the same type if present."""
        self._components()[type(component)] = component
        assert self.scene is not None
        self.scene._on_component_added(self, component)
        return component

    def get_component(self, component_type: Type[C]) -> C:
        """The component of ``component_type``; KeyError if missing."""
        try:
            return self._components()[component_type]
        except KeyError:
            raise KeyError(f"Entity does not have component {component_type.__name__}") from None

    def has_component(self, component_type: type) -> bool:
        return component_type in self._components()

    def remove_component(self, component_type: type) -> None:
        """Detach the component of ``component_type``; KeyError if missing."""
        components = self._components()
        if component_type not in components:
            raise KeyError(f"Entity does not have component {component_type.__name__}")
        del components[component_type]

    @property
    def uuid(self) -> int:
        return self.get_component(IDComponent).id

    @property
    def name(self) -> str:
        return self.get_component(TagComponent).tag

    def __bool__(self) -> bool:
        return self.handle is not None

    def __int__(self) -> int:
        if self.handle is None:
            raise ValueError("null entity")
        return self.handle

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.handle == other.handle and self.scene is other.scene

    def __hash__(self) -> int:
        return hash((self.handle, id(self.scene)))

    def __repr__(self) -> str:
        return f"Entity(handle={self.handle!r})"


class ScriptableEntity:
    """Base of native scripts bound to an entity through NativeScriptComponent.

    The default hooks keep track of the script's lifecycle: whether it is
    running and how much time its updates have covered.
    """

    def __init__(self) -> None:
        self.entity = Entity()
        self.alive = False
        self.elapsed = 0.0

    def get_component(self, component_type: Type[C]) -> C:
        return self.entity.get_component(component_type)

    def on_create(self) -> None:
        """Called once when the script starts; marks it running."""
        self.alive = True
        self.elapsed = 0.0

    def on_update(self, dt: float) -> None:
        """Called once per frame; adds the frame time to ``elapsed``."""
        self.elapsed += float(dt)

    def on_destroy(self) -> None:
        """Called when the script is torn down; marks it stopped."""
        self.alive = False


class Scene:
    """A set of entities with components, viewport size and physics settings."""

    def __init__(self) -> None:
        self._registry: Dict[int, Dict[type, Any]] = {}
        self._next_handle = 0
        self._entity_map: Dict[int, int] = {}
        self.viewport_width = 0
        self.viewport_height = 0
        self.gravity: Tuple[float, float] = (0.0, -9.8)
        self.scene_type = SceneType.SCENE2D

    @staticmethod
    def copy(other: "Scene") -> "Scene":
        """A new scene with the same entities, identifiers and components."""
        new_scene = Scene()
        new_scene.viewport_width = other.viewport_width
        new_scene.viewport_height = other.viewport_height
        new_scene.gravity = other.gravity

        handle_map: Dict[int, int] = {}
        for entity in other.entities_with(IDComponent):
            uuid = entity.uuid
            created = new_scene.create_entity_with_uuid(uuid, entity.name)
            handle_map[uuid] = int(created)

        new_scene.scene_type = other.scene_type

        for component_type in _COPIED_COMPONENTS:
            for entity in other.entities_with(component_type):
                dst = handle_map[entity.uuid]
                new_scene._registry[dst][component_type] = _clone(
                    entity.get_component(component_type)
                )
        return new_scene

    def _new_entity(self) -> Entity:
        handle = self._next_handle
        self._next_handle += 1
        self._registry[handle] = {}
        return Entity(handle, self)

    def create_entity(self, name: str = "") -> Entity:
        """New entity with a fresh identifier, a transform and a tag."""
        entity = self._new_entity()
        entity.add_component(IDComponent)
        entity.add_component(TransformComponent)
        entity.add_component(TagComponent).tag = name or DEFAULT_ENTITY_NAME
        return entity

    def create_entity_with_uuid(self, uuid: int, name: str = "") -> Entity:
        """New entity with identifier ``uuid``, findable through entity_by_uuid."""
        entity = self._new_entity()
        entity.add_component(IDComponent, uuid)
        entity.add_component(TransformComponent)
        entity.add_component(TagComponent).tag = name or DEFAULT_ENTITY_NAME
        self._entity_map[uuid] = int(entity)
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        """Remove ``entity`` and all its components."""
        components = entity._components()
        id_component = components.get(IDComponent)
        if id_component is not None:
            self._entity_map.pop(id_component.id, None)
        del self._registry[int(entity)]

    def set_gravity(self, x: float, y: float) -> None:
        self.gravity = (float(x), float(y))

    def on_viewport_resize(self, width: int, height: int) -> None:
        """Record the viewport and resize every camera without a fixed aspect ratio."""
        self.viewport_width = width
        self.viewport_height = height
        for entity in self.entities_with(CameraComponent):
            camera_component = entity.get_component(CameraComponent)
            if not camera_component.fixed_aspect_ratio:
                camera_component.camera.set_viewport_size(width, height)

    def duplicate_entity(self, entity: Entity) -> Entity:
        """New entity with the same name and copies of ``entity``'s components."""
        new_entity = self.create_entity(entity.name)
        for component_type in _COPIED_COMPONENTS:
            if entity.has_component(component_type):
                new_entity.add_or_replace_component(
                    _clone(entity.get_component(component_type))
                )
        return new_entity

    def primary_camera_entity(self) -> Entity:
        """First entity with a primary camera, or a null entity."""
        for entity in self.entities_with(CameraComponent):
            if entity.get_component(CameraComponent).primary:
                return entity
        return Entity()

    def entity_by_uuid(self, uuid: int) -> Entity:
        """Entity created with identifier ``uuid``; KeyError if there is none."""
        return Entity(self._entity_map[uuid], self)

    def entities_with(self, *args: type) -> Iterator[Entity]:
        """Entities that have every one of the given component types."""
        for handle, components in list(self._registry.items()):
            if all(component_type in components for component_type in args):
                yield Entity(handle, self)

    def entities(self) -> Iterator[Entity]:
        """All entities of the scene."""
        return self.entities_with()

    def __len__(self) -> int:
        return len(self._registry)

    def _on_component_added(self, entity: Entity, component: Any) -> None:
        if isinstance(component, CameraComponent):
            if self.viewport_width > 0 and self.viewport_height > 0:
                component.camera.set_viewport_size(self.viewport_width, self.viewport_height)


__all__ = ["SceneType", "Entity", "Scene", "ScriptableEntity", "generate_uuid"]