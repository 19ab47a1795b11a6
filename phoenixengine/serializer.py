"""Saving scenes to YAML files and loading them back."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import yaml

from phoenixengine.camera import ProjectionType
from phoenixengine.components import (
    BodyType,
    BoxCollider2DComponent,
    CameraComponent,
    CircleCollider2DComponent,
    CircleRendererComponent,
    IDComponent,
    Rigidbody2DComponent,
    ScriptComponent,
    SpriteRendererComponent,
    TagComponent,
    TransformComponent,
)
from phoenixengine.scene import Entity, Scene, SceneType

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
TextureLoader = Callable[[str], Any]

_BODY_TYPE_NAMES = {
    BodyType.STATIC: "Static",
    BodyType.DYNAMIC: "Dynamic",
    BodyType.KINEMATIC: "Kinematic",
}
_SCENE_TYPE_NAMES = {SceneType.SCENE2D: "2D"}


def body_type_to_string(body_type: BodyType) -> str:
    """Name of a rigid body type as stored in scene files."""
    try:
        return _BODY_TYPE_NAMES[BodyType(body_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown body type: {body_type!r}") from None


def body_type_from_string(text: str) -> BodyType:
    """Rigid body type named ``text`` in a scene file."""
    for body_type, name in _BODY_TYPE_NAMES.items():
        if name == text:
            return body_type
    raise ValueError(f"Unknown body type: {text!r}")


def scene_type_to_string(scene_type: SceneType) -> str:
    """Name of a scene type as stored in scene files."""
    try:
        return _SCENE_TYPE_NAMES[scene_type]
    except KeyError:
        raise ValueError(f"Unknown scene type: {scene_type!r}") from None


def scene_type_from_string(text: str) -> SceneType:
    """Scene type named ``text`` in a scene file."""
    for scene_type, name in _SCENE_TYPE_NAMES.items():
        if name == text:
            return scene_type
    raise ValueError(f"Unknown scene type: {text!r}")


class _FlowList(list):
    """A list written in YAML flow style, as ``[x, y, z]``."""


class _Dumper(yaml.SafeDumper):
    pass


def _represent_flow(dumper: yaml.SafeDumper, data: _FlowList) -> yaml.Node:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)


_Dumper.add_representer(_FlowList, _represent_flow)


def _vec_out(values: np.ndarray) -> _FlowList:
    return _FlowList(float(v) for v in values)


def _vec_in(node: Any, size: int) -> np.ndarray:
    if not isinstance(node, Sequence) or isinstance(node, str) or len(node) != size:
        raise ValueError(f"expected a sequence of {size} numbers, got {node!r}")
    return np.array([float(v) for v in node], dtype=np.float64)


def _entity_to_dict(entity: Entity) -> Dict[str, Any]:
    if not entity.has_component(IDComponent):
        raise ValueError("cannot serialize an entity without an IDComponent")

    out: Dict[str, Any] = {"Entity": entity.uuid}

    if entity.has_component(TagComponent):
        out["TagComponent"] = {"Tag": entity.get_component(TagComponent).tag}

    if entity.has_component(TransformComponent):
        tc = entity.get_component(TransformComponent)
        out["TransformComponent"] = {
            "Translation": _vec_out(tc.translation),
            "Rotation": _vec_out(tc.rotation),
            "Scale": _vec_out(tc.scale),
        }

    if entity.has_component(CameraComponent):
        cc = entity.get_component(CameraComponent)
        camera = cc.camera
        out["CameraComponent"] = {
            "Camera": {
                "ProjectionType": int(camera.projection_type),
                "PerspectiveFOV": float(camera.perspective_vertical_fov),
                "PerspectiveNear": float(camera.perspective_near_clip),
                "PerspectiveFar": float(camera.perspective_far_clip),
                "OrthographicSize": float(camera.orthographic_size),
                "OrthographicNear": float(camera.orthographic_near_clip),
                "OrthographicFar": float(camera.orthographic_far_clip),
            },
            "Primary": bool(cc.primary),
            "FixedAspectRatio": bool(cc.fixed_aspect_ratio),
        }

    if entity.has_component(ScriptComponent):
        out["ScriptComponent"] = {"ClassName": entity.get_component(ScriptComponent).name}

    if entity.has_component(SpriteRendererComponent):
        src = entity.get_component(SpriteRendererComponent)
        sprite: Dict[str, Any] = {"Color": _vec_out(src.color)}
        if src.path:
            sprite["Textured"] = True
            sprite["TexturePath"] = src.path
        else:
            sprite["Textured"] = False
        sprite["TextureTiling"] = float(src.tiling_factor)
        out["SpriteRendererComponent"] = sprite

    if entity.has_component(CircleRendererComponent):
        crc = entity.get_component(CircleRendererComponent)
        out["CircleRendererComponent"] = {
            "Color": _vec_out(crc.color),
            "Thickness": float(crc.thickness),
            "Fade": float(crc.fade),
        }

    if entity.has_component(Rigidbody2DComponent):
        rb2d = entity.get_component(Rigidbody2DComponent)
        out["Rigidbody2DComponent"] = {
            "BodyType": body_type_to_string(rb2d.type),
            "FixedRotation": bool(rb2d.fixed_rotation),
        }

    if entity.has_component(BoxCollider2DComponent):
        bc2d = entity.get_component(BoxCollider2DComponent)
        out["BoxCollider2DComponent"] = {
            "Offset": _vec_out(bc2d.offset),
            "Size": _vec_out(bc2d.size),
            "Density": float(bc2d.density),
            "Friction": float(bc2d.friction),
            "Restitution": float(bc2d.restitution),
            "RestitutionThreshold": float(bc2d.restitution_threshold),
            "IsSensor": bool(bc2d.is_sensor),
        }

    if entity.has_component(CircleCollider2DComponent):
        cc2d = entity.get_component(CircleCollider2DComponent)
        out["CircleCollider2DComponent"] = {
            "Offset": _vec_out(cc2d.offset),
            "Radius": float(cc2d.radius),
            "Density": float(cc2d.density),
            "Friction": float(cc2d.friction),
            "Restitution": float(cc2d.restitution),
            "RestitutionThreshold": float(cc2d.restitution_threshold),
            "IsSensor": bool(cc2d.is_sensor),
        }

    return out


class SceneSerializer:
    """Writes a scene to YAML and fills a scene from YAML.

    ``texture_loader``, when given, is called with each sprite's texture path
    on loading and its result is stored as the sprite's texture.
    """

    def __init__(self, scene: Scene, texture_loader: Optional[TextureLoader] = None) -> None:
        self.scene = scene
        self.texture_loader = texture_loader

    def to_yaml(self) -> str:
        """The scene as YAML text."""
        entities: List[Dict[str, Any]] = [
            _entity_to_dict(entity) for entity in self.scene.entities() if entity
        ]
        document = {
            "Scene": "Untitled",
            "SceneType": scene_type_to_string(self.scene.scene_type),
            "Entities": entities,
        }
        return yaml.dump(document, Dumper=_Dumper, sort_keys=False, default_flow_style=False)

    def serialize(self, filepath: PathLike) -> None:
        """Write the scene to ``filepath``."""
        with open(filepath, "w", encoding="utf-8") as out:
            out.write(self.to_yaml())

    def from_yaml(self, text: str) -> bool:
        """Add the entities described by ``text`` to the scene.

        Returns False when the text is not YAML or has no ``Scene`` key.
        Malformed entity data raises ValueError or KeyError.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return False

        if not isinstance(data, dict) or "Scene" not in data:
            return False

        scene_name = str(data["Scene"])
        self.scene.scene_type = scene_type_from_string(str(data["SceneType"]))
        logger.debug("Deserializing scene '%s'", scene_name)

        for entity_data in data.get("Entities") or []:
            self._load_entity(entity_data)
        return True

    def deserialize(self, filepath: PathLike) -> bool:
        """Load the scene file at ``filepath``; see :meth:`from_yaml`."""
        with open(filepath, "r", encoding="utf-8") as src:
            return self.from_yaml(src.read())

    def _load_entity(self, data: Dict[str, Any]) -> None:
        uuid = int(data["Entity"])
        name = ""
        tag = data.get("TagComponent")
        if tag:
            name = str(tag["Tag"])
        logger.debug("Deserialized entity with ID = %d, name = %s", uuid, name)

        entity = self.scene.create_entity_with_uuid(uuid, name)

        transform = data.get("TransformComponent")
        if transform:
            tc = entity.get_component(TransformComponent)
            tc.translation = _vec_in(transform["Translation"], 3)
            tc.rotation = _vec_in(transform["Rotation"], 3)
            tc.scale = _vec_in(transform["Scale"], 3)

        camera_data = data.get("CameraComponent")
        if camera_data:
            cc = entity.add_component(CameraComponent)
            props = camera_data["Camera"]
            camera = cc.camera
            camera.projection_type = ProjectionType(int(props["ProjectionType"]))
            camera.perspective_vertical_fov = float(props["PerspectiveFOV"])
            camera.perspective_near_clip = float(props["PerspectiveNear"])
            camera.perspective_far_clip = float(props["PerspectiveFar"])
            camera.orthographic_size = float(props["OrthographicSize"])
            camera.orthographic_near_clip = float(props["OrthographicNear"])
            camera.orthographic_far_clip = float(props["OrthographicFar"])
            cc.primary = bool(camera_data["Primary"])
            cc.fixed_aspect_ratio = bool(camera_data["FixedAspectRatio"])

        script = data.get("ScriptComponent")
        if script:
            entity.add_component(ScriptComponent).name = str(script["ClassName"])

        sprite = data.get("SpriteRendererComponent")
        if sprite:
            src = entity.add_component(SpriteRendererComponent)
            src.color = _vec_in(sprite["Color"], 4)
            if bool(sprite["Textured"]):
                path = str(sprite["TexturePath"])
                if self.texture_loader is not None:
                    src.texture = self.texture_loader(path)
                src.path = path
            src.tiling_factor = float(sprite["TextureTiling"])

        circle = data.get("CircleRendererComponent")
        if circle:
            crc = entity.add_component(CircleRendererComponent)
            crc.color = _vec_in(circle["Color"], 4)
            crc.thickness = float(circle["Thickness"])
            crc.fade = float(circle["Fade"])

        body = data.get("Rigidbody2DComponent")
        if body:
            rb2d = entity.add_component(Rigidbody2DComponent)
            rb2d.type = body_type_from_string(str(body["BodyType"]))
            rb2d.fixed_rotation = bool(body["FixedRotation"])

        box = data.get("BoxCollider2DComponent")
        if box:
            bc2d = entity.add_component(BoxCollider2DComponent)
            bc2d.offset = _vec_in(box["Offset"], 2)
            bc2d.size = _vec_in(box["Size"], 2)
            bc2d.density = float(box["Density"])
            bc2d.friction = float(box["Friction"])
            bc2d.restitution = float(box["Restitution"])
            bc2d.restitution_threshold = float(box["RestitutionThreshold"])
            bc2d.is_sensor = bool(box["IsSensor"])

        circle_collider = data.get("CircleCollider2DComponent")
        if circle_collider:
            cc2d = entity.add_component(CircleCollider2DComponent)
            cc2d.offset = _vec_in(circle_collider["Offset"], 2)
            cc2d.radius = float(circle_collider["Radius"])
            cc2d.density = float(circle_collider["Density"])
            cc2d.friction = float(circle_collider["Friction"])
            cc2d.restitution = float(circle_collider["Restitution"])
            cc2d.restitution_threshold = float(circle_collider["RestitutionThreshold"])
            cc2d.is_sensor = bool(circle_collider["IsSensor"])