import numpy as np
import pytest
import yaml

from phoenixengine.camera import ProjectionType
from phoenixengine.components import (
    BodyType,
    BoxCollider2DComponent,
    CameraComponent,
    CircleCollider2DComponent,
    CircleRendererComponent,
    Rigidbody2DComponent,
    ScriptComponent,
    SpriteRendererComponent,
    TransformComponent,
)
from phoenixengine.scene import Scene, SceneType
from phoenixengine.serializer import (
    SceneSerializer,
    body_type_from_string,
    body_type_to_string,
    scene_type_from_string,
    scene_type_to_string,
)


def _full_scene():
    scene = Scene()
    player = scene.create_entity_with_uuid(1234, "Player")
    tc = player.get_component(TransformComponent)
    tc.translation = np.array([1.5, -2.0, 0.25])
    tc.rotation = np.array([0.0, 0.0, 0.75])
    tc.scale = np.array([2.0, 3.0, 1.0])
    sprite = player.add_component(SpriteRendererComponent)
    sprite.color = np.array([0.1, 0.2, 0.3, 0.4])
    sprite.path = "assets/textures/player.png"
    sprite.tiling_factor = 2.5
    rb = player.add_component(Rigidbody2DComponent)
    rb.type = BodyType.DYNAMIC
    rb.fixed_rotation = True
    box = player.add_component(BoxCollider2DComponent)
    box.offset = np.array([0.1, 0.2])
    box.size = np.array([1.0, 2.0])
    box.density = 3.0
    box.is_sensor = True
    player.add_component(ScriptComponent).name = "Game.Player"

    cam = scene.create_entity_with_uuid(99, "Camera")
    cc = cam.add_component(CameraComponent)
    cc.camera.set_perspective(1.2, 0.5, 500.0)
    cc.camera.orthographic_size = 7.0
    cc.primary = False
    cc.fixed_aspect_ratio = True

    ball = scene.create_entity_with_uuid(7, "Ball")
    crc = ball.add_component(CircleRendererComponent)
    crc.thickness = 0.5
    crc.fade = 0.01
    ccol = ball.add_component(CircleCollider2DComponent)
    ccol.radius = 0.75
    ccol.friction = 0.9
    return scene


def _reload(scene, loader=None):
    text = SceneSerializer(scene).to_yaml()
    loaded = Scene()
    assert SceneSerializer(loaded, texture_loader=loader).from_yaml(text) is True
    return loaded


@pytest.mark.parametrize("body_type", list(BodyType))
def test_body_type_round_trip(body_type):
    assert body_type_from_string(body_type_to_string(body_type)) == body_type


def test_body_type_names():
    assert body_type_to_string(BodyType.STATIC) == "Static"
    assert body_type_to_string(BodyType.DYNAMIC) == "Dynamic"
    assert body_type_to_string(BodyType.KINEMATIC) == "Kinematic"


def test_body_type_unknown_raises():
    with pytest.raises(ValueError):
        body_type_from_string("Floating")


def test_scene_type_strings():
    assert scene_type_to_string(SceneType.SCENE2D) == "2D"
    assert scene_type_from_string("2D") == SceneType.SCENE2D
    with pytest.raises(ValueError):
        scene_type_from_string("3D")


def test_document_layout():
    text = SceneSerializer(_full_scene()).to_yaml()
    data = yaml.safe_load(text)
    assert list(data) == ["Scene", "SceneType", "Entities"]
    assert data["Scene"] == "Untitled"
    assert data["SceneType"] == "2D"
    assert sorted(e["Entity"] for e in data["Entities"]) == [7, 99, 1234]
    assert "Translation: [" in text


def test_entity_keys_in_order():
    data = yaml.safe_load(SceneSerializer(_full_scene()).to_yaml())
    player = next(e for e in data["Entities"] if e["Entity"] == 1234)
    assert list(player) == [
        "Entity",
        "TagComponent",
        "TransformComponent",
        "ScriptComponent",
        "SpriteRendererComponent",
        "Rigidbody2DComponent",
        "BoxCollider2DComponent",
    ]
    assert player["SpriteRendererComponent"]["Textured"] is True
    assert player["Rigidbody2DComponent"]["BodyType"] == "Dynamic"


def test_untextured_sprite_has_no_path():
    scene = Scene()
    scene.create_entity("Plain").add_component(SpriteRendererComponent)
    data = yaml.safe_load(SceneSerializer(scene).to_yaml())
    sprite = data["Entities"][0]["SpriteRendererComponent"]
    assert sprite["Textured"] is False
    assert "TexturePath" not in sprite


def test_round_trip_names_and_transform():
    original = _full_scene()
    loaded = _reload(original)
    assert len(loaded) == len(original)
    player = loaded.entity_by_uuid(1234)
    assert player.name == "Player"
    tc = player.get_component(TransformComponent)
    src = original.entity_by_uuid(1234).get_component(TransformComponent)
    np.testing.assert_allclose(tc.translation, src.translation)
    np.testing.assert_allclose(tc.rotation, src.rotation)
    np.testing.assert_allclose(tc.scale, src.scale)


def test_round_trip_physics_and_sprite():
    original = _full_scene()
    loaded = _reload(original)
    player = loaded.entity_by_uuid(1234)
    rb = player.get_component(Rigidbody2DComponent)
    assert rb.type == BodyType.DYNAMIC
    assert rb.fixed_rotation is True
    box = player.get_component(BoxCollider2DComponent)
    np.testing.assert_allclose(box.size, [1.0, 2.0])
    np.testing.assert_allclose(box.offset, [0.1, 0.2])
    assert box.density == 3.0
    assert box.is_sensor is True
    sprite = player.get_component(SpriteRendererComponent)
    assert sprite.path == "assets/textures/player.png"
    assert sprite.tiling_factor == 2.5
    np.testing.assert_allclose(sprite.color, [0.1, 0.2, 0.3, 0.4])
    assert player.get_component(ScriptComponent).name == "Game.Player"


def test_round_trip_camera_and_circles():
    loaded = _reload(_full_scene())
    cc = loaded.entity_by_uuid(99).get_component(CameraComponent)
    assert cc.camera.projection_type == ProjectionType.PERSPECTIVE
    assert cc.camera.perspective_vertical_fov == pytest.approx(1.2)
    assert cc.camera.perspective_near_clip == 0.5
    assert cc.camera.perspective_far_clip == 500.0
    assert cc.camera.orthographic_size == 7.0
    assert cc.primary is False
    assert cc.fixed_aspect_ratio is True
    ball = loaded.entity_by_uuid(7)
    assert ball.get_component(CircleRendererComponent).thickness == 0.5
    assert ball.get_component(CircleCollider2DComponent).radius == 0.75
    assert ball.get_component(CircleCollider2DComponent).friction == 0.9


def test_reserialized_text_is_stable():
    first = SceneSerializer(_full_scene()).to_yaml()
    loaded = Scene()
    SceneSerializer(loaded).from_yaml(first)
    second = SceneSerializer(loaded).to_yaml()
    assert yaml.safe_load(first) == yaml.safe_load(second)


def test_texture_loader_receives_path():
    seen = []

    def loader(path):
        seen.append(path)
        return ("texture", path)

    loaded = _reload(_full_scene(), loader)
    sprite = loaded.entity_by_uuid(1234).get_component(SpriteRendererComponent)
    assert seen == ["assets/textures/player.png"]
    assert sprite.texture == ("texture", "assets/textures/player.png")


def test_file_round_trip(tmp_path):
    path = tmp_path / "level.phoenix"
    SceneSerializer(_full_scene()).serialize(path)
    loaded = Scene()
    assert SceneSerializer(loaded).deserialize(path) is True
    assert loaded.entity_by_uuid(7).name == "Ball"


def test_invalid_yaml_returns_false():
    assert SceneSerializer(Scene()).from_yaml("Scene: [unclosed") is False


def test_missing_scene_key_returns_false():
    scene = Scene()
    assert SceneSerializer(scene).from_yaml("Entities: []\n") is False
    assert len(scene) == 0


def test_unknown_body_type_raises():
    text = (
        "Scene: Untitled\n"
        "SceneType: 2D\n"
        "Entities:\n"
        "  - Entity: 5\n"
        "    Rigidbody2DComponent:\n"
        "      BodyType: Floating\n"
        "      FixedRotation: false\n"
    )
    with pytest.raises(ValueError):
        SceneSerializer(Scene()).from_yaml(text)


def test_wrong_vector_length_raises():
    text = (
        "Scene: Untitled\n"
        "SceneType: 2D\n"
        "Entities:\n"
        "  - Entity: 5\n"
        "    TransformComponent:\n"
        "      Translation: [1, 2]\n"
        "      Rotation: [0, 0, 0]\n"
        "      Scale: [1, 1, 1]\n"
    )
    with pytest.raises(ValueError):
        SceneSerializer(Scene()).from_yaml(text)


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        SceneSerializer(Scene()).deserialize(tmp_path / "absent.yaml")