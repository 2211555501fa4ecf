"""
Tests for root object detection and tree building.
"""

from unity_analyzers.hierarchy import build_tree, find_root_objects
from unity_analyzers.unity_scene_parser import SceneObject, SceneTransform, UnitySceneParser

from conftest import game_object, scene_text, transform


def _objects(*objs):
    return {o.file_id: o for o in objs}


def _transforms(*ts):
    return {t.file_id: t for t in ts}


def test_three_level_chain_has_one_root():
    content = scene_text(
        game_object(1, "Root", 10),
        transform(10, 1, parent_id=0),
        game_object(2, "Child", 20),
        transform(20, 2, parent_id=10),
        game_object(3, "Grandchild", 30),
        transform(30, 3, parent_id=20),
    )
    scene = UnitySceneParser().parse_content(content)

    roots = find_root_objects(scene.objects, scene.transforms)

    assert [r.name for r in roots] == ["Root"]


def test_missing_transform_falls_back_to_root():
    objects = _objects(SceneObject("1", "Orphan", "99"))

    roots = find_root_objects(objects, {})

    assert [r.name for r in roots] == ["Orphan"]


def test_object_whose_transform_has_a_parent_is_not_root():
    objects = _objects(SceneObject("2", "Child", "20"))
    transforms = _transforms(SceneTransform("20", "10"))

    assert find_root_objects(objects, transforms) == []


def test_roots_are_sorted_by_ordinal_name():
    objects = _objects(
        SceneObject("1", "beta", "11"),
        SceneObject("2", "Alpha", "12"),
        SceneObject("3", "Zed", "13"),
    )
    transforms = _transforms(
        SceneTransform("11", "0"),
        SceneTransform("12", "0"),
        SceneTransform("13", "0"),
    )

    roots = find_root_objects(objects, transforms)

    assert [r.name for r in roots] == ["Alpha", "Zed", "beta"]


def test_build_tree_nests_children():
    objects = _objects(
        SceneObject("1", "Root", "10"),
        SceneObject("2", "B", "20"),
        SceneObject("3", "A", "30"),
    )
    transforms = _transforms(
        SceneTransform("10", "0"),
        SceneTransform("20", "10"),
        SceneTransform("30", "10"),
    )

    tree = build_tree(objects, transforms)

    assert len(tree) == 1
    assert tree[0]["name"] == "Root"
    assert [c["name"] for c in tree[0]["children"]] == ["A", "B"]
