"""
Scene hierarchy reconstruction from Transform parent references.
"""

from .unity_scene_parser import NULL_FILE_ID, SceneObject, SceneTransform


def find_root_objects(
    objects: dict[str, SceneObject],
    transforms: dict[str, SceneTransform]
) -> list[SceneObject]:
    """
    Return the GameObjects at the top of the scene hierarchy, sorted by name.

    An object is a root if its Transform has m_Parent {fileID: 0}. If the
    Transform record is missing entirely and no other Transform names it as
    a child, the object is assumed to be a root as well. That fallback can
    promote an object whose intermediate Transform data was not parsed.
    """
    child_transforms = {
        t.file_id for t in transforms.values()
        if t.parent_file_id != NULL_FILE_ID
    }

    roots = []
    for obj in objects.values():
        transform = transforms.get(obj.transform_file_id)
        if transform is not None:
            if transform.parent_file_id == NULL_FILE_ID:
                roots.append(obj)
        elif obj.transform_file_id not in child_transforms:
            roots.append(obj)

    # Plain str ordering is ordinal (code point) and case-sensitive
    return sorted(roots, key=lambda o: o.name)


def build_tree(
    objects: dict[str, SceneObject],
    transforms: dict[str, SceneTransform]
) -> list[dict]:
    """Nest GameObjects under their parents, starting from the roots."""
    by_transform = {o.transform_file_id: o for o in objects.values()}
    children: dict[str, list[SceneObject]] = {}
    for transform in transforms.values():
        if transform.parent_file_id == NULL_FILE_ID:
            continue
        child = by_transform.get(transform.file_id)
        if child is not None:
            children.setdefault(transform.parent_file_id, []).append(child)

    def to_tree(obj: SceneObject, seen: set[str]) -> dict:
        seen = seen | {obj.file_id}
        return {
            "name": obj.name,
            "file_id": obj.file_id,
            "children": [
                to_tree(c, seen)
                for c in sorted(children.get(obj.transform_file_id, []), key=lambda o: o.name)
                if c.file_id not in seen
            ]
        }

    return [to_tree(root, set()) for root in find_root_objects(objects, transforms)]
