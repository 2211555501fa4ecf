"""
Cross-reference scene script attachments against declared script schemas.
"""

from dataclasses import dataclass, field
from typing import Mapping

from .csharp_parser import ScriptSchema
from .hierarchy import find_root_objects
from .unity_scene_parser import UnityScene, SceneObject


@dataclass
class SceneResult:
    scene_path: str
    root_objects: list[SceneObject] = field(default_factory=list)
    used_guids: set[str] = field(default_factory=set)
    # One entry per inconsistent attachment, duplicates kept
    inconsistent_guids: list[str] = field(default_factory=list)


def missing_fields(scene_fields: frozenset[str], schema: ScriptSchema) -> set[str]:
    """Scene-stored field names the script no longer declares."""
    return {name for name in scene_fields if name not in schema.serialized_fields}


def cross_reference(scene: UnityScene, scripts: Mapping[str, ScriptSchema]) -> SceneResult:
    """
    Distill a parsed scene into its SceneResult.

    GUIDs with no known schema stay in used_guids but are never
    reported as inconsistent.
    """
    result = SceneResult(
        scene_path=scene.path,
        root_objects=find_root_objects(scene.objects, scene.transforms),
        used_guids=set(scene.used_guids)
    )

    for attached in scene.scripts:
        schema = scripts.get(attached.guid)
        if schema is None:
            continue
        if missing_fields(attached.serialized_fields, schema):
            result.inconsistent_guids.append(attached.guid)

    return result
