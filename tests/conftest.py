"""
Shared fixtures: tiny Unity projects written to tmp_path.
"""

import textwrap
from pathlib import Path

import pytest

SCENE_HEADER = "%YAML 1.1\n%TAG !u! tag:unity3d.com,2011:\n"

META_TEMPLATE = """\
fileFormatVersion: 2
guid: {guid}
MonoImporter:
  externalObjects: {{}}
  serializedVersion: 2
  defaultReferences: []
  executionOrder: 0
  icon: {{instanceID: 0}}
  userData:
  assetBundleName:
  assetBundleVariant:
"""


def game_object(file_id, name, transform_id, *component_ids):
    components = "".join(
        f"  - component: {{fileID: {cid}}}\n" for cid in (transform_id, *component_ids)
    )
    return (
        f"--- !u!1 &{file_id}\n"
        "GameObject:\n"
        "  m_ObjectHideFlags: 0\n"
        "  serializedVersion: 6\n"
        "  m_Component:\n"
        f"{components}"
        "  m_Layer: 0\n"
        f"  m_Name: {name}\n"
        "  m_IsActive: 1\n"
    )


def transform(file_id, game_object_id, parent_id=0):
    return (
        f"--- !u!4 &{file_id}\n"
        "Transform:\n"
        "  m_ObjectHideFlags: 0\n"
        f"  m_GameObject: {{fileID: {game_object_id}}}\n"
        "  m_LocalRotation: {x: 0, y: 0, z: 0, w: 1}\n"
        "  m_LocalPosition: {x: 0, y: 0, z: 0}\n"
        "  m_Children: []\n"
        f"  m_Father: {{fileID: {parent_id}}}\n"
        "  m_RootOrder: 0\n"
    )


def mono_behaviour(file_id, game_object_id, guid, **fields):
    body = "".join(f"  {name}: {value}\n" for name, value in fields.items())
    return (
        f"--- !u!114 &{file_id}\n"
        "MonoBehaviour:\n"
        "  m_ObjectHideFlags: 0\n"
        f"  m_GameObject: {{fileID: {game_object_id}}}\n"
        "  m_Enabled: 1\n"
        "  m_EditorHideFlags: 0\n"
        f"  m_Script: {{fileID: 11500000, guid: {guid}, type: 3}}\n"
        "  m_Name: \n"
        "  m_EditorClassIdentifier: \n"
        f"{body}"
    )


def scene_text(*documents):
    return SCENE_HEADER + "".join(documents)


class UnityProject:
    def __init__(self, root: Path):
        self.root = root
        self.assets = root / "Assets"
        self.assets.mkdir(parents=True, exist_ok=True)

    def add_script(self, rel_path, source, guid=None):
        path = self.assets / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        if guid is not None:
            meta = path.with_name(path.name + ".meta")
            meta.write_text(META_TEMPLATE.format(guid=guid), encoding="utf-8")
        return path

    def add_scene(self, rel_path, *documents, raw=None):
        path = self.assets / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw if raw is not None else scene_text(*documents), encoding="utf-8")
        return path


@pytest.fixture
def unity_project(tmp_path):
    return UnityProject(tmp_path / "MyGame")
