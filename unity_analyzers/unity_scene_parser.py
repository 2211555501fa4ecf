"""
Unity Scene Parser
Parses Unity .unity scene files (multi-document YAML) to extract
GameObjects, Transforms and attached MonoBehaviour scripts.
Works completely offline - no Unity required.
"""

import re
import logging
from pathlib import Path
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# fileID of "no object"; a Transform whose parent is this is a scene root
NULL_FILE_ID = "0"


@dataclass
class SceneObject:
    file_id: str
    name: str
    transform_file_id: str


@dataclass
class SceneTransform:
    file_id: str
    parent_file_id: str = NULL_FILE_ID


@dataclass
class AttachedScript:
    file_id: str
    guid: str
    serialized_fields: frozenset[str] = frozenset()


@dataclass
class UnityScene:
    path: str
    objects: dict[str, SceneObject] = field(default_factory=dict)
    transforms: dict[str, SceneTransform] = field(default_factory=dict)
    scripts: list[AttachedScript] = field(default_factory=list)
    used_guids: set[str] = field(default_factory=set)
    type_counts: Counter = field(default_factory=Counter)
    skipped_documents: int = 0


class UnitySceneParser:
    """Parse Unity .unity scene files."""

    # Unity class IDs
    GAME_OBJECT = 1
    TRANSFORM = 4
    MONO_BEHAVIOUR = 114

    # Fields every MonoBehaviour carries; not part of a script's own data
    RESERVED_FIELD_PREFIX = "m_"
    SCRIPT_FIELD = "m_Script"

    # Scenes serialize the parent as m_Father; some exporters write m_Parent
    PARENT_FIELDS = ("m_Father", "m_Parent")

    # --- !u!<classID> &<fileID> [stripped]
    DOCUMENT_HEADER_PATTERN = re.compile(r'^---(?:\s+(.*))?$')

    def parse_file(self, path: str | Path) -> UnityScene:
        """Parse a .unity file and return structured data."""
        path = Path(path)
        content = path.read_text(encoding='utf-8-sig')
        return self.parse_content(content, str(path))

    def parse_content(self, content: str, path: str = "") -> UnityScene:
        """
        Parse scene content string.
        Raises yaml.YAMLError if any document body is not valid YAML.
        """
        scene = UnityScene(path=path)

        for header, body in self._split_documents(content):
            type_id, file_id = self._parse_header(header)
            if file_id is None:
                if body.strip():
                    logger.debug("Skipping document without a local id in %s: %r", path, header)
                    scene.skipped_documents += 1
                continue

            data = yaml.load(body, Loader=yaml.BaseLoader)
            node = self._record_node(data)
            if node is None:
                logger.debug("Skipping document &%s in %s: not a record mapping", file_id, path)
                scene.skipped_documents += 1
                continue

            if type_id is not None:
                scene.type_counts[type_id] += 1

            if type_id == self.GAME_OBJECT:
                self._extract_game_object(file_id, node, scene)
            elif type_id == self.TRANSFORM:
                self._extract_transform(file_id, node, scene)
            elif type_id == self.MONO_BEHAVIOUR:
                self._extract_mono_behaviour(file_id, node, scene)

        return scene

    def _split_documents(self, content: str) -> list[tuple[Optional[str], str]]:
        """Drop %YAML/%TAG directives and cut the body at '---' headers."""
        documents = []
        header = None
        lines = []

        for line in content.splitlines():
            if line.startswith("%"):
                continue
            match = self.DOCUMENT_HEADER_PATTERN.match(line)
            if match:
                if header is not None or any(text.strip() for text in lines):
                    documents.append((header, "\n".join(lines)))
                header = match.group(1) or ""
                lines = []
            else:
                lines.append(line)

        if header is not None or any(text.strip() for text in lines):
            documents.append((header, "\n".join(lines)))

        return documents

    def _parse_header(self, header: Optional[str]) -> tuple[Optional[int], Optional[str]]:
        """Return (class id, local file id) from '!u!1 &12345'."""
        if not header:
            return None, None

        type_id = None
        file_id = None
        for token in header.split():
            if token.startswith("!u!"):
                try:
                    type_id = int(token[3:])
                except ValueError:
                    type_id = None
            elif token.startswith("&"):
                candidate = token[1:]
                try:
                    int(candidate)
                except ValueError:
                    continue
                file_id = candidate

        return type_id, file_id

    def _record_node(self, data: Any) -> Optional[dict]:
        """A record document is a single 'TypeName: {...}' mapping."""
        if not isinstance(data, dict) or not data:
            return None
        node = next(iter(data.values()))
        return node if isinstance(node, dict) else None

    def _extract_game_object(self, file_id: str, node: dict, scene: UnityScene) -> None:
        name = node.get("m_Name")
        if not isinstance(name, str):
            name = f"Unnamed (FileID: {file_id})"

        components = node.get("m_Component")
        if not isinstance(components, list):
            return

        # The Transform is listed first with a non-zero fileID
        for entry in components:
            if not isinstance(entry, dict) or not entry:
                continue
            reference = next(iter(entry.values()))
            if not isinstance(reference, dict):
                continue
            transform_id = reference.get("fileID")
            if isinstance(transform_id, str) and transform_id != NULL_FILE_ID:
                scene.objects[file_id] = SceneObject(
                    file_id=file_id,
                    name=name,
                    transform_file_id=transform_id
                )
                return

    def _extract_transform(self, file_id: str, node: dict, scene: UnityScene) -> None:
        parent = next((node[key] for key in self.PARENT_FIELDS if key in node), None)
        if not isinstance(parent, dict):
            return

        parent_id = parent.get("fileID")
        if not isinstance(parent_id, str) or not parent_id:
            parent_id = NULL_FILE_ID

        scene.transforms[file_id] = SceneTransform(file_id=file_id, parent_file_id=parent_id)

    def _extract_mono_behaviour(self, file_id: str, node: dict, scene: UnityScene) -> None:
        script = node.get(self.SCRIPT_FIELD)
        if not isinstance(script, dict):
            return

        guid = script.get("guid")
        if not isinstance(guid, str) or not guid:
            return

        scene.used_guids.add(guid)

        fields = frozenset(
            key for key in node
            if isinstance(key, str)
            and not key.startswith(self.RESERVED_FIELD_PREFIX)
            and key != self.SCRIPT_FIELD
        )
        scene.scripts.append(AttachedScript(file_id=file_id, guid=guid, serialized_fields=fields))

    def to_dict(self, scene: UnityScene) -> dict:
        """Convert UnityScene to dictionary for JSON serialization."""
        return {
            "path": scene.path,
            "game_objects": [
                {"file_id": o.file_id, "name": o.name, "transform": o.transform_file_id}
                for o in scene.objects.values()
            ],
            "transforms": [
                {"file_id": t.file_id, "parent": t.parent_file_id}
                for t in scene.transforms.values()
            ],
            "scripts": [
                {"file_id": s.file_id, "guid": s.guid, "fields": sorted(s.serialized_fields)}
                for s in scene.scripts
            ],
            "used_guids": sorted(scene.used_guids),
            "record_counts": {str(k): v for k, v in sorted(scene.type_counts.items())},
            "skipped_documents": scene.skipped_documents
        }
