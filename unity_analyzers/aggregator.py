"""
Global analysis report shared by the scene workers.
"""

import logging
import threading
from collections import deque
from typing import Optional

from .csharp_parser import ScriptSchema
from .cross_reference import SceneResult

logger = logging.getLogger(__name__)

UNKNOWN_SCRIPT = "UNKNOWN"


class GlobalReport:
    """
    Script registry plus usage state merged from every scene.

    Scripts are registered once, before any scene is merged, and are
    read-only afterwards.
    """

    def __init__(self):
        self.scripts: dict[str, ScriptSchema] = {}
        self.used_guids: set[str] = set()
        # deque.append is atomic, no lock needed
        self.inconsistent_guids: deque[str] = deque()
        self.scene_results: list[SceneResult] = []
        self.errors: list[dict] = []

        self._scripts_lock = threading.Lock()
        self._used_lock = threading.Lock()
        self._errors_lock = threading.Lock()

    def register_script(self, schema: ScriptSchema) -> bool:
        """Insert if absent. A GUID seen twice keeps the first script."""
        with self._scripts_lock:
            existing = self.scripts.get(schema.guid)
            if existing is None:
                self.scripts[schema.guid] = schema
                return True

        logger.warning(
            "Duplicate GUID %s in %s, keeping %s",
            schema.guid, schema.relative_path, existing.relative_path
        )
        return False

    def merge_scene(self, result: SceneResult) -> None:
        with self._used_lock:
            self.used_guids.update(result.used_guids)
            self.scene_results.append(result)

        self.inconsistent_guids.extend(result.inconsistent_guids)

    def add_error(self, file: str, error: Exception) -> None:
        with self._errors_lock:
            self.errors.append({
                "file": file,
                "error": str(error),
                "type": type(error).__name__
            })

    def script_path(self, guid: str) -> str:
        schema = self.scripts.get(guid)
        return schema.relative_path if schema else UNKNOWN_SCRIPT

    def unused_guids(self) -> set[str]:
        return set(self.scripts) - self.used_guids

    def unused_scripts(self) -> list[str]:
        return sorted(self.scripts[g].relative_path for g in self.unused_guids())

    def inconsistent_scripts(self) -> dict[str, str]:
        """Distinct inconsistent GUIDs -> script path (or UNKNOWN)."""
        return {guid: self.script_path(guid) for guid in sorted(set(self.inconsistent_guids))}

    def find_scene(self, scene_path: str) -> Optional[SceneResult]:
        for result in self.scene_results:
            if result.scene_path == scene_path:
                return result
        return None

    def to_dict(self) -> dict:
        return {
            "script_count": len(self.scripts),
            "scene_count": len(self.scene_results),
            "used_scripts": {guid: self.script_path(guid) for guid in sorted(self.used_guids)},
            "unused_scripts": self.unused_scripts(),
            "inconsistent_scripts": self.inconsistent_scripts(),
            "errors": list(self.errors)
        }
