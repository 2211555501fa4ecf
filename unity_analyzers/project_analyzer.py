"""
Unity Project Analyzer
Scans entire Unity projects for unused and inconsistent scripts.
Works completely offline - no Unity required.
"""

import os
import re
import logging
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Mapping, Optional

from .aggregator import GlobalReport
from .csharp_parser import CSharpParser, ScriptSchema
from .cross_reference import SceneResult, cross_reference, missing_fields
from .hierarchy import build_tree
from .meta_parser import MetaParser
from .unity_scene_parser import UnitySceneParser

logger = logging.getLogger(__name__)

ASSETS_DIR = "Assets"
SCRIPT_EXTENSION = ".cs"
SCENE_EXTENSION = ".unity"


class ProjectAnalyzer:
    """Analyze entire Unity projects."""

    def __init__(self, project_path: str | Path, max_workers: Optional[int] = None):
        self.project_path = Path(project_path)
        self.assets_path = self.project_path / ASSETS_DIR
        self.max_workers = max_workers or os.cpu_count() or 1

        self.csharp_parser = CSharpParser()
        self.meta_parser = MetaParser()
        self.scene_parser = UnitySceneParser()

        # Cache
        self._report: Optional[GlobalReport] = None

    def get_project_info(self) -> dict:
        """Get basic project information from ProjectSettings/ProjectVersion.txt."""
        info = {
            "path": str(self.project_path),
            "name": self.project_path.name,
            "has_assets": self.assets_path.is_dir(),
            "editor_version": None
        }

        version_file = self.project_path / "ProjectSettings" / "ProjectVersion.txt"
        if version_file.is_file():
            match = re.search(
                r'^m_EditorVersion:\s*(\S+)',
                version_file.read_text(encoding='utf-8'),
                re.MULTILINE
            )
            if match:
                info["editor_version"] = match.group(1)

        return info

    def relative_path(self, path: str | Path) -> str:
        return Path(os.path.relpath(path, self.project_path)).as_posix()

    def find_scripts(self) -> list[Path]:
        return self._find_files(SCRIPT_EXTENSION)

    def find_scenes(self) -> list[Path]:
        return self._find_files(SCENE_EXTENSION)

    def _find_files(self, extension: str) -> list[Path]:
        if not self.assets_path.is_dir():
            return []
        return sorted(p for p in self.assets_path.rglob(f"*{extension}") if p.is_file())

    # ============ Phase 1: scripts ============

    def load_script(
        self,
        cs_path: str | Path,
        on_error: Optional[Callable[[str, Exception], None]] = None
    ) -> Optional[ScriptSchema]:
        """
        Build the schema of one script, or None if it declares no Unity class.
        Unreadable scripts and .meta files are passed to on_error and skipped.
        """
        cs_path = Path(cs_path)

        guid = self.meta_parser.guid_for_asset(cs_path, on_error)
        if not guid:
            logger.debug("No GUID for %s, skipping", cs_path)
            return None

        class_names, fields = self.csharp_parser.collect_fields(cs_path, on_error)
        if not class_names:
            return None

        return ScriptSchema(
            guid=guid,
            path=str(cs_path),
            relative_path=self.relative_path(cs_path),
            class_names=tuple(class_names),
            serialized_fields=fields
        )

    def collect_scripts(self, report: GlobalReport, script_paths: list[Path]) -> None:
        def record_error(path: str, error: Exception) -> None:
            report.add_error(self.relative_path(path), error)

        def process(cs_path: Path) -> None:
            schema = self.load_script(cs_path, record_error)
            if schema is not None:
                report.register_script(schema)

        self._run_parallel(script_paths, process, report)

    # ============ Phase 2: scenes ============

    def process_scene(self, scene_path: str | Path, scripts: Mapping[str, ScriptSchema]) -> SceneResult:
        """Parse one scene and cross-reference it against the script registry."""
        scene = self.scene_parser.parse_file(scene_path)
        result = cross_reference(scene, scripts)
        result.scene_path = self.relative_path(scene_path)
        return result

    def process_scenes(self, report: GlobalReport, scene_paths: list[Path]) -> None:
        scripts = report.scripts

        def process(scene_path: Path) -> None:
            logger.info("Processing scene: %s", scene_path.stem)
            report.merge_scene(self.process_scene(scene_path, scripts))

        self._run_parallel(scene_paths, process, report)

    def _run_parallel(
        self,
        paths: list[Path],
        func: Callable[[Path], Any],
        report: GlobalReport
    ) -> None:
        """Run func over every path; a failing file is logged and skipped."""
        if not paths:
            return

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as executor:
            future_to_path = {executor.submit(func, path): path for path in paths}

            for future in as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error("Error processing %s: %s", path, e)
                    report.add_error(self.relative_path(path), e)

    # ============ Full analysis ============

    def analyze(
        self,
        script_paths: Optional[list[str | Path]] = None,
        scene_paths: Optional[list[str | Path]] = None
    ) -> GlobalReport:
        """Run both phases and return the merged report."""
        scripts = [Path(p) for p in script_paths] if script_paths is not None else self.find_scripts()
        scenes = [Path(p) for p in scene_paths] if scene_paths is not None else self.find_scenes()

        report = GlobalReport()

        logger.info("Collecting GUIDs and serialized fields from %d scripts", len(scripts))
        self.collect_scripts(report, scripts)
        logger.info("Found %d unique scripts", len(report.scripts))

        # Scenes only start once every script is registered
        logger.info("Processing %d scenes", len(scenes))
        self.process_scenes(report, scenes)

        if report.errors:
            logger.warning("%d files could not be processed", len(report.errors))

        self._report = report
        return report

    def get_report(self, refresh: bool = False) -> GlobalReport:
        if refresh or self._report is None:
            return self.analyze()
        return self._report

    def find_unused_scripts(self) -> list[str]:
        return self.get_report().unused_scripts()

    def find_inconsistent_scripts(self) -> list[dict]:
        return [
            {"guid": guid, "path": path}
            for guid, path in self.get_report().inconsistent_scripts().items()
        ]

    def analyze_script(self, script_path: str) -> dict:
        """Get detailed analysis of a single script."""
        full_path = self.project_path / script_path
        if not full_path.exists():
            return {"error": f"Script not found: {script_path}"}

        cs_file = self.csharp_parser.parse_file(full_path)
        result = self.csharp_parser.to_dict(cs_file)
        result["path"] = self.relative_path(full_path)
        result["guid"] = self.meta_parser.guid_for_asset(full_path)
        return result

    def analyze_scene(self, scene_path: str) -> dict:
        """Get detailed analysis of a single scene."""
        full_path = self.project_path / scene_path
        if not full_path.exists():
            return {"error": f"Scene not found: {scene_path}"}

        scripts = self.get_report().scripts
        scene = self.scene_parser.parse_file(full_path)
        result = cross_reference(scene, scripts)

        data = self.scene_parser.to_dict(scene)
        data["path"] = self.relative_path(full_path)
        data["root_objects"] = [
            {"name": o.name, "file_id": o.file_id, "transform": o.transform_file_id}
            for o in result.root_objects
        ]
        data["node_tree"] = build_tree(scene.objects, scene.transforms)
        data["inconsistencies"] = [
            {
                "file_id": s.file_id,
                "guid": s.guid,
                "script": scripts[s.guid].relative_path,
                "missing_fields": sorted(missing_fields(s.serialized_fields, scripts[s.guid]))
            }
            for s in scene.scripts
            if s.guid in scripts and missing_fields(s.serialized_fields, scripts[s.guid])
        ]
        return data
