"""
Report Writer
Writes the analysis summary, the unused scripts CSV and one hierarchy
dump per scene into an output directory.
"""

import csv
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path

from .aggregator import GlobalReport
from .cross_reference import SceneResult

logger = logging.getLogger(__name__)

REPORT_FILE = "AnalysisReport.txt"
UNUSED_CSV_FILE = "UnusedScripts.csv"
DUMP_SUFFIX = ".unity.dump"

RULE = "=" * 50
THIN_RULE = "-" * 50


class ReportWriter:
    """Render a GlobalReport to files."""

    def __init__(self, output_path: str | Path):
        self.output_path = Path(output_path)

    def write_all(self, report: GlobalReport) -> list[Path]:
        self.output_path.mkdir(parents=True, exist_ok=True)
        stems = Counter(Path(r.scene_path).stem for r in report.scene_results)
        written = [
            self.write_scene_dump(result, report, unique=stems[Path(result.scene_path).stem] == 1)
            for result in report.scene_results
        ]
        written.append(self.write_summary(report))
        written.append(self.write_unused_csv(report))
        return written

    def write_summary(self, report: GlobalReport) -> Path:
        unused = report.unused_scripts()
        inconsistent = sorted(
            path for guid, path in report.inconsistent_scripts().items()
            if guid in report.scripts
        )

        lines = [
            RULE,
            "          UNITY PROJECT ANALYSIS REPORT           ",
            RULE,
            f"Analysis Date: {datetime.now():%Y-%m-%d %H:%M:%S}",
            f"Unique Scripts Found: {len(report.scripts)}",
            f"Scripts Used in Scenes: {len(report.used_guids)}",
            THIN_RULE,
            "",
            f"[ 1. UNUSED SCRIPTS ({len(unused)}) ]",
            "(Scripts found in the project, but NOT ATTACHED to any GameObject in scenes)",
        ]
        lines += [f"- {path}" for path in unused] or ["No unused C# scripts found."]
        lines += [
            THIN_RULE,
            "",
            f"[ 2. SCRIPTS WITH INCONSISTENCIES ({len(inconsistent)}) ]",
            "(Scripts ATTACHED to GameObjects that have serialized fields found in .unity "
            "files, but which are MISSING from the actual C# code. These may cause data loss.)",
        ]
        lines += [f"- {path}" for path in inconsistent] or [
            "No scripts found with serialization inconsistencies (missing fields)."
        ]
        if report.errors:
            lines += [THIN_RULE, "", f"[ FILES THAT COULD NOT BE PROCESSED ({len(report.errors)}) ]"]
            lines += [f"- {e['file']}: {e['error']}" for e in report.errors]
        lines.append(RULE)

        path = self.output_path / REPORT_FILE
        path.write_text("\n".join(lines) + "\n", encoding='utf-8')
        logger.info("Summary report saved to: %s", path.name)
        return path

    def write_unused_csv(self, report: GlobalReport) -> Path:
        unused = report.unused_scripts()
        path = self.output_path / UNUSED_CSV_FILE
        with path.open("w", newline="", encoding='utf-8') as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(["script_name"])
            writer.writerows([p] for p in unused)
        logger.info("Unused scripts list (CSV) saved to: %s (%d unused scripts)", path.name, len(unused))
        return path

    def write_scene_dump(self, result: SceneResult, report: GlobalReport, unique: bool = True) -> Path:
        """
        Dumps are named after the scene file. When another scene shares that
        name, the folder path is folded in: Assets/Levels/Main.unity ->
        Levels_Main.unity.dump.
        """
        scene_name = Path(result.scene_path).stem
        lines = [f"SCENE DUMP: {scene_name}.unity"]

        lines += [
            f"- {o.name} (FileID: {o.file_id} | Transform: {o.transform_file_id})"
            for o in result.root_objects
        ] or ["No root objects found in the scene."]

        lines += ["", "[ SCRIPT GUIDs USED IN THIS SCENE ]"]
        lines += [
            f"- {guid} ({report.script_path(guid)})" for guid in sorted(result.used_guids)
        ] or ["No scripts found used in the scene."]

        lines += ["", "[ SCRIPT GUIDs WITH INCONSISTENCIES (MISSING FIELDS) ]"]
        lines += [
            f"- {guid} ({report.script_path(guid)})"
            for guid in dict.fromkeys(result.inconsistent_guids)
        ] or ["No scripts found with inconsistencies."]

        path = self.output_path / f"{dump_name(result.scene_path, unique)}{DUMP_SUFFIX}"
        path.write_text("\n".join(lines) + "\n", encoding='utf-8')
        return path


def dump_name(scene_path: str, unique: bool = True) -> str:
    path = Path(scene_path)
    if unique:
        return path.stem
    parts = list(path.with_suffix("").parts)
    if len(parts) > 1 and parts[0] == "Assets":
        parts = parts[1:]
    return "_".join(parts)
