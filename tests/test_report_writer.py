"""
Tests for the report files.
"""

from unity_analyzers.aggregator import GlobalReport
from unity_analyzers.csharp_parser import ScriptSchema
from unity_analyzers.cross_reference import SceneResult
from unity_analyzers.report_writer import ReportWriter
from unity_analyzers.unity_scene_parser import SceneObject


def _report():
    report = GlobalReport()
    for guid, rel_path in (("G1", "Assets/Mover.cs"), ("G2", "Assets/Idle.cs")):
        report.register_script(ScriptSchema(guid=guid, path=rel_path, relative_path=rel_path))
    report.merge_scene(SceneResult(
        scene_path="Assets/Scenes/Main.unity",
        root_objects=[SceneObject("100", "Player", "400")],
        used_guids={"G1", "X9"},
        inconsistent_guids=["G1", "G1"]
    ))
    return report


def test_write_all(tmp_path):
    written = ReportWriter(tmp_path / "out").write_all(_report())

    assert sorted(p.name for p in written) == [
        "AnalysisReport.txt", "Main.unity.dump", "UnusedScripts.csv"
    ]


def test_summary_lists_unused_and_inconsistent(tmp_path):
    writer = ReportWriter(tmp_path)

    text = writer.write_summary(_report()).read_text(encoding="utf-8")

    assert "Unique Scripts Found: 2" in text
    assert "Scripts Used in Scenes: 2" in text
    assert "[ 1. UNUSED SCRIPTS (1) ]\n" in text
    assert "- Assets/Idle.cs\n" in text
    assert "[ 2. SCRIPTS WITH INCONSISTENCIES (1) ]\n" in text
    assert "- Assets/Mover.cs\n" in text


def test_summary_empty_sections(tmp_path):
    text = ReportWriter(tmp_path).write_summary(GlobalReport()).read_text(encoding="utf-8")

    assert "No unused C# scripts found." in text
    assert "No scripts found with serialization inconsistencies (missing fields)." in text


def test_unused_csv(tmp_path):
    path = ReportWriter(tmp_path).write_unused_csv(_report())

    assert path.read_text(encoding="utf-8") == "script_name\nAssets/Idle.cs\n"


def test_scene_dump(tmp_path):
    report = _report()

    path = ReportWriter(tmp_path).write_scene_dump(report.scene_results[0], report)

    assert path.name == "Main.unity.dump"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "SCENE DUMP: Main.unity"
    assert "- Player (FileID: 100 | Transform: 400)" in lines
    assert "- G1 (Assets/Mover.cs)" in lines
    assert "- X9 (UNKNOWN)" in lines
    # Distinct in the dump even though counted twice
    assert lines.count("- G1 (Assets/Mover.cs)") == 2
    assert lines[-1] == "- G1 (Assets/Mover.cs)"


def test_scenes_sharing_a_name_get_separate_dumps(tmp_path):
    report = _report()
    report.merge_scene(SceneResult(scene_path="Assets/Levels/Main.unity"))
    report.merge_scene(SceneResult(scene_path="Assets/Scenes/Menu.unity"))

    written = ReportWriter(tmp_path).write_all(report)

    assert sorted(p.name for p in written if p.name.endswith(".dump")) == [
        "Levels_Main.unity.dump", "Menu.unity.dump", "Scenes_Main.unity.dump"
    ]
