"""
Tests for the MCP tool handlers.
"""

import asyncio
import json
from pathlib import Path

import pytest

import server

from conftest import game_object, mono_behaviour, transform


def _call(name, arguments=None):
    contents = asyncio.run(server.call_tool(name, arguments or {}))
    return json.loads(contents[0].text)


@pytest.fixture(autouse=True)
def reset_server_state(monkeypatch):
    monkeypatch.setattr(server, "_active_project", None)
    monkeypatch.setattr(server, "_analyzer", None)


def test_tool_list():
    tools = asyncio.run(server.list_tools())

    names = {t.name for t in tools}
    assert "unity_set_project" in names
    assert "analyze_unused_scripts" in names


def test_analysis_requires_project():
    assert "error" in _call("analyze_project")


def test_set_project_rejects_folder_without_assets(tmp_path):
    assert "error" in _call("unity_set_project", {"project_path": str(tmp_path)})


def test_unused_and_inconsistent_tools(unity_project):
    unity_project.add_script("Used.cs", "public class Used : MonoBehaviour { }\n", guid="U1")
    unity_project.add_script("Unused.cs", "public class Unused : MonoBehaviour { }\n", guid="U2")
    unity_project.add_scene(
        "Main.unity",
        game_object(1, "A", 2, 3),
        transform(2, 1),
        mono_behaviour(3, 1, "U1", stale=1),
    )

    assert _call("unity_set_project", {"project_path": str(unity_project.root)})["success"] is True
    assert _call("analyze_unused_scripts") == {"unused_scripts": ["Assets/Unused.cs"]}
    assert _call("analyze_inconsistent_scripts") == {
        "inconsistent_scripts": [{"guid": "U1", "path": "Assets/Used.cs"}]
    }


def test_unknown_tool():
    assert "error" in _call("does_not_exist")


def test_script_and_report_tools(unity_project, tmp_path):
    unity_project.add_script("Mover.cs", "public class Mover : MonoBehaviour { public int speed; }\n", guid="M1")
    unity_project.add_scene("Main.unity", game_object(1, "A", 2, 3), transform(2, 1), mono_behaviour(3, 1, "M1"))
    _call("unity_set_project", {"project_path": str(unity_project.root)})

    script = _call("analyze_script", {"script_path": "Assets/Mover.cs"})
    written = _call("analyze_write_report", {"output_path": str(tmp_path / "out")})

    assert script["guid"] == "M1"
    assert script["serialized_fields"] == {"speed": "int"}
    assert sorted(Path(p).name for p in written["files"]) == [
        "AnalysisReport.txt", "Main.unity.dump", "UnusedScripts.csv"
    ]
