"""
Unity Analyzer MCP Server
Offline Unity project analysis: unused scripts, serialization mismatches,
scene hierarchies.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Any, Optional
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from unity_analyzers import ProjectAnalyzer, ReportWriter

# ============ Configuration ============

DEFAULT_MAX_WORKERS = int(os.environ.get("UNITY_ANALYZER_WORKERS", "0")) or None
LOG_LEVEL = os.environ.get("UNITY_ANALYZER_LOG_LEVEL", "INFO")

# stdout carries the protocol
logging.basicConfig(stream=sys.stderr, level=LOG_LEVEL)
logger = logging.getLogger("unity-analyzer-mcp")

server = Server("unity-analyzer-mcp")

# Active project path (set via tool)
_active_project: Optional[str] = None
_analyzer: Optional[ProjectAnalyzer] = None


def get_analyzer() -> Optional[ProjectAnalyzer]:
    """Get the project analyzer for offline analysis."""
    global _analyzer, _active_project
    if _active_project and (not _analyzer or _analyzer.project_path != Path(_active_project)):
        _analyzer = ProjectAnalyzer(_active_project, max_workers=DEFAULT_MAX_WORKERS)
    return _analyzer


# ============ Tool Definitions ============

@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="unity_set_project",
            description="Set the active Unity project path for offline analysis. Required before using analysis tools.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_path": {
                        "type": "string",
                        "description": "Absolute path to the Unity project folder (containing Assets/)"
                    }
                },
                "required": ["project_path"]
            }
        ),
        Tool(
            name="analyze_project",
            description="Run the full analysis: scripts, scenes, unused and inconsistent scripts (offline)",
            inputSchema={
                "type": "object",
                "properties": {
                    "refresh": {"type": "boolean", "description": "Re-run even if a cached result exists"}
                }
            }
        ),
        Tool(
            name="analyze_unused_scripts",
            description="List MonoBehaviour/ScriptableObject scripts not attached in any scene (offline)",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="analyze_inconsistent_scripts",
            description="List attached scripts whose scene data has fields the code no longer declares (offline)",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="analyze_script",
            description="Get classes, serialized fields and GUID of one C# script (offline)",
            inputSchema={
                "type": "object",
                "properties": {
                    "script_path": {"type": "string", "description": "Path relative to the project (e.g., 'Assets/Scripts/Player.cs')"}
                },
                "required": ["script_path"]
            }
        ),
        Tool(
            name="analyze_scene",
            description="Get root objects, hierarchy and attached scripts of one scene (offline)",
            inputSchema={
                "type": "object",
                "properties": {
                    "scene_path": {"type": "string", "description": "Path relative to the project (e.g., 'Assets/Scenes/Main.unity')"}
                },
                "required": ["scene_path"]
            }
        ),
        Tool(
            name="analyze_write_report",
            description="Write AnalysisReport.txt, UnusedScripts.csv and per-scene dumps to a folder (offline)",
            inputSchema={
                "type": "object",
                "properties": {
                    "output_path": {"type": "string", "description": "Folder to write the reports to"}
                },
                "required": ["output_path"]
            }
        ),
    ]


# ============ Tool Handler ============

@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    global _active_project

    result = {}

    # === Project Setup ===
    if name == "unity_set_project":
        path = arguments["project_path"]
        if os.path.isdir(os.path.join(path, "Assets")):
            _active_project = path
            result = {"success": True, "project": get_analyzer().get_project_info()}
        else:
            result = {"error": f"No Assets folder found in {path}"}

    # === Offline Analysis Tools ===
    elif name.startswith("analyze_"):
        analyzer = get_analyzer()
        if not analyzer:
            result = {"error": "No project set. Use unity_set_project first."}
        else:
            try:
                if name == "analyze_project":
                    report = await asyncio.to_thread(
                        analyzer.get_report, bool(arguments.get("refresh"))
                    )
                    result = report.to_dict()
                elif name == "analyze_unused_scripts":
                    result = {"unused_scripts": await asyncio.to_thread(analyzer.find_unused_scripts)}
                elif name == "analyze_inconsistent_scripts":
                    result = {"inconsistent_scripts": await asyncio.to_thread(analyzer.find_inconsistent_scripts)}
                elif name == "analyze_script":
                    result = await asyncio.to_thread(analyzer.analyze_script, arguments["script_path"])
                elif name == "analyze_scene":
                    result = await asyncio.to_thread(analyzer.analyze_scene, arguments["scene_path"])
                elif name == "analyze_write_report":
                    report = await asyncio.to_thread(analyzer.get_report)
                    written = await asyncio.to_thread(ReportWriter(arguments["output_path"]).write_all, report)
                    result = {"files": [str(p) for p in written]}
                else:
                    result = {"error": f"Unknown tool: {name}"}
            except Exception as e:
                logger.exception("Tool %s failed", name)
                result = {"error": str(e)}

    else:
        result = {"error": f"Unknown tool: {name}"}

    return [TextContent(type="text", text=json.dumps(result, indent=2))]


# ============ Main ============

async def main():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
