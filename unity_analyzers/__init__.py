"""
Unity Static Analyzers
Work without Unity running - pure file parsing.
"""

from .csharp_parser import CSharpParser, CSFile, ScriptSchema
from .meta_parser import MetaParser
from .unity_scene_parser import UnitySceneParser, UnityScene
from .hierarchy import find_root_objects
from .cross_reference import SceneResult, cross_reference
from .aggregator import GlobalReport
from .project_analyzer import ProjectAnalyzer
from .report_writer import ReportWriter

__all__ = [
    'CSharpParser',
    'CSFile',
    'ScriptSchema',
    'MetaParser',
    'UnitySceneParser',
    'UnityScene',
    'find_root_objects',
    'SceneResult',
    'cross_reference',
    'GlobalReport',
    'ProjectAnalyzer',
    'ReportWriter'
]
