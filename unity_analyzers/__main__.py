"""
Command line entry point.

    python -m unity_analyzers /path/to/UnityProject /path/to/Output
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .project_analyzer import ProjectAnalyzer
from .report_writer import ReportWriter

logger = logging.getLogger("unity_analyzers")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unity_analyzers",
        description="Find unused and inconsistent MonoBehaviour scripts in a Unity project."
    )
    parser.add_argument("project_path", help="Unity project folder (containing Assets/)")
    parser.add_argument("output_path", help="Folder the reports are written to")
    parser.add_argument("-j", "--jobs", type=int, default=None,
                        help="Worker threads (default: CPU count)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    project_path = Path(args.project_path)
    if not project_path.is_dir():
        logger.error("The Unity project path '%s' is not valid", project_path)
        return 2

    logger.info("Starting project analysis: %s", project_path)
    report = ProjectAnalyzer(project_path, max_workers=args.jobs).analyze()
    ReportWriter(args.output_path).write_all(report)

    logger.info(
        "Analysis completed: %d scripts, %d unused, %d inconsistent. Results are in %s",
        len(report.scripts),
        len(report.unused_guids()),
        len(report.inconsistent_scripts()),
        args.output_path
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
