#!/usr/bin/env python3
"""
Course Prerequisite Graph Builder

Loads a list of courses with their prerequisites, builds the course catalog
and dependency graph, answers prerequisite queries, and optionally exports
the result:
- JSON catalog (reloadable), graph JSON, Graphviz DOT and TSV

Usage:
    python scripts/build_course_graph.py --jsinput courses.json --output out/courses
    python scripts/build_course_graph.py -j courses.json --course "Operating Systems"
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from coursegraph.catalog import CourseCatalog, LookupStatus
from coursegraph.errors import CatalogIOError, CourseGraphError, UsageError
from coursegraph.exporter import CatalogExporter
from coursegraph.loader import load_english_catalog, load_json_catalog
from coursegraph.prerequisites import prerequisite_to_english
from coursegraph.utils import EXPORT_FORMATS, CourseGraphLogger, config_to_dict, load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simple program to build and export a course prerequisite graph"
    )
    parser.add_argument("--input", "-i", type=Path,
                        help="utf-8 formatted list of classes in English")
    parser.add_argument("--jsinput", "-j", type=Path,
                        help="JSON formatted list of classes")
    parser.add_argument("--output", "-o", type=Path,
                        help="Output base path (extensions will be added)")
    parser.add_argument("--formats", nargs="+", choices=EXPORT_FORMATS,
                        help="Specific formats to export")
    parser.add_argument("--course", action="append", default=[], metavar="NAME",
                        help="Print the prerequisite of the named course (repeatable)")
    parser.add_argument("--config", "-c", default="config/coursegraph_config.json",
                        help="Configuration file path")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")
    return parser


def load_catalog(args: argparse.Namespace, logger: CourseGraphLogger) -> CourseCatalog:
    """Pick the loader from the arguments; JSON input wins over English input."""
    if args.jsinput is not None:
        if args.input is not None:
            logger.warning(f"Both inputs given, ignoring English input {args.input}")
        return load_json_catalog(args.jsinput)
    if args.input is not None:
        return load_english_catalog(args.input)
    raise UsageError("Must provide either an english (--input) or json (--jsinput) class specification.")


def describe_course(catalog: CourseCatalog, name: str) -> str:
    lookup = catalog.lookup_prerequisite(name)
    if lookup.status is LookupStatus.NOT_FOUND:
        return f"{name}: not in catalog"
    if lookup.status is LookupStatus.NO_PREREQUISITE:
        return f"{name}: no prerequisite"
    return f"{name}: {prerequisite_to_english(lookup.prerequisite)}"


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.formats:
        config.export_formats = args.formats

    logger = CourseGraphLogger("course_graph", "DEBUG" if args.verbose else config.log_level)
    logger.debug(f"Configuration: {config_to_dict(config)}")

    logger.start_timer("catalog_loading")
    try:
        catalog = load_catalog(args, logger)
    except UsageError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2
    except CatalogIOError as e:
        logger.error(f"Could not read {e.path}: {e.reason or e}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    except CourseGraphError as e:
        logger.error(f"Failed to load catalog: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        logger.end_timer("catalog_loading")

    logger.info(f"Catalog contains {len(catalog)} courses")
    unknown = catalog.unknown_references()
    if unknown:
        logger.warning(f"Prerequisites reference courses outside the catalog: {', '.join(sorted(unknown))}")

    for name in args.course:
        print(describe_course(catalog, name))

    if args.output is not None:
        exporter = CatalogExporter(config, logger)
        results = exporter.export_all_formats(catalog, str(args.output))

        successful = [fmt for fmt, success in results.items() if success]
        failed = [fmt for fmt, success in results.items() if not success]
        logger.info(f"Successful formats: {', '.join(successful) if successful else 'None'}")
        if failed:
            logger.error(f"Failed formats: {', '.join(failed)}")
            return 1

    logger.log_performance_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
