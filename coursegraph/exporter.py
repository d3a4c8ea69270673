"""
Multi-Format Export Engine

Exports a course catalog and its dependency graph for different uses:
- JSON: the catalog in its input grammar, so it can be loaded again
- GRAPH: node list + edge list keyed by course number
- DOT: graph structure for Graphviz
- TSV: one row per course for spreadsheet review
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Optional

import networkx as nx

from coursegraph.catalog import CourseCatalog, CourseRecord, Semester
from coursegraph.graph import build_dependency_graph, graph_to_dict
from coursegraph.loader import CLASSES_KEY, NAME_KEY, PREREQUISITE_KEY, SEMESTERS_KEY
from coursegraph.prerequisites import (
    COURSE_TAG, prerequisite_to_dict, prerequisite_to_english, referenced_courses
)
from coursegraph.utils import CourseGraphConfig, CourseGraphLogger, FileManager

OUTPUT_SUFFIXES = {
    "json": ".json",
    "graph": ".graph.json",
    "dot": ".dot",
    "tsv": ".tsv",
}


def course_record_to_dict(record: CourseRecord) -> Dict[str, Any]:
    return {
        COURSE_TAG: record.course_number,
        NAME_KEY: record.course_name,
        PREREQUISITE_KEY: (
            prerequisite_to_dict(record.prerequisite) if record.prerequisite is not None else None
        ),
        SEMESTERS_KEY: (
            [s.value for s in record.semesters] if record.semesters is not None else None
        ),
    }


def catalog_to_dict(catalog: CourseCatalog) -> Dict[str, Any]:
    """Serialize a catalog back into the input grammar, sorted by course number."""
    return {CLASSES_KEY: [course_record_to_dict(r) for r in catalog.sorted_courses()]}


class CatalogExporter:
    """Writes a catalog and its dependency graph in the configured formats."""

    def __init__(self, config: CourseGraphConfig, logger: CourseGraphLogger):
        self.config = config
        self.logger = logger
        self.file_manager = FileManager(logger)
        self._graph: Optional[nx.DiGraph] = None
        self._graph_source: Optional[CourseCatalog] = None

        self.export_stats = {
            "json": {"courses": 0},
            "graph": {"nodes": 0, "edges": 0},
            "dot": {"nodes": 0, "edges": 0},
            "tsv": {"records": 0},
        }

    def _dependency_graph(self, catalog: CourseCatalog) -> nx.DiGraph:
        if self._graph is None or self._graph_source is not catalog:
            self._graph = build_dependency_graph(catalog)
            self._graph_source = catalog
        return self._graph

    def export_to_json(self, catalog: CourseCatalog, output_path: str) -> bool:
        """Export the catalog in the same JSON grammar it was loaded from."""
        self.logger.start_timer("json_export")
        success = self.file_manager.save_json(catalog_to_dict(catalog), output_path)
        if success:
            self.export_stats["json"] = {"courses": len(catalog)}
            self.logger.info(f"JSON export: {len(catalog)} courses")
        self.logger.end_timer("json_export")
        return success

    def export_to_graph_json(self, catalog: CourseCatalog, output_path: str) -> bool:
        """Export the dependency graph as node and edge lists."""
        self.logger.start_timer("graph_export")
        graph = self._dependency_graph(catalog)
        success = self.file_manager.save_json(graph_to_dict(graph), output_path)
        if success:
            self.export_stats["graph"] = {
                "nodes": graph.number_of_nodes(),
                "edges": graph.number_of_edges(),
            }
            self.logger.info(
                f"Graph export: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges"
            )
        self.logger.end_timer("graph_export")
        return success

    def export_to_dot(self, catalog: CourseCatalog, output_path: str) -> bool:
        """Export the prerequisite graph to DOT format for Graphviz."""
        self.logger.start_timer("dot_export")

        try:
            dot_path = Path(output_path)
            graph = self._dependency_graph(catalog)
            dot_content = self.generate_dot_content(graph)

            dot_path.parent.mkdir(parents=True, exist_ok=True)
            with open(dot_path, 'w', encoding='utf-8') as dotfile:
                dotfile.write(dot_content)

            self.export_stats["dot"] = {
                "nodes": graph.number_of_nodes(),
                "edges": graph.number_of_edges(),
            }
            self.logger.info(
                f"DOT export: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges"
            )
            return True

        except OSError as e:
            self.logger.error(f"DOT export failed: {e}")
            return False
        finally:
            self.logger.end_timer("dot_export")

    def generate_dot_content(self, graph: nx.DiGraph) -> str:
        """Generate DOT graph content."""
        lines = []

        lines.append("digraph course_prerequisites {")
        lines.append(f"    rankdir={self.config.dot_rankdir};")
        lines.append("    node [shape=box, style=filled];")
        lines.append("    edge [arrowhead=normal];")
        lines.append("")

        for node, attrs in sorted(graph.nodes(data=True), key=lambda n: n[0]):
            node_id = self._quote(node)
            if not attrs.get("known", True):
                lines.append(
                    f'    {node_id} [label={self._quote(node)}, '
                    f'fillcolor="{self.config.unknown_color}", style="filled,dashed"];'
                )
                continue
            title = self._truncate_title(attrs.get("name") or "")
            label = f'"{self._escape(node)}\\n{self._escape(title)}"'
            color = self._semester_color(attrs.get("semesters"))
            lines.append(f'    {node_id} [label={label}, fillcolor="{color}"];')

        lines.append("")

        for source, target, attrs in sorted(graph.edges(data=True), key=lambda e: (e[0], e[1])):
            if attrs.get("logic") == "or":
                lines.append(f"    {self._quote(source)} -> {self._quote(target)} [style=dashed];")
            else:
                lines.append(f"    {self._quote(source)} -> {self._quote(target)};")

        lines.append("}")

        return "\n".join(lines) + "\n"

    def _semester_color(self, semesters: Optional[List[str]]) -> str:
        colors = self.config.semester_colors
        if not semesters:
            return colors.get("unspecified", "#F0F0F0")
        offered = set(semesters)
        if offered == {s.value for s in Semester}:
            key = "both"
        else:
            key = semesters[0]
        return colors.get(key, colors.get("unspecified", "#F0F0F0"))

    def _escape(self, text: str) -> str:
        return text.replace("\\", "\\\\").replace('"', '\\"')

    def _quote(self, text: str) -> str:
        """Quote a DOT identifier."""
        return f'"{self._escape(text)}"'

    def _truncate_title(self, title: str) -> str:
        """Truncate title for display in graph."""
        limit = self.config.max_label_length
        if len(title) > limit:
            return title[:max(limit - 3, 0)] + "..."
        return title

    def export_to_tsv(self, catalog: CourseCatalog, output_path: str) -> bool:
        """Export one row per course to tab-separated values."""
        self.logger.start_timer("tsv_export")

        records = []
        for record in catalog.sorted_courses():
            prereq = record.prerequisite
            records.append({
                "course_number": record.course_number,
                "course_name": record.course_name,
                "semesters": ",".join(s.value for s in record.semesters) if record.semesters else "",
                "prerequisite": prerequisite_to_english(prereq) if prereq is not None else "",
                "prerequisite_courses": ",".join(sorted(referenced_courses(prereq))) if prereq is not None else "",
            })

        fieldnames = ["course_number", "course_name", "semesters", "prerequisite", "prerequisite_courses"]

        try:
            tsv_path = Path(output_path)
            tsv_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tsv_path, 'w', newline='', encoding='utf-8') as tsvfile:
                writer = csv.DictWriter(tsvfile, fieldnames=fieldnames, delimiter='\t')
                writer.writeheader()
                writer.writerows(records)

            self.export_stats["tsv"] = {"records": len(records)}
            self.logger.info(f"TSV export: {len(records)} records")
            return True

        except OSError as e:
            self.logger.error(f"TSV export failed: {e}")
            return False
        finally:
            self.logger.end_timer("tsv_export")

    def export_all_formats(self, catalog: CourseCatalog, base_path: str) -> Dict[str, bool]:
        """Export the catalog to every configured format next to ``base_path``."""
        base_path = Path(base_path)
        results = {}

        export_methods = {
            "json": self.export_to_json,
            "graph": self.export_to_graph_json,
            "dot": self.export_to_dot,
            "tsv": self.export_to_tsv,
        }

        for format_name in self.config.export_formats:
            if format_name not in export_methods:
                self.logger.warning(f"Unknown export format: {format_name}")
                results[format_name] = False
                continue

            output_path = base_path.parent / (base_path.name + OUTPUT_SUFFIXES[format_name])
            success = export_methods[format_name](catalog, str(output_path))
            results[format_name] = success

            if success:
                self.logger.info(f"Exported {format_name} to {output_path}")
            else:
                self.logger.error(f"Failed to export {format_name}")

        return results
