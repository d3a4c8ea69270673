"""
Dependency graph over a course catalog.

Nodes are course numbers; an edge prerequisite -> course means the course's
prerequisite expression references that prerequisite. Courses referenced but
missing from the catalog still get a node, marked known=False.
"""

import logging
from typing import Any, Dict, List

import networkx as nx

from coursegraph.catalog import CourseCatalog
from coursegraph.prerequisites import iter_references

logger = logging.getLogger(__name__)


def build_dependency_graph(catalog: CourseCatalog) -> nx.DiGraph:
    """Build a directed prerequisite graph keyed by course number."""
    graph = nx.DiGraph()

    # one node per number, described by the record find_by_number() returns
    for number in sorted({r.course_number for r in catalog.courses()}):
        record = catalog.find_by_number(number)
        graph.add_node(
            number,
            name=record.course_name,
            semesters=[s.value for s in record.semesters] if record.semesters is not None else None,
            known=True,
        )

    for record in catalog.sorted_courses():
        if record.prerequisite is None:
            continue
        for prereq, logic in iter_references(record.prerequisite):
            if prereq not in graph:
                graph.add_node(prereq, name=None, semesters=None, known=False)
            # repeated references keep the first edge
            if not graph.has_edge(prereq, record.course_number):
                graph.add_edge(prereq, record.course_number, logic=logic)

    unknown = [n for n, known in graph.nodes(data="known") if not known]
    if unknown:
        logger.info(f"{len(unknown)} prerequisite courses are not in the catalog: {sorted(unknown)}")
    logger.debug(f"Dependency graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges")
    return graph


def dependents(graph: nx.DiGraph, course_number: str) -> List[str]:
    """Courses that directly list ``course_number`` as a prerequisite."""
    if course_number not in graph:
        return []
    return sorted(graph.successors(course_number))


def graph_to_dict(graph: nx.DiGraph) -> Dict[str, Any]:
    """Export the graph as sorted node and edge lists."""
    nodes = [
        {
            "id": node,
            "name": attrs.get("name"),
            "semesters": attrs.get("semesters"),
            "known": attrs.get("known", True),
        }
        for node, attrs in sorted(graph.nodes(data=True), key=lambda n: n[0])
    ]
    edges = [
        {"source": source, "target": target, "logic": attrs.get("logic", "single")}
        for source, target, attrs in sorted(graph.edges(data=True), key=lambda e: (e[0], e[1]))
    ]
    return {"nodes": nodes, "edges": edges}
