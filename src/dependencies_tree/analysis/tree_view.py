"""Tree-shaped views over the dependencies world backed by networkx."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import networkx as nx

from dependencies_tree.analysis.keys import SEPARATOR, child_key, key_target
from dependencies_tree.analysis.world_graph import DependenciesWorld

NodeId = str

REPEATED_MARKER = "(*)"


def to_digraph(world: DependenciesWorld, *, separator: str = SEPARATOR) -> nx.DiGraph:
    """Directed graph from each world key to the world keys of its dependencies.

    Dependencies with no world entry of their own become ``resolved=False`` nodes.
    """

    graph = nx.DiGraph(name="dependencies_world")
    canonical = {key.lower(): key for key in world.keys()}

    for key, node in world.items():
        attributes = node.as_dict()
        del attributes["dependencies"]
        graph.add_node(key, **attributes, resolved=True)

    for key, node in world.items():
        target = key_target(key, separator=separator)
        for dependency in node.dependencies:
            candidate = child_key(target, dependency, separator=separator)
            child = canonical.get(candidate.lower())
            if child is None:
                child = candidate
                if child not in graph:
                    graph.add_node(child, name=dependency, resolved=False)
            graph.add_edge(key, child)

    graph.graph["node_count"] = graph.number_of_nodes()
    graph.graph["edge_count"] = graph.number_of_edges()
    return graph


def root_keys(graph: nx.DiGraph) -> List[NodeId]:
    """Entries nothing depends on; targets in a well-formed world."""

    return [node for node in graph.nodes if graph.in_degree(node) == 0]


def node_label(node: NodeId, data: dict[str, object]) -> str:
    label = data.get("name") or node
    version = data.get("version")
    if version:
        label = f"{label} {version}"
    dependency_type = data.get("dependency_type")
    if dependency_type:
        label = f"{label} [{dependency_type}]"
    if data.get("resolved") is False:
        label = f"{label} (unresolved)"
    return str(label)


def render_tree(
    graph: nx.DiGraph,
    *,
    roots: Optional[Iterable[NodeId]] = None,
    max_depth: Optional[int] = None,
    indent: str = "  ",
) -> List[str]:
    """Indented text lines, depth-first in dependency order.

    A node's children are listed once; later occurrences of a node that has
    children are printed as a single ``(*)`` leaf, which also ends cycles.
    """

    lines: List[str] = []
    expanded: set[NodeId] = set()
    start = list(roots) if roots is not None else root_keys(graph)
    stack: List[Tuple[NodeId, int]] = [(root, 0) for root in reversed(start)]

    while stack:
        node, depth = stack.pop()
        label = node_label(node, graph.nodes[node])
        children = list(graph.successors(node))
        if children and node in expanded:
            lines.append(f"{indent * depth}{label} {REPEATED_MARKER}")
            continue
        lines.append(f"{indent * depth}{label}")
        if max_depth is not None and depth >= max_depth:
            continue
        expanded.add(node)
        stack.extend((child, depth + 1) for child in reversed(children))
    return lines


def _sanitize_for_graphml(graph: nx.DiGraph) -> nx.DiGraph:
    """Return a copy of the graph with GraphML-friendly attributes."""

    def sanitize(mapping):
        for key in list(mapping.keys()):
            value = mapping[key]
            if value is None:
                del mapping[key]
                continue
            if isinstance(value, (list, tuple, set)):
                mapping[key] = ";".join(str(item) for item in value)
            elif isinstance(value, dict):
                mapping[key] = json.dumps(value)

    copy = graph.copy()
    sanitize(copy.graph)
    for _, data in copy.nodes(data=True):
        sanitize(data)
    for _, _, data in copy.edges(data=True):
        sanitize(data)
    return copy


def export_world_graph(graph: nx.DiGraph, destination: Path, *, format: str = "json") -> Path:
    """Persist the world graph as JSON (node/edge lists) or GraphML."""

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    fmt = format.lower()
    if fmt == "graphml":
        nx.write_graphml(_sanitize_for_graphml(graph), destination)
        return destination
    if fmt != "json":
        raise ValueError(f"Unsupported format: {format}")

    payload = {
        "graph": graph.graph.get("name", destination.stem),
        "node_count": graph.number_of_nodes(),
        "edge_count": graph.number_of_edges(),
        "roots": root_keys(graph),
        "nodes": [{"id": node, **data} for node, data in graph.nodes(data=True)],
        "edges": [{"source": source, "target": target} for source, target in graph.edges()],
    }
    with destination.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    return destination


__all__ = ["export_world_graph", "node_label", "render_tree", "root_keys", "to_digraph"]
