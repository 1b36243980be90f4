"""Visualization helpers for the dependencies world."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import matplotlib.pyplot as plt
import networkx as nx

from dependencies_tree.analysis.tree_view import node_label

UNRESOLVED = "unresolved"


def _node_kind(data: dict) -> str:
    if data.get("resolved") is False:
        return UNRESOLVED
    return data.get("dependency_type") or "unknown"


def _kind_colors(graph: nx.DiGraph) -> dict[str, object]:
    kinds = sorted({_node_kind(data) for _, data in graph.nodes(data=True)})
    palette = plt.get_cmap("tab10")
    return {kind: palette(idx % palette.N) for idx, kind in enumerate(kinds)}


def plot_world(
    graph: nx.DiGraph,
    output_path: Path,
    *,
    show_labels: bool = True,
    title: str | None = None,
) -> Path:
    """
    Render the world graph to ``output_path`` using matplotlib.

    Nodes are colour-coded by dependency type and laid out in layers by distance from
    their root target.
    """

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if graph.number_of_nodes() == 0:
        raise ValueError("Graph contains no nodes to visualize.")

    layers: dict[str, int] = {}
    for root in (node for node in graph.nodes if graph.in_degree(node) == 0):
        for node, depth in nx.single_source_shortest_path_length(graph, root).items():
            layers[node] = min(depth, layers.get(node, depth))
    for node in graph.nodes:
        # members of a cycle with no root
        layers.setdefault(node, 0)
    layered = graph.copy()
    nx.set_node_attributes(layered, layers, "layer")
    positions = nx.multipartite_layout(layered, subset_key="layer", align="horizontal")

    colors = _kind_colors(graph)
    node_colours = [colors[_node_kind(data)] for _, data in graph.nodes(data=True)]

    plt.figure(figsize=(12, 8))
    nx.draw_networkx_edges(graph, positions, alpha=0.4, width=0.8, arrows=True)
    nx.draw_networkx_nodes(graph, positions, node_color=node_colours, node_size=300, alpha=0.9)
    if show_labels:
        labels = {node: node_label(node, data) for node, data in graph.nodes(data=True)}
        nx.draw_networkx_labels(graph, positions, labels=labels, font_size=7)

    if title is None:
        summary = Counter(_node_kind(data) for _, data in graph.nodes(data=True))
        title = ", ".join(f"{kind}: {count}" for kind, count in sorted(summary.items()))

    plt.title(title)
    plt.axis("off")
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close()
    return output_path


__all__ = ["plot_world"]
