"""Command line entry points for the project."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from dependencies_tree import __version__
from dependencies_tree.analysis.tree_view import export_world_graph, render_tree, to_digraph
from dependencies_tree.analysis.visualization import plot_world
from dependencies_tree.config import COMPILE_TIME_ASSEMBLY, ConsolidationConfig
from dependencies_tree.io.item_records import InputDocument, load_input_document, write_output_document
from dependencies_tree.pipelines.get_dependencies_data import ConsolidationResult, consolidate_document


def _load_document(path: Path) -> InputDocument:
    candidate = path.expanduser().resolve()
    if not candidate.exists():
        raise typer.BadParameter(f"Input not found: {candidate}")
    try:
        return load_input_document(candidate)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _consolidate(path: Path, file_group: str = COMPILE_TIME_ASSEMBLY) -> ConsolidationResult:
    document = _load_document(path)
    return consolidate_document(document, config=ConsolidationConfig.for_file_group(file_group))


def _display_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


app = typer.Typer(help="Consolidate build resolution records into a dependencies tree.")


@app.callback()
def main(
    display_version: bool = typer.Option(
        False, "--version", "-V", callback=_display_version, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every dropped edge."),
) -> None:
    """Configure logging for the selected command."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


@app.command("world")
def world(
    input: Path = typer.Option(..., "--input", "-i", help="JSON document with definitions and dependency edges."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination JSON (defaults to stdout)."),
    file_group: str = typer.Option(COMPILE_TIME_ASSEMBLY, help="File group whose file edges are kept."),
) -> None:
    """Build the dependencies world and emit it as item records."""

    result = _consolidate(input, file_group)
    if output is None:
        typer.echo(write_output_document(result.records))
        return
    destination = output.expanduser().resolve()
    write_output_document(result.records, destination)
    typer.echo(f"World entries: {len(result.records)}")
    if result.dropped_edges:
        typer.echo(f"Dropped edges: {len(result.dropped_edges)}")
    typer.secho(f"Dependencies world written to {destination}", fg=typer.colors.GREEN)


@app.command("tree")
def tree(
    input: Path = typer.Option(..., "--input", "-i", help="JSON document with definitions and dependency edges."),
    max_depth: Optional[int] = typer.Option(None, help="Stop descending below this depth."),
    file_group: str = typer.Option(COMPILE_TIME_ASSEMBLY, help="File group whose file edges are kept."),
) -> None:
    """Print the dependencies world as an indented tree under each target."""

    result = _consolidate(input, file_group)
    graph = to_digraph(result.world)
    lines = render_tree(graph, max_depth=max_depth)
    if not lines:
        typer.secho("The dependencies world is empty.", fg=typer.colors.YELLOW)
        return
    for line in lines:
        typer.echo(line)


@app.command("export")
def export(
    input: Path = typer.Option(..., "--input", "-i", help="JSON document with definitions and dependency edges."),
    output: Path = typer.Option(..., "--output", "-o", help="Destination graph file."),
    export_format: str = typer.Option("json", "--format", help="Output format: json or graphml."),
    file_group: str = typer.Option(COMPILE_TIME_ASSEMBLY, help="File group whose file edges are kept."),
) -> None:
    """Write the world as a networkx graph (JSON node/edge lists or GraphML)."""

    result = _consolidate(input, file_group)
    graph = to_digraph(result.world)
    try:
        destination = export_world_graph(graph, output.expanduser().resolve(), format=export_format)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Nodes: {graph.number_of_nodes()}  Edges: {graph.number_of_edges()}")
    typer.echo(f"Graph written to {destination}")


@app.command("visualize")
def visualize(
    input: Path = typer.Option(..., "--input", "-i", help="JSON document with definitions and dependency edges."),
    output: Path = typer.Option(Path("dependencies_world.png"), "--output", "-o", help="Destination PNG."),
    show_labels: bool = typer.Option(True, help="Render node labels."),
    file_group: str = typer.Option(COMPILE_TIME_ASSEMBLY, help="File group whose file edges are kept."),
) -> None:
    """Render the world graph into a static image."""

    result = _consolidate(input, file_group)
    graph = to_digraph(result.world)
    try:
        png_path = plot_world(graph, output.expanduser().resolve(), show_labels=show_labels)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Visualization saved to {png_path}")


def run() -> None:
    """Entry point used by ``python -m dependencies_tree.cli``."""

    app()


if __name__ == "__main__":
    run()
