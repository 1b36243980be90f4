"""High-level orchestration for building the dependencies world."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from dependencies_tree.analysis.projector import project_world
from dependencies_tree.analysis.registry import EntityRegistry
from dependencies_tree.analysis.world_graph import DependenciesWorld, DroppedEdge, WorldGraphBuilder
from dependencies_tree.config import DEFAULT_CONFIG, ConsolidationConfig
from dependencies_tree.io.item_records import InputDocument, ItemRecord


@dataclass(slots=True)
class ConsolidationResult:
    world: DependenciesWorld
    records: List[ItemRecord]
    dropped_edges: List[DroppedEdge] = field(default_factory=list)


def consolidate(
    target_definitions: Sequence[ItemRecord],
    package_definitions: Sequence[ItemRecord],
    file_definitions: Sequence[ItemRecord],
    package_dependencies: Sequence[ItemRecord],
    file_dependencies: Sequence[ItemRecord],
    *,
    config: ConsolidationConfig = DEFAULT_CONFIG,
) -> ConsolidationResult:
    """
    Run one consolidation pass over fully materialised inputs.

    Every call builds its own arena, lookup tables and world; nothing is shared between
    invocations.
    """

    registry = EntityRegistry.from_definitions(
        target_definitions,
        package_definitions,
        file_definitions,
        config=config,
    )
    builder = WorldGraphBuilder(registry, config=config)
    world = builder.build(package_dependencies, file_dependencies)
    return ConsolidationResult(
        world=world,
        records=project_world(world, config=config),
        dropped_edges=list(builder.dropped_edges),
    )


def consolidate_document(document: InputDocument, *, config: ConsolidationConfig = DEFAULT_CONFIG) -> ConsolidationResult:
    return consolidate(
        document.target_definitions,
        document.package_definitions,
        document.file_definitions,
        document.package_dependencies,
        document.file_dependencies,
        config=config,
    )


def get_dependencies_data(
    target_definitions: Sequence[ItemRecord],
    package_definitions: Sequence[ItemRecord],
    file_definitions: Sequence[ItemRecord],
    package_dependencies: Sequence[ItemRecord],
    file_dependencies: Sequence[ItemRecord],
    *,
    config: ConsolidationConfig = DEFAULT_CONFIG,
) -> List[ItemRecord]:
    """Entry point returning the dependencies world as output item records."""

    return consolidate(
        target_definitions,
        package_definitions,
        file_definitions,
        package_dependencies,
        file_dependencies,
        config=config,
    ).records


__all__ = ["ConsolidationResult", "consolidate", "consolidate_document", "get_dependencies_data"]
