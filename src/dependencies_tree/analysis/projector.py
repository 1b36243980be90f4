"""Projection of the dependencies world into output item records."""

from __future__ import annotations

from typing import List

from requests.structures import CaseInsensitiveDict

from dependencies_tree.analysis.metadata import DependencyMetadata
from dependencies_tree.analysis.world_graph import DependenciesWorld
from dependencies_tree.config import DEFAULT_CONFIG, ConsolidationConfig
from dependencies_tree.io.item_records import ItemRecord


def project_node(key: str, node: DependencyMetadata, *, config: ConsolidationConfig = DEFAULT_CONFIG) -> ItemRecord:
    # ids containing the separator are not escaped
    metadata = CaseInsensitiveDict(
        [
            ("RuntimeIdentifier", node.runtime_identifier),
            ("TargetFramework", node.target_framework_moniker),
            ("FrameworkName", node.framework_name),
            ("FrameworkVersion", node.framework_version),
            ("Name", node.name),
            ("Version", node.version),
            ("DependencyType", node.dependency_type),
            ("Path", node.path),
            ("Dependencies", config.dependency_separator.join(node.dependencies)),
        ]
    )
    return ItemRecord(key, metadata)


def project_world(world: DependenciesWorld, *, config: ConsolidationConfig = DEFAULT_CONFIG) -> List[ItemRecord]:
    """One output record per world entry, in insertion order."""

    return [project_node(key, node, config=config) for key, node in world.items()]


__all__ = ["project_node", "project_world"]
