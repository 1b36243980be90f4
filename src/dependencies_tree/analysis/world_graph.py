"""Builder for the unified dependency world keyed by composite identity."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from requests.structures import CaseInsensitiveDict

from dependencies_tree.analysis.keys import child_key, world_key
from dependencies_tree.analysis.metadata import DependencyMetadata
from dependencies_tree.analysis.registry import EntityRegistry, LookupTable
from dependencies_tree.config import DEFAULT_CONFIG, ConsolidationConfig
from dependencies_tree.io.item_records import ItemRecord

LOGGER = logging.getLogger(__name__)

PACKAGE_EDGE = "package"
FILE_EDGE = "file"

TARGET_RID = "target-rid"
FILE_GROUP = "file-group"
PLACEHOLDER = "placeholder"
UNRESOLVED_PARENT = "unresolved-parent"


@dataclass(frozen=True)
class DroppedEdge:
    kind: str
    item_spec: str
    reason: str


class DependenciesWorld:
    """Composite key to node mapping; keys compare case-insensitively.

    Keys are only ever added, so the spelling of the first insert is the one kept.
    """

    def __init__(self, registry: EntityRegistry) -> None:
        self._arena = registry.arena
        self._entries: CaseInsensitiveDict = CaseInsensitiveDict()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, key: str) -> DependencyMetadata:
        return self._arena.get(self._entries[key])

    def get(self, key: str) -> Optional[DependencyMetadata]:
        index = self._entries.get(key)
        if index is None:
            return None
        return self._arena.get(index)

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def items(self) -> Iterator[Tuple[str, DependencyMetadata]]:
        for key, index in self._entries.items():
            yield key, self._arena.get(index)

    def materialize(self, key: str, table: LookupTable, item_id: str) -> Optional[DependencyMetadata]:
        """Insert a world-owned copy of ``item_id``'s template at ``key``."""

        template = table.index_of(item_id)
        if template is None:
            return None
        index = self._arena.clone(template)
        self._entries[key] = index
        return self._arena.get(index)

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)


class WorldGraphBuilder:
    """Fold package and file edges into a :class:`DependenciesWorld`."""

    def __init__(self, registry: EntityRegistry, *, config: ConsolidationConfig = DEFAULT_CONFIG) -> None:
        self.registry = registry
        self.config = config
        self.world = DependenciesWorld(registry)
        self.dropped_edges: list[DroppedEdge] = []

    def _drop(self, kind: str, edge: ItemRecord, reason: str) -> None:
        LOGGER.debug("Dropping %s edge %s (%s)", kind, edge.item_spec, reason)
        self.dropped_edges.append(DroppedEdge(kind=kind, item_spec=edge.item_spec, reason=reason))

    def add_package_edge(self, edge: ItemRecord) -> bool:
        return self._add_edge(edge, PACKAGE_EDGE, self.registry.packages)

    def add_file_edge(self, edge: ItemRecord) -> bool:
        child_id = edge.item_spec
        file_group = edge.get_metadata("FileGroup")
        if not file_group or file_group != self.config.file_group:
            self._drop(FILE_EDGE, edge, FILE_GROUP)
            return False
        if child_id.endswith(self.config.placeholder_suffix):
            # "no files of this group" marker
            self._drop(FILE_EDGE, edge, PLACEHOLDER)
            return False
        return self._add_edge(edge, FILE_EDGE, self.registry.files)

    def _add_edge(self, edge: ItemRecord, kind: str, child_table: LookupTable) -> bool:
        separator = self.config.key_separator
        child_id = edge.item_spec
        parent_target_id = edge.get_metadata("ParentTarget")
        if separator in parent_target_id:
            # "target/rid" contexts duplicate the plain target edges
            self._drop(kind, edge, TARGET_RID)
            return False
        parent_package_id = edge.get_metadata("ParentPackage")

        current_key = child_key(parent_target_id, child_id, separator=separator)
        registered_child = False
        if current_key not in self.world:
            registered_child = self.world.materialize(current_key, child_table, child_id) is not None

        parent_key = world_key(parent_target_id, parent_package_id, separator=separator)
        parent = self.world.get(parent_key)
        if parent is None:
            if parent_package_id:
                parent = self.world.materialize(parent_key, self.registry.packages, parent_package_id)
            else:
                parent = self.world.materialize(parent_key, self.registry.targets, parent_target_id)
            if parent is None:
                if registered_child:
                    self.world.discard(current_key)
                self._drop(kind, edge, UNRESOLVED_PARENT)
                return False

        parent.add_dependency(child_id)
        return True

    def add_package_edges(self, edges: Iterable[ItemRecord]) -> None:
        for edge in edges:
            self.add_package_edge(edge)

    def add_file_edges(self, edges: Iterable[ItemRecord]) -> None:
        for edge in edges:
            self.add_file_edge(edge)

    def report_dropped_edges(self) -> None:
        if not self.dropped_edges:
            return
        reasons = Counter(dropped.reason for dropped in self.dropped_edges)
        LOGGER.info(
            "Filtered %s edges (%s)",
            len(self.dropped_edges),
            ", ".join(f"{reason}={count}" for reason, count in sorted(reasons.items())),
        )
        unresolved = [dropped for dropped in self.dropped_edges if dropped.reason == UNRESOLVED_PARENT]
        if unresolved:
            sample = ", ".join(f"{dropped.kind}:{dropped.item_spec}" for dropped in unresolved[:5])
            LOGGER.warning("Edges with unresolved parents dropped (sample: %s)", sample)

    def build(self, package_edges: Iterable[ItemRecord], file_edges: Iterable[ItemRecord]) -> DependenciesWorld:
        self.add_package_edges(package_edges)
        self.add_file_edges(file_edges)
        LOGGER.info("Dependencies world holds %s entries", len(self.world))
        self.report_dropped_edges()
        return self.world


__all__ = ["DependenciesWorld", "DroppedEdge", "WorldGraphBuilder"]
