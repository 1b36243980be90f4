"""Lookup tables for targets, packages and files built from definition records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import Iterable, Optional

from requests.structures import CaseInsensitiveDict

from dependencies_tree.analysis.metadata import DependencyMetadata, NodeArena, NodeIndex
from dependencies_tree.config import DEFAULT_CONFIG, ConsolidationConfig
from dependencies_tree.io.item_records import ItemRecord

LOGGER = logging.getLogger(__name__)


def _file_name(item_spec: str) -> str:
    # accepts both separator styles
    return PureWindowsPath(item_spec).name


class LookupTable:
    """Case-insensitive, read-only map from natural identity to an arena template."""

    def __init__(self, arena: NodeArena, entries: Optional[CaseInsensitiveDict] = None) -> None:
        self._arena = arena
        self._entries: CaseInsensitiveDict = entries if entries is not None else CaseInsensitiveDict()

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def index_of(self, item_id: str) -> Optional[NodeIndex]:
        return self._entries.get(item_id)

    def get(self, item_id: str) -> Optional[DependencyMetadata]:
        index = self._entries.get(item_id)
        if index is None:
            return None
        return self._arena.get(index)


@dataclass
class EntityRegistry:
    """The three lookup tables of one run, sharing a node arena."""

    arena: NodeArena = field(default_factory=NodeArena)
    targets: LookupTable = field(init=False)
    packages: LookupTable = field(init=False)
    files: LookupTable = field(init=False)

    def __post_init__(self) -> None:
        self.targets = LookupTable(self.arena)
        self.packages = LookupTable(self.arena)
        self.files = LookupTable(self.arena)

    @classmethod
    def from_definitions(
        cls,
        target_definitions: Iterable[ItemRecord],
        package_definitions: Iterable[ItemRecord],
        file_definitions: Iterable[ItemRecord],
        *,
        config: ConsolidationConfig = DEFAULT_CONFIG,
        arena: Optional[NodeArena] = None,
    ) -> "EntityRegistry":
        registry = cls(arena=arena if arena is not None else NodeArena())
        registry.targets = LookupTable(registry.arena, registry._register_targets(target_definitions, config))
        registry.packages = LookupTable(registry.arena, registry._register_packages(package_definitions, config))
        registry.files = LookupTable(registry.arena, registry._register_files(file_definitions, config))
        LOGGER.info(
            "Registered %s targets, %s packages, %s files",
            len(registry.targets),
            len(registry.packages),
            len(registry.files),
        )
        return registry

    def _register_targets(self, definitions: Iterable[ItemRecord], config: ConsolidationConfig) -> CaseInsensitiveDict:
        entries = CaseInsensitiveDict()
        for definition in definitions:
            if config.key_separator in definition.item_spec:
                # "target/rid" pairs are not targets
                continue
            node = DependencyMetadata(
                dependency_type=config.target_type,
                runtime_identifier=definition.get_metadata("RuntimeIdentifier"),
                target_framework_moniker=definition.get_metadata("TargetFramework"),
                framework_name=definition.get_metadata("FrameworkName"),
                framework_version=definition.get_metadata("FrameworkVersion"),
            )
            entries[definition.item_spec] = self.arena.add(node)
        return entries

    def _register_packages(self, definitions: Iterable[ItemRecord], config: ConsolidationConfig) -> CaseInsensitiveDict:
        entries = CaseInsensitiveDict()
        for definition in definitions:
            node = DependencyMetadata(
                name=definition.get_metadata("Name"),
                version=definition.get_metadata("Version"),
                dependency_type=definition.get_metadata("Type") or config.package_type,
                path=definition.get_metadata("Path"),
            )
            entries[definition.item_spec] = self.arena.add(node)
        return entries

    def _register_files(self, definitions: Iterable[ItemRecord], config: ConsolidationConfig) -> CaseInsensitiveDict:
        entries = CaseInsensitiveDict()
        for definition in definitions:
            node = DependencyMetadata(
                name=_file_name(definition.item_spec),
                dependency_type=definition.get_metadata("Type") or config.file_type,
                path=definition.get_metadata("Path"),
            )
            entries[definition.item_spec] = self.arena.add(node)
        return entries


__all__ = ["EntityRegistry", "LookupTable"]
