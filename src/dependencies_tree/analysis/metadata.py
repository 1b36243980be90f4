"""Dependency nodes and the arena that owns them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

NodeIndex = int


@dataclass(frozen=True)
class DependencyMetadata:
    """A target, package or file vertex of the dependency world.

    Identity fields are frozen. ``dependencies`` holds raw child identities (not world
    keys) and only ever grows by appending.
    """

    name: str = ""
    version: str = ""
    dependency_type: str = ""
    path: str = ""
    runtime_identifier: str = ""
    target_framework_moniker: str = ""
    framework_name: str = ""
    framework_version: str = ""
    dependencies: List[str] = field(default_factory=list, compare=False)

    def __post_init__(self) -> None:
        # callers pass through metadata lookups that may yield None
        for name in (
            "name",
            "version",
            "dependency_type",
            "path",
            "runtime_identifier",
            "target_framework_moniker",
            "framework_name",
            "framework_version",
        ):
            if getattr(self, name) is None:
                object.__setattr__(self, name, "")

    def add_dependency(self, child_id: str) -> None:
        self.dependencies.append(child_id)

    def detached(self) -> "DependencyMetadata":
        """Copy with the same identity and its own dependency list."""

        return replace(self, dependencies=list(self.dependencies))

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "dependency_type": self.dependency_type,
            "path": self.path,
            "runtime_identifier": self.runtime_identifier,
            "target_framework_moniker": self.target_framework_moniker,
            "framework_name": self.framework_name,
            "framework_version": self.framework_version,
            "dependencies": list(self.dependencies),
        }


class NodeArena:
    """Owns every node created during one consolidation run.

    Lookup tables and the world refer to nodes by index. Nodes handed to the world are
    cloned out of their table template so templates never change.
    """

    def __init__(self) -> None:
        self._nodes: list[DependencyMetadata] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: DependencyMetadata) -> NodeIndex:
        self._nodes.append(node)
        return len(self._nodes) - 1

    def get(self, index: NodeIndex) -> DependencyMetadata:
        return self._nodes[index]

    def clone(self, index: NodeIndex) -> NodeIndex:
        return self.add(self._nodes[index].detached())


__all__ = ["DependencyMetadata", "NodeArena", "NodeIndex"]
