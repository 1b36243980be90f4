"""Tests for folding package and file edges into the dependencies world."""

from __future__ import annotations

import logging

import pytest

from dependencies_tree.analysis.registry import EntityRegistry
from dependencies_tree.analysis.world_graph import WorldGraphBuilder
from dependencies_tree.config import ConsolidationConfig
from dependencies_tree.io.item_records import InputDocument, ItemRecord


def _package_edge(child: str, target: str, package: str = "") -> ItemRecord:
    return ItemRecord.create(child, ParentTarget=target, ParentPackage=package)


def _file_edge(child: str, target: str, package: str, group: str = "CompileTimeAssembly") -> ItemRecord:
    return ItemRecord.create(child, ParentTarget=target, ParentPackage=package, FileGroup=group)


def _builder(document: InputDocument, config: ConsolidationConfig | None = None) -> WorldGraphBuilder:
    config = config or ConsolidationConfig()
    registry = EntityRegistry.from_definitions(
        document.target_definitions,
        document.package_definitions,
        document.file_definitions,
        config=config,
    )
    return WorldGraphBuilder(registry, config=config)


def _build(document: InputDocument):
    builder = _builder(document)
    return builder.build(document.package_dependencies, document.file_dependencies), builder


def test_target_package_file_round_trip(sample_document: InputDocument) -> None:
    world, _ = _build(sample_document)

    assert world.keys() == ["net6.0/PkgA/1.0.0", "net6.0", "net6.0/lib/net6.0/PkgA.dll"]
    assert world["net6.0"].dependencies == ["PkgA/1.0.0"]
    assert world["net6.0/PkgA/1.0.0"].dependencies == ["lib/net6.0/PkgA.dll"]
    assert world["net6.0/lib/net6.0/PkgA.dll"].name == "PkgA.dll"
    assert world["net6.0/lib/net6.0/PkgA.dll"].dependencies == []


def test_filtered_edges_are_recorded(sample_document: InputDocument) -> None:
    _, builder = _build(sample_document)

    reasons = sorted((dropped.kind, dropped.reason) for dropped in builder.dropped_edges)
    assert reasons == [("file", "file-group"), ("file", "placeholder"), ("package", "target-rid")]


def test_single_target_with_unknown_child() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0", Type="Package")],
        package_dependencies=[_package_edge("PkgA", "net6.0")],
    )

    world, _ = _build(document)

    assert world.keys() == ["net6.0"]
    assert world["net6.0"].dependencies == ["PkgA"]


def test_target_rid_edges_do_not_touch_the_world() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0")],
        file_definitions=[ItemRecord.create("lib/a.dll")],
        package_dependencies=[_package_edge("PkgA/1.0.0", "net6.0/win-x64")],
        file_dependencies=[_file_edge("lib/a.dll", "net6.0/win-x64", "PkgA/1.0.0")],
    )

    world, _ = _build(document)

    assert len(world) == 0


@pytest.mark.parametrize(
    "edge",
    [
        _file_edge("lib/a.dll", "net6.0", "", group=""),
        _file_edge("lib/a.dll", "net6.0", "", group="RuntimeAssembly"),
        _file_edge("lib/a.dll", "net6.0", "", group="compiletimeassembly"),
        _file_edge("lib/_._", "net6.0", ""),
    ],
)
def test_filtered_file_edges_do_not_touch_the_world(edge: ItemRecord) -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        file_definitions=[ItemRecord.create("lib/a.dll"), ItemRecord.create("lib/_._")],
        file_dependencies=[edge],
    )

    world, _ = _build(document)

    assert len(world) == 0


def test_configured_file_group_is_accepted() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        file_definitions=[ItemRecord.create("runtimes/win/a.dll")],
        file_dependencies=[_file_edge("runtimes/win/a.dll", "net6.0", "", group="RuntimeAssembly")],
    )
    builder = _builder(document, ConsolidationConfig.for_file_group("RuntimeAssembly"))

    world = builder.build([], document.file_dependencies)

    assert world["net6.0"].dependencies == ["runtimes/win/a.dll"]
    assert "net6.0/runtimes/win/a.dll" in world


def test_unresolved_parent_package_drops_the_edge(caplog: pytest.LogCaptureFixture) -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgB/2.0.0")],
        package_dependencies=[_package_edge("PkgB/2.0.0", "net6.0", "Missing/1.0.0")],
    )

    with caplog.at_level(logging.WARNING):
        world, builder = _build(document)

    assert len(world) == 0
    assert [dropped.reason for dropped in builder.dropped_edges] == ["unresolved-parent"]
    assert "unresolved parents" in caplog.text


def test_unresolved_parent_target_drops_the_edge() -> None:
    document = InputDocument(
        package_definitions=[ItemRecord.create("PkgA/1.0.0")],
        package_dependencies=[_package_edge("PkgA/1.0.0", "net48")],
    )

    world, builder = _build(document)

    assert len(world) == 0
    assert builder.dropped_edges[0].item_spec == "PkgA/1.0.0"


def test_existing_parent_accumulates_dependencies_in_order() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0"), ItemRecord.create("PkgB/2.0.0")],
        package_dependencies=[
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgB/2.0.0", "net6.0"),
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgB/2.0.0", "net6.0", "PkgA/1.0.0"),
        ],
    )

    world, _ = _build(document)

    assert world["net6.0"].dependencies == ["PkgA/1.0.0", "PkgB/2.0.0", "PkgA/1.0.0"]
    assert world["net6.0/PkgA/1.0.0"].dependencies == ["PkgB/2.0.0"]
    assert world["net6.0/PkgB/2.0.0"].dependencies == []


def test_keys_are_case_insensitive_and_keep_first_spelling() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0"), ItemRecord.create("PkgB/2.0.0")],
        package_dependencies=[
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgB/2.0.0", "NET6.0"),
            _package_edge("PKGA/1.0.0", "net6.0"),
        ],
    )

    world, _ = _build(document)

    assert world.keys() == ["net6.0/PkgA/1.0.0", "net6.0", "NET6.0/PkgB/2.0.0"]
    assert world["NET6.0"].dependencies == ["PkgA/1.0.0", "PkgB/2.0.0", "PKGA/1.0.0"]


def test_same_package_under_two_targets_gets_separate_nodes() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0"), ItemRecord.create("net48")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0", Name="PkgA")],
        file_definitions=[ItemRecord.create("lib/net6.0/PkgA.dll")],
        package_dependencies=[
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgA/1.0.0", "net48"),
        ],
        file_dependencies=[_file_edge("lib/net6.0/PkgA.dll", "net6.0", "PkgA/1.0.0")],
    )

    world, builder = _build(document)

    modern = world["net6.0/PkgA/1.0.0"]
    legacy = world["net48/PkgA/1.0.0"]
    assert modern is not legacy
    assert modern == legacy
    assert modern.dependencies == ["lib/net6.0/PkgA.dll"]
    assert legacy.dependencies == []
    assert builder.registry.packages.get("PkgA/1.0.0").dependencies == []
    assert builder.registry.targets.get("net6.0").dependencies == []


def test_unresolved_parent_keeps_child_registered_by_earlier_edge() -> None:
    document = InputDocument(
        target_definitions=[ItemRecord.create("net6.0")],
        package_definitions=[ItemRecord.create("PkgA/1.0.0", Name="PkgA")],
        package_dependencies=[
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgA/1.0.0", "net6.0", "Missing/1.0.0"),
        ],
    )

    world, builder = _build(document)

    assert world.keys() == ["net6.0/PkgA/1.0.0", "net6.0"]
    assert world["net6.0/PkgA/1.0.0"].name == "PkgA"
    assert world["net6.0"].dependencies == ["PkgA/1.0.0"]
    assert [dropped.reason for dropped in builder.dropped_edges] == ["unresolved-parent"]
