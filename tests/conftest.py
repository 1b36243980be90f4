"""Shared sample records: one target holding one package holding one compile-time file."""

from __future__ import annotations

import pytest

from dependencies_tree.io.item_records import InputDocument, ItemRecord


def _package_edge(child: str, target: str, package: str = "") -> ItemRecord:
    return ItemRecord.create(child, ParentTarget=target, ParentPackage=package)


def _file_edge(child: str, target: str, package: str, group: str = "CompileTimeAssembly") -> ItemRecord:
    return ItemRecord.create(child, ParentTarget=target, ParentPackage=package, FileGroup=group)


@pytest.fixture
def sample_document() -> InputDocument:
    return InputDocument(
        target_definitions=[
            ItemRecord.create("net6.0", TargetFramework="net6.0", FrameworkName=".NETCoreApp", FrameworkVersion="6.0"),
            ItemRecord.create("net6.0/win-x64", RuntimeIdentifier="win-x64"),
        ],
        package_definitions=[
            ItemRecord.create("PkgA/1.0.0", Name="PkgA", Version="1.0.0", Type="Package", Path="pkga/1.0.0"),
        ],
        file_definitions=[
            ItemRecord.create("lib/net6.0/PkgA.dll", Path="pkga/1.0.0/lib/net6.0/PkgA.dll"),
        ],
        package_dependencies=[
            _package_edge("PkgA/1.0.0", "net6.0"),
            _package_edge("PkgA/1.0.0", "net6.0/win-x64"),
        ],
        file_dependencies=[
            _file_edge("lib/net6.0/PkgA.dll", "net6.0", "PkgA/1.0.0"),
            _file_edge("lib/net6.0/_._", "net6.0", "PkgA/1.0.0"),
            _file_edge("runtimes/win/PkgA.dll", "net6.0", "PkgA/1.0.0", group="RuntimeAssembly"),
        ],
    )
