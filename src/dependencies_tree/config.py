"""Configuration primitives for the project."""

from __future__ import annotations

from dataclasses import dataclass

TARGET_TYPE = "Target"
PACKAGE_TYPE = "Package"
ASSEMBLY_TYPE = "Assembly"
COMPILE_TIME_ASSEMBLY = "CompileTimeAssembly"
PLACEHOLDER_SUFFIX = "_._"


@dataclass(slots=True)
class ConsolidationConfig:
    """Settings guiding how raw resolution records are folded into the world."""

    key_separator: str = "/"
    dependency_separator: str = ";"
    file_group: str = COMPILE_TIME_ASSEMBLY
    placeholder_suffix: str = PLACEHOLDER_SUFFIX
    target_type: str = TARGET_TYPE
    package_type: str = PACKAGE_TYPE
    file_type: str = ASSEMBLY_TYPE

    @classmethod
    def for_file_group(cls, file_group: str) -> "ConsolidationConfig":
        """Factory helper accepting file edges of ``file_group`` instead of compile-time assemblies."""

        return cls(file_group=file_group)


DEFAULT_CONFIG = ConsolidationConfig()
