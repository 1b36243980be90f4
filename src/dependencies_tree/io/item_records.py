"""Item records exchanged with the build and their JSON representation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from requests.structures import CaseInsensitiveDict

TARGET_DEFINITIONS = "targetDefinitions"
PACKAGE_DEFINITIONS = "packageDefinitions"
FILE_DEFINITIONS = "fileDefinitions"
PACKAGE_DEPENDENCIES = "packageDependencies"
FILE_DEPENDENCIES = "fileDependencies"
DEPENDENCIES_WORLD = "dependenciesWorld"


def _metadata_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass
class ItemRecord:
    """An identity string plus named string metadata; unknown names read as ``""``."""

    item_spec: str
    metadata: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, CaseInsensitiveDict):
            self.metadata = CaseInsensitiveDict(
                {name: _metadata_value(value) for name, value in dict(self.metadata).items()}
            )

    @classmethod
    def create(cls, item_spec: str, **metadata: object) -> "ItemRecord":
        return cls(item_spec, CaseInsensitiveDict({k: _metadata_value(v) for k, v in metadata.items()}))

    def get_metadata(self, name: str) -> str:
        return self.metadata.get(name) or ""

    def as_dict(self) -> dict:
        return {"itemSpec": self.item_spec, "metadata": dict(self.metadata.items())}

    @classmethod
    def from_dict(cls, payload: Mapping) -> "ItemRecord":
        if not isinstance(payload, Mapping):
            raise ValueError(f"Item must be an object, got {type(payload).__name__}")
        item_spec = payload.get("itemSpec")
        if not isinstance(item_spec, str):
            raise ValueError(f"Item is missing a string 'itemSpec': {payload!r}")
        metadata = payload.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise ValueError(f"Metadata of {item_spec!r} must be an object")
        return cls(item_spec, metadata)


@dataclass(slots=True)
class InputDocument:
    """The five record lists consumed by a single consolidation run."""

    target_definitions: List[ItemRecord] = field(default_factory=list)
    package_definitions: List[ItemRecord] = field(default_factory=list)
    file_definitions: List[ItemRecord] = field(default_factory=list)
    package_dependencies: List[ItemRecord] = field(default_factory=list)
    file_dependencies: List[ItemRecord] = field(default_factory=list)


def _parse_section(payload: dict, section: str) -> List[ItemRecord]:
    items = payload.get(section)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"Section {section!r} must be a list")
    return [ItemRecord.from_dict(item) for item in items]


def parse_input_document(payload: object) -> InputDocument:
    """Build an :class:`InputDocument` from decoded JSON, treating absent sections as empty."""

    if not isinstance(payload, dict):
        raise ValueError("Input document must be a JSON object")
    return InputDocument(
        target_definitions=_parse_section(payload, TARGET_DEFINITIONS),
        package_definitions=_parse_section(payload, PACKAGE_DEFINITIONS),
        file_definitions=_parse_section(payload, FILE_DEFINITIONS),
        package_dependencies=_parse_section(payload, PACKAGE_DEPENDENCIES),
        file_dependencies=_parse_section(payload, FILE_DEPENDENCIES),
    )


def load_input_document(path: Path) -> InputDocument:
    """Load the JSON input document describing targets, packages, files and their edges."""

    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed JSON in {path}: {exc}") from exc
    return parse_input_document(payload)


def dump_output_document(records: Iterable[ItemRecord]) -> str:
    payload = {DEPENDENCIES_WORLD: [record.as_dict() for record in records]}
    return json.dumps(payload, indent=2)


def write_output_document(records: Iterable[ItemRecord], destination: Optional[Path] = None) -> str:
    """Serialise output records; also persist them when ``destination`` is given."""

    text = dump_output_document(records)
    if destination is not None:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(text, encoding="utf-8")
    return text


__all__ = [
    "InputDocument",
    "ItemRecord",
    "dump_output_document",
    "load_input_document",
    "parse_input_document",
    "write_output_document",
]
