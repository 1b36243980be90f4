"""Composite world keys."""

from __future__ import annotations

SEPARATOR = "/"


def world_key(parent_target_id: str, parent_package_id: str, *, separator: str = SEPARATOR) -> str:
    """Key of the world entry representing a parent.

    One leading and one trailing separator are stripped, so an empty package id
    yields the bare target id.
    """

    key = f"{parent_target_id}{separator}{parent_package_id}"
    if key.startswith(separator):
        key = key[len(separator):]
    if key.endswith(separator):
        key = key[: -len(separator)]
    return key


def child_key(parent_target_id: str, child_id: str, *, separator: str = SEPARATOR) -> str:
    return f"{parent_target_id}{separator}{child_id}"


def key_target(key: str, *, separator: str = SEPARATOR) -> str:
    """Target id a world key lives under (targets never contain the separator)."""

    return key.split(separator, 1)[0]


__all__ = ["child_key", "key_target", "world_key"]
