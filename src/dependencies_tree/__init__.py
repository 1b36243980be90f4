"""Core package for consolidating build resolution records into a dependency world."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dependencies-tree")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev mode
    __version__ = "0.0.0"

__all__ = ["__version__"]
