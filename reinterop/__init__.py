"""Reinterop - C++ bindings generator for managed types."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("reinterop")
except PackageNotFoundError:
    __version__ = "(local)"
