"""Staging plugin implementations and selection by framework."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Iterable, List, Type

from ..errors import UnknownFramework
from .base import StagingPlugin
from .buildpack import BuildpackPlugin
from .node import NodePlugin
from .sinatra import SinatraPlugin

_ENTRY_POINT_GROUP = "stager.plugins"

_BUILTIN_PLUGINS: Dict[str, Type[StagingPlugin]] = {
    "buildpack": BuildpackPlugin,
    "sinatra": SinatraPlugin,
    "node": NodePlugin,
}


def plugin_class_for(framework: str) -> Type[StagingPlugin]:
    """Return the plugin class staging ``framework``.

    Built-in plugins win over entry points registered under ``stager.plugins``.
    """
    key = (framework or "buildpack").lower()
    if key in _BUILTIN_PLUGINS:
        return _BUILTIN_PLUGINS[key]

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load staging plugin entry point '{entry.name}': {exc}") from exc
        if not (isinstance(loaded, type) and issubclass(loaded, StagingPlugin)):
            raise TypeError(f"Staging plugin entry point '{entry.name}' must be a StagingPlugin subclass")
        return loaded

    raise UnknownFramework(f"No staging plugin is registered for framework '{framework}'")


def available_frameworks() -> List[str]:
    names = set(_BUILTIN_PLUGINS)
    names.update(entry.name.lower() for entry in _iter_entry_points())
    return sorted(names)


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BuildpackPlugin",
    "NodePlugin",
    "SinatraPlugin",
    "StagingPlugin",
    "available_frameworks",
    "plugin_class_for",
]
