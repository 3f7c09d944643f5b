"""Script engine discovery via entry points."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from gremlinsvc.errors import ConfigurationError

from .python import PythonScriptEngine
from .types import ScriptEngine

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "gremlinsvc.engines"


@dataclass(slots=True, frozen=True)
class DiscoveredEngine:
    """Metadata captured from entry point discovery."""

    name: str
    entry_point: metadata.EntryPoint
    factory: Any


class EngineLoader:
    """Discovers script engines exposed via entry points."""

    def __init__(
        self,
        *,
        entry_point_group: str = ENTRY_POINT_GROUP,
        builtin_engines: Iterable[type[ScriptEngine] | ScriptEngine] | None = None,
    ) -> None:
        self._entry_point_group = entry_point_group
        self._builtin_engines = list(builtin_engines if builtin_engines is not None else (PythonScriptEngine,))
        self._discovered: dict[str, DiscoveredEngine] = {}

    def discover(self) -> list[DiscoveredEngine]:
        """Enumerate engines from entry points, then fill in built-ins."""

        eps = metadata.entry_points()
        group = eps.select(group=self._entry_point_group)
        discovered: dict[str, DiscoveredEngine] = {}
        for entry_point in sorted(group, key=lambda ep: ep.name):
            try:
                factory = entry_point.load()
            except Exception:
                LOG.exception("Script engine failed to load", extra={"engine": entry_point.name})
                continue
            discovered[entry_point.name] = DiscoveredEngine(
                name=entry_point.name,
                entry_point=entry_point,
                factory=factory,
            )
        for builtin in self._iter_builtin_engines():
            discovered.setdefault(builtin.name, builtin)
        self._discovered = discovered
        return list(discovered.values())

    def names(self) -> tuple[str, ...]:
        if not self._discovered:
            self.discover()
        return tuple(self._discovered)

    def get_engine(self, name: str) -> ScriptEngine:
        """Instantiate the engine registered under ``name``."""

        if not self._discovered:
            self.discover()
        engine = self._discovered.get(name)
        if engine is None:
            known = ", ".join(sorted(self._discovered)) or "none"
            raise ConfigurationError(f"Unknown script engine '{name}' (available: {known}).")
        instance = engine.factory() if inspect.isclass(engine.factory) else engine.factory
        if not isinstance(instance, ScriptEngine):
            raise ConfigurationError(f"Entry point '{name}' does not provide a script engine.")
        return instance

    def _iter_builtin_engines(self) -> list[DiscoveredEngine]:
        builtins: list[DiscoveredEngine] = []
        for engine in self._builtin_engines:
            cls = engine if inspect.isclass(engine) else engine.__class__
            entry_point = metadata.EntryPoint(
                name=cls.name,
                value=f"{cls.__module__}:{cls.__qualname__}",
                group=self._entry_point_group,
            )
            builtins.append(DiscoveredEngine(name=cls.name, entry_point=entry_point, factory=engine))
        return builtins


def get_engine(name: str) -> ScriptEngine:
    """Resolve a script engine by name using the default loader."""

    return EngineLoader().get_engine(name)


__all__ = ["DiscoveredEngine", "ENTRY_POINT_GROUP", "EngineLoader", "get_engine"]
