"""Content-addressed cache of compiled query fragments."""

from __future__ import annotations

import logging
import threading

from .engines.types import CompiledUnit, ScriptEngine, fingerprint
from .errors import ScriptCompilationError

LOG = logging.getLogger(__name__)


class ScriptCache:
    """Maps script fingerprints to compiled units, compiling each at most once.

    Entries are insert-only. Callers racing on the same uncached script wait on
    a per-fingerprint gate so only one of them compiles. Failed compilations
    are never stored; the gate stays in place so the next attempt is still
    serialized with any callers already waiting.
    """

    def __init__(self, engine: ScriptEngine) -> None:
        self._engine = engine
        self._units: dict[str, CompiledUnit] = {}
        self._gates: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def get_or_compile(self, source: str) -> CompiledUnit:
        """Return the cached unit for ``source``, compiling it on first use."""

        key = fingerprint(source)
        unit = self._units.get(key)
        if unit is not None:
            return unit
        with self._lock:
            unit = self._units.get(key)
            if unit is not None:
                return unit
            gate = self._gates.setdefault(key, threading.Lock())
        with gate:
            unit = self._units.get(key)
            if unit is not None:
                return unit
            unit = self._compile(source)
            with self._lock:
                unit = self._units.setdefault(key, unit)
                self._gates.pop(key, None)
        LOG.debug("Compiled script", extra={"fingerprint": key[:12], "engine": self._engine.name})
        return unit

    def __contains__(self, source: object) -> bool:
        return isinstance(source, str) and fingerprint(source) in self._units

    def __len__(self) -> int:
        return len(self._units)

    def clear(self) -> None:
        """Drop every cached unit."""

        with self._lock:
            self._units.clear()
            self._gates.clear()

    def _compile(self, source: str) -> CompiledUnit:
        try:
            return self._engine.compile(source)
        except ScriptCompilationError:
            raise
        except Exception as exc:
            raise ScriptCompilationError(f"Script failed to compile: {exc}") from exc


__all__ = ["ScriptCache"]
