"""Script engine contract shared by the cache, executor and engine plugins."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable


def fingerprint(source: str) -> str:
    """Deterministic content hash used to key compiled units."""

    return hashlib.sha256(source.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class CompiledUnit:
    """Pre-parsed, directly evaluable form of a query fragment."""

    source: str
    engine: str
    payload: Any

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.source)


@runtime_checkable
class ScriptEngine(Protocol):
    """Protocol implemented by script engines."""

    name: str

    def compile(self, text: str) -> CompiledUnit:
        """Compile script text; raise ScriptCompilationError on failure."""

    def evaluate(self, unit: CompiledUnit, bindings: Mapping[str, object]) -> object:
        """Evaluate a compiled unit against the given bindings."""


__all__ = ["CompiledUnit", "ScriptEngine", "fingerprint"]
