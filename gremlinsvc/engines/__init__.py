"""Pluggable script engines and their loader."""

from .loader import ENTRY_POINT_GROUP, DiscoveredEngine, EngineLoader, get_engine
from .python import PythonScriptEngine, gremlin_namespace
from .types import CompiledUnit, ScriptEngine, fingerprint

__all__ = [
    "CompiledUnit",
    "DiscoveredEngine",
    "ENTRY_POINT_GROUP",
    "EngineLoader",
    "PythonScriptEngine",
    "ScriptEngine",
    "fingerprint",
    "get_engine",
    "gremlin_namespace",
]
