"""Scriptable client service for remote Gremlin servers."""

from __future__ import annotations

from .config import ServiceConfig, TlsConfig, load_config
from .errors import (
    ConfigurationError,
    ExecutionError,
    GraphConnectionError,
    GremlinServiceError,
    ScriptCompilationError,
    ShutdownError,
)
from .service import GremlinClientService

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "GraphConnectionError",
    "GremlinClientService",
    "GremlinServiceError",
    "ScriptCompilationError",
    "ServiceConfig",
    "ShutdownError",
    "TlsConfig",
    "__version__",
    "load_config",
]
