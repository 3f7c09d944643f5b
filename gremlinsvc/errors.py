"""Error taxonomy surfaced by the Gremlin client service."""

from __future__ import annotations


class GremlinServiceError(RuntimeError):
    """Base error for every failure the service reports to its host."""


class ConfigurationError(GremlinServiceError):
    """Raised when connection settings are malformed at enable time."""


class ScriptCompilationError(GremlinServiceError):
    """Raised when a query fragment fails to compile."""


class GraphConnectionError(GremlinServiceError, ConnectionError):
    """Raised when the remote connection or a traversal session is unusable."""


class ExecutionError(GremlinServiceError):
    """Raised when binding parameters or evaluating a compiled unit fails."""


class ShutdownError(GremlinServiceError):
    """Raised when releasing the shared connection resource fails."""


__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "GraphConnectionError",
    "GremlinServiceError",
    "ScriptCompilationError",
    "ShutdownError",
]
