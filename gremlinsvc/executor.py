"""Per-call query execution against a remote Gremlin traversal source."""

from __future__ import annotations

import logging
import time
from typing import Mapping

from .cache import ScriptCache
from .cluster import Cluster, TraversalSession
from .engines.types import ScriptEngine
from .errors import ExecutionError, GraphConnectionError, GremlinServiceError
from .models import DEFAULT_TRAVERSAL_SOURCE, RESULT_KEY, NormalizedResult, ResultCallback

LOG = logging.getLogger(__name__)

TRAVERSAL_BINDING = DEFAULT_TRAVERSAL_SOURCE


def normalize_result(value: object) -> NormalizedResult:
    """Pass mappings through; wrap anything else under the ``result`` key."""

    if isinstance(value, Mapping):
        return value
    return {RESULT_KEY: value}


class QueryExecutor:
    """Opens a session, evaluates one cached script and delivers its row."""

    def __init__(
        self,
        cluster: Cluster,
        cache: ScriptCache,
        engine: ScriptEngine,
        *,
        traversal_source_name: str | None = None,
    ) -> None:
        self._cluster = cluster
        self._cache = cache
        self._engine = engine
        self._traversal_source_name = traversal_source_name

    def execute(
        self,
        script: str,
        parameters: Mapping[str, object] | None,
        callback: ResultCallback,
    ) -> dict[str, str]:
        """Run ``script`` and hand the normalized row to ``callback``.

        The callback fires exactly once with ``has_more=False``. The return
        value is always an empty mapping; results travel only through the
        callback.
        """

        started = time.perf_counter()
        session = self._open_session()
        try:
            unit = self._cache.get_or_compile(script)
            bindings = _build_bindings(parameters, session)
            try:
                value = self._engine.evaluate(unit, bindings)
            except GremlinServiceError:
                raise
            except Exception as exc:
                if self._session_lost(session):
                    raise GraphConnectionError(f"Traversal session closed during evaluation: {exc}") from exc
                raise ExecutionError(f"Script evaluation failed: {exc}") from exc
            if self._session_lost(session):
                raise GraphConnectionError("Traversal session closed before the result was delivered.")
            row = normalize_result(value)
            try:
                callback(row, False)
            except Exception as exc:
                raise ExecutionError(f"Result callback failed: {exc}") from exc
        finally:
            _close_session(session)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        LOG.debug(
            "Executed script",
            extra={"fingerprint": unit.fingerprint[:12], "elapsed_ms": elapsed_ms, "url": session.url},
        )
        return {}

    def _session_lost(self, session: TraversalSession) -> bool:
        return session.closed or self._cluster.closed

    def _open_session(self) -> TraversalSession:
        try:
            return self._cluster.open_session(self._traversal_source_name)
        except GraphConnectionError:
            raise
        except Exception as exc:
            raise GraphConnectionError(f"Failed to open traversal session: {exc}") from exc


def _build_bindings(parameters: Mapping[str, object] | None, session: TraversalSession) -> dict[str, object]:
    if parameters is not None and not isinstance(parameters, Mapping):
        raise ExecutionError(f"Parameters must be a mapping, got {type(parameters).__name__}.")
    bindings: dict[str, object] = {}
    for name, value in (parameters or {}).items():
        if not isinstance(name, str) or not name:
            raise ExecutionError(f"Parameter names must be non-empty strings, got {name!r}.")
        if name == TRAVERSAL_BINDING:
            raise ExecutionError(f"Parameter name '{TRAVERSAL_BINDING}' is reserved for the traversal source.")
        bindings[name] = value
    bindings[TRAVERSAL_BINDING] = session.g
    return bindings


def _close_session(session: TraversalSession) -> None:
    try:
        session.close()
    except Exception:  # pragma: no cover - best effort cleanup
        LOG.warning("Failed to close traversal session", extra={"url": session.url}, exc_info=True)


__all__ = ["QueryExecutor", "TRAVERSAL_BINDING", "normalize_result"]
