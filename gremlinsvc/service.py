"""Client service lifecycle: enable, execute, disable."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from .cache import ScriptCache
from .cluster import Cluster, ConnectionFactory
from .config import ServiceConfig
from .descriptor import descriptor_from_config
from .engines import EngineLoader, ScriptEngine
from .errors import GraphConnectionError, ShutdownError
from .executor import QueryExecutor
from .models import ConnectionDescriptor, ResultCallback

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceState:
    """Everything created by one enable cycle."""

    descriptor: ConnectionDescriptor
    cluster: Cluster
    engine: ScriptEngine
    cache: ScriptCache
    executor: QueryExecutor
    traversal_source_name: str | None = None


class GremlinClientService:
    """Scriptable client that runs queries against a remote Gremlin Server."""

    CAPABILITY_DESCRIPTION = (
        "A client service that opens a remote traversal against a Gremlin Server "
        "and runs script-style queries against it."
    )
    TAGS = ("graph", "database", "gremlin", "tinkerpop")

    def __init__(
        self,
        *,
        engine_loader: EngineLoader | None = None,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self._engine_loader = engine_loader or EngineLoader()
        self._connection_factory = connection_factory
        self._state: ServiceState | None = None

    @property
    def enabled(self) -> bool:
        return self._state is not None

    @property
    def descriptor(self) -> ConnectionDescriptor | None:
        state = self._state
        return state.descriptor if state else None

    @property
    def transit_url(self) -> str | None:
        state = self._state
        return state.descriptor.transit_url if state else None

    @property
    def cache(self) -> ScriptCache | None:
        state = self._state
        return state.cache if state else None

    def get_transit_url(self) -> str | None:
        return self.transit_url

    def enable(self, config: ServiceConfig) -> None:
        """Build the connection descriptor and an empty script cache."""

        if self._state is not None:
            LOG.info("Re-enabling service; tearing down previous state")
            self.disable()
        descriptor = descriptor_from_config(config)
        engine = self._engine_loader.get_engine(config.script_engine)
        cluster = Cluster(descriptor, connection_factory=self._connection_factory)
        cache = ScriptCache(engine)
        traversal_source_name = config.resolved_traversal_source()
        executor = QueryExecutor(cluster, cache, engine, traversal_source_name=traversal_source_name)
        self._state = ServiceState(
            descriptor=descriptor,
            cluster=cluster,
            engine=engine,
            cache=cache,
            executor=executor,
            traversal_source_name=traversal_source_name,
        )
        LOG.info(
            "Gremlin client service enabled",
            extra={"transit_url": descriptor.transit_url, "engine": engine.name},
        )

    def disable(self) -> None:
        """Drop the cache and close the cluster; state is cleared even on failure."""

        state = self._state
        if state is None:
            return
        self._state = None
        state.cache.clear()
        try:
            state.cluster.close()
        except Exception as exc:
            LOG.exception("Failed to close cluster", extra={"transit_url": state.descriptor.transit_url})
            raise ShutdownError(f"Failed to close connection to {state.descriptor.transit_url}: {exc}") from exc
        LOG.info("Gremlin client service disabled", extra={"transit_url": state.descriptor.transit_url})

    def execute_query(
        self,
        script: str,
        parameters: Mapping[str, object] | None,
        callback: ResultCallback,
    ) -> dict[str, str]:
        """Evaluate ``script`` with ``parameters``; the row goes to ``callback``."""

        state = self._state
        if state is None:
            raise GraphConnectionError("Gremlin client service is not enabled.")
        return state.executor.execute(script, parameters, callback)


__all__ = ["GremlinClientService", "ServiceState"]
