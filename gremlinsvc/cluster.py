"""Long-lived cluster handle that hands out per-call traversal sessions."""

from __future__ import annotations

import logging
import ssl
import threading
from typing import Any, Callable

from gremlin_python.driver.driver_remote_connection import DriverRemoteConnection
from gremlin_python.process.anonymous_traversal import traversal

from .errors import GraphConnectionError
from .models import DEFAULT_TRAVERSAL_SOURCE, ConnectionDescriptor, TlsMaterial

LOG = logging.getLogger(__name__)

ConnectionFactory = Callable[..., Any]


class TraversalSession:
    """Ephemeral remote connection plus the traversal source bound to it."""

    def __init__(
        self,
        connection: Any,
        g: Any,
        *,
        url: str,
        traversal_source: str,
        on_close: Callable[[TraversalSession], None] | None = None,
    ) -> None:
        self.connection = connection
        self.g = g
        self.url = url
        self.traversal_source = traversal_source
        self._on_close = on_close
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self.connection.close()
        finally:
            if self._on_close is not None:
                self._on_close(self)

    def __enter__(self) -> TraversalSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Cluster:
    """Shared connection resource built from a descriptor.

    Nothing touches the network until ``open_session`` is called. Contact
    points are used round-robin, one per session.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        *,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._connection_factory = connection_factory
        self._urls = descriptor.endpoint_urls()
        self._cursor = 0
        self._sessions: set[TraversalSession] = set()
        self._ssl_context: ssl.SSLContext | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def descriptor(self) -> ConnectionDescriptor:
        return self._descriptor

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def open_sessions(self) -> int:
        return len(self._sessions)

    def open_session(self, traversal_source_name: str | None = None) -> TraversalSession:
        """Open a remote connection and bind a traversal source to it."""

        source = traversal_source_name or DEFAULT_TRAVERSAL_SOURCE
        with self._lock:
            if self._closed:
                raise GraphConnectionError("Cluster is closed.")
            url = self._urls[self._cursor % len(self._urls)]
            self._cursor += 1
        try:
            kwargs: dict[str, object] = {}
            if self._descriptor.tls is not None:
                kwargs["ssl_options"] = self._get_ssl_context(self._descriptor.tls)
            factory = self._connection_factory or DriverRemoteConnection
            connection = factory(url, source, **kwargs)
        except Exception as exc:
            raise GraphConnectionError(f"Failed to open traversal session against {url}: {exc}") from exc
        try:
            g = traversal().with_(connection)
        except Exception as exc:
            _close_quietly(connection)
            raise GraphConnectionError(f"Failed to bind traversal source '{source}': {exc}") from exc
        session = TraversalSession(connection, g, url=url, traversal_source=source, on_close=self._release)
        with self._lock:
            closed = self._closed
            if not closed:
                self._sessions.add(session)
        if closed:
            _close_quietly(connection)
            raise GraphConnectionError("Cluster was closed while the session was opening.")
        LOG.debug("Opened traversal session", extra={"url": url, "traversal_source": source})
        return session

    def close(self) -> None:
        """Close the cluster and any sessions still open against it."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            sessions = tuple(self._sessions)
        first_error: Exception | None = None
        for session in sessions:
            try:
                session.close()
            except Exception as exc:
                LOG.warning("Failed to close traversal session", extra={"url": session.url})
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _release(self, session: TraversalSession) -> None:
        with self._lock:
            self._sessions.discard(session)

    def _get_ssl_context(self, material: TlsMaterial) -> ssl.SSLContext:
        with self._lock:
            if self._ssl_context is None:
                self._ssl_context = build_ssl_context(material)
            return self._ssl_context


def build_ssl_context(material: TlsMaterial) -> ssl.SSLContext:
    """Create a client SSL context from key/trust store references."""

    context = ssl.create_default_context(cafile=material.trust_store)
    if material.key_store:
        key_type = material.key_store_type.upper()
        if key_type != "PEM":
            raise GraphConnectionError(f"Unsupported key store type '{material.key_store_type}'; use PEM.")
        context.load_cert_chain(certfile=material.key_store, password=material.key_store_password)
    return context


def _close_quietly(connection: Any) -> None:
    try:
        connection.close()
    except Exception:  # pragma: no cover - best effort cleanup
        LOG.debug("Ignoring close failure on abandoned connection", exc_info=True)


__all__ = ["Cluster", "ConnectionFactory", "TraversalSession", "build_ssl_context"]
