"""Shared dataclasses used across descriptor/cluster/executor modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

NormalizedResult = Mapping[str, object]
ResultCallback = Callable[[NormalizedResult, bool], None]

RESULT_KEY = "result"
DEFAULT_TRAVERSAL_SOURCE = "g"


@dataclass(frozen=True, slots=True)
class TlsMaterial:
    """Key/trust store references handed through to the TLS layer."""

    key_store: str | None = None
    key_store_password: str | None = None
    key_store_type: str = "PEM"
    trust_store: str | None = None
    trust_store_password: str | None = None


@dataclass(frozen=True, slots=True)
class ConnectionDescriptor:
    """Immutable description of how to reach the Gremlin servers."""

    contact_points: tuple[str, ...]
    port: int
    path: str
    transit_url: str
    tls: TlsMaterial | None = None

    @property
    def tls_enabled(self) -> bool:
        return self.tls is not None

    def endpoint_urls(self) -> tuple[str, ...]:
        """Websocket URL for every contact point, in configured order."""

        scheme = "wss" if self.tls_enabled else "ws"
        return tuple(f"{scheme}://{host}:{self.port}{self.path}" for host in self.contact_points)


__all__ = [
    "ConnectionDescriptor",
    "DEFAULT_TRAVERSAL_SOURCE",
    "NormalizedResult",
    "RESULT_KEY",
    "ResultCallback",
    "TlsMaterial",
]
