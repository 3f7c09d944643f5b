"""Build immutable connection descriptors from service configuration."""

from __future__ import annotations

from typing import Sequence

from .config import ServiceConfig
from .errors import ConfigurationError
from .models import ConnectionDescriptor, TlsMaterial

MIN_PORT = 1
MAX_PORT = 65535


def parse_contact_points(text: str) -> tuple[str, ...]:
    """Split a comma-separated contact list, trimming each entry."""

    return tuple(entry.strip() for entry in text.split(",") if entry.strip())


def build_descriptor(
    contact_points: str | Sequence[str],
    port: int | str,
    path: str,
    tls: TlsMaterial | None = None,
) -> ConnectionDescriptor:
    """Validate connection settings and derive the transit URL."""

    if isinstance(contact_points, str):
        contacts = parse_contact_points(contact_points)
    else:
        contacts = tuple(str(entry).strip() for entry in contact_points if str(entry).strip())
    if not contacts:
        raise ConfigurationError("At least one contact point is required.")
    resolved_port = _validate_port(port)
    resolved_path = _validate_path(path)
    scheme = "gremlin+ssl" if tls is not None else "gremlin"
    transit_url = f"{scheme}://{','.join(contacts)}:{resolved_port}{resolved_path}"
    return ConnectionDescriptor(
        contact_points=contacts,
        port=resolved_port,
        path=resolved_path,
        transit_url=transit_url,
        tls=tls,
    )


def descriptor_from_config(config: ServiceConfig) -> ConnectionDescriptor:
    tls = config.tls.to_material() if config.tls is not None else None
    return build_descriptor(config.contact_points, config.port, config.path, tls)


def _validate_port(port: int | str) -> int:
    if isinstance(port, bool):
        raise ConfigurationError(f"Port must be an integer, got {port!r}.")
    try:
        value = int(port)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Port must be an integer, got {port!r}.") from exc
    if not MIN_PORT <= value <= MAX_PORT:
        raise ConfigurationError(f"Port must be between {MIN_PORT} and {MAX_PORT}, got {value}.")
    return value


def _validate_path(path: str) -> str:
    value = (path or "").strip()
    if not value:
        raise ConfigurationError("Path must not be empty.")
    if not value.startswith("/"):
        value = f"/{value}"
    return value


__all__ = [
    "MAX_PORT",
    "MIN_PORT",
    "build_descriptor",
    "descriptor_from_config",
    "parse_contact_points",
]
