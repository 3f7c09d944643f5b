"""Service configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError
from .models import TlsMaterial

CONFIG_FILE = Path.home() / ".config" / "gremlinsvc" / "config.toml"

DEFAULT_PORT = 8182
DEFAULT_PATH = "/gremlin"
DEFAULT_ENGINE = "python"


class TlsConfig(BaseModel):
    """TLS material references stored in the ``[tls]`` table."""

    key_store: str | None = None
    key_store_password: str | None = None
    key_store_type: str = "PEM"
    trust_store: str | None = None
    trust_store_password: str | None = None

    def to_material(self) -> TlsMaterial:
        return TlsMaterial(
            key_store=self.key_store,
            key_store_password=self.key_store_password,
            key_store_type=self.key_store_type,
            trust_store=self.trust_store,
            trust_store_password=self.trust_store_password,
        )


class ServiceConfig(BaseModel):
    """Shape of the client service configuration."""

    contact_points: str = Field(
        description="A comma-separated list of hostnames or IP addresses where a Gremlin Server can be found.",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        description="The port where Gremlin Server is running on each host listed as a contact point.",
    )
    path: str = Field(
        default=DEFAULT_PATH,
        description="The URL path where Gremlin Server is running on each host listed as a contact point.",
    )
    tls: TlsConfig | None = Field(
        default=None,
        description="Key/trust store material used for TLS connections. Setting it enables TLS.",
    )
    traversal_source_name: str | None = Field(
        default=None,
        description=(
            "Name of the remote traversal source. Useful with servers such as JanusGraph that "
            "expose several traversal sources at once."
        ),
    )
    script_engine: str = Field(
        default=DEFAULT_ENGINE,
        description="Name of the script engine used to compile query fragments.",
    )

    def resolved_traversal_source(self) -> str | None:
        """Return the named traversal source, or None for the server default."""

        name = (self.traversal_source_name or "").strip()
        return name or None

    def with_overrides(self, **updates: object) -> ServiceConfig:
        """Return a copy with the non-None overrides applied."""

        applied = {key: value for key, value in updates.items() if value is not None}
        return self.model_copy(update=applied)


def load_config(path: Path | None = None) -> ServiceConfig:
    """Load configuration from disk."""

    target = path or CONFIG_FILE
    try:
        data = _read_config_file(target)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file '{target}' not found.") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigurationError(f"Config file '{target}' could not be read: {exc}") from exc
    return parse_config(data)


def parse_config(data: dict[str, object]) -> ServiceConfig:
    """Validate a raw mapping into a ServiceConfig."""

    try:
        return ServiceConfig(**data)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid service configuration: {exc}") from exc


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if not isinstance(raw, dict):
        return data
    for key in ("contact_points", "path", "traversal_source_name", "script_engine"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    contact_points = raw.get("contact_points")
    if isinstance(contact_points, list):
        data["contact_points"] = ",".join(str(entry) for entry in contact_points)
    port = raw.get("port")
    if isinstance(port, (int, str)) and not isinstance(port, bool):
        data["port"] = port
    tls = raw.get("tls")
    if isinstance(tls, dict):
        parsed: dict[str, str] = {}
        for key in ("key_store", "key_store_password", "key_store_type", "trust_store", "trust_store_password"):
            value = tls.get(key)
            if isinstance(value, str):
                parsed[key] = value
        data["tls"] = parsed
    return data


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_ENGINE",
    "DEFAULT_PATH",
    "DEFAULT_PORT",
    "ServiceConfig",
    "TlsConfig",
    "load_config",
    "parse_config",
]
