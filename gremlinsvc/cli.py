"""Run a single Gremlin script from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import CONFIG_FILE, ServiceConfig, load_config, parse_config
from .errors import GremlinServiceError, ShutdownError
from .models import NormalizedResult
from .service import GremlinClientService

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gremlinsvc", description=__doc__)
    parser.add_argument("script", help="Script text, '@path' to read it from a file, or '-' for stdin")
    parser.add_argument("--config", type=Path, help=f"TOML config file (default: {CONFIG_FILE})")
    parser.add_argument("--contact-points", help="Comma-separated Gremlin Server hosts")
    parser.add_argument("--port", type=int, help="Gremlin Server port")
    parser.add_argument("--path", help="Gremlin Server URL path")
    parser.add_argument("--traversal-source", help="Remote traversal source name")
    parser.add_argument("--engine", help="Script engine name")
    parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Bind a script parameter; VALUE is parsed as JSON when possible",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_parameters(pairs: list[str]) -> dict[str, object]:
    """Turn NAME=VALUE pairs into script bindings."""

    parameters: dict[str, object] = {}
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'.")
        try:
            parameters[name] = json.loads(raw)
        except json.JSONDecodeError:
            parameters[name] = raw
    return parameters


def read_script(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        return Path(value[1:]).read_text()
    return value


def resolve_config(args: argparse.Namespace) -> ServiceConfig:
    """Merge the config file (if any) with command-line overrides."""

    overrides = {
        "contact_points": args.contact_points,
        "port": args.port,
        "path": args.path,
        "traversal_source_name": args.traversal_source,
        "script_engine": args.engine,
    }
    if args.config is None and args.contact_points:
        return parse_config({key: value for key, value in overrides.items() if value is not None})
    return load_config(args.config).with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        parameters = parse_parameters(args.param)
        script = read_script(args.script)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))

    rows: list[NormalizedResult] = []
    service = GremlinClientService()
    try:
        service.enable(resolve_config(args))
        print(f"Connected to {service.get_transit_url()}", file=sys.stderr)
        service.execute_query(script, parameters, lambda row, _has_more: rows.append(row))
    except GremlinServiceError as exc:
        LOG.debug("Query failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        try:
            service.disable()
        except ShutdownError as exc:
            print(f"warning: {exc}", file=sys.stderr)
    for row in rows:
        print(json.dumps(dict(row), default=str, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
