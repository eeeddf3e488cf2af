"""Entry point wiring configuration, tunnel, mapping and the HTTP transport."""

from __future__ import annotations

import json
import sys
from typing import List, Optional

from .arguments import build_command, parse_args
from .client import ESClient
from .config import Config, load_configuration
from .errors import ConfigError, MappingError, TransportError, TunnelError
from .mapping import map_command, resolve_base_url
from .tunnel import open_tunnel

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _log(tag: str, message: str) -> None:
    print(f"[{tag}] {message}", file=sys.stderr)


def _build_client(config: Config) -> ESClient:
    return ESClient.from_settings(config.elastic)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one command and return the process exit code."""

    args = parse_args(argv)
    command = build_command(args)

    try:
        config = load_configuration(args.config)
    except ConfigError as exc:
        _log("error", f"could not read configuration: {exc}")
        return EXIT_FAILURE

    base_url = resolve_base_url(config.elastic, config.proxy)
    try:
        request = map_command(command, base_url)
    except MappingError as exc:
        _log("error", str(exc))
        return EXIT_USAGE

    if args.dry_run:
        print(json.dumps(request.as_dict(), indent=2))
        return EXIT_OK

    try:
        if open_tunnel(config) is not None:
            _log("tunnel", f"forwarding {base_url} -> {config.elastic.host}:{config.elastic.port}")
    except TunnelError as exc:
        _log("error", str(exc))
        return EXIT_FAILURE

    if args.verbose:
        _log("request", f"{request.method} {request.url}")

    client = _build_client(config)
    try:
        result = client.execute(request)
    except TransportError as exc:
        _log("error", str(exc))
        return EXIT_FAILURE
    finally:
        client.close()

    print(json.dumps(result, indent=2))
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""

    sys.exit(main(sys.argv[1:]))


__all__ = ["EXIT_OK", "EXIT_FAILURE", "EXIT_USAGE", "main", "run"]
