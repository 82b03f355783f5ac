"""cf-copilot CLI: drive a copilot server the way Cloud Controller does."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Optional

from .client import Client
from .config import ClientSettings, load_settings
from .core.errors import ConfigurationError, RemoteCallError, StartupTimeoutError
from .core.models import ProcessAssociation, Route, RouteMapping
from .health import wait_until_healthy
from .telemetry.logging import get_logger
from .utils.env import env_float, env_int, env_str

EXIT_OK = 0
EXIT_REMOTE = 1
EXIT_CONFIG = 2


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port_s = address.rpartition(":")
    if not sep or not host:
        raise ConfigurationError(f"address must be host:port, got {address!r}")
    try:
        port = int(port_s)
    except ValueError as e:
        raise ConfigurationError(f"address port is not a number: {address!r}") from e
    return host.strip("[]"), port


def _settings_from_args(args: argparse.Namespace) -> ClientSettings:
    """Merge --config file, flags and CFCOPILOT_* env vars (flags win)."""
    base: dict[str, Any] = {}
    if args.config:
        base = load_settings(args.config).model_dump(exclude_unset=True)
    address = args.address or env_str("CFCOPILOT_ADDRESS")
    if address:
        base["host"], base["port"] = _split_address(address)
    overrides = {
        "client_ca_path": args.ca or env_str("CFCOPILOT_CA"),
        "client_key_path": args.key or env_str("CFCOPILOT_KEY"),
        "client_chain_path": args.cert or env_str("CFCOPILOT_CERT"),
        "server_name": args.server_name,
    }
    base.update({k: v for k, v in overrides.items() if v})
    if args.timeout is not None:
        base["timeout"] = args.timeout
    elif "timeout" not in base:
        base["timeout"] = env_float("CFCOPILOT_TIMEOUT", 5.0)
    missing = [k for k in ("host", "port", "client_ca_path", "client_key_path", "client_chain_path") if k not in base]
    if missing:
        raise ConfigurationError(
            "missing one of the following required settings: [address, ca, key, cert] "
            f"(missing: {', '.join(missing)})"
        )
    try:
        return ClientSettings.model_validate(base)
    except ValueError as e:
        raise ConfigurationError(f"invalid settings: {e}") from e


def _make_client(args: argparse.Namespace) -> Client:
    return Client.from_settings(_settings_from_args(args))


def _print(obj: Any) -> None:
    print(json.dumps(obj, indent=2, sort_keys=True))


def _load_bulk_state(path: str) -> dict[str, list]:
    try:
        raw = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"reading bulk sync state {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"bulk sync state {path} must be a JSON object")
    try:
        return {
            "routes": [Route.coerce(r) for r in raw.get("routes") or []],
            "route_mappings": [RouteMapping.coerce(m) for m in raw.get("route_mappings") or []],
            "process_associations": [
                ProcessAssociation.coerce(a) for a in raw.get("capi_diego_process_associations") or []
            ],
        }
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"bulk sync state {path}: {e}") from e


def _cmd_health(c: Client, args: argparse.Namespace) -> int:
    healthy = c.check_health()
    _print({"healthy": healthy})
    return EXIT_OK if healthy else EXIT_REMOTE


def _cmd_wait_healthy(c: Client, args: argparse.Namespace) -> int:
    checks = wait_until_healthy(c, retries=args.retries, interval=args.interval)
    _print({"healthy": True, "checks": checks})
    return EXIT_OK


def _cmd_upsert_route(c: Client, args: argparse.Namespace) -> int:
    c.upsert_route(guid=args.guid, host=args.host, path=args.path)
    return EXIT_OK


def _cmd_delete_route(c: Client, args: argparse.Namespace) -> int:
    c.delete_route(guid=args.guid)
    return EXIT_OK


def _cmd_map_route(c: Client, args: argparse.Namespace) -> int:
    c.map_route(capi_process_guid=args.capi_process_guid, route_guid=args.route_guid)
    return EXIT_OK


def _cmd_unmap_route(c: Client, args: argparse.Namespace) -> int:
    c.unmap_route(capi_process_guid=args.capi_process_guid, route_guid=args.route_guid)
    return EXIT_OK


def _cmd_upsert_association(c: Client, args: argparse.Namespace) -> int:
    c.upsert_process_association(
        capi_process_guid=args.capi_process_guid,
        diego_process_guids=args.diego_process_guid,
    )
    return EXIT_OK


def _cmd_delete_association(c: Client, args: argparse.Namespace) -> int:
    c.delete_process_association(capi_process_guid=args.capi_process_guid)
    return EXIT_OK


def _cmd_bulk_sync(c: Client, args: argparse.Namespace) -> int:
    state = _load_bulk_state(args.file)
    c.bulk_sync(**state)
    _print({k: len(v) for k, v in state.items()})
    return EXIT_OK


def _cmd_list_routes(c: Client, args: argparse.Namespace) -> int:
    _print(c.list_routes())
    return EXIT_OK


def _cmd_list_route_mappings(c: Client, args: argparse.Namespace) -> int:
    _print(
        {
            k: {"capi_process_guid": m.capi_process_guid, "route_guid": m.route_guid}
            for k, m in c.list_route_mappings().items()
        }
    )
    return EXIT_OK


def _cmd_list_associations(c: Client, args: argparse.Namespace) -> int:
    _print(c.list_process_associations())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cf-copilot")
    p.add_argument("--config", default=None, help="JSON client settings file")
    p.add_argument("--address", default=None, help="host:port of copilot server (or CFCOPILOT_ADDRESS)")
    p.add_argument("--ca", default=None, help="Path to CA bundle for the copilot server (or CFCOPILOT_CA)")
    p.add_argument("--cert", default=None, help="Path to client certificate chain (or CFCOPILOT_CERT)")
    p.add_argument("--key", default=None, help="Path to client private key (or CFCOPILOT_KEY)")
    p.add_argument("--timeout", type=float, default=None, help="Per-call timeout in seconds (default 5)")
    p.add_argument("--server-name", default=None, help="Override the TLS server name to verify")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("health", help="Ask copilot whether it is healthy")
    sp.set_defaults(func=_cmd_health)

    sp = sub.add_parser("wait-healthy", help="Poll health until copilot is up")
    sp.add_argument("--retries", type=int, default=env_int("CFCOPILOT_HEALTH_RETRIES", 5, minimum=0))
    sp.add_argument("--interval", type=float, default=env_float("CFCOPILOT_HEALTH_INTERVAL", 1.0, minimum=0.0))
    sp.set_defaults(func=_cmd_wait_healthy)

    sp = sub.add_parser("upsert-route", help="Create or update a route")
    sp.add_argument("--guid", required=True)
    sp.add_argument("--host", required=True, help="Route hostname (e.g. foo.example.com)")
    sp.add_argument("--path", default=None)
    sp.set_defaults(func=_cmd_upsert_route)

    sp = sub.add_parser("delete-route", help="Delete a route")
    sp.add_argument("--guid", required=True)
    sp.set_defaults(func=_cmd_delete_route)

    for name, func, help_ in (
        ("map-route", _cmd_map_route, "Map a route to a CAPI process"),
        ("unmap-route", _cmd_unmap_route, "Unmap a route from a CAPI process"),
    ):
        sp = sub.add_parser(name, help=help_)
        sp.add_argument("--capi-process-guid", required=True)
        sp.add_argument("--route-guid", required=True)
        sp.set_defaults(func=func)

    sp = sub.add_parser("upsert-association", help="Associate a CAPI process with Diego processes")
    sp.add_argument("--capi-process-guid", required=True)
    sp.add_argument("--diego-process-guid", action="append", required=True, help="Repeat for each Diego process")
    sp.set_defaults(func=_cmd_upsert_association)

    sp = sub.add_parser("delete-association", help="Remove a CAPI/Diego process association")
    sp.add_argument("--capi-process-guid", required=True)
    sp.set_defaults(func=_cmd_delete_association)

    sp = sub.add_parser("bulk-sync", help="Send full routing state (experimental)")
    sp.add_argument("--file", required=True, help="JSON with routes, route_mappings, capi_diego_process_associations")
    sp.set_defaults(func=_cmd_bulk_sync)

    sp = sub.add_parser("list-routes", help="Dump routes known to copilot (debug)")
    sp.set_defaults(func=_cmd_list_routes)
    sp = sub.add_parser("list-route-mappings", help="Dump route mappings known to copilot (debug)")
    sp.set_defaults(func=_cmd_list_route_mappings)
    sp = sub.add_parser("list-associations", help="Dump CAPI/Diego process associations (debug)")
    sp.set_defaults(func=_cmd_list_associations)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log = get_logger("cf-copilot", {"cmd": args.cmd})
    try:
        client = _make_client(args)
    except ConfigurationError as e:
        log.error(str(e))
        return EXIT_CONFIG
    try:
        with client:
            return int(args.func(client, args))
    except ConfigurationError as e:
        log.error(str(e))
        return EXIT_CONFIG
    except RemoteCallError as e:
        log.error(f"copilot {e.method} request failed: {e.classification}: {e.details}")
        return EXIT_REMOTE
    except StartupTimeoutError as e:
        log.error(str(e))
        return EXIT_REMOTE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
