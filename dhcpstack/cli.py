"""CLI entry point for dhcpstack."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from dhcpstack.config.errors import ConfigError
from dhcpstack.config.loader import find_config, initialize_config, read_document
from dhcpstack.config.schema import Config, LoadEvent, ServerConfig, parse_config, parse_logging_config
from dhcpstack.core.logging import configure_logging, get_logger, logging_observer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dhcpstack")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=Path("./config.yml"))
    init_parser.add_argument("--force", action="store_true")

    check_parser = subparsers.add_parser("check", help="Validate config and print resolved servers")
    check_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file path (default: search ., ~/.dhcpstack, /etc/dhcpstack)",
    )

    plugins_parser = subparsers.add_parser("plugins", help="Show the plugin chain of one protocol")
    plugins_parser.add_argument("--config", type=Path, default=None)
    plugins_parser.add_argument("--version", dest="protocol_version", type=int, choices=[4, 6], required=True)

    return parser


def _server_payload(server: ServerConfig | None) -> dict[str, Any] | None:
    if server is None:
        return None
    host, port = server.listener.socket_address()
    return {
        "listen": {"ip": host, "port": port},
        "plugins": [{"name": plugin.name, "args": list(plugin.args)} for plugin in server.plugins],
    }


def _load(config_path: Path | None) -> Config:
    path = config_path if config_path is not None else find_config()
    document = read_document(path)
    configure_logging(parse_logging_config(document), force=True)
    observe = logging_observer(get_logger("dhcpstack.cli"))
    observe(LoadEvent(action="config_loading", message="Loading configuration", payload={"path": str(path)}))
    return parse_config(document, observer=observe)


def cmd_init(config_path: Path, force: bool) -> int:
    initialize_config(config_path, force=force)
    print(f"wrote config: {config_path}")
    return 0


def cmd_check(config_path: Path | None) -> int:
    try:
        config = _load(config_path)
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 1
    payload = {
        "server6": _server_payload(config.server6),
        "server4": _server_payload(config.server4),
        "logging": {"level": config.logging.level, "format": config.logging.fmt, "sink": config.logging.sink},
    }
    print(json.dumps(payload, indent=2))
    return 0


def cmd_plugins(config_path: Path | None, version: int) -> int:
    try:
        config = _load(config_path)
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 1
    server = config.server(version)
    if server is None:
        print(f"DHCPv{version} is not configured", file=sys.stderr)
        return 1
    print(json.dumps([{"name": plugin.name, "args": list(plugin.args)} for plugin in server.plugins], indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args.config, args.force)
    if args.command == "check":
        return cmd_check(args.config)
    if args.command == "plugins":
        return cmd_plugins(args.config, args.protocol_version)

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
