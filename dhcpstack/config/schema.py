"""Dataclasses and parsing for the dual-stack server configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import ipaddress
import re
from typing import Any, Callable

from dhcpstack.config.document import DocumentAccessor
from dhcpstack.config.errors import (
    AddressFamilyMismatch,
    ConfigError,
    DocumentTypeError,
    InvalidListenSyntax,
    InvalidPluginEntry,
    InvalidPluginsSection,
    InvalidPort,
    MalformedPluginEntry,
    MissingListenDirective,
    NoProtocolConfigured,
)


IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

PROTOCOL_VERSIONS = (6, 4)
MAX_PORT = 65535
_PORT_RE = re.compile(r"[0-9]+")
_UNSPECIFIED_V6 = ipaddress.IPv6Address("::")


@dataclass(frozen=True, slots=True)
class ListenAddress:
    ip: IPAddress
    port: int

    @property
    def version(self) -> int:
        return self.ip.version

    def socket_address(self) -> tuple[str, int]:
        return (str(self.ip), self.port)

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True, slots=True)
class PluginConfig:
    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ServerConfig:
    listener: ListenAddress
    plugins: tuple[PluginConfig, ...] = ()


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    fmt: str = "ecs_json"
    sink: str = "stdout"
    file_path: str | None = None
    service_name: str = "dhcpstack"


@dataclass(frozen=True, slots=True)
class Config:
    server6: ServerConfig | None = None
    server4: ServerConfig | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def server(self, version: int) -> ServerConfig | None:
        _check_version(version)
        return self.server6 if version == 6 else self.server4


@dataclass(frozen=True, slots=True)
class LoadEvent:
    action: str
    message: str
    version: int | None = None
    payload: dict[str, Any] = field(default_factory=dict)


LoadObserver = Callable[[LoadEvent], None]


VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
VALID_LOG_FORMATS = {"ecs_json", "text"}
VALID_LOG_SINKS = {"stdout", "file"}


def _check_version(version: int) -> None:
    if version not in PROTOCOL_VERSIONS:
        raise ValueError(f"unsupported protocol version {version!r}, expected 4 or 6")


def _ignore_event(event: LoadEvent) -> None:
    return None


def _plugin_argument_string(value: Any, *, version: int | None, index: int) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple, set)):
        raise InvalidPluginEntry(
            f"plugin #{index} arguments must be a string, got {type(value).__name__}",
            version=version,
            index=index,
        )
    return str(value)


def parse_plugins(items: list[Any], *, version: int | None = None) -> tuple[PluginConfig, ...]:
    """Turn a raw plugins list into ordered plugin entries.

    Every entry is a mapping with exactly one key, the plugin name, whose value
    is a whitespace separated argument string.
    """
    plugins: list[PluginConfig] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidPluginEntry(f"plugin #{index} is not a string map", version=version, index=index)
        if len(item) != 1:
            raise MalformedPluginEntry(
                f"exactly one plugin per item can be specified, plugin #{index} has {len(item)}",
                version=version,
                index=index,
            )
        ((key, raw_args),) = item.items()
        if key is None or isinstance(key, bool) or not isinstance(key, (str, int, float)):
            raise MalformedPluginEntry(
                f"plugin #{index} name must be a string, got {type(key).__name__}",
                version=version,
                index=index,
            )
        name = str(key).strip()
        if not name:
            raise MalformedPluginEntry(f"plugin #{index} has an empty name", version=version, index=index)
        args = _plugin_argument_string(raw_args, version=version, index=index).split()
        plugins.append(PluginConfig(name=name, args=tuple(args)))
    return tuple(plugins)


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port``, ``[host]:port`` or an unbracketed IPv6 literal.

    For unbracketed input the port is whatever follows the last colon.
    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address '{address}'")
        host = address[1:end]
        rest = address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"missing port in address '{address}'")
        return host, rest[1:]
    if ":" not in address:
        raise ValueError(f"missing port in address '{address}'")
    host, _, port = address.rpartition(":")
    if "[" in host or "]" in host:
        raise ValueError(f"unexpected bracket in address '{address}'")
    return host, port


def _section_present(document: DocumentAccessor, version: int) -> bool:
    # A protocol without a section is simply not served.
    return document.has_value(f"server{version}")


def _required_listen(document: DocumentAccessor, version: int) -> str:
    try:
        address = document.get_string(f"server{version}.listen").strip()
    except DocumentTypeError as exc:
        raise InvalidListenSyntax(f"`listen` directive {exc}", version=version) from exc
    if not address:
        raise MissingListenDirective(f"missing `server{version}.listen` directive", version=version)
    return address


def _optional_plugins(document: DocumentAccessor, version: int) -> list[Any]:
    path = f"server{version}.plugins"
    if not document.has_value(path):
        return []
    plugin_list = document.get_raw_list(path)
    if plugin_list is None:
        raise InvalidPluginsSection("invalid plugins section, not a list", version=version)
    return plugin_list


def resolve_listen_address(document: DocumentAccessor, version: int) -> ListenAddress | None:
    """Resolve ``server{version}.listen``, or ``None`` when the protocol has no section."""
    _check_version(version)
    if not _section_present(document, version):
        return None
    address = _required_listen(document, version)

    try:
        host, port_raw = split_host_port(address)
    except ValueError as exc:
        raise InvalidListenSyntax(str(exc), version=version) from exc

    if host:
        try:
            ip: IPAddress = ipaddress.ip_address(host)
        except ValueError as exc:
            raise InvalidListenSyntax(f"invalid `listen` address '{address}': {exc}", version=version) from exc
    elif version == 6:
        ip = _UNSPECIFIED_V6
    else:
        raise AddressFamilyMismatch(f"`listen` address '{address}' has no IPv4 host", version=version)

    if version == 6:
        if isinstance(ip, ipaddress.IPv4Address) or ip.ipv4_mapped is not None:
            raise AddressFamilyMismatch(f"`listen` address {host} is not an IPv6 address", version=version)
    elif isinstance(ip, ipaddress.IPv6Address):
        if ip.ipv4_mapped is None:
            raise AddressFamilyMismatch(f"`listen` address {host} is not an IPv4 address", version=version)
        ip = ip.ipv4_mapped

    if not _PORT_RE.fullmatch(port_raw) or int(port_raw) > MAX_PORT:
        raise InvalidPort(f"invalid `listen` port '{port_raw}'", version=version)
    return ListenAddress(ip=ip, port=int(port_raw))


def build_server_config(
    document: DocumentAccessor,
    version: int,
    *,
    observer: LoadObserver | None = None,
) -> ServerConfig | None:
    notify = observer or _ignore_event
    listener = resolve_listen_address(document, version)
    if listener is None:
        notify(
            LoadEvent(
                action="protocol_unconfigured",
                message=f"DHCPv{version}: no server{version} section, not serving",
                version=version,
            )
        )
        return None

    plugins = parse_plugins(_optional_plugins(document, version), version=version)
    for plugin in plugins:
        notify(
            LoadEvent(
                action="plugin_found",
                message=f"DHCPv{version}: found plugin `{plugin.name}` with {len(plugin.args)} args: {list(plugin.args)}",
                version=version,
                payload={"plugin": plugin.name, "args": list(plugin.args)},
            )
        )
    notify(
        LoadEvent(
            action="server_configured",
            message=f"DHCPv{version}: listening on {listener} with {len(plugins)} plugins",
            version=version,
            payload={"listen": str(listener), "plugin_count": len(plugins)},
        )
    )
    return ServerConfig(listener=listener, plugins=plugins)


def parse_logging_config(document: DocumentAccessor) -> LoggingConfig:
    logging_raw = document.get_raw_value("logging")
    if logging_raw is None:
        return LoggingConfig()
    if not isinstance(logging_raw, dict):
        raise ConfigError("'logging' must be an object")
    level = document.get_string("logging.level").strip().upper() or "INFO"
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(f"invalid logging level '{level}'")
    fmt = document.get_string("logging.fmt").strip().lower() or "ecs_json"
    if fmt not in VALID_LOG_FORMATS:
        raise ConfigError(f"invalid logging format '{fmt}'")
    sink = document.get_string("logging.sink").strip().lower() or "stdout"
    if sink not in VALID_LOG_SINKS:
        raise ConfigError(f"invalid logging sink '{sink}'")
    file_path = document.get_string("logging.file_path").strip() or None
    return LoggingConfig(
        level=level,
        fmt=fmt,
        sink=sink,
        file_path=file_path,
        service_name=document.get_string("logging.service_name").strip() or "dhcpstack",
    )


def parse_config(document: DocumentAccessor, *, observer: LoadObserver | None = None) -> Config:
    logging_config = parse_logging_config(document)
    server6 = build_server_config(document, 6, observer=observer)
    server4 = build_server_config(document, 4, observer=observer)
    if server6 is None and server4 is None:
        raise NoProtocolConfigured("need at least one valid config for DHCPv6 or DHCPv4")
    return Config(server6=server6, server4=server4, logging=logging_config)
