"""Configuration validation errors."""

from __future__ import annotations


class ConfigError(ValueError):
    """Terminal configuration failure. Never retried by the loader."""

    def __init__(self, message: str, *, version: int | None = None, index: int | None = None) -> None:
        prefix = f"dhcpv{version}: " if version is not None else ""
        super().__init__(f"{prefix}{message}")
        self.version = version
        self.index = index


class ConfigNotFoundError(ConfigError):
    pass


class DocumentTypeError(ConfigError):
    pass


class DocumentDecodeError(ConfigError):
    pass


class MissingListenDirective(ConfigError):
    pass


class InvalidListenSyntax(ConfigError):
    pass


class AddressFamilyMismatch(ConfigError):
    pass


class InvalidPort(ConfigError):
    pass


class InvalidPluginsSection(ConfigError):
    pass


class InvalidPluginEntry(ConfigError):
    pass


class MalformedPluginEntry(ConfigError):
    pass


class NoProtocolConfigured(ConfigError):
    pass
