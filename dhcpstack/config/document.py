"""Typed access to a decoded configuration document by dotted path."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from dhcpstack.config.errors import DocumentTypeError


@runtime_checkable
class DocumentAccessor(Protocol):
    def has_value(self, path: str) -> bool: ...

    def get_string(self, path: str) -> str: ...

    def get_raw_list(self, path: str) -> list[Any] | None: ...

    def get_raw_value(self, path: str) -> Any: ...


_MISSING = object()


class YamlDocument:
    """Read-only view over a mapping decoded from YAML.

    Mapping keys are matched case-insensitively, the way the server has always
    treated section and directive names. Values inside lists are returned as
    decoded, so plugin names keep their spelling.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DocumentTypeError("configuration document must be a mapping at the top level")
        self._data = data

    def _lookup(self, path: str) -> Any:
        node: Any = self._data
        for part in path.split("."):
            if not isinstance(node, dict):
                return _MISSING
            if part in node:
                node = node[part]
                continue
            wanted = part.lower()
            for key, value in node.items():
                if str(key).lower() == wanted:
                    node = value
                    break
            else:
                return _MISSING
        return node

    def has_value(self, path: str) -> bool:
        value = self._lookup(path)
        return value is not _MISSING and value is not None

    def get_raw_value(self, path: str) -> Any:
        value = self._lookup(path)
        return None if value is _MISSING else value

    def get_string(self, path: str) -> str:
        value = self.get_raw_value(path)
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            raise DocumentTypeError(f"'{path}' must be a string, got {type(value).__name__}")
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def get_raw_list(self, path: str) -> list[Any] | None:
        value = self.get_raw_value(path)
        if isinstance(value, list):
            return list(value)
        return None
