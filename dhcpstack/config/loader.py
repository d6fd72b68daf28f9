"""Config discovery, loading and initialization."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Any, Sequence

import yaml

from dhcpstack.config.document import YamlDocument
from dhcpstack.config.errors import ConfigNotFoundError, DocumentDecodeError, DocumentTypeError
from dhcpstack.config.schema import Config, LoadEvent, LoadObserver, parse_config


DEFAULT_CONFIG_PATH = Path(__file__).with_name("defaults.yml")
CONFIG_FILE_NAMES = ("config.yml", "config.yaml")
DEFAULT_SEARCH_PATHS = (".", "~/.dhcpstack", "/etc/dhcpstack")
_ENV_TOKEN_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")


def find_config(search_paths: Sequence[str | Path] | None = None) -> Path:
    directories = DEFAULT_SEARCH_PATHS if search_paths is None else search_paths
    for directory in directories:
        base = Path(directory).expanduser()
        for name in CONFIG_FILE_NAMES:
            candidate = base / name
            if candidate.is_file():
                return candidate
    searched = ", ".join(str(Path(directory).expanduser()) for directory in directories)
    raise ConfigNotFoundError(f"no config.yml found in: {searched}")


def read_document(path: Path) -> YamlDocument:
    if not path.exists():
        raise ConfigNotFoundError(f"config file does not exist: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise DocumentDecodeError(f"config file {path} is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise DocumentTypeError(f"config file {path} must contain a mapping at the top level")
    try:
        data = _interpolate_env(raw)
    except ValueError as exc:
        raise DocumentDecodeError(str(exc)) from exc
    return YamlDocument(data)


def load_config(
    path: Path | None = None,
    *,
    search_paths: Sequence[str | Path] | None = None,
    observer: LoadObserver | None = None,
) -> Config:
    config_path = path if path is not None else find_config(search_paths)
    if observer is not None:
        observer(
            LoadEvent(
                action="config_loading",
                message="Loading configuration",
                payload={"path": str(config_path)},
            )
        )
    return parse_config(read_document(config_path), observer=observer)


def initialize_config(path: Path, force: bool = False) -> Path:
    if path.exists() and not force:
        raise FileExistsError(f"config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(DEFAULT_CONFIG_PATH, path)
    return path


def _interpolate_env(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _interpolate_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    if isinstance(value, str):
        return _interpolate_string(value)
    return value


def _interpolate_string(value: str) -> str:
    if "${" not in value:
        return value

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        default = match.group(2)
        resolved = os.environ.get(name)
        if resolved is not None:
            return resolved
        if default is not None:
            return default
        token = match.group(0)
        raise ValueError(f"missing required environment variable '{name}' referenced by '{token}'")

    return _ENV_TOKEN_RE.sub(_replace, value)
