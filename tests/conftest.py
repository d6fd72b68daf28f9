from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

import pytest
import yaml


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: object, name: str = "config.yml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_dhcpstack_logging() -> Iterator[None]:
    yield
    for name in ("dhcpstack", "dhcpstack.cli"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        if hasattr(logger, "_dhcpstack_configured"):
            delattr(logger, "_dhcpstack_configured")
