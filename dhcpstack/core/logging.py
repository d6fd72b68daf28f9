"""Structured ECS logging for config loading and server progress."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from pathlib import Path

from dhcpstack.config.schema import LoadEvent, LoadObserver, LoggingConfig


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _strip_empty(value: object) -> object | None:
    if isinstance(value, dict):
        cleaned = {key: _strip_empty(item) for key, item in value.items()}
        return {key: item for key, item in cleaned.items() if item is not None} or None
    if isinstance(value, list):
        cleaned_list = [_strip_empty(item) for item in value]
        return [item for item in cleaned_list if item is not None] or None
    if value in ("", None):
        return None
    return value


class ECSJsonFormatter(logging.Formatter):
    def __init__(self, service_name: str = "dhcpstack") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="microseconds")
        payload: dict[str, object] = {
            "@timestamp": timestamp,
            "message": record.getMessage(),
            "log": {
                "level": record.levelname.lower(),
                "logger": record.name,
            },
            "service": {
                "name": getattr(record, "service_name", self.service_name),
            },
            "event": {
                "kind": "event",
                "category": getattr(record, "event_category", "configuration"),
                "action": getattr(record, "event_action", None),
                "outcome": getattr(record, "event_outcome", None),
            },
            "dhcp": {
                "version": getattr(record, "dhcp_version", None),
                "payload": getattr(record, "payload", None),
            },
        }
        if record.exc_info:
            payload["error"] = {"message": self.formatException(record.exc_info)}
        cleaned = _strip_empty(payload) or {}
        return json.dumps(cleaned, separators=(",", ":"))


def _formatter(config: LoggingConfig) -> logging.Formatter:
    if config.fmt == "text":
        return logging.Formatter(TEXT_FORMAT)
    return ECSJsonFormatter(service_name=config.service_name)


def _sink_handler(config: LoggingConfig, formatter: logging.Formatter) -> logging.Handler:
    if config.sink == "file":
        file_path = config.file_path or "logs/dhcpstack.log"
        log_file = Path(file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: LoggingConfig, force: bool = False) -> None:
    root = logging.getLogger("dhcpstack")
    if getattr(root, "_dhcpstack_configured", False) and not force:
        return

    root.setLevel(config.level)
    for existing in list(root.handlers):
        existing.close()
    root.handlers.clear()
    handler = _sink_handler(config, _formatter(config))
    # child loggers set their own level
    handler.setLevel(config.level)
    root.addHandler(handler)
    root.propagate = False
    setattr(root, "_dhcpstack_configured", True)


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if name.startswith("dhcpstack"):
        parent = logging.getLogger("dhcpstack")
        if parent.handlers:
            logger.setLevel(level)
            logger.propagate = True
            return logger

    handler = logging.StreamHandler()
    handler.setFormatter(ECSJsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def logging_observer(logger: logging.Logger, level: str = "INFO") -> LoadObserver:
    """Report config load progress through ``logger``."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    def _observe(event: LoadEvent) -> None:
        logger.log(
            log_level,
            event.message,
            extra={
                "event_action": event.action,
                "event_category": "configuration",
                "event_outcome": "success",
                "dhcp_version": event.version,
                "payload": dict(event.payload) or None,
            },
        )

    return _observe
