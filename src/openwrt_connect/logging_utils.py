"""Structured event logging for openwrt-connect."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

_LOGGER_NAME = "openwrt_connect"

_logger = logging.getLogger(_LOGGER_NAME)
# Events are dropped unless setup_logging() attaches a file handler.
_logger.addHandler(logging.NullHandler())

_LEADING_KEYS = ("ts", "level")
_EVENT_KEY_ORDER: dict[str, tuple[str, ...]] = {
    "app_start": ("argv", "config_dir", "log_file"),
    "app_stop": ("reason", "exit_code", "error_type", "error"),
    "config_loaded": ("config_file", "command_count", "warning_count"),
    "config_not_found": ("config_dir",),
    "script_file_missing": ("command", "path", "error"),
    "multiple_content_keys": ("command", "keys", "used"),
    "plan_built": ("command", "target", "kind", "use_key"),
    "ssh_exit": ("command", "target", "exit_code"),
}


class StructuredTextFormatter(logging.Formatter):
    """Format log records as human-readable ``key: value`` blocks."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    @staticmethod
    def _ordered_keys(event_name: str, data: dict[str, Any]) -> list[str]:
        preferred = _LEADING_KEYS + _EVENT_KEY_ORDER.get(event_name, ())
        present = [k for k in preferred if data.get(k) is not None]
        rest = sorted(k for k, v in data.items() if k not in preferred and v is not None)
        return present + rest

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "ts": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
        }
        # log_event payloads are JSON; anything else is kept as a plain message.
        payload = _parse_payload(record.getMessage())
        if payload is None:
            data["message"] = record.getMessage()
        else:
            data.update(payload)

        event_name = str(data.pop("event", record.name))
        lines = [f"=== {event_name} ==="]
        for key in self._ordered_keys(event_name, data):
            lines.append(f"{key}: {self._format_value(data[key])}")

        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body


def _parse_payload(message: str) -> dict[str, Any] | None:
    if not (message.startswith("{") and message.endswith("}")):
        return None
    try:
        parsed = json.loads(message)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        payload[key] = _to_log_safe(value)
    _logger.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def setup_logging(log_file: Path | None = None) -> None:
    """Send events to log_file, or disable logging when no file is configured."""
    if log_file is None:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
