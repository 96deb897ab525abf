"""Levelled, structured logging in a key=value text format."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, TextIO

LEVELS: dict[str, int] = {
    "debug": 5,
    "info": 4,
    "warn": 3,
    "error": 2,
    "fatal": 1,
    "panic": 0,
}

_PANIC = logging.CRITICAL + 10

_LOGGING_LEVELS = {
    5: logging.DEBUG,
    4: logging.INFO,
    3: logging.WARNING,
    2: logging.ERROR,
    1: logging.CRITICAL,
    0: _PANIC,
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
    _PANIC: "panic",
}

_SAFE_CHARS = set("-._/@^+")


def _sprint(args: tuple[Any, ...]) -> str:
    """Join values, spacing only between neighbours that are not strings."""
    pieces: list[str] = []
    previous_is_str = True
    for position, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if position and not is_str and not previous_is_str:
            pieces.append(" ")
        pieces.append(str(arg))
        previous_is_str = is_str
    return "".join(pieces)


def _quote(text: str) -> str:
    if text and all((c.isascii() and c.isalnum()) or c in _SAFE_CHARS for c in text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


class _TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).astimezone()
        pairs = [
            ("time", stamp.isoformat(timespec="seconds")),
            ("level", _LEVEL_NAMES.get(record.levelno, record.levelname.lower())),
            ("msg", record.getMessage()),
        ]
        fields: Mapping[str, Any] = getattr(record, "fields", {})
        pairs.extend((key, str(fields[key])) for key in sorted(fields))
        return " ".join(f"{key}={_quote(value)}" for key, value in pairs)


class LogEntry:
    """A log call bound to a set of fields."""

    def __init__(self, logger: Logger, fields: Mapping[str, Any]) -> None:
        self._logger = logger
        self.fields = dict(fields)

    def info(self, *args: Any) -> None:
        self._logger._emit(logging.INFO, self.fields, args)

    def warn(self, *args: Any) -> None:
        self._logger._emit(logging.WARNING, self.fields, args)

    def error(self, *args: Any) -> None:
        self._logger._emit(logging.ERROR, self.fields, args)

    def fatal(self, *args: Any) -> None:
        """Log the message and stop the program with exit status 1."""
        self._logger._emit(logging.CRITICAL, self.fields, args)
        raise SystemExit(1)


class Logger:
    """Writes levelled log lines; unknown level names fall back to debug."""

    def __init__(self, level: str = "debug", stream: TextIO | None = None) -> None:
        value = LEVELS.get(level, LEVELS["debug"])
        self.level = _LOGGING_LEVELS[value]
        self._logger = logging.Logger("mtgreport", self.level)
        self._logger.propagate = False
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(_TextFormatter())
        self._logger.addHandler(handler)

    def _emit(self, level: int, fields: Mapping[str, Any], args: tuple[Any, ...]) -> None:
        self._logger.log(level, _sprint(args), extra={"fields": dict(fields)})

    def info(self, *args: Any) -> None:
        self._emit(logging.INFO, {}, args)

    def warn(self, *args: Any) -> None:
        self._emit(logging.WARNING, {}, args)

    def error(self, *args: Any) -> None:
        self._emit(logging.ERROR, {}, args)

    def with_fields(self, fields: Mapping[str, Any]) -> LogEntry:
        """Return an entry that adds ``fields`` to every line it logs."""
        return LogEntry(self, fields)

    def with_error(self, err: BaseException) -> LogEntry:
        """Return an entry carrying the error under the ``error`` key."""
        return LogEntry(self, {"error": err})