"""结构化日志：统一输出到 stderr，自动附带工具调用上下文并屏蔽 API 密钥。

Structured logging for eleven-mcp-server.

stdout carries the MCP protocol stream, so every record goes to stderr.
Loggers are ``logging.LoggerAdapter`` wrappers that accept keyword fields;
a filter on the package logger attaches the current tool call context and
redacts API keys before anything is formatted.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, TextIO

PACKAGE_LOGGER = "eleven_mcp"
REDACTED = "***REDACTED***"

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_call_context: ContextVar[CallContext | None] = ContextVar("eleven_mcp_call", default=None)


@dataclass(frozen=True)
class CallContext:
    """Fields attached to every record emitted while a tool call runs.

    Attributes:
        request_id: Short random identifier of the tool call
        tool: Tool name
        operation: Remote operation kind, once known
        fields: Any other fields to attach
    """

    request_id: str | None = None
    tool: str | None = None
    operation: str | None = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def as_fields(self) -> dict[str, Any]:
        out = {
            k: v
            for k, v in (
                ("request_id", self.request_id),
                ("tool", self.tool),
                ("operation", self.operation),
            )
            if v
        }
        out.update(self.fields)
        return out

    def bind(self, **fields: Any) -> CallContext:
        return replace(self, fields={**self.fields, **fields})


def current_call_context() -> CallContext:
    return _call_context.get() or CallContext()


@contextmanager
def call_context(tool: str, request_id: str | None = None, **fields: Any) -> Iterator[CallContext]:
    """Bind a tool call context for the duration of a ``with`` block.

    Example:
        >>> with call_context("transcribe"):
        ...     logger.info("Tool call started")
    """
    ctx = CallContext(request_id=request_id or uuid.uuid4().hex[:12], tool=tool, fields=fields)
    token = _call_context.set(ctx)
    try:
        yield ctx
    finally:
        _call_context.reset(token)


@contextmanager
def operation_scope(operation: str) -> Iterator[CallContext]:
    """Tag the current call context with the remote operation being run."""
    ctx = replace(current_call_context(), operation=operation)
    token = _call_context.set(ctx)
    try:
        yield ctx
    finally:
        _call_context.reset(token)


class KeyRedactor:
    """Removes API keys from messages and structured fields."""

    PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
        (re.compile(r"\bsk_[a-f0-9]{16,}\b", re.IGNORECASE), "sk_" + REDACTED),
        (
            re.compile(r"((?:xi-)?api[_-]?key[\"']?\s*[:=]\s*[\"']?)[^\"'\s,}]+", re.IGNORECASE),
            r"\1" + REDACTED,
        ),
    )
    FIELD_MARKERS = ("key", "token", "secret", "password", "auth")

    def redact(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def redact_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, value in fields.items():
            if any(marker in name.lower() for marker in self.FIELD_MARKERS):
                out[name] = REDACTED
            elif isinstance(value, str):
                out[name] = self.redact(value)
            elif isinstance(value, Mapping):
                out[name] = self.redact_fields(value)
            else:
                out[name] = value
        return out


class _ContextFilter(logging.Filter):
    """Merges call context and keyword fields into ``record.fields``, redacted."""

    def __init__(self, redactor: KeyRedactor) -> None:
        super().__init__()
        self._redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        merged = current_call_context().as_fields()
        merged.update(getattr(record, "fields", None) or {})
        record.fields = self._redactor.redact_fields(merged)
        record.msg = self._redactor.redact(record.getMessage())
        record.args = None
        return True


class StderrFormatter(logging.Formatter):
    """One line per record, either ``text`` or ``json``."""

    def __init__(self, style: str = "text") -> None:
        super().__init__(fmt=_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        self.json = style == "json"

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = getattr(record, "fields", None) or {}
        if not self.json:
            line = super().format(record)
            if fields:
                line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
            return line

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **fields,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class FieldLogger(logging.LoggerAdapter):
    """Logger accepting structured keyword fields.

    Example:
        >>> logger = get_logger("eleven_mcp.client")
        >>> logger.info("Operation finished", operation="speech", bytes=20480)
    """

    _PASSTHROUGH = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in self._PASSTHROUGH}
        kwargs["extra"] = {**(kwargs.get("extra") or {}), "fields": fields}
        return msg, kwargs


def parse_level(level: str | int) -> int:
    """Map a level name to a ``logging`` level; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: str | int = "INFO",
    format: str = "text",
    stream: TextIO | None = None,
) -> None:
    """Install the stderr handler on the package logger, replacing any previous one.

    Args:
        level: Level name or number
        format: ``text`` or ``json``
        stream: Output stream (stderr by default)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StderrFormatter(format))
    handler.addFilter(_ContextFilter(KeyRedactor()))

    root = logging.getLogger(PACKAGE_LOGGER)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(parse_level(level))
    root.propagate = False


def get_logger(name: str) -> FieldLogger:
    """Get a keyword-field logger under the package logger."""
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return FieldLogger(logging.getLogger(name), {})
