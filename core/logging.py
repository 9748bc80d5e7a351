# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Core - Structured logging with render context
# PURPOSE: Consistent, queryable logging across renderers and resolvers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Loggers are tagged with a component type and pick up the render context
(application, component, definition, stage, namespace) pushed with
log_context(). Output is either one JSON object per line or a compact
human format.

Usage:
    from core.logging import get_logger, log_context, ComponentType

    logger = get_logger(__name__, ComponentType.RENDERER)

    with log_context(app_name="shop", component="frontend", definition="webservice"):
        logger.info("Rendering workload")

Errors derived from DefinitionError are expanded into their renderer,
stage and field when logged with exc_info.
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, TextIO, Union


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    ENGINE = "engine"
    RENDERER = "renderer"
    RESOLVER = "resolver"
    EVALUATOR = "evaluator"
    CLUSTER = "cluster"
    PREPROCESS = "preprocess"
    TOOL = "tool"


# Chatty third-party loggers kept at WARNING unless DEBUG is requested
_NOISY_LOGGERS = ("httpx", "httpcore")


@dataclass(frozen=True)
class LogContext:
    """Render context attached to every record logged inside log_context()."""
    app_name: Optional[str] = None
    component: Optional[str] = None
    definition: Optional[str] = None
    stage: Optional[str] = None
    namespace: Optional[str] = None
    correlation_id: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only; extra keys are flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result

    def label(self) -> str:
        """Short form for human output: app/component def@stage ns=..."""
        parts = []
        if self.app_name or self.component:
            parts.append("/".join(p for p in (self.app_name, self.component) if p))
        if self.definition:
            parts.append(f"{self.definition}@{self.stage}" if self.stage else self.definition)
        elif self.stage:
            parts.append(f"@{self.stage}")
        if self.namespace:
            parts.append(f"ns={self.namespace}")
        return " ".join(parts)


_CONTEXT_FIELDS = {f.name for f in fields(LogContext)} - {"extra"}
_local = threading.local()


def _stack() -> list:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost context of the calling thread."""
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Push render context for the current thread.

    Known fields override the enclosing context; any other keyword lands
    in `extra`.

    Example:
        with log_context(definition="ingress", stage="patch", attempt=2):
            logger.warning("Patch skipped")
    """
    parent = get_current_context()
    known = {k: v for k, v in kwargs.items() if k in _CONTEXT_FIELDS}
    extra = {**parent.extra, **kwargs.get("extra", {})}
    extra.update({k: v for k, v in kwargs.items() if k not in _CONTEXT_FIELDS and k != "extra"})
    context = replace(parent, extra=extra, **known)

    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


def _error_fields(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
    """Structured fields of a logged DefinitionError."""
    if not record.exc_info or record.exc_info[1] is None:
        return None
    error = record.exc_info[1]
    to_dict = getattr(error, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"error_type": type(error).__name__, "message": str(error)}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def __init__(self, include_source: bool = True):
        super().__init__()
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        component_type = getattr(record, "component_type", None)
        if component_type:
            entry["component_type"] = component_type

        context = getattr(record, "render_context", None)
        if context is None:
            context = get_current_context().to_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        error = _error_fields(record)
        if error:
            entry["error"] = error
            entry["traceback"] = self.formatException(record.exc_info)

        if self.include_source:
            entry["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Compact single-line format for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        label = get_current_context().label()
        label = f" [{label}]" if label else ""

        line = f"{ts} {record.levelname:<7} {record.name}{label}: {record.getMessage()}"

        data = getattr(record, "data", None)
        if data:
            line += " " + " ".join(f"{k}={v}" for k, v in data.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter stamping records with the component type and render context.

    Keyword `data` (a dict) is carried to the formatters as structured
    payload.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra["component_type"] = getattr(self.extra.get("component"), "value", None)
        extra["render_context"] = get_current_context().to_dict()
        data = kwargs.pop("data", None)
        if data:
            extra["data"] = data
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (usually __name__)
        component: Component type for categorization

    Returns:
        ContextLogger instance
    """
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name or number
        json_output: JSON lines instead of the human format
            (also selected by LOG_FORMAT=json)
        stream: Output stream, stderr by default so rendered YAML on
            stdout stays clean
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else max(level, logging.WARNING))


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

_checkpoint_logger = get_logger("checkpoint")


def log_checkpoint(name: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a named render milestone at DEBUG.

    Checkpoint names: "workload_rendered", "trait_rendered",
    "health_checked", "status_evaluated".
    """
    payload = {"checkpoint": name}
    if data:
        payload.update(data)
    _checkpoint_logger.debug(f"CHECKPOINT: {name}", data=payload)


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
