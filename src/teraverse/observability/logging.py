"""
Logging — activity-tagged output for the controller.

Auto-play, claim batches and energy refreshes run concurrently on one
event loop. Each of them binds an `ActivityContext` through an
`ActivityScope` for the duration of its work, and every record logged
under the `teraverse` logger is stamped with it: the activity that
produced it, plus the run details during auto-play.
"""

import json
import logging
import sys
from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any

# Chatty transport loggers that are only useful at DEBUG
TRANSPORT_LOGGERS = ("urllib3", "requests")


@dataclass(frozen=True)
class ActivityContext:
    """What the controller is doing on behalf of the current task."""
    activity: str | None = None       # "autoplay", "claim:dust", "energy", ...
    run_id: str | None = None
    dungeon_id: int | None = None
    provider: str | None = None

    def tag(self) -> str:
        """Short bracket tag for terminal output, e.g. `autoplay d3 run-1a2b`."""
        parts = []
        if self.activity:
            parts.append(self.activity)
        if self.dungeon_id is not None:
            parts.append(f"d{self.dungeon_id}")
        if self.run_id:
            parts.append(self.run_id[:8])
        return " ".join(parts) or "-"

    def fields(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_EMPTY = ActivityContext()
_context: ContextVar[ActivityContext] = ContextVar("teraverse_activity", default=_EMPTY)


def get_activity_context() -> ActivityContext:
    return _context.get()


def reset_activity_context() -> None:
    """Drop any context bound in the current task."""
    _context.set(_EMPTY)


class ActivityScope:
    """
    Context manager binding context fields for the enclosed block.

    Fields are layered over the enclosing context, so a claim batch
    started from inside auto-play keeps the run id. Passing None for a
    field clears it inside the block.

    Usage:
        with ActivityScope(activity="autoplay", run_id=state.entity_id):
            logger.info("Submitting move")
    """

    def __init__(self, **fields: Any):
        if fields.get("run_id") is not None:
            fields["run_id"] = str(fields["run_id"])
        self.fields = fields
        self._token = None

    def __enter__(self) -> ActivityContext:
        bound = replace(_context.get(), **self.fields)
        self._token = _context.set(bound)
        return bound

    def __exit__(self, *args):
        if self._token is not None:
            _context.reset(self._token)
            self._token = None


class ActivityFilter(logging.Filter):
    """Copies the bound activity context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.activity_context = _context.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, context fields flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "activity_context", None)
        if context is not None:
            log_data.update(context.fields())

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ReadableFormatter(logging.Formatter):
    """Terminal format: `LEVEL   [tag] logger: message`."""

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "activity_context", _EMPTY)
        base = f"{record.levelname:<7} [{context.tag()}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(
    level: int | str = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure controller logging.

    Replaces any handler installed by an earlier call. Transport loggers
    from requests are held at WARNING unless the controller itself logs
    at DEBUG.

    Args:
        level: Logging level (int or name such as "debug")
        json_format: Emit JSON lines instead of the terminal format
        stream: Output stream (default: stderr)
    """
    if isinstance(level, str):
        level = level.upper()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(ActivityFilter())
    handler.setFormatter(JSONFormatter() if json_format else ReadableFormatter())

    root = logging.getLogger("teraverse")
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    transport_level = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a controller component."""
    return logging.getLogger(f"teraverse.{name}")
