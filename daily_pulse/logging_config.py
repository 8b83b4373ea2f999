"""Structured logging configuration for the Daily Pulse digest builder."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else arrived through `extra`
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Renders a record and all of its `extra` context as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        )

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger(logging.LoggerAdapter):
    """Component logger that stamps every record with the run's context.

    Keyword arguments other than the standard logging ones become record
    attributes, e.g. ``logger.info("Fetched", feed_url=url)``.
    """

    PASSTHROUGH = ("exc_info", "stack_info", "stacklevel")

    def __init__(self, execution_id: str, component: str = "main"):
        super().__init__(
            logging.getLogger(f"daily_pulse.{component}"),
            {"execution_id": execution_id, "component": component},
        )
        self.execution_id = execution_id
        self.component = component
        self.start_time: datetime | None = None

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        passthrough = {k: kwargs.pop(k) for k in self.PASSTHROUGH if k in kwargs}
        return msg, {**passthrough, "extra": {**self.extra, **kwargs}}

    def log_execution_start(self, **kwargs) -> None:
        self.start_time = datetime.now(UTC)
        self.info(
            f"Starting {self.component} execution",
            execution_start=self.start_time.isoformat(),
            **kwargs,
        )

    def log_execution_end(self, success: bool = True, **kwargs) -> None:
        """Log the end of a run with its duration; failures log at ERROR."""
        ended = datetime.now(UTC)
        duration = (ended - self.start_time).total_seconds() if self.start_time else None
        self.log(
            logging.INFO if success else logging.ERROR,
            f"Completed {self.component} execution",
            execution_end=ended.isoformat(),
            execution_duration_seconds=duration,
            execution_success=success,
            **kwargs,
        )

    def log_feed_processing(self, feed_url: str, items_count: int) -> None:
        self.info(
            f"Fetched feed: {items_count} items found",
            feed_url=feed_url,
            items_count=items_count,
        )

    def log_item_processing(
        self, item_title: str, action: str, success: bool = True
    ) -> None:
        """Log what happened to one feed item; unsuccessful actions log at WARNING."""
        self.log(
            logging.INFO if success else logging.WARNING,
            f"Item {action}: {item_title}",
            item_title=item_title,
            action=action,
            success=success,
        )

    def log_metrics(self, metrics: dict[str, Any]) -> None:
        self.info("Execution metrics", metrics=metrics)


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Send JSON log lines to stdout.

    Args:
        log_level: Level name for the daily_pulse loggers (DEBUG, INFO, ...)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    # Component loggers are children of "daily_pulse" and inherit its level
    logging.getLogger("daily_pulse").setLevel(level)


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
