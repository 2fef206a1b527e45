"""
Structured Logging - structlog setup shared by the client modules.

Console output with colors for local use, JSON for production. Sensitive
fields (passwords, session tokens) are masked before any renderer sees them.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any, Dict

import structlog


# ---------------------------------------------------------------------------
# Sensitive Data Filter
# ---------------------------------------------------------------------------

_SENSITIVE_KEYS = ("password", "session", "token", "secret", "api_key")


def _mask_value(value: Any) -> str:
    text = str(value)
    if len(text) > 8:
        return text[:4] + "****" + text[-4:]
    return "****"


def _mask_sensitive(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive data in log output (passwords, session tokens, etc.)."""
    for key in list(event_dict.keys()):
        if key == "event":
            continue
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            event_dict[key] = _mask_value(event_dict[key])
        elif isinstance(event_dict[key], dict):
            event_dict[key] = {
                k: _mask_value(v) if any(s in str(k).lower() for s in _SENSITIVE_KEYS) else v
                for k, v in event_dict[key].items()
            }
    return event_dict


# ---------------------------------------------------------------------------
# Performance Timer
# ---------------------------------------------------------------------------

class PerformanceTimer:
    """Context manager for measuring and logging operation duration."""

    def __init__(self, logger: Any, operation: str, **kwargs):
        self.logger = logger
        self.operation = operation
        self.kwargs = kwargs
        self.start_time: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = (time.perf_counter() - self.start_time) * 1000  # ms
        if exc_type:
            self.logger.error(
                f"{self.operation} failed",
                duration_ms=round(elapsed, 2),
                error=repr(exc_val),
                **self.kwargs
            )
        else:
            level = "warning" if elapsed > 5000 else "debug"
            getattr(self.logger, level)(
                f"{self.operation} completed",
                duration_ms=round(elapsed, 2),
                **self.kwargs
            )
        return False


# ---------------------------------------------------------------------------
# Logger Setup
# ---------------------------------------------------------------------------

def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog on top of the standard library root logger.

    The library itself never calls this; applications embedding the client
    call it once at startup.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for h in root_logger.handlers[:]:
        h.close()
        root_logger.removeHandler(h)
    root_logger.addHandler(console_handler)

    # httpx logs full request lines at INFO; keep warnings/errors only.
    for noisy in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _mask_sensitive,
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=40)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )
    console_handler.setFormatter(formatter)


def configure_logging(config: Any, json_output: bool = False) -> None:
    """Run ``setup_logging`` at the level carried by a ``ClientConfig``."""
    setup_logging(log_level=config.log_level, json_output=json_output)


def get_logger(name: str = "vardexpay") -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance with the given name."""
    return structlog.get_logger(name)


def log_performance(logger: Any, operation: str, **kwargs) -> PerformanceTimer:
    """Create a performance timing context manager."""
    return PerformanceTimer(logger, operation, **kwargs)
