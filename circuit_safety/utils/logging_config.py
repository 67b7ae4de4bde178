"""
Logging setup for circuit_safety.

Library modules log through the standard ``logging`` package under the
``circuit_safety`` namespace. This module adds:
- ``CircuitFormatter``: fixed-width columns, plus the simulated minute when a
  record carries one (``extra={'time_min': t}``)
- ``setup_logging``: console and per-run file handlers on the package logger
- ``get_logger``: component loggers (``circuit_safety.<component>``)
- ``LogContext``: begin/done/failed records with wall-clock duration
"""

import logging
import sys
import time
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional


ROOT_LOGGER_NAME = 'circuit_safety'


class CircuitFormatter(logging.Formatter):
    """Column formatter; records are rendered identically across runs except
    for the wall-clock timestamp."""

    def __init__(self, show_thread: bool = False):
        super().__init__()
        self.show_thread = show_thread

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).isoformat(sep=' ', timespec='milliseconds')
        columns = [stamp, f"{record.levelname:<8}"]
        if self.show_thread:
            columns.append(f"{record.threadName:<14}")
        columns.append(f"{record.name:<32}")

        sim_minute = getattr(record, 'time_min', None)
        if sim_minute is not None:
            columns.append(f"t={sim_minute:>5}min")

        columns.append(record.getMessage())
        text = " | ".join(columns)
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    console: bool = True,
    file: bool = True,
    show_thread: bool = False,
    run_name: str = 'simulation',
) -> Optional[Path]:
    """Configure the package logger.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        log_dir: Directory for the run log; no file is written when None
        level: Threshold for the package logger and its handlers
        console: Log to stderr
        file: Log to ``<log_dir>/<run_name>_<timestamp>.log``
        show_thread: Add a thread column (useful with parallel evaluation)
        run_name: Prefix of the log file name

    Returns:
        Path of the run log, or None when no file handler was installed
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    while package_logger.handlers:
        stale = package_logger.handlers[0]
        package_logger.removeHandler(stale)
        stale.close()

    formatter = CircuitFormatter(show_thread=show_thread)
    if console:
        _attach(package_logger, logging.StreamHandler(sys.stderr), level, formatter)

    if not (file and log_dir):
        return None

    run_log = Path(log_dir) / f"{run_name}_{datetime.now():%Y%m%d_%H%M%S}.log"
    run_log.parent.mkdir(parents=True, exist_ok=True)
    _attach(package_logger, logging.FileHandler(run_log, encoding='utf-8'), level, formatter)
    return run_log


@lru_cache(maxsize=None)
def get_logger(component: str) -> logging.Logger:
    """Logger for one component, e.g. ``get_logger('engine')``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


class LogContext:
    """Logs the start, end and duration of an operation.

    Usage:
        with LogContext(logger, "simulate_circuit", rated_a=16) as ctx:
            ...
        ctx.elapsed_ms
    """

    def __init__(self, logger: logging.Logger, operation: str, **fields: Any):
        self.logger = logger
        self.operation = operation
        self.fields: Dict[str, Any] = fields
        self.elapsed_ms: Optional[float] = None
        self._t0 = 0.0

    def _describe(self) -> str:
        if not self.fields:
            return self.operation
        detail = ", ".join(f"{key}={value}" for key, value in self.fields.items())
        return f"{self.operation} [{detail}]"

    def __enter__(self) -> 'LogContext':
        self.logger.info(f"begin {self._describe()}")
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed_ms = (time.perf_counter() - self._t0) * 1000.0
        if exc_type is not None:
            self.logger.error(f"failed {self.operation} after {self.elapsed_ms:.1f} ms: {exc_val!r}")
        else:
            self.logger.info(f"done {self.operation} in {self.elapsed_ms:.1f} ms")
        return False
