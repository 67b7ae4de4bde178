"""Utility modules for circuit_safety."""

from circuit_safety.utils.errors import (
    CircuitConfigError,
    InvalidConfiguration,
    OutOfRange,
    Issue,
    Level,
)
from circuit_safety.utils.logging_config import setup_logging, get_logger, LogContext
from circuit_safety.utils.config import CircuitConfig, ScenarioConfig
from circuit_safety.utils.metrics import SeriesMetrics, calculate_series_metrics

__all__ = [
    "CircuitConfigError",
    "InvalidConfiguration",
    "OutOfRange",
    "Issue",
    "Level",
    "setup_logging",
    "get_logger",
    "LogContext",
    "CircuitConfig",
    "ScenarioConfig",
    "SeriesMetrics",
    "calculate_series_metrics",
]
