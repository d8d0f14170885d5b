"""Shared utilities package."""

from signdispatch.shared.logging import setup_logger, get_logger, LoggerAdapter
from signdispatch.shared.retry import RetryStrategy
from signdispatch.shared.metrics import MetricsCollector
from signdispatch.shared.types import JsonDict, Sleeper, Clock

__all__ = [
    "setup_logger",
    "get_logger",
    "LoggerAdapter",
    "RetryStrategy",
    "MetricsCollector",
    "JsonDict",
    "Sleeper",
    "Clock",
]
