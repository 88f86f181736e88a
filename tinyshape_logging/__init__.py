"""
Structured Logging for tinyshape
================================

Bounded Context: Observability

JSON-structured logging shared by the cache service, the construction
engine and the CLI.

Design:
- JSON output (one object per line)
- Typed events (enums prevent typos)
- Contextual metadata (fingerprint, capacity, etc.)
- Thread-safe

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from tinyshape_logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="cache")
    >>> logger.info(
    ...     event=LogEvent.CACHE_CONFIGURED,
    ...     message="Shape cache ready",
    ...     metadata={'capacity': 30}
    ... )

Output:
    {
        "timestamp": "2026-10-19T15:30:45.123456+00:00",
        "level": "INFO",
        "component": "cache",
        "event": "cache.configured",
        "message": "Shape cache ready",
        "metadata": {"capacity": 30}
    }
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
