"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

Design:
- JSON output (compatible with log aggregators)
- Thread-safe (uses standard logging module)
- Contextual metadata (component, fingerprint, etc.)
- Type-safe events (LogEvent enum)

Architecture:
- Wraps Python's logging module
- Adds structured metadata
- Formats as JSON for stdout/file
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Wraps Python's logging module with structured metadata support.

    Attributes:
        component: Component name (e.g., "cache", "engine")
        logger: Underlying Python logger instance

    Example:
        >>> logger = StructuredLogger("cache")
        >>> logger.warning(
        ...     event=LogEvent.OVERLAY_DEGRADED,
        ...     message="Overlay dropped",
        ...     metadata={'fingerprint': '0|-1|0|0|0.0'}
        ... )

    Levels:
        The level belongs to this instance, not to the shared
        "tinyshape.<component>" logger, so two services with different
        log levels do not overwrite each other.

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier (e.g., "cache")
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: tinyshape.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"tinyshape.{component}"
        self.level = level
        self.logger = logging.getLogger(self.logger_name)
        # Filtering happens per instance; the shared logger passes everything
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.DEBUG)

        # Configure JSON formatter if not already configured
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Internal log method with structured format.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            event: Typed log event
            message: Human-readable message
            metadata: Additional context (fingerprint, capacity, etc.)
            exc_info: Exception for ERROR logs
        """
        log_level = getattr(logging, level)
        # Cache hits are logged on the hot path; skip serialization entirely
        if log_level < self.level or not self.logger.isEnabledFor(log_level):
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(
            log_level,
            json.dumps(log_entry, default=str),
            exc_info=exc_info if level == 'ERROR' else None
        )

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message."""
        self._log('DEBUG', event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Args:
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
        """
        self._log('INFO', event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log WARNING level message.

        Args:
            event: Typed log event
            message: Human-readable message
            metadata: Additional context

        Example:
            >>> logger.warning(
            ...     event=LogEvent.OVERLAY_STATE_MAP_SYNTHESIZED,
            ...     message="Set a state color map explicitly",
            ...     metadata={'solid': 4294901760}
            ... )
        """
        self._log('WARNING', event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Log ERROR level message.

        Args:
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception instance for traceback
        """
        self._log('ERROR', event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        """
        Change logging level dynamically.

        Args:
            level: New logging level (logging.DEBUG, INFO, WARNING, ERROR)
        """
        self.level = level


class JSONFormatter(logging.Formatter):
    """
    Formatter used internally by StructuredLogger.

    The message produced by StructuredLogger is already JSON, so it is
    passed through untouched.
    """

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Args:
        component: Component identifier
        level: Logging level (default: INFO)

    Returns:
        Configured StructuredLogger instance

    Example:
        >>> logger = create_logger("cache", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
