"""
Structured Logger for the finance tracker

Every log entry is a single JSON document (timestamp, level, event,
context, metadata) so API and handler activity can be grepped and parsed.

Operations (recording a transaction, building a dashboard summary, ...)
are tracked with start/end/error events that carry the duration in ms.
"""

import json
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from fintrack.errors import AuthenticationError, RecordNotFoundError, ValidationError


def _utc_now_iso() -> str:
    """Return current UTC time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _duration_ms(started_at: str, ended_at: str) -> int:
    start_dt = datetime.fromisoformat(started_at.replace("Z", "+00:00"))
    end_dt = datetime.fromisoformat(ended_at.replace("Z", "+00:00"))
    return int((end_dt - start_dt).total_seconds() * 1000)


# ============================================================================
# TYPES
# ============================================================================

class LogLevel(str, Enum):
    """Log level enumeration"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ErrorType(str, Enum):
    """Standard error types for consistent error handling"""
    VALIDATION_ERROR = "VALIDATION_ERROR"    # Bad input (amount, date, references)
    NOT_FOUND = "NOT_FOUND"                  # Referenced row does not exist
    AUTH_ERROR = "AUTH_ERROR"                # Missing/invalid credentials
    DB_ERROR = "DB_ERROR"                    # Database operation failed
    UNKNOWN_ERROR = "UNKNOWN_ERROR"          # Unexpected error


# ============================================================================
# LOGGER CLASS
# ============================================================================

class Logger:
    """Structured logger with JSON output"""

    def __init__(self, context: Optional[str] = None):
        self.context = context

    def _log(
        self,
        level: LogLevel,
        event: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        entry = {
            "timestamp": _utc_now_iso(),
            "level": level.value,
            "event": event,
        }

        if self.context:
            entry["context"] = self.context

        if metadata:
            entry["metadata"] = metadata

        output = json.dumps(entry, default=str)

        if level in (LogLevel.ERROR, LogLevel.WARN):
            print(output, file=sys.stderr)
        else:
            print(output, file=sys.stdout)

    def debug(self, event: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, event, metadata)

    def info(self, event: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, event, metadata)

    def warn(self, event: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARN, event, metadata)

    def error(self, event: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.ERROR, event, metadata)

    def operation_start(self, operation: str, args: Optional[Dict[str, Any]] = None) -> str:
        """Log the start of an operation, returns timestamp for duration tracking"""
        started_at = _utc_now_iso()

        metadata = {
            "operation": operation,
            "started_at": started_at,
        }
        if args:
            metadata["arguments"] = args

        self.debug("Operation started", metadata)
        return started_at

    def operation_end(
        self,
        operation: str,
        started_at: str,
        result: Optional[Any] = None,
    ) -> None:
        """Log successful operation completion"""
        ended_at = _utc_now_iso()

        metadata = {
            "operation": operation,
            "duration_ms": _duration_ms(started_at, ended_at),
            "success": True,
        }
        if result is not None:
            metadata["result_summary"] = self._summarize_result(result)

        self.info("Operation completed", metadata)

    def operation_error(
        self,
        operation: str,
        started_at: str,
        error: Exception,
        error_type: ErrorType = ErrorType.UNKNOWN_ERROR,
    ) -> None:
        """Log operation failure. Client errors are warnings, the rest errors."""
        ended_at = _utc_now_iso()

        metadata = {
            "operation": operation,
            "duration_ms": _duration_ms(started_at, ended_at),
            "success": False,
            "error_type": error_type.value,
            "error_message": str(error),
        }

        if error_type in (ErrorType.VALIDATION_ERROR, ErrorType.NOT_FOUND, ErrorType.AUTH_ERROR):
            self.warn("Operation rejected", metadata)
        else:
            self.error("Operation failed", metadata)

    def _summarize_result(self, result: Any) -> Any:
        """Summarize result for logging (avoid logging huge objects)"""
        if result is None:
            return None

        if isinstance(result, (list, tuple)):
            return {
                "_type": "array",
                "length": len(result),
            }

        if isinstance(result, dict):
            return {
                "_type": "object",
                "keys": list(result.keys())[:10],
            }

        if isinstance(result, (str, int, float, bool)):
            return result

        return {"_type": type(result).__name__}

    @contextmanager
    def operation(self, operation: str, args: Optional[Dict[str, Any]] = None):
        """Context manager for operations with automatic logging"""
        started_at = self.operation_start(operation, args)
        try:
            yield
            self.operation_end(operation, started_at)
        except Exception as e:
            self.operation_error(operation, started_at, e, classify_error(e))
            raise


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def classify_error(error: Exception) -> ErrorType:
    """Helper to classify errors into ErrorType"""
    if isinstance(error, ValidationError):
        return ErrorType.VALIDATION_ERROR
    if isinstance(error, RecordNotFoundError):
        return ErrorType.NOT_FOUND
    if isinstance(error, AuthenticationError):
        return ErrorType.AUTH_ERROR
    if isinstance(error, SQLAlchemyError):
        return ErrorType.DB_ERROR

    error_msg = str(error).lower()
    if "database" in error_msg or "sqlite" in error_msg or "sql" in error_msg:
        return ErrorType.DB_ERROR

    return ErrorType.UNKNOWN_ERROR


def create_logger(context: str) -> Logger:
    """Create a logger with a specific context"""
    return Logger(context)
