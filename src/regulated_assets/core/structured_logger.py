"""
Structured Logging with Trace IDs
=================================

Provides JSON-structured logging with request tracing capabilities, so a
single approval flow (submit, action, resubmit) can be followed across
calls. Stellar secret seeds and encoded transaction envelopes are never
written to the log.
"""

import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from regulated_assets.config.settings import LoggingConfig

# Context variable to store trace_id for current flow
_trace_id_var: ContextVar[str | None] = ContextVar('trace_id', default=None)

# Ed25519 secret seeds (strkey "S...")
_SECRET_PATTERNS = re.compile(r"\bS[A-Z2-7]{55}\b")

# Base64 XDR transaction envelopes start with the envelope type discriminant
_ENVELOPE_PATTERN = re.compile(r"\bAAAA[A-Za-z0-9+/]{60,}={0,2}")


def _redact_secrets(text: str) -> str:
    text = _SECRET_PATTERNS.sub("[REDACTED]", text)
    return _ENVELOPE_PATTERN.sub("[TX_ENVELOPE]", text)


class StructuredLogger:
    """
    Structured logger that outputs JSON logs with trace IDs

    Example output:
    {
        "timestamp": "2026-10-19T10:30:45.123Z",
        "level": "INFO",
        "trace_id": "abc123",
        "component": "ApprovalClient",
        "message": "Approval server replied",
        "status": "revised",
        "elapsed_ms": 812.4
    }
    """

    def __init__(self, component: str, logger: logging.Logger | None = None) -> None:
        """
        Initialize structured logger

        Args:
            component: Component name (e.g., 'ApprovalClient', 'HorizonClient')
            logger: Optional existing logger (creates new if not provided)
        """
        self.component = component
        self.logger = logger or logging.getLogger(f"regulated_assets.{component}")

    def _log(self, level: str, message: str, **kwargs) -> None:
        trace_id = _trace_id_var.get()

        log_entry = {
            'timestamp': datetime.now(tz=UTC).isoformat(),
            'level': level,
            'component': self.component,
            'message': _redact_secrets(message),
        }

        if trace_id:
            log_entry['trace_id'] = trace_id

        for k, v in kwargs.items():
            log_entry[k] = _redact_secrets(v) if isinstance(v, str) else v

        json_log = _redact_secrets(json.dumps(log_entry, default=str))

        log_method = getattr(self.logger, level.lower())
        log_method(json_log)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message"""
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message"""
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message"""
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message"""
        self._log('ERROR', message, **kwargs)


class TraceContext:
    """
    Context manager for setting trace_id for an approval flow

    Usage:
        with TraceContext() as trace_id:
            outcome = await service.post_transaction(tx, asset.approval_server)
    """

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or self._generate_trace_id()
        self.token = None

    def __enter__(self) -> str:
        self.token = _trace_id_var.set(self.trace_id)
        return self.trace_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _trace_id_var.reset(self.token)

    @staticmethod
    def _generate_trace_id() -> str:
        """Generate a unique trace ID"""
        return str(uuid.uuid4())[:8]


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def get_logger(component: str) -> StructuredLogger:
    """
    Get a structured logger for a component

    Args:
        component: Component name

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(component)


def configure_logging(config: "LoggingConfig") -> None:
    """Attach a stderr handler to the package logger at the configured level."""
    package_logger = logging.getLogger("regulated_assets")
    package_logger.setLevel(config.level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if config.format == "text":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        # Records are already JSON documents
        handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
