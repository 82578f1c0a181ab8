"""
Logging Setup
=============

Console logging for the ``geotest`` logger tree and the gated
operation logger used by the multi-provider analysis.
"""

import logging
from typing import Any, Optional

LOGGER_NAME = "geotest"
OPERATION_TAG = "[3-AI GEO Analysis]"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a console handler to the package logger (once).

    Args:
        level: Log level for the package logger

    Returns:
        The configured ``geotest`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.handlers:
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(sh)
    return logger


class DummyLogger:
    """No-op logger for disabled logging."""
    def __getattr__(self, name):
        return lambda *args, **kwargs: None


class OperationLogger:
    """
    Emits one structured line per analysis operation when enabled.

    Example:
        >>> op_log = OperationLogger(enabled=True)
        >>> op_log.log("Retry Attempt", attempt=1, error="timeout")
    """

    def __init__(self, enabled: bool, logger: Optional[logging.Logger] = None):
        self.enabled = enabled
        self.logger = logger or logging.getLogger(f"{LOGGER_NAME}.analysis")

    def log(self, operation: str, **data: Any):
        if self.enabled:
            self.logger.info(f"{OPERATION_TAG} {operation}: {data}")


def operation_logger(enabled: bool):
    """Return an OperationLogger, or a DummyLogger when logging is disabled."""
    if not enabled:
        return DummyLogger()
    return OperationLogger(enabled=True)
