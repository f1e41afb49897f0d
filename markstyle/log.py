"""Syslog-style logging on top of loguru.

Every subsystem reports failures as ``(severity, tag, message)`` where
severity follows syslog numbering. Callers decide what to surface to users
by attaching their own loguru sinks.
"""

from __future__ import annotations
import sys
from datetime import datetime, timezone

from loguru import logger

ERROR = 3
WARNING = 4
INFO = 6
DEBUG = 7

SEVERITY_LEVELS = {
    ERROR: "ERROR",
    WARNING: "WARNING",
    INFO: "INFO",
    DEBUG: "DEBUG",
}

MODULE_NAME = "markstyle"


def log_syslog_message(severity: int, tag: str, message: str) -> str:
    """Log ``message`` under ``tag`` and return the formatted line."""
    if severity not in SEVERITY_LEVELS:
        severity = INFO
    level = SEVERITY_LEVELS[severity]
    timestamp = datetime.now(timezone.utc).isoformat()
    line = f"<{level}> {timestamp} [{MODULE_NAME}]({tag}): {message}"
    logger.bind(tag=tag, severity=severity).log(level, "[{}] {}", tag, message)
    return line


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    # resolve sys.stderr per message so redirected streams are honoured
    logger.add(
        lambda message: sys.stderr.write(message),
        level=level.upper(),
        colorize=False,
        format="{time:HH:mm:ss} | {level: <8} | {message}",
    )
