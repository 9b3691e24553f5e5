"""Logger factory for the payroll engine."""

from __future__ import annotations

import logging

_LOGGER_PREFIX = "teacher_payroll"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the teacher_payroll namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the package root logger.

    Safe to call more than once (e.g. one app per test).
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)

    if not any(getattr(h, "_teacher_payroll", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._teacher_payroll = True
        root.addHandler(handler)
