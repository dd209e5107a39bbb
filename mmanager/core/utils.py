"""Shared utility functions for the m-manager project."""

import logging
import re
from datetime import UTC, datetime
from pathlib import Path

import colorlog

PROJECT_LOGGER = "mmanager"
_LEADING_INT = re.compile(r"^[+-]?\d+")
# largest value a signed 64-bit INTEGER column holds
MAX_AMOUNT = 2**63 - 1


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Module loggers (``mmanager.*``) share the handlers of the project logger, so the file
    handler added by ``setup_logging`` sees every record.
    """
    if name.startswith(f"{PROJECT_LOGGER}."):
        get_logger(PROJECT_LOGGER)
        return logging.getLogger(name)
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def safe_cast(val: object, to_type: type, default: object = None) -> object:
    """Safely cast a value to a type, returning default on failure."""
    try:
        return to_type(val)
    except (ValueError, TypeError, OverflowError):
        return default


def coerce_amount(val: object) -> int:
    """Coerce form input into a non-negative integer amount.

    Strings may carry thousands separators ("12,000") and trailing junk ("300yen");
    only the leading integer counts. Anything without digits becomes 0, and amounts are
    capped at ``MAX_AMOUNT``.
    """
    if isinstance(val, bool) or val is None:
        return 0
    if isinstance(val, int | float):
        amount = safe_cast(val, int, 0)
    else:
        match = _LEADING_INT.match(str(val).strip().replace(",", ""))
        digits = match.group() if match else "0"
        # digit strings too long for int() are far beyond the cap either way
        amount = safe_cast(digits, int, 0 if digits.startswith("-") else MAX_AMOUNT)
    return min(max(0, amount), MAX_AMOUNT)


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return datetime.now(UTC).isoformat()
