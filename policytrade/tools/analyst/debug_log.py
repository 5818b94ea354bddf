# policytrade/tools/analyst/debug_log.py
"""
Debug logging for the AI analysis seam.

- Errors always go to stderr (redacted) and, best-effort, to a rotating file log.
- Raw model output previews are emitted only when POLICYTRADE_DEBUG is on.
- Log directory: POLICYTRADE_LOG_DIR (default ./logs).
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler

_LOGGER: logging.Logger | None = None

_SECRET_ENV_KEYS = ("OPENAI_API_KEY",)
PREVIEW_CHARS = 5000


def get_debug_logger() -> logging.Logger:
    """Create/reuse a rotating file logger for analyst debug output."""
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    logger = logging.getLogger("policytrade.analyst_debug")
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if reloaded in REPL/tests
    if not logger.handlers:
        log_path = os.path.join(os.getenv("POLICYTRADE_LOG_DIR", "logs"), "policytrade_debug.log")
        try:
            os.makedirs(os.path.dirname(log_path), exist_ok=True)
            handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        except OSError:
            # No writable log dir: stderr output in log_exception keeps working
            handler = None
        if handler is not None:
            handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(levelname)s %(message)s",
                    datefmt="(%Y-%m-%d %H:%M:%S)",
                )
            )
            logger.addHandler(handler)

    _LOGGER = logger
    return logger


def debug_enabled() -> bool:
    return os.getenv("POLICYTRADE_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def redact(s: str) -> str:
    """Replace any configured API key values found in s."""
    for k in _SECRET_ENV_KEYS:
        val = os.getenv(k)
        if val:
            s = s.replace(val, "[REDACTED]")
    return s


def log_exception(prefix: str, exc: BaseException) -> None:
    """Print the error to stderr and record it in the rotating log."""
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    msg = redact(f"{prefix}: {exc}\n{tb}")

    print(f"[ANALYST ERROR] {redact(f'{prefix}: {exc}')}", file=sys.stderr, flush=True)

    logger = get_debug_logger()
    if logger.handlers:
        logger.error(msg)


def log_raw_preview(text: str, label: str) -> None:
    if not debug_enabled():
        return
    preview = text if len(text) <= PREVIEW_CHARS else text[:PREVIEW_CHARS] + "…"
    line = redact(f"[ANALYST DEBUG] {label} (preview, first {PREVIEW_CHARS} chars):\n{preview}\n")
    print(line, file=sys.stderr)
    logger = get_debug_logger()
    if logger.handlers:
        logger.debug(line)
