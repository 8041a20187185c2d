from __future__ import annotations

import logging
import os
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False

_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "step=%(step)s status=%(status)s row=%(row)s duration_ms=%(duration_ms)s "
    "error=%(error)s run_id=%(run_id)s"
)


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing extra fields by injecting defaults.

    run_id falls back to the RUN_ID env var so every line of one import
    can be grepped together with its decision trace.
    """

    DEFAULTS: dict[str, Any] = {
        "step": "-",
        "status": "-",
        "row": "-",
        "duration_ms": "-",
        "error": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        if not hasattr(record, "run_id"):
            record.run_id = os.getenv("RUN_ID") or "-"
        return super().format(record)


def init_logging(level: str | None = None) -> None:
    """Attach one stderr handler to the root logger. Safe to call repeatedly.

    stdout stays reserved for command output (JSON reports, CSV templates).
    """
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=_FORMAT))
        root_logger.addHandler(handler)

    _INITIALIZED = True
