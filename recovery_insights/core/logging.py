"""
Process-wide logging setup.

Everything goes to stdout; Gunicorn / the container runtime captures it.
Modules log through `logging.getLogger(__name__)`.
"""
from __future__ import annotations

import logging
import sys

from recovery_insights.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if any(getattr(h, "_recovery_insights", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._recovery_insights = True  # type: ignore[attr-defined]
    root.addHandler(handler)
