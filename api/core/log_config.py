"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s %(message)s"


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def configure_logging(level: str | None = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_storefront_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._storefront_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    resolved = (level or log_level()).upper()
    root.setLevel(getattr(logging, resolved, logging.INFO))
