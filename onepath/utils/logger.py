"""Logging utilities for the solver and its command-line host."""

from __future__ import annotations

import logging
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Marks the handler installed here so reconfiguring swaps only that one.
_HANDLER_FLAG = "_onepath_handler"


def _is_ours(handler: logging.Handler) -> bool:
    return getattr(handler, _HANDLER_FLAG, False)


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Handler:
    """Install the solver's stream handler on the root logger.

    Calling this again replaces the handler from the previous call and leaves
    handlers added by the host application in place. The search loop itself
    never logs; the scheduler reports lifecycle events at DEBUG and the CLI
    reports progress at INFO.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    setattr(handler, _HANDLER_FLAG, True)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if _is_ours(h)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger; set up defaults only if nothing is configured."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "onepath")
