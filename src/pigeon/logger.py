"""Namespaced loggers for pigeon modules."""

from __future__ import annotations

import logging

from pigeon.config import get_settings

ROOT_LOGGER = "pigeon"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(handler)
    root.setLevel(get_settings().log_level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``pigeon`` namespace."""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
