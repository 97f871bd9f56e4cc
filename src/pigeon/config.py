# config.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment (and ``.env``)."""

    log_level: str = "WARNING"
    fragment_suffix: str = "Fragment"
    drop_unknown: bool = True

    @classmethod
    def from_env(cls) -> Settings:
        log_level = (os.getenv("PIGEON_LOG_LEVEL") or cls.log_level).upper().strip()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = cls.log_level
        fragment_suffix = os.getenv("PIGEON_FRAGMENT_SUFFIX")
        if fragment_suffix is None:
            fragment_suffix = cls.fragment_suffix
        drop_unknown = (os.getenv("PIGEON_DROP_UNKNOWN") or "true").lower().strip()
        return cls(
            log_level=log_level,
            fragment_suffix=fragment_suffix.strip(),
            drop_unknown=drop_unknown not in _FALSE_VALUES,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
