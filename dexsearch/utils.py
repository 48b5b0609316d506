# dexsearch/utils.py
"""Small helpers shared by the search modules."""

from __future__ import annotations

import logging
import re

from dexsearch.config import LOG_LEVEL

_WORD = re.compile(r"\w+", re.U)


def setup_logger(name: str = "dexsearch") -> logging.Logger:
    """Return a named logger with a one-line formatter (configured once)."""

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    return logger


def tokenize(s: str | None) -> list[str]:
    """Lowercase word tokens, used for the text index."""
    return _WORD.findall((s or "").lower())
