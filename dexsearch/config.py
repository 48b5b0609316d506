# dexsearch/config.py
"""Environment-driven settings for the catalog search service.

Everything here is a plain module constant so the API, the CLI and the
ingest job read the same values. A ``.env`` file next to the process is
picked up automatically.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() not in ("0", "false", "no", "off", "")


CATALOG_PATH = Path(os.getenv("CATALOG_PATH", "./cache/pokemon.jsonl"))

# Off = behave like a store without a text index (lexical search raises).
TEXT_INDEX = _flag("TEXT_INDEX", "1")

SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", "20"))
SEARCH_MAX_LIMIT = int(os.getenv("SEARCH_MAX_LIMIT", "200"))

# Unfiltered semantic search scores limit * SAMPLE_FACTOR candidates.
SAMPLE_FACTOR = int(os.getenv("SAMPLE_FACTOR", "10"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
