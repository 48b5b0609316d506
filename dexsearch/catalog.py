# dexsearch/catalog.py
"""In-memory creature catalog: the document store the search paths read from.

Offers the three storage primitives the search core needs:
  - text_search(): BM25 over each record's search text (the "text index")
  - find():        plain filtered retrieval, optional name sort and cap
  - distinct_types(): the sorted type vocabulary
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rank_bm25 import BM25Okapi

from dexsearch.utils import setup_logger, tokenize

if TYPE_CHECKING:
    from dexsearch.filters import RecordFilter


logger = setup_logger("dexsearch.catalog")


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    hp: int = Field(0, ge=0)
    attack: int = Field(0, ge=0)
    defense: int = Field(0, ge=0)
    speed: int = Field(0, ge=0)


class Record(BaseModel):
    """One creature. ``name`` is unique in the catalog, compared case-insensitively."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    height: Optional[float] = None
    weight: Optional[float] = None
    types: list[str] = Field(default_factory=list)
    stats: Stats = Field(default_factory=Stats)
    search_text: Optional[str] = Field(None, alias="searchText")

    @property
    def key(self) -> str:
        return self.name.lower()

    @staticmethod
    def derive_search_text(name: str, types: Iterable[str]) -> str:
        return " ".join([name, *types])


class TextIndexMissing(RuntimeError):
    """text_search() was called on a catalog built without a text index."""


class Catalog:
    """
    Read-only record store.
    Usage:
        c = Catalog.from_jsonl("./cache/pokemon.jsonl")
        c.text_search("fire", limit=5)
        c.find(RecordFilter(type="water"), sort_by_name=True, limit=20)
    """

    def __init__(self, records: Iterable[Record], text_index: bool = True):
        self.records = list(records)

        seen = set()
        for r in self.records:
            if r.key in seen:
                raise ValueError(f"Duplicate record name in catalog: {r.name!r}")
            seen.add(r.key)

        self._text_indexed = False
        self._bm25 = None
        self._doc_token_sets = []
        if text_index:
            self.build_text_index()

    @classmethod
    def from_jsonl(cls, path: str | Path, text_index: bool = True) -> "Catalog":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        records = []
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(Record.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as exc:
                    raise ValueError(f"Invalid record at {path}:{line_no}: {exc}") from exc

        logger.info("Loaded %s records from %s (text_index=%s)", len(records), path, text_index)
        return cls(records, text_index=text_index)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def has_text_index(self) -> bool:
        return self._text_indexed

    def build_text_index(self) -> None:
        doc_tokens = [tokenize(r.search_text) for r in self.records]
        self._doc_token_sets = [set(t) for t in doc_tokens]
        # BM25Okapi cannot be built over an empty corpus
        self._bm25 = BM25Okapi(doc_tokens) if any(doc_tokens) else None
        self._text_indexed = True

    def text_search(self, text: str, filt: "RecordFilter | None" = None, limit: int | None = None):
        """
        Indexed text search: returns [(record, bm25_score)], best first.
        A record matches when its search text shares at least one token with ``text``.
        """
        if not self._text_indexed:
            raise TextIndexMissing("text search requires a text index on searchText")

        qtok = tokenize(text)
        if not qtok or self._bm25 is None:
            return []

        qset = set(qtok)
        scores = self._bm25.get_scores(qtok)
        order = np.argsort(-scores, kind="stable")

        out = []
        for i in order:
            i = int(i)
            if not (qset & self._doc_token_sets[i]):
                continue
            rec = self.records[i]
            if filt is not None and not filt.matches(rec):
                continue
            out.append((rec, float(scores[i])))
            if limit is not None and len(out) >= limit:
                break
        return out

    def find(self, filt: "RecordFilter | None" = None, sort_by_name: bool = False,
             limit: int | None = None) -> list[Record]:
        out = [r for r in self.records if filt is None or filt.matches(r)]
        if sort_by_name:
            out.sort(key=lambda r: r.key)
        if limit is not None:
            out = out[:limit]
        return out

    def distinct_types(self) -> list[str]:
        return sorted({t for r in self.records for t in r.types})
