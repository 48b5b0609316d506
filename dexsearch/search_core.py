# dexsearch/search_core.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dexsearch.catalog import Catalog, Record, TextIndexMissing
from dexsearch.config import CATALOG_PATH, SAMPLE_FACTOR, TEXT_INDEX
from dexsearch.filters import RecordFilter, SearchQuery, build_filter
from dexsearch.scoring import DEFAULT_WEIGHTS, ScoreWeights, score
from dexsearch.utils import setup_logger


logger = setup_logger("dexsearch.search")


class SearchError(RuntimeError):
    """Unrecovered search failure, message kept for the caller."""


def merge_by_priority(lexical: list[Record], semantic: list[Record], limit: int) -> list[Record]:
    """
    Lexical hits first, then semantic hits not already present; deduped by name.
    Relative scores of the two lists are never compared.
    """
    merged: dict[str, Record] = {}
    for r in lexical:
        merged.setdefault(r.key, r)
    for r in semantic:
        merged.setdefault(r.key, r)
    return list(merged.values())[:limit]


class Searcher:
    """
    Runs one query against a catalog.
    Usage:
        s = Searcher.from_path("./cache/pokemon.jsonl")
        s.search(SearchQuery(query="char", searchMode="semantic", limit=5))
    """
    def __init__(self, catalog: Catalog, weights: ScoreWeights = DEFAULT_WEIGHTS,
                 sample_factor: int = SAMPLE_FACTOR):
        self.catalog = catalog
        self.weights = weights
        self.sample_factor = sample_factor

    @classmethod
    def from_path(cls, catalog_path: str | Path = CATALOG_PATH, text_index: bool = TEXT_INDEX, **kwargs):
        return cls(Catalog.from_jsonl(catalog_path, text_index=text_index), **kwargs)

    def lexical_search(self, text: str, filt: RecordFilter | None = None, limit: int = 20) -> list[Record]:
        """Text-index hits, best BM25 score first. Raises TextIndexMissing without an index."""
        pairs = self.catalog.text_search(text, filt, limit=limit)
        return [r for r, _ in pairs]

    def semantic_topn(self, text: str, filt: RecordFilter | None = None, limit: int = 20):
        """
        Returns [(record, similarity)], similarity > 0, best first.
        - with a structural filter: every matching record is a candidate
        - without one: the first limit * sample_factor records are
        """
        if filt is not None and not filt.is_empty:
            candidates = self.catalog.find(filt)
        else:
            candidates = self.catalog.find(limit=limit * self.sample_factor)

        scored = [(r, score(text, r, self.weights)) for r in candidates]
        scored = [p for p in scored if p[1] > 0]
        # sorted() is stable, so equal scores keep retrieval order
        scored = sorted(scored, key=lambda p: p[1], reverse=True)
        return scored[:limit]

    def semantic_search(self, text: str, filt: RecordFilter | None = None, limit: int = 20) -> list[Record]:
        return [r for r, _ in self.semantic_topn(text, filt, limit)]

    def _lexical_or_empty(self, text, filt, limit):
        # hybrid only: a dead store still fails through the semantic path
        try:
            return self.lexical_search(text, filt, limit)
        except Exception as exc:
            logger.warning("Lexical path failed (%r); using semantic results only", exc)
            return []

    def hybrid_search(self, text: str, filt: RecordFilter | None = None, limit: int = 20) -> list[Record]:
        # the two paths share nothing mutable; joined before the merge
        with ThreadPoolExecutor(max_workers=2) as pool:
            lex_future = pool.submit(self._lexical_or_empty, text, filt, limit)
            sem_future = pool.submit(self.semantic_search, text, filt, limit)
            lexical = lex_future.result()
            semantic = sem_future.result()
        return merge_by_priority(lexical, semantic, limit)

    def fulltext_search(self, text: str, filt: RecordFilter | None = None, limit: int = 20) -> list[Record]:
        try:
            return self.lexical_search(text, filt, limit)
        except TextIndexMissing as exc:
            logger.warning("Text index missing (%s); falling back to semantic search", exc)
            return self.semantic_search(text, filt, limit)

    def filter_only(self, filt: RecordFilter, limit: int = 20) -> list[Record]:
        return self.catalog.find(filt, sort_by_name=True, limit=limit)

    def _run(self, query: SearchQuery) -> list[Record]:
        filt = build_filter(query)
        if not query.has_text:
            return self.filter_only(filt, query.limit)

        text = query.text.strip()
        if query.mode == "fulltext":
            return self.fulltext_search(text, filt, query.limit)
        if query.mode == "semantic":
            return self.semantic_search(text, filt, query.limit)
        return self.hybrid_search(text, filt, query.limit)

    def search(self, query: SearchQuery) -> dict:
        """
        Returns {"count": int, "data": list[Record]}.
        Storage or unexpected failures are raised as SearchError.
        """
        try:
            data = self._run(query)
        except Exception as exc:
            logger.exception("Search failed: mode=%s text=%r", query.mode, query.text)
            raise SearchError(str(exc)) from exc

        logger.info("Search mode=%s text=%r limit=%s -> %s hits",
                    query.mode if query.has_text else "filter", query.text, query.limit, len(data))
        return {"count": len(data), "data": data}

    def types(self) -> list[str]:
        try:
            return self.catalog.distinct_types()
        except Exception as exc:
            logger.exception("Listing types failed")
            raise SearchError(str(exc)) from exc
