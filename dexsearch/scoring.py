# dexsearch/scoring.py
"""String-similarity scoring for the semantic search path.

``score(query, record)`` returns a relevance value in [0, 100] built from
five channels (name, types, search text, character overlap, substring
cross-bonus). All weights come from a ``ScoreWeights`` table so callers can
tune them without touching the scoring code.

Usage:
    score("char", record)                  # default weights
    score("char", record, weights=custom)  # custom ScoreWeights
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dexsearch.catalog import Record


@dataclass(frozen=True)
class ScoreWeights:
    # name channel
    name: float = 40.0
    exact_bonus: float = 30.0
    prefix_bonus: float = 20.0
    substring_bonus: float = 10.0
    # type channel
    type_exact: float = 15.0
    type_fuzzy: float = 10.0
    type_cap: float = 20.0
    # search text channel
    search_text: float = 20.0
    token_hit: float = 5.0
    token_fuzzy: float = 3.0
    token_fuzzy_threshold: float = 0.7
    # char overlap + cross bonus
    char_overlap: float = 10.0
    cross_bonus: float = 5.0
    cap: float = 100.0


DEFAULT_WEIGHTS = ScoreWeights()


def levenshtein(a: str, b: str) -> int:
    """Edit distance (insert / delete / substitute, each cost 1)."""
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j], dp[i][j - 1], dp[i - 1][j - 1])
    return dp[m][n]


def similarity_ratio(a: str, b: str) -> float:
    """1 - distance / longer length, on lowercased input. Both empty -> 1, one empty -> 0."""
    a = (a or "").lower()
    b = (b or "").lower()
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein(a, b) / max(len(a), len(b))


def _name_channel(q: str, name: str, w: ScoreWeights) -> float:
    s = similarity_ratio(q, name) * w.name
    if name == q:
        s += w.exact_bonus
    elif name.startswith(q):
        s += w.prefix_bonus
    elif q in name:
        s += w.substring_bonus
    return s


def _type_channel(words: list[str], types: list[str], w: ScoreWeights) -> float:
    s = 0.0
    for word in words:
        for t in types:
            t = t.lower()
            if t == word:
                s += w.type_exact
            else:
                s += similarity_ratio(word, t) * w.type_fuzzy
    return min(s, w.type_cap)


def _search_text_channel(q: str, words: list[str], text: str, w: ScoreWeights) -> float:
    if not text:
        return 0.0
    s = similarity_ratio(q, text) * w.search_text
    text_words = text.split()
    for word in words:
        if word in text:
            s += w.token_hit
            continue
        # every close token counts, not just the best one
        for tw in text_words:
            r = similarity_ratio(word, tw)
            if r > w.token_fuzzy_threshold:
                s += r * w.token_fuzzy
    return s


def _char_overlap(q: str, name: str, types_joined: str, w: ScoreWeights) -> float:
    if not q:
        return 0.0
    common = sum(1 for ch in q if ch in name or ch in types_joined)
    return common / len(q) * w.char_overlap


def score(query: str, record: "Record", weights: ScoreWeights = DEFAULT_WEIGHTS) -> float:
    """Relevance of ``record`` for ``query``, clamped to [0, cap]."""
    w = weights
    q = (query or "").lower().strip()
    name = (record.name or "").lower()
    types = list(record.types or [])
    types_joined = " ".join(types).lower()
    text = (record.search_text or "").lower()
    words = q.split()

    total = _name_channel(q, name, w)
    total += _type_channel(words, types, w)
    total += _search_text_channel(q, words, text, w)
    total += _char_overlap(q, name, types_joined, w)

    # Overlaps with the name bonus tiers; kept as-is.
    if q in name or name in q:
        total += w.cross_bonus

    return max(0.0, min(total, w.cap))
