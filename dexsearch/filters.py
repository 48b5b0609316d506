# dexsearch/filters.py
"""Query model and the structural filter built from it.

``SearchQuery`` is the one place request parameters are parsed and
validated; ``build_filter`` turns it into a ``RecordFilter`` that both
search paths and the filter-only path apply to catalog records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dexsearch.config import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT

if TYPE_CHECKING:
    from dexsearch.catalog import Record


SearchMode = Literal["fulltext", "semantic", "hybrid"]

STAT_FIELDS = ("attack", "defense", "hp", "speed")


class SearchQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(None, alias="query", description="Free text: name, type, ...")
    type: Optional[str] = Field(None, description="Exact type filter, e.g. fire")
    min_attack: Optional[float] = Field(None, alias="minAttack")
    max_attack: Optional[float] = Field(None, alias="maxAttack")
    min_defense: Optional[float] = Field(None, alias="minDefense")
    max_defense: Optional[float] = Field(None, alias="maxDefense")
    min_hp: Optional[float] = Field(None, alias="minHp")
    max_hp: Optional[float] = Field(None, alias="maxHp")
    min_speed: Optional[float] = Field(None, alias="minSpeed")
    max_speed: Optional[float] = Field(None, alias="maxSpeed")
    limit: int = Field(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT)
    mode: SearchMode = Field("hybrid", alias="searchMode")

    @field_validator("type")
    @classmethod
    def _blank_type_is_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


@dataclass(frozen=True)
class StatRange:
    low: Optional[float] = None
    high: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.low is not None and value < self.low:
            return False
        if self.high is not None and value > self.high:
            return False
        return True


@dataclass(frozen=True)
class RecordFilter:
    """Type equality plus per-stat ranges; an empty filter matches everything."""

    type: Optional[str] = None
    ranges: dict[str, StatRange] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.type and not self.ranges

    def matches(self, record: "Record") -> bool:
        if self.type:
            # exact tag match, like the store's equality filter
            if self.type not in record.types:
                return False
        for stat, rng in self.ranges.items():
            if not rng.contains(getattr(record.stats, stat)):
                return False
        return True


def build_filter(query: SearchQuery) -> RecordFilter:
    ranges = {}
    for stat in STAT_FIELDS:
        low = getattr(query, f"min_{stat}")
        high = getattr(query, f"max_{stat}")
        if low is None and high is None:
            continue
        ranges[stat] = StatRange(low=low, high=high)
    return RecordFilter(type=query.type, ranges=ranges)
