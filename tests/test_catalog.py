import json

import pytest

from dexsearch.catalog import Catalog, Record, TextIndexMissing
from dexsearch.filters import RecordFilter, StatRange

from conftest import make_record


def test_duplicate_names_rejected_case_insensitively():
    with pytest.raises(ValueError):
        Catalog([make_record("Pikachu", ["electric"]), make_record("pikachu", ["electric"])])


def test_derive_search_text():
    assert Record.derive_search_text("charizard", ["fire", "flying"]) == "charizard fire flying"


def test_text_search_orders_by_bm25(catalog):
    hits = catalog.text_search("fire")
    names = [r.name for r, _ in hits]
    # equal-length docs tie and keep catalog order; the longer charizard doc scores lower
    assert names == ["charmander", "charmeleon", "charizard"]
    scores = [s for _, s in hits]
    assert scores == sorted(scores, reverse=True)


def test_text_search_requires_a_token_match(catalog):
    assert catalog.text_search("char") == []
    assert catalog.text_search("   ") == []


def test_text_search_applies_filter_and_limit(catalog):
    filt = RecordFilter(ranges={"speed": StatRange(low=90)})
    hits = catalog.text_search("flying fire", filt)
    assert [r.name for r, _ in hits] == ["charizard"]
    assert len(catalog.text_search("fire", limit=2)) == 2


def test_text_search_without_index_raises(catalog_no_index):
    assert not catalog_no_index.has_text_index
    with pytest.raises(TextIndexMissing):
        catalog_no_index.text_search("fire")


def test_text_search_on_empty_catalog():
    assert Catalog([]).text_search("fire") == []


def test_find_sort_and_limit(catalog):
    names = [r.name for r in catalog.find(sort_by_name=True, limit=3)]
    assert names == ["bulbasaur", "charizard", "charmander"]
    assert [r.name for r in catalog.find(limit=2)] == ["charmander", "charmeleon"]
    assert [r.name for r in catalog.find(RecordFilter(type="water"))] == ["squirtle", "gyarados"]
    assert catalog.find(RecordFilter(type="Water")) == []


def test_distinct_types_sorted(catalog):
    types = catalog.distinct_types()
    assert types == sorted(types)
    assert len(types) == len(set(types))
    assert {"fire", "flying", "water", "dark"} <= set(types)


def test_from_jsonl(tmp_path):
    path = tmp_path / "pokemon.jsonl"
    rows = [
        {"name": "eevee", "height": 3, "weight": 65, "types": ["normal"],
         "stats": {"hp": 55, "attack": 55, "defense": 50, "speed": 55}, "searchText": "eevee normal"},
        {"name": "ditto", "types": ["normal"], "stats": {"hp": 48}},
    ]
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n\n", encoding="utf-8")

    c = Catalog.from_jsonl(path)
    assert len(c) == 2
    assert c.records[0].search_text == "eevee normal"
    assert c.records[1].search_text is None
    assert c.records[1].stats.attack == 0
    assert [r.name for r, _ in c.text_search("eevee")] == ["eevee"]


def test_from_jsonl_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        Catalog.from_jsonl(tmp_path / "missing.jsonl")

    bad = tmp_path / "bad.jsonl"
    bad.write_text('{"name": "eevee"}\n{"name": ""}\n', encoding="utf-8")
    with pytest.raises(ValueError, match=":2"):
        Catalog.from_jsonl(bad)


def test_records_are_immutable(records):
    with pytest.raises(Exception):
        records[0].name = "other"
