import pytest
from pydantic import ValidationError

from dexsearch.filters import RecordFilter, SearchQuery, StatRange, build_filter

from conftest import make_record


def test_defaults():
    q = SearchQuery()
    assert q.limit == 20
    assert q.mode == "hybrid"
    assert not q.has_text
    assert build_filter(q).is_empty


def test_blank_text_has_no_text():
    assert not SearchQuery(query="   ").has_text
    assert SearchQuery(query=" char ").has_text


def test_aliases_and_field_names_both_work():
    a = SearchQuery(query="char", searchMode="semantic", minAttack="100")
    b = SearchQuery(text="char", mode="semantic", min_attack=100)
    assert a == b
    assert a.min_attack == 100.0


def test_invalid_inputs_rejected():
    with pytest.raises(ValidationError):
        SearchQuery(minAttack="lots")
    with pytest.raises(ValidationError):
        SearchQuery(limit=0)
    with pytest.raises(ValidationError):
        SearchQuery(searchMode="vector")


def test_blank_type_ignored():
    assert build_filter(SearchQuery(type="  ")).is_empty


def test_build_filter_ranges():
    filt = build_filter(SearchQuery(type="fire", minAttack=60, maxSpeed=90, minHp=50))
    assert filt.type == "fire"
    assert filt.ranges == {
        "attack": StatRange(low=60, high=None),
        "hp": StatRange(low=50, high=None),
        "speed": StatRange(low=None, high=90),
    }


def test_stat_range_bounds_inclusive():
    r = StatRange(low=10, high=20)
    assert r.contains(10) and r.contains(20)
    assert not r.contains(9) and not r.contains(21)
    assert StatRange().contains(0)


def test_record_filter_matches():
    charizard = make_record("charizard", ["fire", "flying"], (78, 84, 78, 100))
    assert RecordFilter().matches(charizard)
    assert RecordFilter(type="flying").matches(charizard)
    assert not RecordFilter(type="FLYING").matches(charizard)
    assert not RecordFilter(type="water").matches(charizard)
    assert RecordFilter(ranges={"speed": StatRange(low=100)}).matches(charizard)
    assert not RecordFilter(type="fire", ranges={"attack": StatRange(high=80)}).matches(charizard)
