from __future__ import annotations

import pytest

from dexsearch.catalog import Catalog, Record, Stats

# name, types, (hp, attack, defense, speed)
SAMPLE = [
    ("charmander", ["fire"], (39, 52, 43, 65)),
    ("charmeleon", ["fire"], (58, 64, 58, 80)),
    ("charizard", ["fire", "flying"], (78, 84, 78, 100)),
    ("squirtle", ["water"], (44, 48, 65, 43)),
    ("bulbasaur", ["grass", "poison"], (45, 49, 49, 45)),
    ("pikachu", ["electric"], (35, 55, 40, 90)),
    ("machamp", ["fighting"], (90, 130, 80, 55)),
    ("gyarados", ["water", "flying"], (95, 125, 79, 81)),
    ("snorlax", ["normal"], (160, 110, 65, 30)),
    ("tyranitar", ["rock", "dark"], (100, 134, 110, 61)),
    ("mr-mime", ["psychic", "fairy"], (40, 45, 65, 90)),
]


def make_record(name, types, stats=(50, 50, 50, 50), search_text=True, **extra) -> Record:
    hp, attack, defense, speed = stats
    return Record(
        name=name,
        types=list(types),
        stats=Stats(hp=hp, attack=attack, defense=defense, speed=speed),
        search_text=Record.derive_search_text(name, types) if search_text else None,
        **extra,
    )


@pytest.fixture
def records() -> list[Record]:
    return [make_record(n, t, s, height=10, weight=100) for n, t, s in SAMPLE]


@pytest.fixture
def catalog(records) -> Catalog:
    return Catalog(records)


@pytest.fixture
def catalog_no_index(records) -> Catalog:
    return Catalog(records, text_index=False)
