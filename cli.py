# cli.py
import argparse

from pydantic import ValidationError

from dexsearch.config import CATALOG_PATH, SEARCH_DEFAULT_LIMIT, TEXT_INDEX
from dexsearch.filters import SearchQuery
from dexsearch.search_core import Searcher


def print_results(query: SearchQuery, result: dict):
    print(f"\nQuery: {query.text!r} | mode={query.mode} | limit={query.limit} | hits={result['count']}\n")
    for rank, r in enumerate(result["data"], start=1):
        s = r.stats
        print(f"{rank:>2}. {r.name:<20} [{'/'.join(r.types)}] "
              f"hp={s.hp} atk={s.attack} def={s.defense} spd={s.speed}")
    print()


def main():
    ap = argparse.ArgumentParser(description="Pokédex keyword + filter search")
    ap.add_argument("--query", default=None, help="name, type, or any free text")
    ap.add_argument("--type", default=None, help="exact type filter, e.g. fire")
    for stat in ("attack", "defense", "hp", "speed"):
        ap.add_argument(f"--min-{stat}", type=float, default=None)
        ap.add_argument(f"--max-{stat}", type=float, default=None)
    ap.add_argument("--limit", type=int, default=SEARCH_DEFAULT_LIMIT)
    ap.add_argument("--mode", choices=["fulltext", "semantic", "hybrid"], default="hybrid")
    ap.add_argument("--catalog", default=str(CATALOG_PATH))
    ap.add_argument("--no-text-index", action="store_true", help="search as if the store had no text index")
    ap.add_argument("--types", action="store_true", help="list all types and exit")
    args = ap.parse_args()

    searcher = Searcher.from_path(args.catalog, text_index=TEXT_INDEX and not args.no_text_index)

    if args.types:
        print("\n".join(searcher.types()))
        return

    try:
        query = SearchQuery(
            text=args.query, type=args.type, limit=args.limit, mode=args.mode,
            min_attack=args.min_attack, max_attack=args.max_attack,
            min_defense=args.min_defense, max_defense=args.max_defense,
            min_hp=args.min_hp, max_hp=args.max_hp,
            min_speed=args.min_speed, max_speed=args.max_speed,
        )
    except ValidationError as e:
        ap.error(str(e))

    print_results(query, searcher.search(query))


if __name__ == "__main__":
    main()
