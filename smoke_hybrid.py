# smoke_hybrid.py
from dexsearch.filters import SearchQuery
from dexsearch.search_core import Searcher

s = Searcher.from_path("./cache/pokemon.jsonl")

for mode in ("fulltext", "semantic", "hybrid"):
    print(f"=== {mode.upper()} ===")
    res = s.search(SearchQuery(query="char", searchMode=mode, limit=5))
    for r in res["data"]:
        print(r.name, "/".join(r.types))
    print()
