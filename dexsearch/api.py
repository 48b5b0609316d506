# dexsearch/api.py
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dexsearch.catalog import Record
from dexsearch.config import CATALOG_PATH, CORS_ORIGINS, SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT, TEXT_INDEX
from dexsearch.filters import SearchMode, SearchQuery
from dexsearch.search_core import SearchError, Searcher
from dexsearch.utils import setup_logger

logger = setup_logger("dexsearch.api")


# Loaded on first request and reused; a failed load is retried next time.
@lru_cache(maxsize=1)
def get_searcher() -> Searcher:
    try:
        return Searcher.from_path(CATALOG_PATH, text_index=TEXT_INDEX)
    except (FileNotFoundError, ValueError) as exc:
        raise SearchError(f"Catalog unavailable: {exc}") from exc


app = FastAPI(title="Pokédex Search")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchResponse(BaseModel):
    count: int
    data: list[Record]


class TypesResponse(BaseModel):
    types: list[str]


@app.exception_handler(SearchError)
async def search_error_handler(request: Request, exc: SearchError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/api/pokemon/search", response_model=SearchResponse)
def search(
    query: Optional[str] = Query(None, description="Search term (name, type, etc.)"),
    type: Optional[str] = Query(None, description="Filter by type (e.g., fire, water)"),
    min_attack: Optional[float] = Query(None, alias="minAttack"),
    max_attack: Optional[float] = Query(None, alias="maxAttack"),
    min_defense: Optional[float] = Query(None, alias="minDefense"),
    max_defense: Optional[float] = Query(None, alias="maxDefense"),
    min_hp: Optional[float] = Query(None, alias="minHp"),
    max_hp: Optional[float] = Query(None, alias="maxHp"),
    min_speed: Optional[float] = Query(None, alias="minSpeed"),
    max_speed: Optional[float] = Query(None, alias="maxSpeed"),
    limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT),
    search_mode: SearchMode = Query("hybrid", alias="searchMode"),
    searcher: Searcher = Depends(get_searcher),
):
    # FastAPI has already rejected non-numeric bounds with a 422
    q = SearchQuery(
        text=query, type=type,
        min_attack=min_attack, max_attack=max_attack,
        min_defense=min_defense, max_defense=max_defense,
        min_hp=min_hp, max_hp=max_hp,
        min_speed=min_speed, max_speed=max_speed,
        limit=limit, mode=search_mode,
    )
    return searcher.search(q)


@app.get("/api/pokemon/types", response_model=TypesResponse)
def types(searcher: Searcher = Depends(get_searcher)):
    return {"types": searcher.types()}


@app.get("/")
def root():
    return {
        "message": "Pokédex API running. Go to /docs to try it.",
        "endpoints": {
            "search": "GET /api/pokemon/search",
            "types": "GET /api/pokemon/types",
            "parameters": {
                "query": "Search term (name, type, etc.)",
                "type": "Filter by type (e.g., fire, water)",
                "minAttack": "Minimum attack stat",
                "maxAttack": "Maximum attack stat",
                "minDefense": "Minimum defense stat",
                "maxDefense": "Maximum defense stat",
                "minHp": "Minimum HP stat",
                "maxHp": "Maximum HP stat",
                "minSpeed": "Minimum speed stat",
                "maxSpeed": "Maximum speed stat",
                "limit": f"Number of results (default: {SEARCH_DEFAULT_LIMIT})",
                "searchMode": "'fulltext', 'semantic', or 'hybrid' (default: 'hybrid')",
            },
        },
    }
