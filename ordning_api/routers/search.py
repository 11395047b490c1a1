from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ..db import get_db
from ..schemas.item import Item as ItemSchema
from ..schemas.location import Location as LocationSchema
from ..schemas.search import ItemSearchResult, LocationSearchResult
from ..utils.config import SEARCH_DEFAULT_LIMIT
from ..utils.search import search_items, search_locations

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("/items", response_model=ItemSearchResult)
def search_items_endpoint(
        q: Optional[str] = Query(None, description="Free-text search term; empty lists everything by name"),
        offset: int = Query(0, description="How many results to skip (for pagination)"),
        limit: int = Query(SEARCH_DEFAULT_LIMIT, description="Max number of results to return (1-100)"),
        db: Session = Depends(get_db),
):
    results, total = search_items(db, q, offset, limit)
    return ItemSearchResult(
        results=[ItemSchema.model_validate(i) for i in results],
        total_count=total,
        offset=offset,
        limit=limit,
    )


@router.get("/locations", response_model=LocationSearchResult)
def search_locations_endpoint(
        q: Optional[str] = Query(None, description="Free-text search term; empty lists everything by name"),
        offset: int = Query(0, description="How many results to skip (for pagination)"),
        limit: int = Query(SEARCH_DEFAULT_LIMIT, description="Max number of results to return (1-100)"),
        db: Session = Depends(get_db),
):
    results, total = search_locations(db, q, offset, limit)
    return LocationSearchResult(
        results=[LocationSchema.model_validate(loc) for loc in results],
        total_count=total,
        offset=offset,
        limit=limit,
    )
