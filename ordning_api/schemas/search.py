from typing import List

from pydantic import BaseModel

from .item import Item
from .location import Location


class ItemSearchResult(BaseModel):
    results: List[Item]
    total_count: int
    offset: int
    limit: int


class LocationSearchResult(BaseModel):
    results: List[Location]
    total_count: int
    offset: int
    limit: int
