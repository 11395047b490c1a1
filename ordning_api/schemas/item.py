from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Item(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    location_id: str
    properties: Dict[str, str] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location_id: str = Field(..., min_length=1)
    description: Optional[str] = Field(None, max_length=1000)
    properties: Optional[Dict[str, str]] = None


class ItemUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    properties: Optional[Dict[str, str]] = None


class ItemMoveRequest(BaseModel):
    """
    Payload for moving items into another (leaf) location.
    """
    item_ids: List[str]
    location_id: str


class ItemMoveResult(BaseModel):
    moved: int
