from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    parent_location_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocationCreateRequest(BaseModel):
    id: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    parent_location_id: Optional[str] = None


class LocationUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    parent_location_id: Optional[str] = None


class LocationMoveRequest(BaseModel):
    """
    Payload for re-parenting a location. A null parent makes it a root.
    """
    parent_location_id: Optional[str] = None


class LocationTreeNode(BaseModel):
    location: Location
    children: List["LocationTreeNode"] = Field(default_factory=list)

    class Config:
        from_attributes = True


LocationTreeNode.model_rebuild()
