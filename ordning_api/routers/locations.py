from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from ..db import get_db
from ..schemas.location import (
    Location as LocationSchema,
    LocationCreateRequest,
    LocationMoveRequest,
    LocationTreeNode as LocationTreeNodeSchema,
    LocationUpdateRequest,
)
from ..utils.location import (
    create_location,
    delete_location,
    get_location,
    get_location_path,
    get_location_tree,
    list_all_locations,
    list_child_locations,
    list_top_locations,
    move_location,
    update_location,
)

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.post("/", response_model=LocationSchema, status_code=201)
def add_location(payload: LocationCreateRequest, db: Session = Depends(get_db)):
    return create_location(
        db,
        location_id=payload.id,
        name=payload.name,
        description=payload.description,
        parent_location_id=payload.parent_location_id,
    )


@router.get("/", response_model=list[LocationSchema])
def get_all_locations(db: Session = Depends(get_db)):
    return list_all_locations(db)


@router.get("/top", response_model=list[LocationSchema])
def get_top_locations(db: Session = Depends(get_db)):
    return list_top_locations(db)


@router.get("/tree", response_model=list[LocationTreeNodeSchema])
def get_tree(db: Session = Depends(get_db)):
    return [LocationTreeNodeSchema.model_validate(node) for node in get_location_tree(db)]


@router.get("/children/{parent_id}", response_model=list[LocationSchema])
def get_children(parent_id: str, db: Session = Depends(get_db)):
    return list_child_locations(db, parent_id)


@router.get("/{location_id}", response_model=LocationSchema)
def get_single_location(location_id: str, db: Session = Depends(get_db)):
    location = get_location(db, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.get("/{location_id}/path", response_model=list[LocationSchema])
def get_path(location_id: str, db: Session = Depends(get_db)):
    path = get_location_path(db, location_id)
    if not path:
        raise HTTPException(status_code=404, detail="Location not found")
    return path


@router.put("/{location_id}", response_model=LocationSchema)
def update_location_endpoint(
        location_id: str,
        payload: LocationUpdateRequest,
        db: Session = Depends(get_db),
):
    updated = update_location(
        db,
        location_id,
        name=payload.name,
        description=payload.description,
        parent_location_id=payload.parent_location_id,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Location not found")
    return updated


@router.put("/{location_id}/move", response_model=LocationSchema)
def move_location_endpoint(
        location_id: str,
        payload: LocationMoveRequest,
        db: Session = Depends(get_db),
):
    """
    Re-parent a location. The new parent must exist and must not be the
    location itself or one of its descendants.
    """
    moved = move_location(db, location_id, payload.parent_location_id)
    if not moved:
        raise HTTPException(status_code=404, detail="Location not found")
    return moved


@router.delete("/{location_id}", status_code=204)
def remove_location(location_id: str, db: Session = Depends(get_db)):
    if not delete_location(db, location_id):
        raise HTTPException(status_code=404, detail="Location not found")
    return Response(status_code=204)
