from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from ..db import get_db
from ..schemas.item import (
    Item as ItemSchema,
    ItemCreateRequest,
    ItemMoveRequest,
    ItemMoveResult,
    ItemUpdateRequest,
)
from ..utils.item import (
    create_item,
    delete_item,
    get_item,
    list_items,
    list_items_by_location,
    move_items,
    update_item,
)

router = APIRouter(prefix="/items", tags=["Items"])


@router.post("/", response_model=ItemSchema, status_code=201)
def add_item(payload: ItemCreateRequest, db: Session = Depends(get_db)):
    return create_item(
        db,
        name=payload.name,
        location_id=payload.location_id,
        description=payload.description,
        properties=payload.properties,
    )


@router.get("/", response_model=list[ItemSchema])
def get_all_items(db: Session = Depends(get_db)):
    return list_items(db)


@router.get("/by-location/{location_id}", response_model=list[ItemSchema])
def get_items_in_location(location_id: str, db: Session = Depends(get_db)):
    return list_items_by_location(db, location_id)


@router.post("/move", response_model=ItemMoveResult)
def move_items_endpoint(payload: ItemMoveRequest, db: Session = Depends(get_db)):
    """
    Bulk-move items into another location.
    - Every item must exist.
    - The target must exist and have no child locations.
    """
    moved = move_items(db, payload.item_ids, payload.location_id)
    return ItemMoveResult(moved=moved)


@router.get("/{item_id}", response_model=ItemSchema)
def get_single_item(item_id: str, db: Session = Depends(get_db)):
    item = get_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.put("/{item_id}", response_model=ItemSchema)
def update_item_endpoint(item_id: str, payload: ItemUpdateRequest, db: Session = Depends(get_db)):
    updated = update_item(
        db,
        item_id,
        name=payload.name,
        description=payload.description,
        properties=payload.properties,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Item not found")
    return updated


@router.delete("/{item_id}", status_code=204)
def remove_item(item_id: str, db: Session = Depends(get_db)):
    if not delete_item(db, item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return Response(status_code=204)
