from typing import Iterable, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.item import Item
from ..models.location import utcnow
from .errors import ConstraintViolation, InvalidInput, ItemSelectionError, LocationNotLeaf, ViolationKind
from .integrity import WriteAction, guarded_write
from .location import has_children, location_exists


def _clean_properties(properties: Optional[Mapping[str, str]]) -> dict[str, str]:
    # The property bag is always stored as an object, never NULL.
    if not properties:
        return {}
    return {str(k): "" if v is None else str(v) for k, v in properties.items()}


def _clean_name(name: Optional[str]) -> str:
    clean = (name or "").strip()
    if not clean:
        raise InvalidInput("Item name cannot be empty")
    return clean


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description.strip() or None


def _ensure_leaf_location(session: Session, location_id: str) -> None:
    if not location_exists(session, location_id):
        raise ConstraintViolation(
            f"Location with ID '{location_id}' does not exist.",
            ViolationKind.LOCATION_MISSING,
        )
    if has_children(session, location_id):
        raise LocationNotLeaf(
            "Items cannot be added to the selected location because it has child locations. "
            "Please select a more specific location."
        )


def get_item(session: Session, item_id: str) -> Optional[Item]:
    return session.query(Item).filter_by(id=item_id).first()


def item_exists(session: Session, item_id: str) -> bool:
    return session.query(Item.id).filter_by(id=item_id).first() is not None


def list_items(session: Session) -> list[Item]:
    return session.query(Item).order_by(func.lower(Item.name), Item.name, Item.id).all()


def list_items_by_location(session: Session, location_id: str) -> list[Item]:
    return (
        session.query(Item)
        .filter(Item.location_id == location_id)
        .order_by(func.lower(Item.name), Item.name, Item.id)
        .all()
    )


def create_item(
        session: Session,
        name: str,
        location_id: str,
        description: Optional[str] = None,
        properties: Optional[Mapping[str, str]] = None,
        commit: bool = True,
) -> Item:
    """
    Create an item with a generated id inside a leaf location.

    Raises:
        InvalidInput        -> empty name.
        ConstraintViolation -> location-missing (checked up front and by
                               the foreign key).
        LocationNotLeaf     -> the location has child locations.
    """
    name = _clean_name(name)
    _ensure_leaf_location(session, location_id)

    item = Item(
        name=name,
        description=_clean_description(description),
        location_id=location_id,
        properties=_clean_properties(properties),
    )
    with guarded_write(session, WriteAction.WRITE, commit=commit):
        session.add(item)
    return item


def update_item(
        session: Session,
        item_id: str,
        name: str,
        description: Optional[str] = None,
        properties: Optional[Mapping[str, str]] = None,
        commit: bool = True,
) -> Optional[Item]:
    """
    Replace name, description and properties. `properties=None` clears the
    bag to {}. Returns None if the item does not exist.
    """
    item = get_item(session, item_id)
    if not item:
        return None

    name = _clean_name(name)
    with guarded_write(session, WriteAction.WRITE, commit=commit):
        item.name = name
        item.description = _clean_description(description)
        item.properties = _clean_properties(properties)
    return item


def delete_item(session: Session, item_id: str, commit: bool = True) -> bool:
    item = get_item(session, item_id)
    if not item:
        return False

    with guarded_write(session, WriteAction.DELETE, commit=commit):
        session.delete(item)
    return True


def move_items(
        session: Session,
        item_ids: Iterable[str],
        new_location_id: str,
        commit: bool = True,
) -> int:
    """
    Move items into another leaf location.

    Returns:
        int -> number of items moved.

    Raises:
        ItemSelectionError  -> no ids given, or one of them does not exist.
        ConstraintViolation -> target location does not exist.
        LocationNotLeaf     -> target location has child locations.
    """
    ids = list(dict.fromkeys(item_ids))
    if not ids:
        raise ItemSelectionError("At least one item ID must be provided.")

    _ensure_leaf_location(session, new_location_id)

    found = {row[0] for row in session.query(Item.id).filter(Item.id.in_(ids)).all()}
    missing = [item_id for item_id in ids if item_id not in found]
    if missing:
        raise ItemSelectionError(
            f"Item with ID '{missing[0]}' does not exist.",
            ViolationKind.ITEM_MISSING,
        )

    with guarded_write(session, WriteAction.WRITE, commit=commit):
        affected = (
            session.query(Item)
            .filter(Item.id.in_(ids))
            .update(
                {Item.location_id: new_location_id, Item.updated_at: utcnow()},
                synchronize_session="fetch",
            )
        )
    return int(affected or 0)
