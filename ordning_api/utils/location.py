from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.item import Item
from ..models.location import Location
from .errors import ConstraintViolation, InvalidInput, ViolationKind
from .hierarchy import load_parent_map, validate_parent, walk_ancestors
from .integrity import WriteAction, guarded_write


@dataclass
class LocationTreeNode:
    location: Location
    children: List["LocationTreeNode"] = field(default_factory=list)


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_name(name: Optional[str]) -> str:
    clean = (name or "").strip()
    if not clean:
        raise InvalidInput("Location name cannot be empty")
    return clean


def get_location(session: Session, location_id: str) -> Optional[Location]:
    return session.query(Location).filter_by(id=location_id).first()


def location_exists(session: Session, location_id: str) -> bool:
    return session.query(Location.id).filter_by(id=location_id).first() is not None


def list_all_locations(session: Session) -> list[Location]:
    return session.query(Location).order_by(func.lower(Location.name), Location.name, Location.id).all()


def list_top_locations(session: Session) -> list[Location]:
    return (
        session.query(Location)
        .filter(Location.parent_location_id.is_(None))
        .order_by(func.lower(Location.name), Location.name)
        .all()
    )


def list_child_locations(session: Session, parent_id: str) -> list[Location]:
    return (
        session.query(Location)
        .filter_by(parent_location_id=parent_id)
        .order_by(func.lower(Location.name), Location.name)
        .all()
    )


def has_children(session: Session, location_id: str) -> bool:
    return session.query(Location.id).filter_by(parent_location_id=location_id).first() is not None


def has_items(session: Session, location_id: str) -> bool:
    return session.query(Item.id).filter_by(location_id=location_id).first() is not None


def create_location(
        session: Session,
        location_id: str,
        name: str,
        description: Optional[str] = None,
        parent_location_id: Optional[str] = None,
        commit: bool = True,
) -> Location:
    """
    Create a location with a caller-supplied id.

    Raises:
        InvalidInput        -> empty id or name.
        ConstraintViolation -> the id is taken, or the parent vanished
                               between validation and write.
        HierarchyViolation  -> parent missing, or equal to the id.
    """
    location_id = _clean_optional(location_id)
    if location_id is None:
        raise InvalidInput("Location ID cannot be empty")
    name = _clean_name(name)
    parent_location_id = _clean_optional(parent_location_id)

    if location_exists(session, location_id):
        raise ConstraintViolation(
            f"A location with ID '{location_id}' already exists.",
            ViolationKind.GENERIC_CONSTRAINT_VIOLATION,
        )

    validate_parent(session, location_id, parent_location_id)

    location = Location(
        id=location_id,
        name=name,
        description=_clean_optional(description),
        parent_location_id=parent_location_id,
    )
    with guarded_write(session, WriteAction.WRITE, commit=commit):
        session.add(location)
    return location


def update_location(
        session: Session,
        location_id: str,
        name: str,
        description: Optional[str] = None,
        parent_location_id: Optional[str] = None,
        commit: bool = True,
) -> Optional[Location]:
    """
    Replace name, description and parent of a location.
    Returns the updated Location, or None if it does not exist.
    """
    loc = get_location(session, location_id)
    if not loc:
        return None

    name = _clean_name(name)
    parent_location_id = _clean_optional(parent_location_id)
    if parent_location_id != loc.parent_location_id:
        validate_parent(session, location_id, parent_location_id)

    with guarded_write(session, WriteAction.WRITE, commit=commit):
        loc.name = name
        loc.description = _clean_optional(description)
        loc.parent_location_id = parent_location_id
    return loc


def move_location(
        session: Session,
        location_id: str,
        new_parent_id: Optional[str],
        commit: bool = True,
) -> Optional[Location]:
    """
    Re-parent a location (None makes it a root). Returns None if the
    location does not exist.
    """
    loc = get_location(session, location_id)
    if not loc:
        return None

    new_parent_id = _clean_optional(new_parent_id)
    validate_parent(session, location_id, new_parent_id)

    with guarded_write(session, WriteAction.WRITE, commit=commit):
        loc.parent_location_id = new_parent_id
    return loc


def delete_location(session: Session, location_id: str, commit: bool = True) -> bool:
    """
    Delete a location ONLY if it has no child locations and no items.

    Returns:
        True  -> deleted
        False -> location does not exist

    Raises:
        ConstraintViolation -> location-has-children / location-has-items
    """
    loc = get_location(session, location_id)
    if not loc:
        return False

    if has_children(session, location_id):
        raise ConstraintViolation(
            "Location has child locations and cannot be deleted.",
            ViolationKind.LOCATION_HAS_CHILDREN,
        )

    if has_items(session, location_id):
        raise ConstraintViolation(
            "Location contains items and cannot be deleted.",
            ViolationKind.LOCATION_HAS_ITEMS,
        )

    with guarded_write(session, WriteAction.DELETE, commit=commit):
        session.delete(loc)
    return True


def get_location_path(session: Session, location_id: str) -> list[Location]:
    """
    Complete path from the root down to `location_id`.
    Guaranteed order: [root, ..., parent, current].
    Returns an empty list if the location does not exist.
    """
    parent_map = load_parent_map(session)
    if location_id not in parent_map:
        return []

    chain = list(walk_ancestors(parent_map, location_id))
    locations = session.query(Location).filter(Location.id.in_(chain)).all()
    by_id = {loc.id: loc for loc in locations}
    return [by_id[loc_id] for loc_id in reversed(chain) if loc_id in by_id]


def get_location_tree(session: Session) -> List[LocationTreeNode]:
    """
    Whole forest as nested nodes. Roots and every children list are sorted
    by name.
    """
    locations = list_all_locations(session)
    nodes = {loc.id: LocationTreeNode(location=loc) for loc in locations}

    children_map: DefaultDict[str, List[LocationTreeNode]] = defaultdict(list)
    roots: List[LocationTreeNode] = []
    for loc in locations:
        if loc.parent_location_id is None:
            roots.append(nodes[loc.id])
        elif loc.parent_location_id in nodes:
            children_map[loc.parent_location_id].append(nodes[loc.id])

    # list_all_locations is already name-ordered, so appends keep that order
    for loc_id, kids in children_map.items():
        nodes[loc_id].children = kids

    return roots
