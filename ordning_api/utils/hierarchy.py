import logging
from typing import Dict, Iterator, Optional

from sqlalchemy.orm import Session

from ..models.location import Location
from .errors import HierarchyViolation, ViolationKind

logger = logging.getLogger(__name__)


def load_parent_map(session: Session) -> Dict[str, Optional[str]]:
    """
    Snapshot of the whole location forest as {location_id: parent_id}, read
    in a single query. Ancestor walks over it are plain dict lookups.
    """
    return {
        loc_id: parent_id
        for loc_id, parent_id in session.query(Location.id, Location.parent_location_id).all()
    }


def walk_ancestors(parent_map: Dict[str, Optional[str]], start_id: str) -> Iterator[str]:
    """
    Yield `start_id` and then each ancestor up to the root. Stops on a
    repeated id so a corrupted snapshot can not loop forever.
    """
    seen: set[str] = set()
    current: Optional[str] = start_id
    while current is not None and current not in seen:
        yield current
        seen.add(current)
        current = parent_map.get(current)


def parent_rejection(
        session: Session,
        location_id: str,
        proposed_parent_id: Optional[str],
) -> Optional[HierarchyViolation]:
    """
    Check whether `proposed_parent_id` may become the parent of `location_id`.

    Returns None when the assignment is fine, otherwise the reason:
      - self-parent: the ids are equal
      - parent-location-missing: the proposed parent does not exist
      - cycle: `location_id` is an ancestor of (or is) the proposed parent
    """
    if proposed_parent_id is None:
        return None

    if proposed_parent_id == location_id:
        return HierarchyViolation("A location cannot be its own parent.", ViolationKind.SELF_PARENT)

    parent_map = load_parent_map(session)
    if proposed_parent_id not in parent_map:
        return HierarchyViolation(
            f"Parent location with ID '{proposed_parent_id}' does not exist.",
            ViolationKind.PARENT_LOCATION_MISSING,
        )

    for ancestor_id in walk_ancestors(parent_map, proposed_parent_id):
        if ancestor_id == location_id:
            return HierarchyViolation(
                f"Setting '{proposed_parent_id}' as parent would create a circular reference.",
                ViolationKind.CYCLE,
            )

    return None


def validate_parent(session: Session, location_id: str, proposed_parent_id: Optional[str]) -> None:
    """Raise HierarchyViolation if the parent assignment is not allowed."""
    rejection = parent_rejection(session, location_id, proposed_parent_id)
    if rejection is not None:
        logger.info(
            "Rejected parent %r for location %r: %s",
            proposed_parent_id, location_id, rejection.kind.value,
        )
        raise rejection
