from enum import Enum


class ViolationKind(str, Enum):
    INVALID_PAGINATION = "invalid-pagination"
    INVALID_INPUT = "invalid-input"
    SELF_PARENT = "self-parent"
    CYCLE = "cycle"
    PARENT_LOCATION_MISSING = "parent-location-missing"
    LOCATION_MISSING = "location-missing"
    LOCATION_HAS_CHILDREN = "location-has-children"
    LOCATION_HAS_ITEMS = "location-has-items"
    LOCATION_NOT_LEAF = "location-not-leaf"
    ITEM_MISSING = "item-missing"
    EMPTY_SELECTION = "empty-selection"
    GENERIC_CONSTRAINT_VIOLATION = "generic-constraint-violation"


class OrdningError(ValueError):
    """
    Base for every error this API reports to a caller. Carries a machine
    readable `kind` next to the human readable message.
    """
    kind: ViolationKind = ViolationKind.GENERIC_CONSTRAINT_VIOLATION

    def __init__(self, message: str, kind: ViolationKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class InvalidSearchParameters(OrdningError):
    kind = ViolationKind.INVALID_PAGINATION


class HierarchyViolation(OrdningError):
    """Rejected parent assignment: self-parent, cycle or missing parent."""


class ConstraintViolation(OrdningError):
    """A storage constraint failure translated into a domain error."""


class LocationNotLeaf(OrdningError):
    kind = ViolationKind.LOCATION_NOT_LEAF


class ItemSelectionError(OrdningError):
    kind = ViolationKind.EMPTY_SELECTION


class InvalidInput(OrdningError):
    kind = ViolationKind.INVALID_INPUT
