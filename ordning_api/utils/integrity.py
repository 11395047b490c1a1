import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from sqlalchemy import ForeignKeyConstraint, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Base
from .errors import ConstraintViolation, ViolationKind

logger = logging.getLogger(__name__)


class WriteAction(str, Enum):
    WRITE = "write"
    DELETE = "delete"


@dataclass(frozen=True)
class ConstraintRule:
    fragment: str
    action: WriteAction
    kind: ViolationKind
    message: str


# Constraint-name (or, where the driver reports no name, error-text) fragment
# -> domain error. The same foreign key means different things depending on
# whether the failing statement wrote the referencing row or deleted the
# referenced one. Adjust the fragments to the storage engine's naming.
CONSTRAINT_RULES: tuple[ConstraintRule, ...] = (
    ConstraintRule(
        "fk_locations_parent_location", WriteAction.WRITE,
        ViolationKind.PARENT_LOCATION_MISSING, "Parent location does not exist.",
    ),
    ConstraintRule(
        "fk_locations_parent_location", WriteAction.DELETE,
        ViolationKind.LOCATION_HAS_CHILDREN, "Location has child locations and cannot be deleted.",
    ),
    ConstraintRule(
        "fk_items_location", WriteAction.WRITE,
        ViolationKind.LOCATION_MISSING, "Location does not exist.",
    ),
    ConstraintRule(
        "fk_items_location", WriteAction.DELETE,
        ViolationKind.LOCATION_HAS_ITEMS, "Location contains items and cannot be deleted.",
    ),
    ConstraintRule(
        "pk_locations", WriteAction.WRITE,
        ViolationKind.GENERIC_CONSTRAINT_VIOLATION, "A location with this ID already exists.",
    ),
    ConstraintRule(
        "locations.id", WriteAction.WRITE,
        ViolationKind.GENERIC_CONSTRAINT_VIOLATION, "A location with this ID already exists.",
    ),
    ConstraintRule(
        "pk_items", WriteAction.WRITE,
        ViolationKind.GENERIC_CONSTRAINT_VIOLATION, "An item with this ID already exists.",
    ),
    ConstraintRule(
        "items.id", WriteAction.WRITE,
        ViolationKind.GENERIC_CONSTRAINT_VIOLATION, "An item with this ID already exists.",
    ),
)

_STATEMENT_RE = re.compile(r"\s*(INSERT\s+INTO|UPDATE|DELETE\s+FROM)\s+\"?(\w+)\"?", re.IGNORECASE)

GENERIC_MESSAGES = {
    WriteAction.WRITE: "A database constraint violation occurred.",
    WriteAction.DELETE: "Record cannot be deleted because it is referenced by other records.",
}


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """
    Name of the constraint that fired, when the DBAPI driver reports it
    (psycopg exposes it on `diag`). SQLite does not.
    """
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None) or getattr(orig, "constraint_name", None)
    return name or None


def _bound_values(params) -> list:
    if isinstance(params, dict):
        return list(params.values())
    if isinstance(params, (list, tuple)):
        values = []
        for param in params:
            if isinstance(param, (dict, list, tuple)):
                values.extend(_bound_values(param))
            else:
                values.append(param)
        return values
    return []


def _foreign_key_candidates(statement: Optional[str]) -> list[ForeignKeyConstraint]:
    """
    Foreign keys the failing statement could have tripped: the table's own
    keys for INSERT/UPDATE, the keys referencing the table for DELETE.
    """
    match = _STATEMENT_RE.match(statement or "")
    if not match:
        return []
    verb, table_name = match.group(1).upper(), match.group(2)
    if verb.startswith("DELETE"):
        candidates = [
            fk for table in Base.metadata.tables.values()
            for fk in table.foreign_key_constraints
            if fk.referred_table.name == table_name
        ]
    else:
        table = Base.metadata.tables.get(table_name)
        candidates = list(table.foreign_key_constraints) if table is not None else []
    return sorted(candidates, key=lambda fk: fk.name or "")


def _is_referenced(session: Session, fk: ForeignKeyConstraint, values: list) -> bool:
    column = next(iter(fk.columns))
    return bool(session.query(exists().where(column.in_(values))).scalar())


def infer_constraint_name(exc: IntegrityError, session: Optional[Session] = None) -> Optional[str]:
    """
    Best guess at the foreign key behind an unnamed failure, from the
    statement that failed. A DELETE whose table is referenced by more than
    one key is resolved by looking for rows that still point at the deleted
    ids, which needs `session`.
    """
    candidates = _foreign_key_candidates(getattr(exc, "statement", None))
    if len(candidates) == 1:
        return candidates[0].name
    if not candidates or session is None:
        return None
    values = [v for v in _bound_values(getattr(exc, "params", None)) if v is not None]
    if not values:
        return None
    for fk in candidates:
        if _is_referenced(session, fk, values):
            return fk.name
    return None


def classify_integrity_error(
        exc: IntegrityError,
        action: WriteAction = WriteAction.WRITE,
        rules: tuple[ConstraintRule, ...] = CONSTRAINT_RULES,
        session: Optional[Session] = None,
) -> ConstraintViolation:
    name = constraint_name(exc)
    haystacks = [name] if name else [str(getattr(exc, "orig", None) or exc)]
    if not name:
        inferred = infer_constraint_name(exc, session)
        if inferred:
            haystacks.append(inferred)

    for haystack in haystacks:
        for rule in rules:
            if rule.action is action and rule.fragment in haystack:
                return ConstraintViolation(rule.message, rule.kind)

    return ConstraintViolation(GENERIC_MESSAGES[action], ViolationKind.GENERIC_CONSTRAINT_VIOLATION)


@contextmanager
def guarded_write(
        session: Session,
        action: WriteAction = WriteAction.WRITE,
        commit: bool = True,
) -> Iterator[Session]:
    """
    Run a block of writes and flush (or commit) them. Any storage-level
    integrity failure rolls the session back and is re-raised as a
    ConstraintViolation.

        with guarded_write(db, WriteAction.DELETE):
            db.delete(location)
    """
    try:
        yield session
        if commit:
            session.commit()
        else:
            session.flush()
    except IntegrityError as exc:
        session.rollback()
        violation = classify_integrity_error(exc, action, session=session)
        logger.warning(
            "Constraint violation on %s (%s): %s",
            action.value, constraint_name(exc) or "unnamed", violation.kind.value,
        )
        raise violation from exc
