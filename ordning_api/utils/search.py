import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session

from ..models.item import Item
from ..models.location import Location
from .config import SEARCH_MAX_LIMIT
from .errors import InvalidSearchParameters
from .query import TieredQuery, compile_query, sanitize_term
from .ranking import SearchDocument, rank_document, ranking_sort_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTarget:
    """
    How one entity kind is searched: the model, the columns used to
    prefilter candidates in SQL, and how a row becomes a SearchDocument.
    """
    label: str
    model: Any
    text_columns: tuple
    to_document: Callable[[Any], SearchDocument]


ITEM_TARGET = SearchTarget(
    label="items",
    model=Item,
    text_columns=(Item.name, Item.description, cast(Item.properties, String)),
    to_document=lambda item: SearchDocument.build(
        item.id, item.name, item.description, item.properties or {},
    ),
)

LOCATION_TARGET = SearchTarget(
    label="locations",
    model=Location,
    text_columns=(Location.name, Location.description),
    to_document=lambda loc: SearchDocument.build(loc.id, loc.name, loc.description),
)


def validate_pagination(offset: int, limit: int) -> None:
    """Reject bad paging input before any query runs."""
    if offset is None or offset < 0:
        raise InvalidSearchParameters("Offset must be greater than or equal to zero.")
    if limit is None or limit <= 0:
        raise InvalidSearchParameters("Limit must be greater than zero.")
    if limit > SEARCH_MAX_LIMIT:
        raise InvalidSearchParameters(f"Limit cannot exceed {SEARCH_MAX_LIMIT}.")


def _like_pattern(word: str) -> str:
    escaped = word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _list_by_name(session: Session, target: SearchTarget, offset: int, limit: int) -> tuple[list, int]:
    model = target.model
    total = session.query(func.count(model.id)).scalar() or 0
    rows = (
        session.query(model)
        .order_by(func.lower(model.name), model.name, model.id)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, int(total)


def _ranked_search(
        session: Session,
        target: SearchTarget,
        query: TieredQuery,
        offset: int,
        limit: int,
) -> tuple[list, int]:
    # Any-terms is the widest tier, so a substring match on any word is a
    # superset of every eligible row. Exact eligibility is decided below.
    conditions = [
        column.ilike(_like_pattern(word), escape="\\")
        for word in query.words
        for column in target.text_columns
    ]
    candidates = session.query(target.model).filter(or_(*conditions)).all()

    ranked = []
    for row in candidates:
        doc = target.to_document(row)
        ranking = rank_document(query, doc)
        if ranking.eligible:
            ranked.append((ranking_sort_key(ranking, doc), row))

    ranked.sort(key=lambda pair: pair[0])
    total = len(ranked)
    page = [row for _, row in ranked[offset:offset + limit]]

    logger.debug(
        "Search %s phrase=%s all=%s any=%s candidates=%d total=%d",
        target.label, query.phrase, query.all_terms, query.any_terms, len(candidates), total,
    )
    return page, total


def search(
        session: Session,
        target: SearchTarget,
        term: Optional[str],
        offset: int = 0,
        limit: int = 20,
) -> tuple[list, int]:
    """
    Ranked, paginated search.

    Returns (page, total_count). total_count counts every eligible row,
    not just the page. An empty term (or one with no usable words) lists
    everything ordered by name.

    Raises:
        InvalidSearchParameters -> offset < 0, limit <= 0 or limit > 100.
    """
    validate_pagination(offset, limit)

    query = compile_query(sanitize_term(term))
    if query is None:
        return _list_by_name(session, target, offset, limit)

    return _ranked_search(session, target, query, offset, limit)


def search_items(session: Session, term: Optional[str], offset: int = 0, limit: int = 20) -> tuple[list[Item], int]:
    return search(session, ITEM_TARGET, term, offset, limit)


def search_locations(
        session: Session,
        term: Optional[str],
        offset: int = 0,
        limit: int = 20,
) -> tuple[list[Location], int]:
    return search(session, LOCATION_TARGET, term, offset, limit)
