"""
Query executor - compiles predicates and runs count + fetch for one page
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from homesphere.query.pagination import PageRequest, PageResult
from homesphere.query.predicate import FieldMap, Predicate, compile_predicate
from homesphere.utils.errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_SORT = "newest"


@dataclass(frozen=True)
class Collection:
    """
    Everything the executor needs to know about one listable entity:
    the mapped class, how logical filter fields resolve to columns and
    which sort keys are accepted.
    """
    model: Any
    field_map: FieldMap
    sorts: Dict[str, Tuple[Any, ...]] = field(default_factory=dict)

    def order_by(self, sort: Optional[str]) -> Tuple[Any, ...]:
        key = (sort or "").strip().lower()
        clauses = self.sorts.get(key) or self.sorts.get(DEFAULT_SORT) or ()
        # Primary key tiebreaker keeps ordering stable between identical requests
        return tuple(clauses) + (self.model.id.asc(),)


async def count_matching(session: AsyncSession, collection: Collection, predicate: Predicate) -> int:
    criteria = compile_predicate(predicate, collection.field_map)
    query = select(func.count()).select_from(collection.model).where(*criteria)
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Count query on {collection.model.__tablename__} failed: {e}")
        raise StorageError(details=str(e)) from e
    return result.scalar_one()


async def fetch_all(
    session: AsyncSession,
    collection: Collection,
    predicate: Predicate,
    sort: Optional[str] = None,
    options: Sequence[Any] = (),
    limit: Optional[int] = None,
) -> list:
    criteria = compile_predicate(predicate, collection.field_map)
    query = (
        select(collection.model)
        .where(*criteria)
        .order_by(*collection.order_by(sort))
        .options(*options)
        .execution_options(populate_existing=True)
    )
    if limit is not None:
        query = query.limit(limit)
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Fetch query on {collection.model.__tablename__} failed: {e}")
        raise StorageError(details=str(e)) from e
    return list(result.scalars().all())


async def fetch_page(
    session: AsyncSession,
    collection: Collection,
    predicate: Predicate,
    page_request: PageRequest,
    sort: Optional[str] = None,
    options: Sequence[Any] = (),
) -> PageResult:
    """
    Run the count and the page fetch for one listing request.

    Both queries share the caller's session. ``total`` counts every matching
    row regardless of the requested window; a page past the end yields no
    items and the same ``total``.
    """
    total = await count_matching(session, collection, predicate)

    criteria = compile_predicate(predicate, collection.field_map)
    query = (
        select(collection.model)
        .where(*criteria)
        .order_by(*collection.order_by(sort))
        .offset(page_request.offset)
        .limit(page_request.limit)
        .options(*options)
        .execution_options(populate_existing=True)
    )
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Page query on {collection.model.__tablename__} failed: {e}")
        raise StorageError(details=str(e)) from e

    return PageResult(
        items=list(result.scalars().all()),
        total=total,
        page=page_request.page,
        limit=page_request.limit,
    )
