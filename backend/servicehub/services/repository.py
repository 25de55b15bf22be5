"""
ServiceHub Backend — Tenant-Scoped Repository
===============================================

What:  Data access for every tenant-owned model.
How:   Every statement starts from `tenant_id = :tenant AND is_deleted = false`;
       caller criteria (filters, free-text search, one sort key) are ANDed on
       top of that scope. Callers never build the tenant predicate themselves.
Who:   The paged query (services/paging.py) and every entity service.

Criteria:
    FieldFilter(field, value, op)   value None → not provided, skipped.
                                    False / "" / 0 are real values and filter.
    AnyOf(filters)                  the provided member filters, ORed.
    TextSearch(term, fields)        case-insensitive "contains" over fields,
                                    ORed; a blank term is ignored.
    SortKey(field, descending)      `id` is always appended as a tie-breaker
                                    so pages are deterministic.

Field names must be mapped table columns. Filters on `tenant_id` or
`is_deleted` raise ValueError: the scope is fixed by the repository and
cannot be widened or replaced by a caller.

Database failures are logged and re-raised as DatabaseError (generic 500).
"""

import logging
import operator
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from sqlalchemy import Select, desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.exceptions import DatabaseError
from servicehub.models.base import TenantScopedMixin

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=TenantScopedMixin)

# Columns owned by the tenant scope itself
RESERVED_FIELDS = frozenset({"tenant_id", "is_deleted"})

COMPARISONS = {
    "eq": operator.eq,
    "ne": operator.ne,
    "ge": operator.ge,
    "gt": operator.gt,
    "le": operator.le,
    "lt": operator.lt,
}


@dataclass(frozen=True)
class FieldFilter:
    """
    One optional predicate.

    op:
        eq (default), ne, ge, gt, le, lt   compare the column with value
        in, not_in                         value is a collection
        le_field                           value names another column
                                           (stock_quantity <= low_stock_threshold)
    Range operators are used for date windows such as start_date/end_date
    on payments, invoices and appointments.
    """

    field: str
    value: Any
    op: str = "eq"


@dataclass(frozen=True)
class AnyOf:
    """Matches rows satisfying at least one of the provided member filters."""

    filters: Tuple[FieldFilter, ...]


@dataclass(frozen=True)
class TextSearch:
    term: Optional[str]
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


@dataclass
class QueryCriteria:
    filters: List[Union[FieldFilter, AnyOf]] = field(default_factory=list)
    search: Optional[TextSearch] = None
    sort: Optional[SortKey] = None
    # Loader options (e.g. selectinload) applied to row queries, never to counts
    options: Tuple[Any, ...] = ()


class TenantRepository(Generic[M]):
    """Tenant-scoped queries and writes for one mapped model."""

    def __init__(self, model: Type[M]):
        self.model = model

    # ── Statement building ────────────────────────────────────────────────

    def _column(self, name: str):
        if name in RESERVED_FIELDS:
            raise ValueError(f"Filtering on '{name}' is not allowed; tenant scope is fixed")
        if name not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no field '{name}'")
        return getattr(self.model, name)

    def scoped(self, tenant_id: uuid.UUID) -> Select:
        """SELECT over the tenant's live rows."""
        return select(self.model).where(
            self.model.tenant_id == tenant_id,
            self.model.is_deleted.is_(False),
        )

    def _predicate(self, flt: FieldFilter):
        """SQL predicate for one filter, or None when its value was not provided."""
        column = self._column(flt.field)
        if flt.value is None:
            return None
        if flt.op in COMPARISONS:
            return COMPARISONS[flt.op](column, flt.value)
        if flt.op == "in":
            return column.in_(flt.value)
        if flt.op == "not_in":
            return column.not_in(flt.value)
        if flt.op == "le_field":
            return column <= self._column(flt.value)
        raise ValueError(f"Unsupported filter operator '{flt.op}'")

    def _apply_filters(self, stmt: Select, criteria: QueryCriteria) -> Select:
        for flt in criteria.filters:
            if isinstance(flt, AnyOf):
                predicates = [p for p in map(self._predicate, flt.filters) if p is not None]
                if predicates:
                    stmt = stmt.where(or_(*predicates))
                continue
            predicate = self._predicate(flt)
            if predicate is not None:
                stmt = stmt.where(predicate)

        search = criteria.search
        if search is not None and search.term is not None and search.term.strip():
            term = search.term.strip()
            stmt = stmt.where(
                or_(*(self._column(name).icontains(term, autoescape=True) for name in search.fields))
            )
        return stmt

    def _apply_sort(self, stmt: Select, sort: Optional[SortKey]) -> Select:
        if sort is not None:
            column = self._column(sort.field)
            stmt = stmt.order_by(column.desc() if sort.descending else column.asc())
        return stmt.order_by(self.model.id.asc())

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_page(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        criteria: QueryCriteria,
        offset: int,
        limit: int,
    ) -> Tuple[List[M], int]:
        """
        One page of rows plus the total count of the filtered set.

        The count runs over the filtered, unsorted, unpaginated statement.
        """
        filtered = self._apply_filters(self.scoped(tenant_id), criteria)
        count_stmt = select(func.count()).select_from(filtered.subquery())
        rows_stmt = (
            self._apply_sort(filtered, criteria.sort)
            .options(*criteria.options)
            .offset(offset)
            .limit(limit)
        )
        try:
            total = (await db.execute(count_stmt)).scalar_one()
            rows = list((await db.execute(rows_stmt)).scalars().all())
        except SQLAlchemyError as e:
            logger.error(
                "Database error paging %s: %s", self.model.__name__, str(e), exc_info=True
            )
            raise DatabaseError(context={"model": self.model.__name__})
        return rows, total

    async def find_all(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        criteria: Optional[QueryCriteria] = None,
    ) -> List[M]:
        criteria = criteria or QueryCriteria()
        stmt = self._apply_sort(self._apply_filters(self.scoped(tenant_id), criteria), criteria.sort)
        stmt = stmt.options(*criteria.options)
        try:
            return list((await db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})

    async def get(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        entity_id: uuid.UUID,
        options: Sequence[Any] = (),
    ) -> Optional[M]:
        """The live row with this id inside the tenant, else None."""
        stmt = self.scoped(tenant_id).where(self.model.id == entity_id).options(*options)
        try:
            return (await db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching %s %s: %s", self.model.__name__, entity_id, str(e))
            raise DatabaseError(context={"model": self.model.__name__, "id": str(entity_id)})

    async def exists(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        filters: Sequence[Union[FieldFilter, AnyOf]],
    ) -> bool:
        stmt = self._apply_filters(self.scoped(tenant_id), QueryCriteria(filters=list(filters)))
        try:
            found = (await db.execute(select(stmt.exists()))).scalar()
        except SQLAlchemyError as e:
            logger.error("Database error checking %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})
        return bool(found)

    async def count_created_between(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> int:
        """
        Rows the tenant created in [start, end), soft-deleted ones included.

        Used for document numbering, where a deleted record still consumed
        its number.
        """
        stmt = select(func.count()).select_from(self.model).where(
            self.model.tenant_id == tenant_id,
            self.model.created_at >= start,
            self.model.created_at < end,
        )
        try:
            return (await db.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error counting %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})

    async def count(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        filters: Sequence[Union[FieldFilter, AnyOf]] = (),
    ) -> int:
        filtered = self._apply_filters(self.scoped(tenant_id), QueryCriteria(filters=list(filters)))
        try:
            return (await db.execute(select(func.count()).select_from(filtered.subquery()))).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error counting %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})

    async def total(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        expression: Any,
        filters: Sequence[Union[FieldFilter, AnyOf]] = (),
    ) -> Any:
        """SUM(expression) over the filtered live rows; 0 when none match."""
        stmt = self._apply_filters(
            self.scoped(tenant_id).with_only_columns(func.coalesce(func.sum(expression), 0)),
            QueryCriteria(filters=list(filters)),
        )
        try:
            return (await db.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error summing %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})

    async def count_by(
        self,
        db: AsyncSession,
        tenant_id: uuid.UUID,
        field_name: str,
        filters: Sequence[Union[FieldFilter, AnyOf]] = (),
        limit: Optional[int] = None,
    ) -> List[Tuple[Any, int]]:
        """(value, row count) per distinct value of one column, largest count first."""
        column = self._column(field_name)
        hits = func.count().label("hits")
        stmt = self._apply_filters(
            self.scoped(tenant_id).with_only_columns(column, hits),
            QueryCriteria(filters=list(filters)),
        )
        stmt = stmt.group_by(column).order_by(desc(hits), column)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return [(value, count) for value, count in (await db.execute(stmt)).all()]
        except SQLAlchemyError as e:
            logger.error("Database error grouping %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})

    # ── Writes ────────────────────────────────────────────────────────────

    async def add(self, db: AsyncSession, tenant_id: uuid.UUID, entity: M) -> M:
        """Stamp the caller's tenant on a new entity and flush it."""
        entity.tenant_id = tenant_id
        db.add(entity)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error inserting %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})
        return entity

    async def save(self, db: AsyncSession, entity: M) -> M:
        """Flush pending changes to an already-loaded entity."""
        entity.touch()
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})
        return entity

    async def soft_delete(self, db: AsyncSession, entity: M) -> None:
        """Mark deleted; the row stays in the table."""
        entity.mark_deleted()
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting %s: %s", self.model.__name__, str(e))
            raise DatabaseError(context={"model": self.model.__name__})
