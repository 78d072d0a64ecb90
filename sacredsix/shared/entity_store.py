"""Entity store over an async SQLAlchemy session.

Services receive an ``EntityStore`` instead of a raw session. It exposes the
small set of storage operations the domain layer needs and the transaction
boundary used by every mutating operation.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models import User

logger = logging.getLogger(__name__)

M = TypeVar("M")


class EntityStore:
    """Storage operations for ORM entities keyed by id and by owner."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["EntityStore"]:
        """Run the enclosed block as one unit of work.

        Nested calls join the outermost transaction; only the outermost block
        commits, and any exception rolls back everything and propagates.
        """
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise
        finally:
            self._depth = 0

    async def get(self, model: type[M], entity_id: UUID | None) -> M | None:
        if entity_id is None:
            return None
        return await self.db.get(model, entity_id)

    async def list(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Sequence[Any] | Any | None = None,
        **filters: Any,
    ) -> list[M]:
        stmt = select(model).where(*criteria).filter_by(**filters)
        if order_by is not None:
            order = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
            stmt = stmt.order_by(*order)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def first(self, model: type[M], *criteria: Any, order_by=None, **filters: Any) -> M | None:
        stmt = select(model).where(*criteria).filter_by(**filters)
        if order_by is not None:
            order = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
            stmt = stmt.order_by(*order)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def count(self, model: type[M], *criteria: Any, **filters: Any) -> int:
        stmt = select(func.count()).select_from(model).where(*criteria).filter_by(**filters)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def put(self, record: M) -> M:
        self.db.add(record)
        await self.db.flush()
        return record

    async def delete(self, record: Any) -> None:
        await self.db.delete(record)
        await self.db.flush()

    async def delete_where(self, model: type[M], *criteria: Any, **filters: Any) -> int:
        stmt = delete(model).where(*criteria).filter_by(**filters)
        result = await self.db.execute(stmt.execution_options(synchronize_session="evaluate"))
        return result.rowcount or 0

    async def update_where(
        self, model: type[M], values: dict[str, Any], *criteria: Any, **filters: Any
    ) -> int:
        """Apply ``values`` to every matching row and return the affected count.

        Used as a compare-and-set by putting the expected current value in the
        criteria: a zero count means another writer got there first.
        """
        stmt = update(model).where(*criteria).filter_by(**filters).values(**values)
        result = await self.db.execute(stmt.execution_options(synchronize_session="evaluate"))
        return result.rowcount or 0

    async def refresh(self, record: Any) -> Any:
        await self.db.refresh(record)
        return record

    async def lock_owner(self, user_id: UUID) -> User | None:
        """Take the per-user row lock that serializes owner-scoped checks.

        On PostgreSQL this is ``SELECT ... FOR UPDATE``; SQLite serializes
        writers on its own and ignores the clause.
        """
        if not self.in_transaction:
            logger.warning(f"lock_owner called outside a transaction for user {user_id}")
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
