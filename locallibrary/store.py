"""Record store: the CRUD primitives the catalog managers are written against.

Every operation opens its own session from the session factory, so
independent reads can be awaited together with ``asyncio.gather`` without
sharing a session. SQLAlchemy failures are re-raised as ``StoreError``.
"""
from typing import Any, Optional, TypeVar

from sqlalchemy import ColumnElement, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.core.exceptions import StoreError
from locallibrary.core.logging import get_logger
from locallibrary.database import Base

logger = get_logger("store")

ModelT = TypeVar("ModelT", bound=Base)


class Store:
    """Async CRUD over the catalog tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_all(
        self,
        model: type[ModelT],
        *criteria: ColumnElement[bool],
        order_by: Optional[Any] = None,
    ) -> list[ModelT]:
        """Get all records of ``model`` matching ``criteria``."""
        query = select(model).where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        else:
            query = query.order_by(model.id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError("find_all", str(exc)) from exc

    async def find_by_id(self, model: type[ModelT], record_id: int) -> Optional[ModelT]:
        """Get a record by ID, or None when it does not exist."""
        try:
            async with self.session_factory() as session:
                return await session.get(model, record_id)
        except SQLAlchemyError as exc:
            raise StoreError("find_by_id", str(exc)) from exc

    async def count(self, model: type[Base], *criteria: ColumnElement[bool]) -> int:
        """Count records of ``model`` matching ``criteria``."""
        query = select(func.count()).select_from(model).where(*criteria)
        try:
            async with self.session_factory() as session:
                return (await session.execute(query)).scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError("count", str(exc)) from exc

    async def insert(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        """Insert a new record and return it with its assigned ID."""
        try:
            async with self.session_factory() as session:
                record = model()
                await self._assign(session, record, values)
                session.add(record)
                await session.commit()
                return await self._reload(session, model, record.id)
        except SQLAlchemyError as exc:
            raise StoreError("insert", str(exc)) from exc

    async def update_by_id(
        self,
        model: type[ModelT],
        record_id: int,
        values: dict[str, Any],
    ) -> Optional[ModelT]:
        """Overwrite a record in place; None when it no longer exists."""
        try:
            async with self.session_factory() as session:
                record = await session.get(model, record_id)
                if record is None:
                    return None
                await self._assign(session, record, values)
                await session.commit()
                return await self._reload(session, model, record_id)
        except SQLAlchemyError as exc:
            raise StoreError("update_by_id", str(exc)) from exc

    async def delete_by_id(self, model: type[Base], record_id: int) -> None:
        """Delete a record; deleting a missing record is a no-op."""
        try:
            async with self.session_factory() as session:
                record = await session.get(model, record_id)
                if record is not None:
                    await session.delete(record)
                    await session.commit()
        except SQLAlchemyError as exc:
            raise StoreError("delete_by_id", str(exc)) from exc

    async def delete_unreferenced(
        self,
        model: type[Base],
        record_id: int,
        *dependents: tuple[type[Base], ColumnElement[bool]],
    ) -> list[Base]:
        """Delete a record only if nothing references it.

        The target row is locked and the dependents are re-read in the same
        transaction as the delete. Returns the dependents that blocked the
        delete, or an empty list when the record was deleted (or was
        already gone).
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(model).where(model.id == record_id).with_for_update()
                    )
                    record = result.scalar_one_or_none()
                    if record is None:
                        return []

                    blocking: list[Base] = []
                    for dependent_model, criterion in dependents:
                        found = await session.execute(
                            select(dependent_model).where(criterion)
                        )
                        blocking.extend(found.scalars().all())
                    if blocking:
                        return blocking

                    await session.delete(record)
                return []
        except SQLAlchemyError as exc:
            raise StoreError("delete_unreferenced", str(exc)) from exc

    async def _assign(
        self,
        session: AsyncSession,
        record: Base,
        values: dict[str, Any],
    ) -> None:
        """Copy ``values`` onto ``record``.

        Collection relationships take a list of IDs, resolved against the
        related table inside ``session``.
        """
        relationships = inspect(type(record)).relationships
        for key, value in values.items():
            if key in relationships and relationships[key].uselist:
                related_model = relationships[key].mapper.class_
                if value:
                    result = await session.execute(
                        select(related_model).where(related_model.id.in_(value))
                    )
                    value = list(result.scalars().all())
                else:
                    value = []
            setattr(record, key, value)

    async def _reload(
        self,
        session: AsyncSession,
        model: type[ModelT],
        record_id: int,
    ) -> ModelT:
        """Re-read a freshly written record so eager relationships are populated."""
        result = await session.execute(
            select(model)
            .where(model.id == record_id)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one()
        logger.debug(f"Stored {record!r}")
        return record

