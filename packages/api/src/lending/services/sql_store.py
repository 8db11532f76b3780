# This project was developed with assistance from AI tools.
"""Database-backed registries.

Implements the ``Store`` / ``LoanScopedStore`` protocols over the ``db``
package's row models. Column names mirror the pydantic field names, so
mapping is a straight copy; JSON columns receive the JSON-mode dump of
nested models.
"""

import logging
from typing import Any, Generic, TypeVar

from db import (
    ActiveLoanRow,
    AdminReviewRow,
    LoanRequestRow,
    PaymentRow,
    ReminderScheduleRow,
    get_session_factory,
)
from pydantic import BaseModel
from sqlalchemy import JSON, delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..schemas.loan import ActiveLoan, PaymentRecord
from ..schemas.loan_request import LoanRequest
from ..schemas.reminder import ReminderSchedule
from ..schemas.review import AdminReview
from .store import Stores

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class SqlStore(Generic[T]):
    """Store keyed by the row's string primary key."""

    def __init__(
        self,
        model: type[T],
        row_model: type,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self._model = model
        self._row_model = row_model
        self._session_factory = session_factory
        columns = row_model.__table__.columns
        self._fields = [c.name for c in columns if c.name in model.model_fields]
        self._json_fields = {c.name for c in columns if isinstance(c.type, JSON)}

    def to_row(self, item: T) -> Any:
        plain = item.model_dump()
        as_json = item.model_dump(mode="json", include=self._json_fields)
        values = {
            name: as_json[name] if name in self._json_fields else plain[name]
            for name in self._fields
        }
        return self._row_model(**values)

    def to_model(self, row: Any) -> T:
        return self._model.model_validate({name: getattr(row, name) for name in self._fields})

    async def get(self, key: str) -> T | None:
        async with self._session_factory() as session:
            row = await session.get(self._row_model, key)
            return self.to_model(row) if row is not None else None

    async def put(self, item: T) -> None:
        async with self._session_factory() as session:
            await session.merge(self.to_row(item))
            await session.commit()

    async def delete(self, key: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(self._row_model).where(self._row_model.id == key)
            )
            await session.commit()
            return result.rowcount > 0

    async def list(self) -> list[T]:
        async with self._session_factory() as session:
            result = await session.execute(select(self._row_model))
            return [self.to_model(row) for row in result.scalars().all()]


class SqlLoanScopedStore(SqlStore[T]):
    """SQL store for rows carrying a ``loan_id`` foreign key."""

    async def list_by_loan(self, loan_id: str) -> list[T]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(self._row_model).where(self._row_model.loan_id == loan_id)
            )
            return [self.to_model(row) for row in result.scalars().all()]

    async def delete_by_loan(self, loan_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(self._row_model).where(self._row_model.loan_id == loan_id)
            )
            await session.commit()
            return result.rowcount


def build_sql_stores(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> Stores:
    """Registries persisted through the shared async session factory."""
    factory = session_factory or get_session_factory()
    logger.info("Using database registries")
    return Stores(
        loan_requests=SqlStore(LoanRequest, LoanRequestRow, factory),
        reviews=SqlStore(AdminReview, AdminReviewRow, factory),
        loans=SqlStore(ActiveLoan, ActiveLoanRow, factory),
        payments=SqlLoanScopedStore(PaymentRecord, PaymentRow, factory),
        schedules=SqlLoanScopedStore(ReminderSchedule, ReminderScheduleRow, factory),
    )
