# This project was developed with assistance from AI tools.
"""Storage contracts for the lifecycle registries and their in-memory fakes.

The engine only talks to these protocols, so the registries can live in
process memory (tests, single-node dev) or in the database
(``sql_store``). In-memory stores hand out deep copies: callers must
``put()`` a changed entity back, exactly as with a real database.
"""

import logging
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel

from ..schemas.loan import ActiveLoan, PaymentRecord
from ..schemas.loan_request import LoanRequest
from ..schemas.reminder import ReminderSchedule
from ..schemas.review import AdminReview

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Store(Protocol[T]):
    async def get(self, key: str) -> T | None: ...

    async def put(self, item: T) -> None: ...

    async def delete(self, key: str) -> bool: ...

    async def list(self) -> list[T]: ...


class LoanScopedStore(Store[T], Protocol[T]):
    async def list_by_loan(self, loan_id: str) -> list[T]: ...

    async def delete_by_loan(self, loan_id: str) -> int: ...


class InMemoryStore(Generic[T]):
    """Dict-backed store keyed by the entity's ``id`` field."""

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    async def get(self, key: str) -> T | None:
        item = self._items.get(key)
        return item.model_copy(deep=True) if item is not None else None

    async def put(self, item: T) -> None:
        self._items[item.id] = item.model_copy(deep=True)

    async def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    async def list(self) -> list[T]:
        return [item.model_copy(deep=True) for item in self._items.values()]

    def __len__(self) -> int:
        return len(self._items)


class InMemoryLoanScopedStore(InMemoryStore[T]):
    """In-memory store for entities carrying a ``loan_id``."""

    async def list_by_loan(self, loan_id: str) -> list[T]:
        return [
            item.model_copy(deep=True)
            for item in self._items.values()
            if item.loan_id == loan_id
        ]

    async def delete_by_loan(self, loan_id: str) -> int:
        keys = [key for key, item in self._items.items() if item.loan_id == loan_id]
        for key in keys:
            del self._items[key]
        return len(keys)


LoanRequestStore = Store[LoanRequest]
ReviewStore = Store[AdminReview]
LoanStore = Store[ActiveLoan]
PaymentStore = LoanScopedStore[PaymentRecord]
ScheduleStore = LoanScopedStore[ReminderSchedule]


class Stores:
    """Bundle of the five registries the engine needs."""

    def __init__(
        self,
        *,
        loan_requests: LoanRequestStore,
        reviews: ReviewStore,
        loans: LoanStore,
        payments: PaymentStore,
        schedules: ScheduleStore,
    ):
        self.loan_requests = loan_requests
        self.reviews = reviews
        self.loans = loans
        self.payments = payments
        self.schedules = schedules


def build_memory_stores() -> Stores:
    """Fresh set of empty in-memory registries."""
    logger.info("Using in-memory registries (state is lost on restart)")
    return Stores(
        loan_requests=InMemoryStore[LoanRequest](),
        reviews=InMemoryStore[AdminReview](),
        loans=InMemoryStore[ActiveLoan](),
        payments=InMemoryLoanScopedStore[PaymentRecord](),
        schedules=InMemoryLoanScopedStore[ReminderSchedule](),
    )
