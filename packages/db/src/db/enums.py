# This project was developed with assistance from AI tools.
"""
Domain enums for the peer-to-peer loan lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class LoanRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FUNDED = "funded"
    ACTIVE = "active"
    COMPLETED = "completed"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def rank(self) -> int:
        """Ordinal used for compatibility distance (low=1 .. high=3)."""
        return {RiskLevel.LOW: 1, RiskLevel.MEDIUM: 2, RiskLevel.HIGH: 3}[self]


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REQUIRES_ADDITIONAL_DATA = "requires_additional_data"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ReviewStatus"]:
        """Statuses where the review no longer accepts decisions."""
        return frozenset({cls.APPROVED, cls.REJECTED})

    @classmethod
    def valid_transitions(cls) -> dict["ReviewStatus", frozenset["ReviewStatus"]]:
        """Allowed status transitions for an admin review."""
        return {
            cls.PENDING: frozenset(
                {cls.APPROVED, cls.REJECTED, cls.REQUIRES_ADDITIONAL_DATA}
            ),
            cls.REQUIRES_ADDITIONAL_DATA: frozenset({cls.APPROVED, cls.REJECTED}),
            cls.APPROVED: frozenset(),
            cls.REJECTED: frozenset(),
        }


class ReviewActionType(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_DATA = "request_data"
    ADJUST_TERMS = "adjust_terms"


class LoanStatus(str, enum.Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"

    @classmethod
    def terminal_statuses(cls) -> frozenset["LoanStatus"]:
        """Statuses never revisited by the periodic status update."""
        return frozenset({cls.COMPLETED, cls.DEFAULTED})


class ReminderType(str, enum.Enum):
    UPCOMING = "upcoming"
    OVERDUE = "overdue"
    FINAL = "final"


class ReminderStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(str, enum.Enum):
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"
    CASH = "cash"
