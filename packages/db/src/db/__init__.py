# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, dispose_engine, get_db, get_engine, get_session_factory, init_models
from .enums import (
    LoanRequestStatus,
    LoanStatus,
    PaymentMethod,
    PaymentStatus,
    ReminderStatus,
    ReminderType,
    ReviewActionType,
    ReviewStatus,
    RiskLevel,
)
from .models import (
    ActiveLoanRow,
    AdminReviewRow,
    LoanRequestRow,
    PaymentRow,
    ReminderScheduleRow,
)

__all__ = [
    "Base",
    "dispose_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
    "init_models",
    "__version__",
    # Enums
    "LoanRequestStatus",
    "LoanStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ReminderStatus",
    "ReminderType",
    "ReviewActionType",
    "ReviewStatus",
    "RiskLevel",
    # Models
    "ActiveLoanRow",
    "AdminReviewRow",
    "LoanRequestRow",
    "PaymentRow",
    "ReminderScheduleRow",
]
