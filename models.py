# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Defines Transaction (the ledger) and Budget (per-category spending limits).
#       Derived budget figures (spent, remaining, ...) are never stored here;
#       see app/services/budget_evaluator.py.

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from db import Base


# ---- Enumerations / predefined values ----

TRANSACTION_TYPES = ("income", "expense")
RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")
BUDGET_PERIODS = ("weekly", "monthly", "yearly")

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investments",
    "Business",
    "Rental",
    "Gifts",
    "Refunds",
    "Other Income",
]

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Housing",
    "Utilities",
    "Healthcare",
    "Entertainment",
    "Shopping",
    "Education",
    "Travel",
    "Insurance",
    "Debt Payments",
    "Savings",
    "Gifts & Donations",
    "Personal Care",
    "Other Expenses",
]

DEFAULT_BUDGET_COLOR = "#3B82F6"
DEFAULT_ALERT_THRESHOLD = 80


def first_day_of_current_month() -> datetime:
    now = datetime.now()
    return datetime(now.year, now.month, 1)


class Transaction(Base):
    """
    ORM model representing a single income or expense entry.

    Amounts are always positive; `type` decides the direction.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_owner_date", "owner_id", "date"),
        Index("ix_transactions_owner_type_category", "owner_id", "type", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Tenant-scoping key (user id provided by the auth layer)
    owner_id = Column(String(64), nullable=False, index=True)

    # "income" | "expense"
    type = Column(String(10), nullable=False)

    category = Column(String(50), nullable=False)

    amount = Column(Float, nullable=False)

    date = Column(DateTime, nullable=False, default=datetime.now)

    description = Column(Text, nullable=False, default="")

    # List of lower-cased tag strings
    tags = Column(JSON, nullable=False, default=list)

    is_recurring = Column(Boolean, nullable=False, default=False)

    # One of RECURRING_FREQUENCIES when is_recurring, else NULL
    recurring_frequency = Column(String(10), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class Budget(Base):
    """
    ORM model for a spending limit on one category.

    One row per (owner_id, category); creating a budget for an existing
    pair updates that row instead (see app/services/budget_store.py:upsert).
    """

    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("owner_id", "category", name="uq_budgets_owner_category"),
    )

    id = Column(Integer, primary_key=True, index=True)

    owner_id = Column(String(64), nullable=False, index=True)

    category = Column(String(50), nullable=False)

    limit = Column(Float, nullable=False)

    # "weekly" | "monthly" | "yearly" (spend is still aggregated per calendar month)
    period = Column(String(10), nullable=False, default="monthly")

    alert_threshold = Column(Float, nullable=False, default=DEFAULT_ALERT_THRESHOLD)

    alerts_enabled = Column(Boolean, nullable=False, default=True)

    # Hex color for UI display, e.g. "#3B82F6"
    color = Column(String(7), nullable=False, default=DEFAULT_BUDGET_COLOR)

    notes = Column(String(200), nullable=False, default="")

    start_date = Column(DateTime, nullable=False, default=first_day_of_current_month)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
