"""
Request / response schemas

Pydantic models used to validate request bodies and to serialize ORM rows.
JSON keys are camelCase on the wire (e.g. "alertThreshold"); snake_case keys
are accepted on input as well.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel

MAX_AMOUNT = 999_999_999.99


def _round_money(value: float) -> float:
    rounded = round(value, 2)
    if rounded <= 0:
        raise ValueError("Amount must be a positive number")
    return rounded


def _not_in_future(value: datetime) -> datetime:
    if value.tzinfo is not None:
        # Stored timestamps are naive local time
        value = value.astimezone().replace(tzinfo=None)
    if value > datetime.now():
        raise ValueError("Date cannot be in the future")
    return value


TransactionType = Literal["income", "expense"]
RecurringFrequency = Literal["daily", "weekly", "monthly", "yearly"]
BudgetPeriod = Literal["weekly", "monthly", "yearly"]

Category = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, max_length=30)]
Notes = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]
Money = Annotated[float, Field(gt=0, le=MAX_AMOUNT), AfterValidator(_round_money)]
PastDate = Annotated[datetime, AfterValidator(_not_in_future)]
Tags = Annotated[List[Tag], Field(max_length=10)]
Threshold = Annotated[float, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------------------------------------------------------------------
# Transactions
# -------------------------------------------------------------------

class TransactionCreate(CamelModel):
    type: TransactionType
    category: Category
    amount: Money
    date: Optional[PastDate] = None
    description: Description = ""
    tags: Tags = Field(default_factory=list)
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None

    @model_validator(mode="after")
    def check_recurrence(self):
        if self.is_recurring and self.recurring_frequency is None:
            raise ValueError("recurringFrequency is required for recurring transactions")
        if not self.is_recurring and self.recurring_frequency is not None:
            raise ValueError("recurringFrequency must be null for non-recurring transactions")
        return self


class TransactionUpdate(CamelModel):
    """Partial update; only fields present in the request body are applied."""

    type: Optional[TransactionType] = None
    category: Optional[Category] = None
    amount: Optional[Money] = None
    date: Optional[PastDate] = None
    description: Optional[Description] = None
    tags: Optional[Tags] = None
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class TransactionOut(CamelModel):
    id: int
    owner_id: str
    type: str
    category: str
    amount: float
    date: datetime
    description: str
    tags: List[str]
    is_recurring: bool
    recurring_frequency: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BulkDeleteIn(CamelModel):
    ids: List[int] = Field(min_length=1)


# -------------------------------------------------------------------
# Budgets
# -------------------------------------------------------------------

class BudgetCreate(CamelModel):
    category: Category
    limit: Money
    period: BudgetPeriod = "monthly"
    alert_threshold: Threshold = 80
    alerts_enabled: bool = True
    color: HexColor = "#3B82F6"
    notes: Notes = ""


class BudgetUpdate(CamelModel):
    limit: Optional[Money] = None
    period: Optional[BudgetPeriod] = None
    alert_threshold: Optional[Threshold] = None
    alerts_enabled: Optional[bool] = None
    color: Optional[HexColor] = None
    notes: Optional[Notes] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class BudgetOut(CamelModel):
    id: int
    owner_id: str
    category: str
    limit: float
    period: str
    alert_threshold: float
    alerts_enabled: bool
    color: str
    notes: str
    start_date: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BudgetStatusOut(BudgetOut):
    spent: float
    remaining: float
    percent_used: int
    is_exceeded: bool
    is_alert_triggered: bool

    @classmethod
    def from_status(cls, status) -> "BudgetStatusOut":
        base = BudgetOut.model_validate(status.budget).model_dump()
        return cls(
            **base,
            spent=status.spent,
            remaining=status.remaining,
            percent_used=status.percent_used,
            is_exceeded=status.is_exceeded,
            is_alert_triggered=status.is_alert_triggered,
        )


class BudgetSummaryOut(CamelModel):
    total_budget: float
    total_spent: float
    remaining: float
    percent_used: int
    alerts_count: int
    exceeded_count: int


class AlertOut(CamelModel):
    type: str
    category: str
    limit: float
    spent: float
    percent_used: int
    message: str
