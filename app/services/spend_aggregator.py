# app/services/spend_aggregator.py
#
# Spend Aggregator
# Computes how much an owner has spent per category (and overall) inside a
# period window. Always reads from the ledger; nothing is cached between calls.

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict

from sqlalchemy.orm import Session

from app.services import ledger
from app.services.periods import current_month_window

# Product rule: a budget on this category tracks spending across ALL categories.
GENERAL_CATEGORY = "General"


@dataclass(frozen=True)
class SpendSnapshot:
    """Expense totals for one owner over one window."""

    window_start: datetime
    window_end: datetime
    by_category: Dict[str, float] = field(default_factory=dict)
    total: float = 0.0

    def spent_for(self, category: str) -> float:
        """
        Spend that counts against a budget on `category`.

        The General category maps to the grand total; every other category
        maps to its own sum (0 when nothing was spent).
        """
        if category == GENERAL_CATEGORY:
            return self.total
        return self.by_category.get(category, 0.0)


def aggregate_spend(
    db: Session,
    owner_id: str,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
    now: datetime | None = None,
) -> SpendSnapshot:
    """
    Expense totals per category for [window_start, window_end).
    Defaults to the current calendar month.
    """
    if window_start is None or window_end is None:
        default_start, default_end = current_month_window(now)
        window_start = window_start or default_start
        window_end = window_end or default_end

    by_category = ledger.sum_expenses_by_category(db, owner_id, window_start, window_end)
    total = round(sum(by_category.values()), 2)

    return SpendSnapshot(
        window_start=window_start,
        window_end=window_end,
        by_category=by_category,
        total=total,
    )
