# app/services/budget_evaluator.py
"""
Budget evaluation and alerting.

Public API:
    evaluate(budget, spent) -> BudgetStatus
        Pure computation of the derived figures for one budget.
    evaluate_all(db, owner_id) -> (list[BudgetStatus], BudgetSummary)
        Status list for every active budget of an owner, current month.
    check_alert_on_write(db, owner_id, category, incoming_amount) -> Alert | None
        Alert decision for a transaction that is being written.
    alerts_from_statuses(statuses) -> list[Alert]
        Alerts listing built from a status list.

All spend figures use the current calendar month, whatever the budget's
configured period is.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import CURRENCY_SYMBOL
from app.services import budget_store, ledger
from app.services.periods import current_month_window
from app.services.spend_aggregator import aggregate_spend

logger = logging.getLogger(__name__)

ALERT_WARNING = "warning"
ALERT_EXCEEDED = "exceeded"


def round_half_up(value: float) -> int:
    # round() is banker's rounding; percentages round .5 upwards
    return int(math.floor(value + 0.5))


def percent_of(spent: float, limit: float) -> int:
    if limit <= 0:
        return 0
    return round_half_up(spent / limit * 100)


@dataclass(frozen=True)
class BudgetStatus:
    """A budget together with its spend figures for the current month."""

    budget: Any
    spent: float
    remaining: float
    percent_used: int
    is_exceeded: bool
    is_alert_triggered: bool


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float
    total_spent: float
    remaining: float
    percent_used: int
    alerts_count: int
    exceeded_count: int


@dataclass(frozen=True)
class Alert:
    type: str
    category: str
    limit: float
    spent: float
    percent_used: int
    message: str


# ---- Pure evaluation ----

def evaluate(budget: Any, spent: float) -> BudgetStatus:
    """
    Derive remaining / percent_used / is_exceeded / is_alert_triggered
    for `budget` given the amount spent against it.
    """
    limit = float(budget.limit)
    spent = round(float(spent), 2)
    percent_used = percent_of(spent, limit)

    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=round(max(0.0, limit - spent), 2),
        percent_used=percent_used,
        is_exceeded=spent > limit,
        is_alert_triggered=bool(budget.alerts_enabled) and percent_used >= budget.alert_threshold,
    )


def summarize(statuses: List[BudgetStatus]) -> BudgetSummary:
    total_budget = round(sum(float(s.budget.limit) for s in statuses), 2)
    total_spent = round(sum(s.spent for s in statuses), 2)

    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=round(total_budget - total_spent, 2),
        percent_used=percent_of(total_spent, total_budget),
        alerts_count=sum(1 for s in statuses if s.is_alert_triggered),
        exceeded_count=sum(1 for s in statuses if s.is_exceeded),
    )


# ---- Alert messages ----

def _money(value: float) -> str:
    return f"{CURRENCY_SYMBOL}{value:.2f}"


def build_alert(alert_type: str, category: str, limit: float, spent: float, percent_used: int) -> Alert:
    if alert_type == ALERT_EXCEEDED:
        message = (
            f"Budget exceeded! You've spent {_money(spent)} of your "
            f"{_money(limit)} budget for {category}."
        )
    else:
        message = (
            f"Budget alert: You've used {percent_used}% of your {category} budget "
            f"({_money(spent)} of {_money(limit)})."
        )

    return Alert(
        type=alert_type,
        category=category,
        limit=limit,
        spent=spent,
        percent_used=percent_used,
        message=message,
    )


# ---- Store-backed operations ----

def evaluate_all(
    db: Session,
    owner_id: str,
    now: datetime | None = None,
) -> Tuple[List[BudgetStatus], BudgetSummary]:
    """
    Status list for all active budgets of `owner_id` (ordered by category)
    plus the rollup summary. Spend is aggregated once for the whole month.
    """
    budgets = budget_store.list_active(db, owner_id)
    snapshot = aggregate_spend(db, owner_id, now=now)

    statuses = [evaluate(b, snapshot.spent_for(b.category)) for b in budgets]
    return statuses, summarize(statuses)


def alerts_from_statuses(statuses: List[BudgetStatus]) -> List[Alert]:
    alerts: List[Alert] = []
    for s in statuses:
        if not (s.is_alert_triggered or s.is_exceeded):
            continue
        alerts.append(
            build_alert(
                ALERT_EXCEEDED if s.is_exceeded else ALERT_WARNING,
                s.budget.category,
                float(s.budget.limit),
                s.spent,
                s.percent_used,
            )
        )
    return alerts


def check_alert_on_write(
    db: Session,
    owner_id: str,
    category: str,
    incoming_amount: float,
    now: datetime | None = None,
) -> Optional[Alert]:
    """
    Decide whether writing an expense of `incoming_amount` in `category`
    crosses the budget's alert threshold or its limit.

    Pass incoming_amount=0 to re-check where things stand now (update path).
    On create this runs before the new transaction is added to the session,
    so the stored spend does not include it yet and incoming_amount is added
    on top exactly once.
    """
    budget = budget_store.find_active(db, owner_id, category)
    if budget is None or not budget.alerts_enabled:
        return None

    month_start, _ = current_month_window(now)
    existing = ledger.sum_expenses(db, owner_id, category, month_start)

    limit = float(budget.limit)
    spent = round(existing + float(incoming_amount), 2)
    percent_used = percent_of(spent, limit)

    if percent_used >= 100:
        alert_type = ALERT_EXCEEDED
    elif percent_used >= budget.alert_threshold:
        alert_type = ALERT_WARNING
    else:
        return None

    logger.info(
        "Budget %s alert owner=%s category=%r spent=%.2f limit=%.2f (%d%%)",
        alert_type,
        owner_id,
        category,
        spent,
        limit,
        percent_used,
    )
    return build_alert(alert_type, category, limit, spent, percent_used)
