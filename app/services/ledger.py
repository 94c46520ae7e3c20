# app/services/ledger.py
#
# Ledger Queries
# Read-side aggregate queries over the transactions table: expense totals per
# category for a window, category-specific expense sums, income/expense totals,
# per-category counts and the monthly income/expense trend.
# All queries are scoped to a single owner.

from datetime import datetime
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Transaction


def _money(value: Any) -> float:
    return round(float(value or 0.0), 2)


# ---- Expense sums used by the budget logic ----

def sum_expenses_by_category(
    db: Session,
    owner_id: str,
    window_start: datetime,
    window_end: datetime,
) -> Dict[str, float]:
    """
    Total expense amount per category for expenses dated in [window_start, window_end).
    Owners without expenses in the window get an empty dict.
    """
    rows = (
        db.query(
            Transaction.category.label("category"),
            func.coalesce(func.sum(Transaction.amount), 0.0).label("total"),
        )
        .filter(
            Transaction.owner_id == owner_id,
            Transaction.type == "expense",
            Transaction.date >= window_start,
            Transaction.date < window_end,
        )
        .group_by(Transaction.category)
        .all()
    )
    return {r.category: _money(r.total) for r in rows}


def sum_expenses(
    db: Session,
    owner_id: str,
    category: str,
    window_start: datetime,
    window_end: datetime | None = None,
) -> float:
    """
    Total expense amount for one category from window_start onwards.
    window_end is optional; the write-path check only bounds the start.
    """
    query = db.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
        Transaction.owner_id == owner_id,
        Transaction.type == "expense",
        Transaction.category == category,
        Transaction.date >= window_start,
    )
    if window_end is not None:
        query = query.filter(Transaction.date < window_end)
    return _money(query.scalar())


# ---- Dashboard aggregates ----

def get_total(
    db: Session,
    owner_id: str,
    tx_type: str,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
) -> float:
    query = db.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
        Transaction.owner_id == owner_id,
        Transaction.type == tx_type,
    )
    if window_start is not None:
        query = query.filter(Transaction.date >= window_start)
    if window_end is not None:
        query = query.filter(Transaction.date < window_end)
    return _money(query.scalar())


def expenses_by_category(
    db: Session,
    owner_id: str,
    window_start: datetime,
    window_end: datetime,
) -> List[Dict[str, Any]]:
    """
    Same figures as sum_expenses_by_category, as a list sorted by total (desc).
    """
    totals = sum_expenses_by_category(db, owner_id, window_start, window_end)
    return [
        {"category": category, "total": total}
        for category, total in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


def category_totals(db: Session, owner_id: str) -> List[Dict[str, Any]]:
    """
    All-time total and count per (category, type), sorted by type then category.
    """
    rows = (
        db.query(
            Transaction.category.label("category"),
            Transaction.type.label("type"),
            func.coalesce(func.sum(Transaction.amount), 0.0).label("total"),
            func.count(Transaction.id).label("count"),
        )
        .filter(Transaction.owner_id == owner_id)
        .group_by(Transaction.category, Transaction.type)
        .order_by(Transaction.type, Transaction.category)
        .all()
    )
    return [
        {
            "category": r.category,
            "type": r.type,
            "total": _money(r.total),
            "count": int(r.count),
        }
        for r in rows
    ]


def monthly_summary(db: Session, owner_id: str, since: datetime) -> List[Dict[str, Any]]:
    """
    Income, expense and balance per calendar month for transactions dated >= since.
    Months without transactions are omitted. Sorted oldest first.
    """
    rows = (
        db.query(Transaction.date, Transaction.type, Transaction.amount)
        .filter(Transaction.owner_id == owner_id, Transaction.date >= since)
        .all()
    )
    if not rows:
        return []

    df = pd.DataFrame([tuple(r) for r in rows], columns=["date", "type", "amount"])
    df["date"] = pd.to_datetime(df["date"])
    df["year"] = df["date"].dt.year
    df["month"] = df["date"].dt.month

    pivot = (
        df.pivot_table(
            index=["year", "month"],
            columns="type",
            values="amount",
            aggfunc="sum",
            fill_value=0.0,
        )
        .reindex(columns=["income", "expense"], fill_value=0.0)
        .sort_index()
    )

    summary: List[Dict[str, Any]] = []
    for (year, month), row in pivot.iterrows():
        income = _money(row["income"])
        expense = _money(row["expense"])
        summary.append(
            {
                "year": int(year),
                "month": int(month),
                "income": income,
                "expense": expense,
                "balance": _money(income - expense),
            }
        )
    return summary
