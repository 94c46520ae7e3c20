# app/services/transaction_helpers.py
#
# Transaction Helper Functions
# Converts validated request payloads into Transaction ORM objects, applies
# partial updates, and builds the sort / pagination pieces of the list endpoint.

import logging
import math
from datetime import datetime
from typing import Any, Dict

from models import EXPENSE_CATEGORIES, INCOME_CATEGORIES, Transaction
from app.schemas import TransactionCreate

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": Transaction.date,
    "amount": Transaction.amount,
    "category": Transaction.category,
}


# ---- Transaction Conversion ----

def build_transaction_from_payload(owner_id: str, payload: TransactionCreate) -> Transaction:
    """
    Convert one validated create payload into a Transaction ORM object.
    Missing date means "now".
    """
    known = INCOME_CATEGORIES if payload.type == "income" else EXPENSE_CATEGORIES
    if payload.category not in known:
        logger.info("Custom category used: %r (%s)", payload.category, payload.type)

    return Transaction(
        owner_id=owner_id,
        type=payload.type,
        category=payload.category,
        amount=payload.amount,
        date=payload.date or datetime.now(),
        description=payload.description,
        tags=list(payload.tags),
        is_recurring=payload.is_recurring,
        recurring_frequency=payload.recurring_frequency if payload.is_recurring else None,
    )


def apply_transaction_update(tx: Transaction, changes: Dict[str, Any]) -> None:
    """
    Apply a partial update (only keys present in `changes`) to `tx` in place.

    Raises ValueError when the merged record breaks the recurrence rule:
    a recurring transaction needs a frequency, a one-off one must not have one.
    """
    for name, value in changes.items():
        if name in ("type", "category", "amount", "date", "is_recurring") and value is None:
            # explicit nulls for required columns are ignored
            continue
        if name == "tags" and value is None:
            value = []
        if name == "description" and value is None:
            value = ""
        setattr(tx, name, value)

    if changes.get("is_recurring") is False and "recurring_frequency" not in changes:
        tx.recurring_frequency = None

    if tx.is_recurring and not tx.recurring_frequency:
        raise ValueError("recurringFrequency is required for recurring transactions")
    if not tx.is_recurring and tx.recurring_frequency:
        raise ValueError("recurringFrequency must be null for non-recurring transactions")


# ---- Listing Utilities ----

def parse_sort(sort: str | None):
    """
    '-date' -> date DESC, 'amount' -> amount ASC, ...
    Unknown fields fall back to newest first.
    """
    if not sort:
        return Transaction.date.desc()

    descending = sort.startswith("-")
    column = SORT_COLUMNS.get(sort.lstrip("-"))
    if column is None:
        return Transaction.date.desc()
    return column.desc() if descending else column.asc()


def pagination_meta(total: int, page: int, limit: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }
