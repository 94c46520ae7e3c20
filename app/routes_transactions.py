# routes_transactions.py
"""
Routes for transaction CRUD, listing with filters, bulk delete and CSV export.

Expense writes run the budget alert hook and return its result as `budgetAlert`.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from models import Transaction
from app.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.deps import get_db, get_owner_id
from app.schemas import AlertOut, BulkDeleteIn, TransactionCreate, TransactionOut, TransactionUpdate
from app.services.alert_hook import alert_after_create, alert_after_update
from app.services.csv_export import transactions_to_csv
from app.services.periods import get_month_range
from app.services.transaction_helpers import (
    apply_transaction_update,
    build_transaction_from_payload,
    pagination_meta,
    parse_sort,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])

SortOption = Literal["date", "-date", "amount", "-amount", "category", "-category"]


def _date_window(start_date: date | None, end_date: date | None):
    """
    [start, end + 1 day) from inclusive calendar dates; either side may be open.
    """
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    range_start = datetime.combine(start_date, time.min) if start_date else None
    range_end_exclusive = (
        datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
    )
    return range_start, range_end_exclusive


def _get_owned_transaction(db: Session, owner_id: str, transaction_id: int) -> Transaction:
    tx = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id, Transaction.owner_id == owner_id)
        .first()
    )
    if tx is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return tx


def _alert_payload(alert):
    return AlertOut.model_validate(alert) if alert is not None else None


# -------------------------------------------------------------------
# Listing
# -------------------------------------------------------------------

@router.get("")
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: Literal["income", "expense"] | None = Query(None),
    category: str | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    search: str | None = Query(None, max_length=100),
    sort: SortOption = Query("-date"),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    query = db.query(Transaction).filter(Transaction.owner_id == owner_id)

    if type:
        query = query.filter(Transaction.type == type)

    if category:
        query = query.filter(Transaction.category == category.strip())

    # Explicit dates win over the month shortcut
    if start_date or end_date:
        range_start, range_end_exclusive = _date_window(start_date, end_date)
        if range_start:
            query = query.filter(Transaction.date >= range_start)
        if range_end_exclusive:
            query = query.filter(Transaction.date < range_end_exclusive)
    elif month:
        range_start, range_end_exclusive, _ = get_month_range(month)
        query = query.filter(
            Transaction.date >= range_start,
            Transaction.date < range_end_exclusive,
        )

    if search and search.strip():
        query = query.filter(Transaction.description.ilike(f"%{search.strip()}%"))

    total = query.count()

    transactions = (
        query.order_by(parse_sort(sort), Transaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "success": True,
        **pagination_meta(total, page, limit),
        "data": [TransactionOut.model_validate(t) for t in transactions],
    }


@router.get("/export/csv")
def export_csv(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    query = db.query(Transaction).filter(Transaction.owner_id == owner_id)

    range_start, range_end_exclusive = _date_window(start_date, end_date)
    if range_start:
        query = query.filter(Transaction.date >= range_start)
    if range_end_exclusive:
        query = query.filter(Transaction.date < range_end_exclusive)

    transactions = query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    return Response(
        content=transactions_to_csv(transactions),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=transactions.csv"},
    )


# -------------------------------------------------------------------
# Bulk delete (must come before /{transaction_id})
# -------------------------------------------------------------------

@router.delete("/bulk")
def bulk_delete(
    payload: BulkDeleteIn,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    ids = set(payload.ids)

    owned = (
        db.query(Transaction.id)
        .filter(Transaction.owner_id == owner_id, Transaction.id.in_(ids))
        .count()
    )
    if owned != len(ids):
        raise HTTPException(status_code=400, detail="Some transactions not found or unauthorized")

    db.query(Transaction).filter(
        Transaction.owner_id == owner_id,
        Transaction.id.in_(ids),
    ).delete(synchronize_session=False)
    db.commit()

    logger.info("Bulk deleted %d transactions owner=%s", len(ids), owner_id)

    return {
        "success": True,
        "message": f"{len(ids)} transactions deleted successfully",
    }


# -------------------------------------------------------------------
# Single transaction CRUD
# -------------------------------------------------------------------

@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: int,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    tx = _get_owned_transaction(db, owner_id, transaction_id)
    return {"success": True, "data": TransactionOut.model_validate(tx)}


@router.post("", status_code=201)
def create_transaction(
    payload: TransactionCreate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    tx = build_transaction_from_payload(owner_id, payload)

    # Checked against the ledger as it is before this row lands; the hook adds tx.amount
    budget_alert = alert_after_create(db, tx)

    db.add(tx)
    db.commit()
    db.refresh(tx)

    return {
        "success": True,
        "data": TransactionOut.model_validate(tx),
        "budgetAlert": _alert_payload(budget_alert),
    }


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    tx = _get_owned_transaction(db, owner_id, transaction_id)

    try:
        apply_transaction_update(tx, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(tx)

    budget_alert = alert_after_update(db, tx)

    return {
        "success": True,
        "data": TransactionOut.model_validate(tx),
        "budgetAlert": _alert_payload(budget_alert),
    }


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    tx = _get_owned_transaction(db, owner_id, transaction_id)

    db.delete(tx)
    db.commit()

    return {"success": True, "message": "Transaction deleted successfully"}
