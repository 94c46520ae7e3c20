# app/routes_dashboard.py

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import MONTHLY_SUMMARY_MONTHS
from app.deps import get_db, get_owner_id
from app.services import ledger
from app.services.periods import get_date_range, months_back_start

# Registered before routes_transactions so "/summary" is not read as a transaction id
router = APIRouter(prefix="/api/transactions", tags=["dashboard"])


@router.get("/summary")
def summary(
    period: Literal["week", "month", "year"] = Query("month"),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    start_date, end_date = get_date_range(period)

    # Totals for the selected period
    total_income = ledger.get_total(db, owner_id, "income", start_date, end_date)
    total_expense = ledger.get_total(db, owner_id, "expense", start_date, end_date)

    # Spending by category (expenses only, biggest first)
    expenses_by_category = ledger.expenses_by_category(db, owner_id, start_date, end_date)

    # Trend: last N months, independent of `period`
    monthly_summary = ledger.monthly_summary(
        db, owner_id, months_back_start(MONTHLY_SUMMARY_MONTHS)
    )

    return {
        "success": True,
        "data": {
            "period": period,
            "startDate": start_date,
            "endDate": end_date,
            "totalIncome": total_income,
            "totalExpense": total_expense,
            "balance": round(total_income - total_expense, 2),
            "expensesByCategory": expenses_by_category,
            "monthlySummary": monthly_summary,
        },
    }


@router.get("/categories")
def categories(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    return {
        "success": True,
        "data": ledger.category_totals(db, owner_id),
    }
