# routes_budgets.py
"""
Routes for per-category budgets: CRUD, the status list with spend figures,
and the alerts listing.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from models import Budget
from app.deps import get_db, get_owner_id
from app.schemas import (
    AlertOut,
    BudgetCreate,
    BudgetOut,
    BudgetStatusOut,
    BudgetSummaryOut,
    BudgetUpdate,
)
from app.services import budget_store
from app.services.budget_evaluator import alerts_from_statuses, evaluate, evaluate_all
from app.services.spend_aggregator import aggregate_spend

router = APIRouter(prefix="/api/budgets", tags=["budgets"])


def _get_budget_or_404(db: Session, owner_id: str, category: str) -> Budget:
    budget = budget_store.find(db, owner_id, category)
    if budget is None:
        raise HTTPException(status_code=404, detail=f"No budget found for category: {category}")
    return budget


# -------------------------------------------------------------------
# Aggregate routes (must come before /{category})
# -------------------------------------------------------------------

@router.get("/status/all")
def budgets_status(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Every active budget with its spend for the current month, plus totals.
    """
    statuses, summary = evaluate_all(db, owner_id)

    return {
        "success": True,
        "summary": BudgetSummaryOut.model_validate(summary),
        "data": [BudgetStatusOut.from_status(s) for s in statuses],
    }


@router.get("/alerts")
def budget_alerts(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Budgets that are over their alert threshold or over their limit.
    """
    statuses, _ = evaluate_all(db, owner_id)
    alerts = alerts_from_statuses(statuses)

    return {
        "success": True,
        "count": len(alerts),
        "data": [AlertOut.model_validate(a) for a in alerts],
    }


# -------------------------------------------------------------------
# CRUD
# -------------------------------------------------------------------

@router.get("")
def list_budgets(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    budgets = budget_store.list_active(db, owner_id)
    return {
        "success": True,
        "count": len(budgets),
        "data": [BudgetOut.model_validate(b) for b in budgets],
    }


@router.post("")
def save_budget(
    payload: BudgetCreate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """
    Create the budget for payload.category, or overwrite the existing one.
    """
    fields = payload.model_dump(exclude={"category"})
    budget = budget_store.upsert(db, owner_id, payload.category, fields)

    return {
        "success": True,
        "message": "Budget saved successfully",
        "data": BudgetOut.model_validate(budget),
    }


@router.get("/{category}")
def get_budget(
    category: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    budget = _get_budget_or_404(db, owner_id, category)
    snapshot = aggregate_spend(db, owner_id)
    status = evaluate(budget, snapshot.spent_for(budget.category))

    return {"success": True, "data": BudgetStatusOut.from_status(status)}


@router.put("/{category}")
def update_budget(
    category: str,
    payload: BudgetUpdate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    budget = _get_budget_or_404(db, owner_id, category)
    budget = budget_store.update(db, budget, payload.model_dump(exclude_unset=True))

    return {"success": True, "data": BudgetOut.model_validate(budget)}


@router.delete("/{category}")
def delete_budget(
    category: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    budget = _get_budget_or_404(db, owner_id, category)
    budget_store.delete(db, budget)

    return {"success": True, "message": "Budget deleted successfully"}


@router.put("/{category}/deactivate")
def deactivate_budget(
    category: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    budget = _get_budget_or_404(db, owner_id, category)
    budget = budget_store.deactivate(db, budget)

    return {
        "success": True,
        "message": "Budget deactivated successfully",
        "data": BudgetOut.model_validate(budget),
    }
