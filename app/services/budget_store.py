# app/services/budget_store.py
#
# Budget Store
# Persistence helpers for per-owner, per-category budgets.
# The (owner_id, category) pair is unique at the table level; upsert relies on
# that constraint when two requests create the same budget at once.

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Budget

logger = logging.getLogger(__name__)

# Columns a caller may set through upsert/update
UPDATABLE_FIELDS = (
    "limit",
    "period",
    "alert_threshold",
    "alerts_enabled",
    "color",
    "notes",
    "is_active",
)


def list_active(db: Session, owner_id: str) -> List[Budget]:
    return (
        db.query(Budget)
        .filter(Budget.owner_id == owner_id, Budget.is_active.is_(True))
        .order_by(Budget.category)
        .all()
    )


def find(db: Session, owner_id: str, category: str) -> Optional[Budget]:
    """Budget for the pair regardless of is_active."""
    return (
        db.query(Budget)
        .filter(Budget.owner_id == owner_id, Budget.category == category)
        .first()
    )


def find_active(db: Session, owner_id: str, category: str) -> Optional[Budget]:
    return (
        db.query(Budget)
        .filter(
            Budget.owner_id == owner_id,
            Budget.category == category,
            Budget.is_active.is_(True),
        )
        .first()
    )


def _apply_fields(budget: Budget, fields: Dict[str, Any]) -> None:
    for name in UPDATABLE_FIELDS:
        if name in fields and fields[name] is not None:
            setattr(budget, name, fields[name])


def upsert(db: Session, owner_id: str, category: str, fields: Dict[str, Any]) -> Budget:
    """
    Create the budget for (owner_id, category) or overwrite the existing one.
    The result is always active.
    """
    budget = find(db, owner_id, category)
    created = budget is None
    if created:
        budget = Budget(owner_id=owner_id, category=category)
        db.add(budget)

    _apply_fields(budget, fields)
    budget.is_active = True

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first: update that row instead.
        db.rollback()
        budget = find(db, owner_id, category)
        if budget is None:
            raise
        created = False
        _apply_fields(budget, fields)
        budget.is_active = True
        db.commit()

    db.refresh(budget)
    logger.info(
        "%s budget owner=%s category=%r limit=%.2f",
        "Created" if created else "Updated",
        owner_id,
        category,
        budget.limit,
    )
    return budget


def update(db: Session, budget: Budget, fields: Dict[str, Any]) -> Budget:
    _apply_fields(budget, fields)
    db.commit()
    db.refresh(budget)
    return budget


def deactivate(db: Session, budget: Budget) -> Budget:
    budget.is_active = False
    db.commit()
    db.refresh(budget)
    logger.info("Deactivated budget owner=%s category=%r", budget.owner_id, budget.category)
    return budget


def delete(db: Session, budget: Budget) -> None:
    logger.info("Deleted budget owner=%s category=%r", budget.owner_id, budget.category)
    db.delete(budget)
    db.commit()
