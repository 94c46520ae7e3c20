# app/services/alert_hook.py
#
# Write-path budget alert hook.
# Create: called with the new row before it is committed, so its amount is added
# exactly once. Update: called after the commit, as a status re-check.

from typing import Optional

from sqlalchemy.orm import Session

from models import Transaction
from app.services.budget_evaluator import Alert, check_alert_on_write


def alert_after_create(db: Session, tx: Transaction) -> Optional[Alert]:
    """New (not yet persisted) expense: stored spend plus this amount."""
    if tx.type != "expense":
        return None
    return check_alert_on_write(db, tx.owner_id, tx.category, tx.amount)


def alert_after_update(db: Session, tx: Transaction) -> Optional[Alert]:
    """Updated expense: re-check current standing, nothing is added."""
    if tx.type != "expense":
        return None
    return check_alert_on_write(db, tx.owner_id, tx.category, 0)
