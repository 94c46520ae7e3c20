# app/deps.py
# Role: Shared request-level dependencies.
#       Provides the standard SQLAlchemy database session dependency and
#       the owner-id dependency that scopes every query to the calling user.

"""
Shared dependencies for the finance tracker API.
"""

from typing import Generator

from fastapi import Header, HTTPException
from sqlalchemy.orm import Session

from db import SessionLocal
from app.config import OWNER_HEADER

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -------------------------------------------------------------------
# Owner dependency
# -------------------------------------------------------------------

def get_owner_id(
    x_user_id: str | None = Header(default=None, alias=OWNER_HEADER),
) -> str:
    """
    Resolve the id of the calling user.

    Authentication happens in front of this service; it forwards the
    authenticated user id in the X-User-Id header.
    """
    owner_id = (x_user_id or "").strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail="Not authorized, no user id provided")
    return owner_id
