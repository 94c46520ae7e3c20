# main.py
# Role: Application entry point for the finance tracker API.
#       Configures logging, creates database tables, registers error
#       handlers and all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create DB tables
- register exception handlers
- include route modules

Run locally with:
    uvicorn main:app --reload
"""

from fastapi import FastAPI

from db import Base, engine
from app.config import configure_logging
from app.errors import register_exception_handlers
from app.routes_root import router as root_router
from app.routes_dashboard import router as dashboard_router
from app.routes_transactions import router as transactions_router
from app.routes_budgets import router as budgets_router


# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

configure_logging()

# Create database tables (only if they don't exist yet).
Base.metadata.create_all(bind=engine)

# FastAPI application instance
app = FastAPI(title="Finance Tracker API")

register_exception_handlers(app)

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / health
app.include_router(root_router)

# Summary and category totals (before transactions: fixed paths win over /{id})
app.include_router(dashboard_router)

# Transactions CRUD, listing, bulk delete, CSV export
app.include_router(transactions_router)

# Budgets CRUD, status list and alerts
app.include_router(budgets_router)
