"""Shared fixtures: an in-memory SQLite database per test and an API client bound to it."""

import os
from datetime import datetime

# Keep the app's own engine off the on-disk database during tests
os.environ.setdefault("FINANCE_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from main import app
from app.deps import get_db
from models import Budget, Transaction

OWNER = "user-1"
OTHER_OWNER = "user-2"

# Fixed clock for service-level tests
NOW = datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, headers={"X-User-Id": OWNER}) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def add_tx(db):
    """Insert a transaction directly into the ledger."""

    def _add(category, amount, date=NOW, type="expense", owner=OWNER, description=""):
        tx = Transaction(
            owner_id=owner,
            type=type,
            category=category,
            amount=amount,
            date=date,
            description=description,
            tags=[],
            is_recurring=False,
        )
        db.add(tx)
        db.commit()
        db.refresh(tx)
        return tx

    return _add


@pytest.fixture()
def add_budget(db):
    """Insert a budget row directly into the store."""

    def _add(category, limit, alert_threshold=80, alerts_enabled=True, is_active=True, owner=OWNER):
        budget = Budget(
            owner_id=owner,
            category=category,
            limit=limit,
            alert_threshold=alert_threshold,
            alerts_enabled=alerts_enabled,
            is_active=is_active,
        )
        db.add(budget)
        db.commit()
        db.refresh(budget)
        return budget

    return _add
