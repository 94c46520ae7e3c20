"""Tests for the budget evaluation rules and the write-path alert check."""

from datetime import datetime

import pytest

from models import Budget
from app.services.budget_evaluator import (
    ALERT_EXCEEDED,
    ALERT_WARNING,
    alerts_from_statuses,
    check_alert_on_write,
    evaluate,
    evaluate_all,
    percent_of,
)
from conftest import NOW, OTHER_OWNER, OWNER


def make_budget(limit, alert_threshold=80, alerts_enabled=True, category="Food"):
    return Budget(
        owner_id=OWNER,
        category=category,
        limit=limit,
        alert_threshold=alert_threshold,
        alerts_enabled=alerts_enabled,
    )


# ---- evaluate() ----

@pytest.mark.parametrize(
    "spent, limit, expected",
    [
        (0, 500, 0),
        (250, 500, 50),
        (450, 500, 90),
        (1, 3, 33),
        (2, 3, 67),
        (1, 200, 1),  # 0.5% rounds up
        (600, 500, 120),
    ],
)
def test_percent_used_is_rounded_share_of_limit(spent, limit, expected) -> None:
    assert evaluate(make_budget(limit), spent).percent_used == expected


def test_zero_limit_gives_zero_percent() -> None:
    assert percent_of(100, 0) == 0
    status = evaluate(make_budget(0), 100)
    assert status.percent_used == 0
    assert status.is_exceeded is True


def test_exceeded_only_when_strictly_over_limit() -> None:
    for limit in (0, 50, 100):
        for spent in (0, 49.99, 50, 50.01, 100, 150):
            assert evaluate(make_budget(limit), spent).is_exceeded == (spent > limit)


def test_remaining_never_negative() -> None:
    for limit in (0, 100, 500):
        for spent in (0, 99.5, 100, 150, 1000):
            status = evaluate(make_budget(limit), spent)
            assert status.remaining == round(max(0, limit - spent), 2)
            assert status.remaining >= 0


def test_alert_triggered_requires_enabled_and_threshold() -> None:
    assert evaluate(make_budget(100, alert_threshold=80), 80).is_alert_triggered is True
    assert evaluate(make_budget(100, alert_threshold=80), 79).is_alert_triggered is False
    assert evaluate(make_budget(100, alert_threshold=80, alerts_enabled=False), 95).is_alert_triggered is False
    assert evaluate(make_budget(100, alert_threshold=0), 0).is_alert_triggered is True


def test_scenario_e_over_limit_budget() -> None:
    status = evaluate(make_budget(100), 150)
    assert status.is_exceeded is True
    assert status.remaining == 0
    assert status.percent_used == 150


# ---- check_alert_on_write() ----

def test_scenario_a_warning_alert(db, add_budget) -> None:
    add_budget("Food", 500, alert_threshold=80)

    alert = check_alert_on_write(db, OWNER, "Food", 450, now=NOW)

    assert alert is not None
    assert alert.type == ALERT_WARNING
    assert alert.percent_used == 90
    assert "90%" in alert.message
    assert alert.message == "Budget alert: You've used 90% of your Food budget ($450.00 of $500.00)."


def test_scenario_b_exceeded_alert(db, add_budget) -> None:
    add_budget("Food", 500, alert_threshold=80)

    alert = check_alert_on_write(db, OWNER, "Food", 600, now=NOW)

    assert alert.type == ALERT_EXCEEDED
    assert alert.percent_used == 120
    assert "$600.00" in alert.message
    assert "$500.00" in alert.message
    assert alert.message == "Budget exceeded! You've spent $600.00 of your $500.00 budget for Food."


def test_scenario_c_no_budget_no_alert(db) -> None:
    for amount in (0, 1, 10_000, 999_999):
        assert check_alert_on_write(db, OWNER, "Travel", amount, now=NOW) is None


def test_disabled_alerts_never_alert(db, add_budget, add_tx) -> None:
    add_budget("Food", 100, alerts_enabled=False)
    add_tx("Food", 500)

    assert check_alert_on_write(db, OWNER, "Food", 1000, now=NOW) is None


def test_inactive_budget_is_ignored(db, add_budget) -> None:
    add_budget("Food", 100, is_active=False)

    assert check_alert_on_write(db, OWNER, "Food", 1000, now=NOW) is None


def test_existing_spend_is_added_to_incoming(db, add_budget, add_tx) -> None:
    add_budget("Food", 500)
    add_tx("Food", 300)
    add_tx("Food", 50, type="income")  # income never counts
    add_tx("Fun", 400)  # other category
    add_tx("Food", 400, date=datetime(2024, 5, 31, 23, 59))  # previous month

    alert = check_alert_on_write(db, OWNER, "Food", 120, now=NOW)

    assert alert.type == ALERT_WARNING
    assert alert.spent == 420
    assert alert.percent_used == 84


def test_zero_incoming_rechecks_current_standing(db, add_budget, add_tx) -> None:
    add_budget("Food", 500)
    add_tx("Food", 300)
    assert check_alert_on_write(db, OWNER, "Food", 0, now=NOW) is None

    add_tx("Food", 250)
    alert = check_alert_on_write(db, OWNER, "Food", 0, now=NOW)
    assert alert.type == ALERT_EXCEEDED
    assert alert.spent == 550


def test_write_check_has_no_upper_date_bound(db, add_budget, add_tx) -> None:
    add_budget("Food", 100)
    add_tx("Food", 90, date=datetime(2024, 7, 2))

    alert = check_alert_on_write(db, OWNER, "Food", 0, now=NOW)

    assert alert is not None
    assert alert.spent == 90


def test_exactly_at_limit_is_exceeded_alert(db, add_budget) -> None:
    add_budget("Food", 200, alert_threshold=80)

    alert = check_alert_on_write(db, OWNER, "Food", 200, now=NOW)

    assert alert.type == ALERT_EXCEEDED
    assert alert.percent_used == 100


def test_below_threshold_no_alert(db, add_budget) -> None:
    add_budget("Food", 500, alert_threshold=80)

    assert check_alert_on_write(db, OWNER, "Food", 395, now=NOW) is None


def test_other_owner_spend_not_counted(db, add_budget, add_tx) -> None:
    add_budget("Food", 500)
    add_tx("Food", 480, owner=OTHER_OWNER)

    assert check_alert_on_write(db, OWNER, "Food", 10, now=NOW) is None


# ---- evaluate_all() ----

def test_scenario_d_general_budget_tracks_all_spending(db, add_budget, add_tx) -> None:
    add_budget("General", 1000)
    add_tx("Food", 300)
    add_tx("Fun", 200)

    statuses, summary = evaluate_all(db, OWNER, now=NOW)

    assert len(statuses) == 1
    assert statuses[0].budget.category == "General"
    assert statuses[0].spent == 500
    assert statuses[0].percent_used == 50
    assert summary.total_spent == 500


def test_evaluate_all_summary(db, add_budget, add_tx) -> None:
    add_budget("Transportation", 100)
    add_budget("Food & Dining", 500)
    add_budget("Shopping", 200, alerts_enabled=False)
    add_budget("Travel", 300, is_active=False)
    add_tx("Food & Dining", 450)
    add_tx("Transportation", 150)
    add_tx("Shopping", 190)
    add_tx("Travel", 1000)

    statuses, summary = evaluate_all(db, OWNER, now=NOW)

    # active only, ordered by category
    assert [s.budget.category for s in statuses] == ["Food & Dining", "Shopping", "Transportation"]
    assert summary.total_budget == 800
    assert summary.total_spent == sum(s.spent for s in statuses) == 790
    assert summary.remaining == 10
    assert summary.percent_used == 99
    assert summary.alerts_count == 2  # Food & Dining (90%), Transportation (150%)
    assert summary.exceeded_count == 1


def test_evaluate_all_without_budgets(db, add_tx) -> None:
    add_tx("Food", 10)

    statuses, summary = evaluate_all(db, OWNER, now=NOW)

    assert statuses == []
    assert summary.total_budget == 0
    assert summary.percent_used == 0


def test_alerts_from_statuses(db, add_budget, add_tx) -> None:
    add_budget("Food", 500)
    add_budget("Fun", 100, alerts_enabled=False)
    add_budget("Rent", 1000)
    add_tx("Food", 420)
    add_tx("Fun", 130)
    add_tx("Rent", 100)

    statuses, _ = evaluate_all(db, OWNER, now=NOW)
    alerts = {a.category: a for a in alerts_from_statuses(statuses)}

    assert set(alerts) == {"Food", "Fun"}
    assert alerts["Food"].type == ALERT_WARNING
    assert alerts["Food"].percent_used == 84
    # exceeded budgets are listed even with alerts turned off
    assert alerts["Fun"].type == ALERT_EXCEEDED
    assert alerts["Fun"].message == "Budget exceeded! You've spent $130.00 of your $100.00 budget for Fun."
