# app/services/periods.py
#
# Period Window Helpers
# Calculates [start, end) datetime windows used by the aggregation queries:
# calendar months, weeks and years, plus the rolling window for the monthly trend.

from datetime import date, datetime, timedelta


# ---- Month windows ----

def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """
    Returns (start, end_exclusive) for the given calendar month.
    """
    start = datetime(year, month, 1)
    if month == 12:
        end_exclusive = datetime(year + 1, 1, 1)
    else:
        end_exclusive = datetime(year, month + 1, 1)
    return start, end_exclusive


def current_month_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Window used for all budget spend figures: first instant of the current
    month up to (excluding) the first instant of the next one.
    """
    now = now or datetime.now()
    return month_bounds(now.year, now.month)


def get_month_range(month_str: str | None, today: date | None = None):
    """
    month_str: 'YYYY-MM' or None.
    Returns (start, end_exclusive, normalized_month_str).
    If month_str is None or invalid, uses the CURRENT month.
    """
    today = today or date.today()

    # 1) pick year/month
    year, month = today.year, today.month
    if month_str:
        try:
            year_str, month_only_str = month_str.split("-")
            y = int(year_str)
            m = int(month_only_str)
            if not (1 <= m <= 12):
                raise ValueError
            year, month = y, m
        except ValueError:
            pass

    # 2) compute window
    start, end_exclusive = month_bounds(year, month)

    normalized = f"{year:04d}-{month:02d}"
    return start, end_exclusive, normalized


# ---- Summary periods ----

def get_date_range(period: str = "month", now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    period: 'week' | 'month' | 'year' (anything else falls back to month).
    Weeks start on Sunday.
    """
    now = now or datetime.now()
    today = datetime(now.year, now.month, now.day)

    if period == "week":
        # Python weekday(): Monday=0 ... Sunday=6
        days_since_sunday = (today.weekday() + 1) % 7
        start = today - timedelta(days=days_since_sunday)
        return start, start + timedelta(days=7)

    if period == "year":
        return datetime(now.year, 1, 1), datetime(now.year + 1, 1, 1)

    return current_month_window(now)


def months_back_start(months: int, now: datetime | None = None) -> datetime:
    """
    First instant of the month `months` months before the current one.
    """
    now = now or datetime.now()
    total = now.year * 12 + (now.month - 1) - months
    return datetime(total // 12, total % 12 + 1, 1)
