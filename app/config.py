# app/config.py
# Role: Central configuration for the finance tracker API.
#       Reads environment variables (optionally from a .env file) and exposes
#       module-level settings plus the logging setup used at startup.

"""
Configuration values with environment variable overrides.

All settings are prefixed with FINANCE_ in the environment, e.g.:
    FINANCE_DATABASE_URL=sqlite:///./finance.db
    FINANCE_LOG_LEVEL=DEBUG
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Project root (one level above app/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Default SQLite location: <project_root>/database/finance.db
DB_DIR = os.path.join(BASE_DIR, "database")
DEFAULT_DATABASE_URL = f"sqlite:///{os.path.join(DB_DIR, 'finance.db')}"


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


DATABASE_URL = os.getenv("FINANCE_DATABASE_URL", DEFAULT_DATABASE_URL)
SQL_ECHO = _env_truthy("FINANCE_SQL_ECHO")
LOG_LEVEL = os.getenv("FINANCE_LOG_LEVEL", "INFO").upper()

# Dashboard / listing defaults
MONTHLY_SUMMARY_MONTHS = _env_int("FINANCE_MONTHLY_SUMMARY_MONTHS", 12)
DEFAULT_PAGE_SIZE = _env_int("FINANCE_DEFAULT_PAGE_SIZE", 20)
MAX_PAGE_SIZE = _env_int("FINANCE_MAX_PAGE_SIZE", 100)

# Used when formatting alert messages
CURRENCY_SYMBOL = os.getenv("FINANCE_CURRENCY_SYMBOL", "$")

# Header carrying the authenticated owner id (set by the auth layer in front of us)
OWNER_HEADER = "X-User-Id"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once for the whole app.
    Safe to call more than once (basicConfig is a no-op after the first call).
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
