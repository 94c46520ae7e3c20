# csv_export.py

from typing import Iterable

import pandas as pd

from models import Transaction

CSV_COLUMNS = ["Date", "Type", "Category", "Amount", "Description"]


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    """
    Render transactions as CSV text (one row per transaction, input order kept).

    Date is written as YYYY-MM-DD and Amount with two decimals.
    """
    rows = [
        {
            "Date": tx.date.strftime("%Y-%m-%d"),
            "Type": tx.type,
            "Category": tx.category,
            "Amount": f"{tx.amount:.2f}",
            "Description": tx.description or "",
        }
        for tx in transactions
    ]

    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False, lineterminator="\n")
