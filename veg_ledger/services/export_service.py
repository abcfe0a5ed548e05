"""CSV rows for the ledger statement and the outstanding credits list."""

import logging
from typing import Dict, Iterable, List

import pandas as pd

from veg_ledger.config import EXPORT_DATE_FORMAT
from veg_ledger.models.reports import LedgerReport
from veg_ledger.models.schemas import PaymentDetail
from veg_ledger.utils.parsing import format_amount

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = ["Date", "Opening Balance", "Purchases", "Paid Amount", "Closing Balance"]
CREDIT_COLUMNS = ["Party ID", "Code", "Party Name", "Total Amount", "Paid Amount", "Due Amount"]


def ledger_export_rows(report: LedgerReport) -> List[Dict[str, str]]:
    """Day rows as shown (newest first), a blank separator, then the period summary."""
    rows = []
    for day in report.rows:
        paid = format_amount(day.credit)
        if day.payment_methods:
            paid = f"{paid} ({', '.join(day.payment_methods)})"
        rows.append({
            "Date": day.date.strftime(EXPORT_DATE_FORMAT),
            "Opening Balance": format_amount(day.opening),
            "Purchases": format_amount(day.purchases),
            "Paid Amount": paid,
            "Closing Balance": format_amount(day.closing),
        })
    rows.append({column: "" for column in LEDGER_COLUMNS})
    rows.append({
        "Date": "Summary",
        "Opening Balance": format_amount(report.opening_balance),
        "Purchases": format_amount(report.total_purchases),
        "Paid Amount": format_amount(report.total_credit),
        "Closing Balance": format_amount(report.closing_balance),
    })
    return rows


def credit_export_rows(details: Iterable[PaymentDetail]) -> List[Dict[str, str]]:
    """Parties that still owe, or are owed, a positive amount."""
    return [
        {
            "Party ID": detail.party_id,
            "Code": detail.code or "",
            "Party Name": detail.party_name,
            "Total Amount": format_amount(detail.total_amount),
            "Paid Amount": format_amount(detail.paid_amount),
            "Due Amount": format_amount(detail.due_amount),
        }
        for detail in details
        if detail.due_amount > 0
    ]


def write_csv(rows: List[Dict[str, str]], path: str, columns: List[str] = None) -> str:
    """
    Write plain comma-separated rows.

    Args:
        rows: Mappings of column name to text
        path: Destination file
        columns: Column order (defaults to the keys of the first row)

    Returns:
        The path written
    """
    df = pd.DataFrame(rows, columns=columns or (list(rows[0].keys()) if rows else None))
    df.to_csv(path, index=False)
    logger.info(f"Wrote {len(rows)} rows to {path}")
    return path
