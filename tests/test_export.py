"""
Tests for CSV exports
"""

from datetime import date

import pandas as pd

from veg_ledger.models.reports import LedgerDay, LedgerReport
from veg_ledger.models.schemas import PaymentDetail
from veg_ledger.services.export_service import (
    CREDIT_COLUMNS,
    LEDGER_COLUMNS,
    credit_export_rows,
    ledger_export_rows,
    write_csv,
)


def sample_report():
    return LedgerReport(
        rows=[
            LedgerDay(date=date(2024, 5, 3), opening=400, purchases=300, closing=700),
            LedgerDay(date=date(2024, 5, 1), opening=100, purchases=500, credit=200,
                      payment_methods=["Cash", "GPay"], closing=400),
        ],
        opening_balance=100,
        total_purchases=800,
        total_credit=200,
        closing_balance=700,
    )


def test_ledger_rows():
    rows = ledger_export_rows(sample_report())

    assert rows[0] == {
        "Date": "03/05/2024",
        "Opening Balance": "400.00",
        "Purchases": "300.00",
        "Paid Amount": "0.00",
        "Closing Balance": "700.00",
    }
    assert rows[1]["Paid Amount"] == "200.00 (Cash, GPay)"
    assert all(value == "" for value in rows[2].values())
    assert rows[3]["Date"] == "Summary"
    assert rows[3]["Closing Balance"] == "700.00"


def test_credit_rows_keep_only_outstanding():
    details = [
        PaymentDetail(id="CUS003", party_id="CUS003", party_name="Anbu Retail",
                      total_amount=8400, paid_amount=5000, due_amount=3400),
        PaymentDetail(id="CUS004", party_id="CUS004", party_name="Kannan Stores",
                      total_amount=550, paid_amount=550, due_amount=0),
    ]

    rows = credit_export_rows(details)

    assert [row["Party Name"] for row in rows] == ["Anbu Retail"]
    assert rows[0]["Due Amount"] == "3400.00"


def test_write_csv(tmp_path):
    path = tmp_path / "ledger.csv"

    write_csv(ledger_export_rows(sample_report()), str(path), LEDGER_COLUMNS)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    assert list(df.columns) == LEDGER_COLUMNS
    assert len(df) == 4
    assert df.iloc[1]["Paid Amount"] == "200.00 (Cash, GPay)"


def test_write_csv_without_rows(tmp_path):
    path = tmp_path / "credits.csv"

    write_csv([], str(path), CREDIT_COLUMNS)

    assert path.read_text().strip() == ",".join(CREDIT_COLUMNS)
