"""
Tests for grouping log entries into bills
"""

import pytest
from datetime import date

from veg_ledger.models.schemas import Transaction, TransactionType
from veg_ledger.services.bill_history import bill_key, group_bills

DAY1 = date(2024, 5, 1)
DAY2 = date(2024, 5, 2)


def line(id, day, party, bill, amount, type=TransactionType.SALE, payment="Cash", item="Tomato"):
    return Transaction(id=id, date=day, party=party, type=type, item=item, amount=amount,
                       payment=payment, quantity=amount / 10, price=10, bill_number=bill)


def payment(id, day, party, amount, method="Cash"):
    return Transaction(id=id, date=day, party=party, type=TransactionType.PAYMENT, item="Payment",
                       amount=amount, payment=method, debit=amount, credit=0)


@pytest.fixture
def log():
    return [
        line("a1", DAY1, "Venkatesh", 1, 300),
        line("a2", DAY1, "Venkatesh", 1, 200, item="Onion"),
        line("b1", DAY1, "Anbu Retail", 2, 150, payment="Credit"),
        line("c1", DAY2, "Kannan Stores", 1, 550, payment="GPay"),
        line("p1", DAY1, "Hari", 1, 400, type=TransactionType.PURCHASE, payment="Credit"),
        payment("x1", DAY1, "Venkatesh", 500),
        payment("x2", DAY1, "Venkatesh", 500),
    ]


def test_line_items_of_a_bill_are_grouped(log):
    bills = group_bills(log, TransactionType.SALE)

    assert [(b.date, b.bill_number) for b in bills] == [(DAY2, 1), (DAY1, 2), (DAY1, 1)]
    first_bill = bills[-1]
    assert first_bill.party == "Venkatesh"
    assert first_bill.total_amount == 500
    assert [item.name for item in first_bill.items] == ["Tomato", "Onion"]


def test_sale_and_purchase_with_same_number_stay_apart(log):
    bills = [b for b in group_bills(log) if b.date == DAY1 and b.bill_number == 1]

    assert {b.type for b in bills} == {TransactionType.SALE, TransactionType.PURCHASE}


def test_payments_stand_alone(log):
    payments = group_bills(log, TransactionType.PAYMENT)

    assert len(payments) == 2
    assert all(p.bill_number is None and p.items == [] for p in payments)
    assert bill_key(log[-1]) == ("payment", "x2")


def test_filters(log):
    assert [b.party for b in group_bills(log, search="kannan")] == ["Kannan Stores"]
    assert [b.party for b in group_bills(log, TransactionType.SALE, payment_method="Credit")] == ["Anbu Retail"]
    assert {b.date for b in group_bills(log, on_date=DAY2)} == {DAY2}
    assert [b.bill_number for b in group_bills(log, TransactionType.SALE, search="2")] == [2]


def test_empty_log():
    assert group_bills([]) == []
