# hims/billing/tests/test_totals.py
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from hims.billing.totals import compute_totals, line_amount, money, payment_status, totals_from_gross


def test_money_rounds_half_up():
    assert money("10.005") == Decimal("10.01")
    assert money(None) == Decimal("0.00")


def test_line_amount_checks_given_amount():
    assert line_amount({"price": "99.50", "quantity": 2}) == Decimal("199.00")
    assert line_amount({"price": "99.50", "quantity": 2, "amount": "199"}) == Decimal("199.00")
    with pytest.raises(ValidationError):
        line_amount({"price": "99.50", "quantity": 2, "amount": "100"})


def test_compute_totals():
    t = compute_totals([{"price": "500"}, {"price": "150", "quantity": 2}], discount="100", paid="400")
    assert t.gross == Decimal("800.00")
    assert t.net == Decimal("700.00")
    assert t.due == Decimal("300.00")


def test_discount_and_paid_limits():
    with pytest.raises(ValidationError):
        totals_from_gross("100", discount="101")
    with pytest.raises(ValidationError):
        totals_from_gross("100", discount="10", paid="91")


def test_payment_status():
    assert payment_status(totals_from_gross("100", paid="0")) == "unpaid"
    assert payment_status(totals_from_gross("100", paid="40")) == "partially_paid"
    assert payment_status(totals_from_gross("100", discount="20", paid="80")) == "paid"
    assert payment_status(totals_from_gross("0")) == "paid"
