# hims/billing/totals.py
"""
Bill arithmetic shared by the payload serializers and the billing services.
All amounts are Decimals rounded to cents.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from rest_framework.exceptions import ValidationError

from hims.common.constants import BillStatus

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

AMOUNT_MISMATCH = "Amount must be equal to price x quantity"
DISCOUNT_TOO_HIGH = "Discount cannot be greater than gross amount"
PAID_TOO_HIGH = "Paid amount cannot be greater than net amount"


def money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    gross: Decimal
    discount: Decimal
    net: Decimal
    paid: Decimal

    @property
    def due(self) -> Decimal:
        return max(self.net - self.paid, ZERO)


def line_amount(line: Mapping) -> Decimal:
    expected = money(money(line["price"]) * int(line.get("quantity") or 1))
    given = line.get("amount")
    if given is not None and money(given) != expected:
        raise ValidationError(AMOUNT_MISMATCH)
    return expected


def compute_totals(lines: Iterable[Mapping], *, discount=0, paid=0) -> Totals:
    gross = money(sum((line_amount(line) for line in lines), ZERO))
    return totals_from_gross(gross, discount=discount, paid=paid)


def totals_from_gross(gross, *, discount=0, paid=0) -> Totals:
    gross, discount, paid = money(gross), money(discount), money(paid)
    if discount > gross:
        raise ValidationError(DISCOUNT_TOO_HIGH)
    net = gross - discount
    if paid > net:
        raise ValidationError(PAID_TOO_HIGH)
    return Totals(gross=gross, discount=discount, net=net, paid=paid)


def payment_status(totals: Totals) -> str:
    if totals.paid >= totals.net:
        return BillStatus.PAID
    if totals.paid > ZERO:
        return BillStatus.PARTIALLY_PAID
    return BillStatus.UNPAID
