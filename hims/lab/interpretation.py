# hims/lab/interpretation.py
"""
Flag a result value against its reference.

Numeric values are compared with the bio-reference bounds first
(critical_low/critical_high, then min/max). When the reference carries no
numeric bounds its range text is parsed instead: `a-b`, `<x`, `>x`
(`<=`/`>=` accepted). Anything non-numeric is left uninterpreted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from hims.common.constants import Interpretation

_NUMBER = r"-?\d+(?:\.\d+)?"
_BETWEEN = re.compile(rf"^\s*({_NUMBER})\s*-\s*({_NUMBER})\s*$")
_BOUND = re.compile(rf"^\s*(<=|>=|<|>)\s*({_NUMBER})\s*$")


@dataclass(frozen=True)
class Flag:
    interpretation: str = ""
    is_critical: bool = False
    is_abnormal: bool = False


UNINTERPRETED = Flag()


def to_decimal(value) -> Decimal | None:
    if value is None:
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _flag(interpretation: str) -> Flag:
    return Flag(
        interpretation=interpretation,
        is_critical=interpretation in (Interpretation.CRITICAL_LOW, Interpretation.CRITICAL_HIGH),
        is_abnormal=interpretation != Interpretation.NORMAL,
    )


def parse_range(text: str | None) -> tuple[Decimal | None, Decimal | None] | None:
    """
    `"3.5-5.5"` -> (3.5, 5.5); `"<200"` -> (None, 200); `">40"` -> (40, None).
    Returns None for text that is not a numeric range.
    """
    if not text:
        return None
    m = _BETWEEN.match(text)
    if m:
        return Decimal(m.group(1)), Decimal(m.group(2))
    m = _BOUND.match(text)
    if m:
        op, bound = m.group(1), Decimal(m.group(2))
        return (None, bound) if op.startswith("<") else (bound, None)
    return None


def interpret_numeric(
    number: Decimal,
    *,
    low: Decimal | None = None,
    high: Decimal | None = None,
    critical_low: Decimal | None = None,
    critical_high: Decimal | None = None,
) -> Flag:
    if critical_low is not None and number < critical_low:
        return _flag(Interpretation.CRITICAL_LOW)
    if critical_high is not None and number > critical_high:
        return _flag(Interpretation.CRITICAL_HIGH)
    if low is not None and number < low:
        return _flag(Interpretation.LOW)
    if high is not None and number > high:
        return _flag(Interpretation.HIGH)
    return _flag(Interpretation.NORMAL)


def interpret(value, reference=None, *, range_text: str | None = None) -> Flag:
    """
    `reference` is a BioReference (or None); `range_text` is used when the
    reference is missing or has no numeric bounds.
    """
    number = to_decimal(value)
    if number is None:
        return UNINTERPRETED

    low = high = critical_low = critical_high = None
    if reference is not None:
        low, high = reference.min, reference.max
        critical_low, critical_high = reference.critical_low, reference.critical_high
        range_text = range_text or reference.range

    if low is None and high is None:
        parsed = parse_range(range_text)
        if parsed is not None:
            low, high = parsed

    if low is None and high is None and critical_low is None and critical_high is None:
        return UNINTERPRETED

    return interpret_numeric(
        number,
        low=low,
        high=high,
        critical_low=critical_low,
        critical_high=critical_high,
    )
