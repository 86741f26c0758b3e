# hims/lab/tests/test_interpretation.py
from decimal import Decimal
from types import SimpleNamespace

from hims.lab.interpretation import interpret, interpret_numeric, parse_range, to_decimal


def reference(min=None, max=None, critical_low=None, critical_high=None, range=""):
    d = lambda v: Decimal(str(v)) if v is not None else None  # noqa: E731
    return SimpleNamespace(min=d(min), max=d(max), critical_low=d(critical_low), critical_high=d(critical_high), range=range)


def test_to_decimal():
    assert to_decimal(" 12.5 ") == Decimal("12.5")
    assert to_decimal("Positive") is None
    assert to_decimal("NaN") is None
    assert to_decimal(None) is None


def test_parse_range():
    assert parse_range("3.5-5.5") == (Decimal("3.5"), Decimal("5.5"))
    assert parse_range("<200") == (None, Decimal("200"))
    assert parse_range(">= 40") == (Decimal("40"), None)
    assert parse_range("Negative") is None
    assert parse_range("") is None


def test_numeric_bands():
    ref = reference(13, 17, 7, 20)
    assert interpret("15", ref).interpretation == "normal"
    assert interpret("12.9", ref).interpretation == "low"
    assert interpret("17.1", ref).interpretation == "high"

    crit = interpret("6", ref)
    assert crit.interpretation == "critical_low"
    assert crit.is_critical and crit.is_abnormal

    assert interpret("25", ref).interpretation == "critical_high"


def test_bounds_are_normal():
    ref = reference(13, 17)
    assert interpret("13", ref).interpretation == "normal"
    assert interpret("17", ref).interpretation == "normal"


def test_range_text_fallback():
    assert interpret("250", reference(range="<200")).interpretation == "high"
    assert interpret("150", reference(range="<200")).is_abnormal is False
    assert interpret("4", None, range_text="3.5-5.5").interpretation == "normal"


def test_non_numeric_or_no_reference_is_uninterpreted():
    assert interpret("Reactive", reference(1, 2)).interpretation == ""
    assert interpret("5", None).interpretation == ""
    assert interpret("5", reference(range="Negative")).is_abnormal is False


def test_critical_only_reference():
    flag = interpret_numeric(Decimal("3"), critical_low=Decimal("4"))
    assert flag.interpretation == "critical_low"
