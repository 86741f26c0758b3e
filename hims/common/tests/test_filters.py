# hims/common/tests/test_filters.py
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from hims.common.filters import FilterBuilder
from hims.patients.models import Patient

pytestmark = pytest.mark.django_db


def _patient(name, uhid, **extra):
    return Patient.objects.create(name=name, gender=extra.pop("gender", "Male"), relation="S/O", uhid=uhid, **extra)


def test_blank_values_are_skipped():
    fb = FilterBuilder().eq("gender", "").eq("patient_type", None).search(["name"], "  ")
    assert fb.clauses == []
    assert not fb.build()


def test_search_matches_any_field_case_insensitively():
    _patient("Asha", "U1", mobile_number="9000000001")
    _patient("Bina", "U2", mobile_number="9000000002")

    qs = FilterBuilder().search(["name", "mobile_number"], "asha").apply(Patient.objects.all())
    assert [p.name for p in qs] == ["Asha"]

    qs = FilterBuilder().search(["name", "mobile_number"], "0002").apply(Patient.objects.all())
    assert [p.name for p in qs] == ["Bina"]


def test_clauses_are_anded():
    _patient("Asha", "U1", gender="Female")
    _patient("Asha", "U2", gender="Male")

    qs = FilterBuilder().search(["name"], "Asha").eq("gender", "Female").apply(Patient.objects.all())
    assert [p.uhid for p in qs] == ["U1"]


def test_or_combines_builders():
    _patient("Asha", "U1", gender="Female")
    _patient("Bina", "U2", gender="Male")
    _patient("Chetan", "U3", gender="Other")

    fb = FilterBuilder().or_(FilterBuilder().eq("gender", "Female"), FilterBuilder().eq("gender", "Male"))
    assert sorted(p.uhid for p in fb.apply(Patient.objects.all())) == ["U1", "U2"]


def test_date_range_is_inclusive_of_whole_end_day():
    p = _patient("Asha", "U1")
    today = timezone.localdate()

    fb = FilterBuilder().date_range("created_at", today.isoformat(), today.isoformat())
    assert list(fb.apply(Patient.objects.all())) == [p]

    tomorrow = (today + timedelta(days=1)).isoformat()
    fb = FilterBuilder().date_range("created_at", tomorrow, None)
    assert not fb.apply(Patient.objects.all()).exists()


def test_invalid_date_raises_validation_error():
    with pytest.raises(ValidationError):
        FilterBuilder().date_range("created_at", "not-a-date")


def test_boolean_and_in():
    fb = FilterBuilder().boolean("is_active", "true").in_("gender", ["Male", ""])
    kinds = [c.kind for c in fb.clauses]
    assert kinds == ["bool", "in"]
