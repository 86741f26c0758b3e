# hims/catalog/tests/test_reference_ranges.py
from decimal import Decimal
from types import SimpleNamespace

import pytest

from hims.catalog.reference_ranges import best_reference, convert_age, filter_bio_references, matches


def ref(age_from, age_to, age_type="Year", gender="All", label=""):
    return SimpleNamespace(age_from=Decimal(str(age_from)), age_to=Decimal(str(age_to)), age_type=age_type, gender=gender, label=label)


def test_convert_age_units():
    assert convert_age(2, "Year") == Decimal(2)
    assert convert_age(Decimal("0.5"), "Month") == Decimal("6.0")
    assert convert_age(1, "Day") == Decimal(365)
    assert convert_age(40, "All") is None
    with pytest.raises(ValueError):
        convert_age(1, "Week")


def test_month_band_matches_infant():
    infant = ref(0, 6, "Month")
    assert matches(infant, age_years=Decimal("0.25"), gender="Male")
    assert not matches(infant, age_years=1, gender="Male")


def test_bounds_are_inclusive():
    adult = ref(18, 60)
    assert matches(adult, age_years=18, gender="Female")
    assert matches(adult, age_years=60, gender="Female")
    assert not matches(adult, age_years=Decimal("60.01"), gender="Female")


def test_gender_filter():
    male_only = ref(0, 100, gender="Male")
    assert matches(male_only, age_years=30, gender="Male")
    assert not matches(male_only, age_years=30, gender="Female")
    assert not matches(male_only, age_years=30, gender=None)


def test_unknown_age_only_matches_all_ages():
    assert not matches(ref(0, 100), age_years=None, gender="Male")
    assert matches(ref(0, 0, "All"), age_years=None, gender="Male")


def test_filter_keeps_order():
    refs = [ref(0, 12, "Month", label="infant"), ref(1, 17, label="child"), ref(18, 100, label="adult")]
    assert [r.label for r in filter_bio_references(refs, age_years=10, gender="Male")] == ["child"]


def test_best_reference_prefers_specific():
    generic = ref(0, 0, "All", "All", label="generic")
    banded = ref(18, 100, "Year", "All", label="banded")
    specific = ref(18, 100, "Year", "Female", label="specific")

    assert best_reference([generic, banded, specific], age_years=30, gender="Female").label == "specific"
    assert best_reference([generic, banded, specific], age_years=30, gender="Male").label == "banded"
    assert best_reference([generic, banded], age_years=5, gender="Male").label == "generic"
    assert best_reference([banded], age_years=5, gender="Male") is None
