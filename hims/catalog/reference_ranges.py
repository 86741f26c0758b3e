# hims/catalog/reference_ranges.py
"""
Selection of bio-reference ranges for a patient.

The patient's age is always given in years (fractions allowed). Each range
carries its own unit, so the age is converted before comparing:

    Year  -> years
    Month -> years * 12
    Day   -> years * 365

A range with age_type `All` matches any age, gender `All` matches any gender.
Bounds are inclusive.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, TypeVar

from hims.common.constants import AgeUnit, GenderWithAll

R = TypeVar("R")

AGE_FACTORS = {
    AgeUnit.YEAR: Decimal(1),
    AgeUnit.MONTH: Decimal(12),
    AgeUnit.DAY: Decimal(365),
}


def convert_age(age_years, unit: str) -> Decimal | None:
    if unit == AgeUnit.ALL:
        return None
    factor = AGE_FACTORS.get(unit)
    if factor is None:
        raise ValueError(f"Unknown age unit: {unit}")
    return Decimal(str(age_years)) * factor


def matches(ref, *, age_years, gender: str | None) -> bool:
    if ref.gender != GenderWithAll.ALL and ref.gender != gender:
        return False
    if ref.age_type == AgeUnit.ALL:
        return True
    if age_years is None:
        return False

    age = convert_age(age_years, ref.age_type)
    return Decimal(str(ref.age_from)) <= age <= Decimal(str(ref.age_to))


def filter_bio_references(references: Iterable[R], *, age_years, gender: str | None) -> list[R]:
    return [ref for ref in references if matches(ref, age_years=age_years, gender=gender)]


def best_reference(references: Iterable[R], *, age_years, gender: str | None) -> R | None:
    """
    First matching range, preferring gender-specific over `All` and
    age-banded over `All`.
    """
    candidates = filter_bio_references(references, age_years=age_years, gender=gender)
    if not candidates:
        return None
    candidates.sort(key=lambda r: (r.gender == GenderWithAll.ALL, r.age_type == AgeUnit.ALL))
    return candidates[0]
