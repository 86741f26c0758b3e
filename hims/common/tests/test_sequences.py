# hims/common/tests/test_sequences.py
from datetime import date

import pytest

from hims.common import sequences

pytestmark = pytest.mark.django_db


def test_uhid_is_day_scoped_and_increasing():
    day = date(2026, 3, 14)
    first = sequences.next_uhid(today=day)
    second = sequences.next_uhid(today=day)

    assert first == "UHID202603140001"
    assert second == "UHID202603140002"


def test_uhid_counter_restarts_on_a_new_day():
    sequences.next_uhid(today=date(2026, 3, 14))
    sequences.next_uhid(today=date(2026, 3, 14))

    assert sequences.next_uhid(today=date(2026, 3, 15)) == "UHID202603150001"


def test_counters_are_independent_per_key():
    day = date(2026, 1, 2)
    assert sequences.next_visit_code(today=day) == "VISIT202601020001"
    assert sequences.next_accession_no(today=day) == "LAB202601020001"
    assert sequences.next_uhid(today=day) == "UHID202601020001"


def test_opd_bill_id_is_global():
    assert sequences.next_opd_bill_id() == "OPD-00001"
    assert sequences.next_opd_bill_id() == "OPD-00002"


def test_employee_id_uses_two_digit_year():
    assert sequences.next_employee_id(today=date(2026, 7, 1)) == "DOC260001"


def test_timestamp_codes_are_unique_within_process():
    codes = {sequences.timestamp_code("IPD") for _ in range(50)}
    assert len(codes) == 50
    assert all(c.startswith("IPD-") for c in codes)
