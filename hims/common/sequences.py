# hims/common/sequences.py
"""
Human-readable identifiers backed by DailySequence counters.

Each call increments one (key, period) row with an UPDATE ... SET value = value + 1
inside a transaction, so concurrent writers get distinct suffixes.
"""
from __future__ import annotations

import threading
import time
from datetime import date

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from hims.common.models import DailySequence


@transaction.atomic
def next_value(*, key: str, period: str) -> int:
    DailySequence.objects.get_or_create(key=key, period=period)
    seq = DailySequence.objects.select_for_update().get(key=key, period=period)
    DailySequence.objects.filter(pk=seq.pk).update(value=F("value") + 1, updated_at=timezone.now())
    seq.refresh_from_db(fields=["value"])
    return seq.value


def _day(today: date | None) -> str:
    return (today or timezone.localdate()).strftime("%Y%m%d")


def next_uhid(*, today: date | None = None) -> str:
    period = _day(today)
    return f"UHID{period}{next_value(key='uhid', period=period):04d}"


def next_visit_code(*, today: date | None = None) -> str:
    period = _day(today)
    return f"VISIT{period}{next_value(key='visit', period=period):04d}"


def next_accession_no(*, today: date | None = None) -> str:
    period = _day(today)
    return f"LAB{period}{next_value(key='lab_order', period=period):04d}"


def next_opd_bill_id() -> str:
    return f"OPD-{next_value(key='opd_bill', period='all'):05d}"


def next_employee_id(*, today: date | None = None) -> str:
    yy = (today or timezone.localdate()).strftime("%y")
    return f"DOC{yy}{next_value(key='doctor', period=yy):04d}"


_stamp_lock = threading.Lock()
_last_stamp = 0


def timestamp_code(prefix: str) -> str:
    """
    IPD-1718000000000 / APPT-1718000000000. Millisecond epoch, bumped by one
    when two calls land in the same millisecond within this process.
    """
    global _last_stamp
    with _stamp_lock:
        stamp = max(int(time.time() * 1000), _last_stamp + 1)
        _last_stamp = stamp
    return f"{prefix}-{stamp}"
