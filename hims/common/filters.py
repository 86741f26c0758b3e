# hims/common/filters.py
"""
Explicit predicate builder for list endpoints.

Selectors collect clauses instead of assembling filter dicts by hand:

    q = (
        FilterBuilder()
        .search(["name", "uhid"], request.query_params.get("search"))
        .eq("gender", request.query_params.get("gender"))
        .date_range("created_at", from_date, to_date)
        .build()
    )

Clauses added with eq/search/date_range/... are joined with AND. Blank values
are skipped, so raw query params can be passed straight through.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Iterable, Sequence

from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, tuple, set)) and not value:
        return True
    return False


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


def _to_datetime(value: Any, *, end_of_day: bool) -> datetime | None:
    if _blank(value):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        raw = str(value).strip()
        dt = parse_datetime(raw)
        if dt is None:
            d = parse_date(raw)
            if d is None:
                raise ValidationError(f"Invalid date: {raw}")
            dt = datetime.combine(d, time.max if end_of_day else time.min)
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


@dataclass
class Clause:
    """One tagged predicate; `kind` is kept for debugging and tests."""
    kind: str
    q: Q


@dataclass
class FilterBuilder:
    clauses: list[Clause] = field(default_factory=list)

    def _add(self, kind: str, q: Q) -> "FilterBuilder":
        self.clauses.append(Clause(kind=kind, q=q))
        return self

    def eq(self, field_name: str, value: Any) -> "FilterBuilder":
        if _blank(value):
            return self
        return self._add("eq", Q(**{field_name: value}))

    def boolean(self, field_name: str, value: Any) -> "FilterBuilder":
        if _blank(value):
            return self
        return self._add("bool", Q(**{field_name: _as_bool(value)}))

    def in_(self, field_name: str, values: Iterable[Any] | None) -> "FilterBuilder":
        values = [v for v in (values or []) if not _blank(v)]
        if not values:
            return self
        return self._add("in", Q(**{f"{field_name}__in": values}))

    def isnull(self, field_name: str, value: bool) -> "FilterBuilder":
        return self._add("isnull", Q(**{f"{field_name}__isnull": value}))

    def search(self, fields: Sequence[str], term: str | None) -> "FilterBuilder":
        term = (term or "").strip()
        if not term or not fields:
            return self
        q = Q()
        for f in fields:
            q |= Q(**{f"{f}__icontains": term})
        return self._add("search", q)

    def date_range(self, field_name: str, start: Any = None, end: Any = None) -> "FilterBuilder":
        start_dt = _to_datetime(start, end_of_day=False)
        end_dt = _to_datetime(end, end_of_day=True)
        q = Q()
        if start_dt is not None:
            q &= Q(**{f"{field_name}__gte": start_dt})
        if end_dt is not None:
            q &= Q(**{f"{field_name}__lte": end_dt})
        if not q:
            return self
        return self._add("date_range", q)

    def and_(self, *builders: "FilterBuilder") -> "FilterBuilder":
        """AND in the clauses of other builders as one clause."""
        q = Q()
        for b in builders:
            q &= b.build()
        if not q:
            return self
        return self._add("and", q)

    def or_(self, *builders: "FilterBuilder") -> "FilterBuilder":
        """OR together the clauses of other builders as one clause."""
        q = Q()
        for b in builders:
            built = b.build()
            if built:
                q |= built
        if not q:
            return self
        return self._add("or", q)

    def build(self) -> Q:
        q = Q()
        for clause in self.clauses:
            q &= clause.q
        return q

    def apply(self, qs: QuerySet) -> QuerySet:
        return qs.filter(self.build())
