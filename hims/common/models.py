# hims/common/models.py
from __future__ import annotations

import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """
    Standard timestamps for all entities.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(TimeStampedModel):
    """
    UUID surrogate key + timestamps. Human-readable codes (UHID, bill ids)
    live in their own unique columns.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class DailySequence(TimeStampedModel):
    """
    Counter row per (key, period). Incremented atomically by
    hims.common.sequences; never scanned from the entity tables.
    """
    key = models.CharField(max_length=32)
    period = models.CharField(max_length=16)
    value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "common_daily_sequence"
        constraints = [
            models.UniqueConstraint(fields=["key", "period"], name="uq_sequence_key_period"),
        ]

    def __str__(self) -> str:
        return f"{self.key}:{self.period}={self.value}"
