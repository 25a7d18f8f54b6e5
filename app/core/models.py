"""
Abstract base model shared by every domain model.

Usage:
    from core.models import BaseModel

    class Booking(BaseModel):
        ...

Inheriting models get ``created_at`` (indexed, set on insert) and
``updated_at`` (refreshed on every save). Models that need a different
default ordering override ``Meta.ordering``.
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Abstract model with creation and modification timestamps.

    Fields:
        created_at: Set once when the row is inserted
        updated_at: Refreshed on every save()
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.pk})"
