# impairment/models/calculation.py

"""
======================================================
PATH: impairment/models/calculation.py
======================================================
POSTED IMPAIRMENT CALCULATIONS

ImpairmentCalculation:
- One row per posted run, holding the caller's params and the full
  preview snapshot (tagged by calc_type).
- (company, calc_type, period_end) is unique among posted rows. This
  constraint is the authoritative idempotency signal for the engine.
- Immutable: no updates, no deletes.

ImpairmentPosting:
- 1:1 link between a calculation and the ledger transaction it produced.
- Immutable.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.transaction import Transaction
from users.models.company import Company


class ImpairmentCalculation(models.Model):
    CALC_RECEIVABLES = "receivables"
    CALC_ASSETS = "assets"
    CALC_INVENTORY = "inventory"

    CALC_TYPES = [
        (CALC_RECEIVABLES, "Receivables ECL"),
        (CALC_ASSETS, "Asset impairment"),
        (CALC_INVENTORY, "Inventory write-down"),
    ]

    STATUS_POSTED = "posted"

    STATUS_CHOICES = [
        (STATUS_POSTED, "Posted"),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="impairment_calculations",
    )

    calc_type = models.CharField(max_length=20, choices=CALC_TYPES)
    period_end = models.DateField()

    params = models.JSONField(default=dict, blank=True)
    result = models.JSONField(default=dict, blank=True)

    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_POSTED,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="impairment_calculations",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-period_end", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "calc_type", "period_end"],
                condition=Q(status="posted"),
                name="uniq_posted_impairment_per_period",
            ),
        ]

    def __str__(self):
        return f"{self.calc_type} {self.period_end} ({self.status})"

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("ImpairmentCalculation records are immutable")

        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ImpairmentCalculation records cannot be deleted")


class ImpairmentPosting(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="impairment_postings",
    )

    calculation = models.OneToOneField(
        ImpairmentCalculation,
        on_delete=models.PROTECT,
        related_name="posting",
    )

    transaction = models.OneToOneField(
        Transaction,
        on_delete=models.PROTECT,
        related_name="impairment_posting",
    )

    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="impairment_postings",
    )

    posted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-posted_at"]

    def __str__(self):
        return f"{self.calculation} → Transaction #{self.transaction_id}"

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("ImpairmentPosting records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ImpairmentPosting records cannot be deleted")
