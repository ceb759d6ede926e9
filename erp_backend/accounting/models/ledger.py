# accounting/models/ledger.py

"""
======================================================
PATH: accounting/models/ledger.py
======================================================
LEDGER ENTRY MODEL

General-ledger row mirroring one TransactionEntry.

Guarantees:
- Immutable once created (no updates, no deletes)
- Exactly one of debit / credit is non-zero
- entry_date is the owning transaction's date (reporting timeline)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.transaction import Transaction
from users.models.company import Company


class LedgerEntry(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    entry_date = models.DateField()
    description = models.CharField(max_length=255, blank=True, default="")
    is_reversed = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Ledger Entry"
        verbose_name_plural = "Ledger Entries"
        ordering = ["entry_date", "id"]
        indexes = [
            models.Index(fields=["company", "entry_date"], name="ledger_company_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0)),
                name="chk_ledger_entry_debit_xor_credit",
            ),
        ]

    def __str__(self):
        side = f"DR {self.debit}" if self.debit else f"CR {self.credit}"
        return f"{self.entry_date} {side} → {self.account}"

    def clean(self):
        if self.debit < 0 or self.credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if (self.debit > 0) == (self.credit > 0):
            raise ValidationError("A ledger row must carry exactly one of debit or credit")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("LedgerEntry records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("LedgerEntry records are immutable and cannot be deleted")
