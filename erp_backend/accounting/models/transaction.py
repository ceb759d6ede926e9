# accounting/models/transaction.py

"""
======================================================
PATH: accounting/models/transaction.py
======================================================
TRANSACTION (JOURNAL HEADER) + TRANSACTION ENTRY (JOURNAL LINE)

Lifecycle:
- A Transaction is created "pending", its entries and ledger rows are
  written, then it is flipped to "posted" exactly once.
- Once posted, the header is immutable (no updates, no deletes).
- Entries are immutable from creation.

Idempotency:
- reference is unique per company when present, so an external key
  (e.g. "IMP-AR-2024-12-31") can only ever produce one transaction.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from users.models.company import Company


class Transaction(models.Model):
    STATUS_PENDING = "pending"
    STATUS_POSTED = "posted"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_POSTED, "Posted"),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="transactions",
    )

    transaction_date = models.DateField(help_text="Accounting effective date")

    description = models.TextField(help_text="Narrative description of the transaction")

    reference_number = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="External reference (e.g. IMP-AR-2024-12-31)",
    )

    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    transaction_type = models.CharField(max_length=50)

    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    posted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "transaction_date"], name="txn_company_date_idx"),
            models.Index(fields=["company", "transaction_type"], name="txn_company_type_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "reference_number"],
                condition=Q(reference_number__isnull=False) & ~Q(reference_number=""),
                name="uniq_transaction_company_reference",
            )
        ]

    def __str__(self):
        return f"Transaction #{self.id} – {self.transaction_date} ({self.status})"

    def clean(self):
        if self.reference_number is not None:
            self.reference_number = str(self.reference_number).strip() or None

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Transaction description is required")

        if self.status not in (self.STATUS_PENDING, self.STATUS_POSTED):
            raise ValidationError("Invalid transaction status")

    def save(self, *args, **kwargs):
        if self.pk:
            previous = (
                Transaction.objects.filter(pk=self.pk).values_list("status", flat=True).first()
            )
            if previous == self.STATUS_POSTED:
                raise ValidationError("Posted transactions are immutable")

        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Transactions are immutable and cannot be deleted")


class TransactionEntry(models.Model):
    STATUS_APPROVED = "approved"

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.PROTECT,
        related_name="entries",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="transaction_entries",
    )

    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    description = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=20, default=STATUS_APPROVED)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Transaction Entry"
        verbose_name_plural = "Transaction Entries"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=(Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0)),
                name="chk_transaction_entry_debit_xor_credit",
            ),
        ]

    def __str__(self):
        side = f"DR {self.debit}" if self.debit else f"CR {self.credit}"
        return f"{side} → {self.account}"

    def clean(self):
        if self.debit < 0 or self.credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if (self.debit > 0) == (self.credit > 0):
            raise ValidationError("An entry must carry exactly one of debit or credit")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("TransactionEntry records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("TransactionEntry records are immutable and cannot be deleted")
