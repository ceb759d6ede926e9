# sales/models/invoice.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from users.models.company import Company


class Invoice(models.Model):
    """
    A customer invoice (accounts receivable source document).

    Outstanding balance = max(0, total_amount - amount_paid).
    Draft and cancelled invoices are not receivables.
    """

    STATUS_DRAFT = "draft"
    STATUS_SENT = "sent"
    STATUS_PARTIALLY_PAID = "partially_paid"
    STATUS_PAID = "paid"
    STATUS_OVERDUE = "overdue"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SENT, "Sent"),
        (STATUS_PARTIALLY_PAID, "Partially Paid"),
        (STATUS_PAID, "Paid"),
        (STATUS_OVERDUE, "Overdue"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    NON_RECEIVABLE_STATUSES = (STATUS_DRAFT, STATUS_CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    invoice_number = models.CharField(max_length=64)
    customer_name = models.CharField(max_length=255, blank=True, default="")

    invoice_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    amount_paid = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-invoice_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "invoice_number"],
                name="uniq_invoice_company_number",
            ),
        ]

    def __str__(self):
        return f"{self.invoice_number} ({self.status})"

    def clean(self):
        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError("Invoice total cannot be negative")
        if self.amount_paid is not None and self.amount_paid < 0:
            raise ValidationError("Amount paid cannot be negative")
        if self.due_date and self.invoice_date and self.due_date < self.invoice_date:
            raise ValidationError("Due date cannot be before invoice date")

    @property
    def outstanding_amount(self) -> Decimal:
        outstanding = (self.total_amount or Decimal("0.00")) - (
            self.amount_paid or Decimal("0.00")
        )
        return max(Decimal("0.00"), outstanding)
