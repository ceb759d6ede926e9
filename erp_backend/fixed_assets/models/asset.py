# fixed_assets/models/asset.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from users.models.company import Company


class FixedAsset(models.Model):
    """
    Entry in a company's fixed asset register.

    carrying_amount = max(0, cost - accumulated_depreciation)
    """

    STATUS_ACTIVE = "active"
    STATUS_DISPOSED = "disposed"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_DISPOSED, "Disposed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="fixed_assets",
    )

    description = models.CharField(max_length=255)
    purchase_date = models.DateField(null=True, blank=True)

    cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    accumulated_depreciation = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["description"]

    def __str__(self):
        return self.description

    def clean(self):
        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Asset description is required")
        if self.cost is not None and self.cost < 0:
            raise ValidationError("Cost cannot be negative")
        if self.accumulated_depreciation is not None and self.accumulated_depreciation < 0:
            raise ValidationError("Accumulated depreciation cannot be negative")

    @property
    def carrying_amount(self) -> Decimal:
        carrying = (self.cost or Decimal("0.00")) - (
            self.accumulated_depreciation or Decimal("0.00")
        )
        return max(Decimal("0.00"), carrying)
