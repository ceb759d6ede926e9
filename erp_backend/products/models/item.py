# products/models/item.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from users.models.company import Company


class Item(models.Model):
    """
    A stocked or service item.

    STOCK MODEL:
    - quantity_on_hand is the current on-hand count
    - cost_price is the per-unit carrying cost
    - Only PRODUCT items carry inventory; services never do
    """

    TYPE_PRODUCT = "product"
    TYPE_SERVICE = "service"

    ITEM_TYPES = [
        (TYPE_PRODUCT, "Product"),
        (TYPE_SERVICE, "Service"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="items",
    )

    sku = models.CharField(max_length=128, blank=True, default="")
    name = models.CharField(max_length=255, db_index=True)

    item_type = models.CharField(
        max_length=10,
        choices=ITEM_TYPES,
        default=TYPE_PRODUCT,
    )

    quantity_on_hand = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0.000")
    )
    cost_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    selling_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.sku})" if self.sku else self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Item name is required")
        if self.cost_price is not None and self.cost_price < 0:
            raise ValidationError("Cost price cannot be negative")
        if self.selling_price is not None and self.selling_price < 0:
            raise ValidationError("Selling price cannot be negative")
