# products/tests/test_items.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from products.models.item import Item
from users.models import Company


class ItemModelTests(TestCase):
    def setUp(self):
        self.company = Company.objects.create(name="Acme Trading Ltd")

    def test_item_defaults_to_product(self):
        item = Item.objects.create(
            company=self.company,
            name="Widget",
            quantity_on_hand=Decimal("5"),
            cost_price=Decimal("2.50"),
        )

        self.assertEqual(item.item_type, Item.TYPE_PRODUCT)
        self.assertEqual(str(item), "Widget")

    def test_negative_cost_is_invalid(self):
        item = Item(company=self.company, name="Widget", cost_price=Decimal("-1.00"))

        with self.assertRaises(ValidationError):
            item.full_clean()
