# impairment/tests/test_calculators.py

from decimal import Decimal

from django.test import TestCase

from fixed_assets.models.asset import FixedAsset
from impairment.services.calculators import (
    bucket_for,
    preview_assets,
    preview_inventory,
    preview_receivables,
)
from impairment.services.exceptions import ValidationFailure
from impairment.services.settings_store import update_settings
from impairment.tests.helpers import (
    PERIOD_END,
    make_asset,
    make_company,
    make_invoice,
    make_item,
)
from products.models.item import Item
from sales.models.invoice import Invoice


class AgingBucketTests(TestCase):
    def test_bucket_boundaries(self):
        self.assertEqual(bucket_for(0), "0_30")
        self.assertEqual(bucket_for(30), "0_30")
        self.assertEqual(bucket_for(31), "31_60")
        self.assertEqual(bucket_for(60), "31_60")
        self.assertEqual(bucket_for(61), "61_90")
        self.assertEqual(bucket_for(90), "61_90")
        self.assertEqual(bucket_for(91), "90_plus")


class ReceivablesPreviewTests(TestCase):
    def setUp(self):
        self.company = make_company()

    def test_forty_five_days_overdue_lands_in_31_60(self):
        """1000.00 due 45 days before period end -> 5% -> 50.00."""
        make_invoice(self.company, "1000.00", days_before_period_end=45)

        preview = preview_receivables(self.company, PERIOD_END)

        self.assertEqual(len(preview.items), 1)
        item = preview.items[0]
        self.assertEqual(item.days_overdue, 45)
        self.assertEqual(item.bucket, "31_60")
        self.assertEqual(item.expected_loss, Decimal("50.00"))
        self.assertEqual(preview.summary.total_outstanding, Decimal("1000.00"))
        self.assertEqual(preview.summary.sum_31_60, Decimal("50.00"))
        self.assertEqual(preview.summary.sum_0_30, Decimal("0.00"))
        self.assertEqual(preview.total, Decimal("50.00"))

    def test_boundaries_through_invoices(self):
        for days in (30, 31, 90, 91):
            make_invoice(self.company, "100.00", days_before_period_end=days)

        preview = preview_receivables(self.company, PERIOD_END)
        buckets = {item.days_overdue: item.bucket for item in preview.items}

        self.assertEqual(buckets, {30: "0_30", 31: "31_60", 90: "61_90", 91: "90_plus"})
        self.assertEqual(preview.summary.sum_0_30, Decimal("1.00"))
        self.assertEqual(preview.summary.sum_31_60, Decimal("5.00"))
        self.assertEqual(preview.summary.sum_61_90, Decimal("20.00"))
        self.assertEqual(preview.summary.sum_90_plus, Decimal("50.00"))
        self.assertEqual(preview.summary.total_expected_loss, Decimal("76.00"))

    def test_not_yet_due_is_zero_days(self):
        make_invoice(self.company, "200.00", days_before_period_end=-10)

        item = preview_receivables(self.company, PERIOD_END).items[0]

        self.assertEqual(item.days_overdue, 0)
        self.assertEqual(item.bucket, "0_30")

    def test_invoice_date_used_when_no_due_date(self):
        make_invoice(self.company, "100.00", days_before_period_end=75, due=False)

        item = preview_receivables(self.company, PERIOD_END).items[0]

        self.assertEqual(item.days_overdue, 75)
        self.assertEqual(item.bucket, "61_90")

    def test_skips_settled_draft_and_cancelled_invoices(self):
        make_invoice(self.company, "100.00", paid="100.00", status=Invoice.STATUS_PAID)
        make_invoice(self.company, "100.00", paid="150.00")
        make_invoice(self.company, "100.00", status=Invoice.STATUS_DRAFT)
        make_invoice(self.company, "100.00", status=Invoice.STATUS_CANCELLED)
        make_invoice(self.company, "300.00", paid="100.00", status=Invoice.STATUS_PARTIALLY_PAID)

        preview = preview_receivables(self.company, PERIOD_END)

        self.assertEqual(len(preview.items), 1)
        self.assertEqual(preview.items[0].outstanding, Decimal("200.00"))

    def test_other_companies_are_excluded(self):
        make_invoice(make_company(name="Other Co"), "999.00", days_before_period_end=100)

        preview = preview_receivables(self.company, PERIOD_END)

        self.assertEqual(preview.items, [])
        self.assertEqual(preview.total, Decimal("0.00"))

    def test_zero_rate_is_honoured(self):
        update_settings(self.company, ecl_rate_0_30="0")
        make_invoice(self.company, "500.00", days_before_period_end=5)

        preview = preview_receivables(self.company, PERIOD_END)

        self.assertEqual(preview.items[0].expected_loss, Decimal("0.00"))
        self.assertEqual(preview.rates["ecl_rate_0_30"], "0.0000")

    def test_expected_loss_rounds_half_up(self):
        update_settings(self.company, ecl_rate_0_30="0.0100")
        make_invoice(self.company, "0.50", days_before_period_end=1)

        item = preview_receivables(self.company, PERIOD_END).items[0]

        # 0.50 * 0.01 = 0.005 -> 0.01
        self.assertEqual(item.expected_loss, Decimal("0.01"))

    def test_to_dict_is_json_safe(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)

        data = preview_receivables(self.company, PERIOD_END).to_dict()

        self.assertEqual(data["calc_type"], "receivables")
        self.assertEqual(data["period_end"], "2024-12-31")
        self.assertEqual(data["summary"]["total_expected_loss"], "50.00")
        self.assertEqual(data["items"][0]["bucket"], "31_60")


class AssetsPreviewTests(TestCase):
    def setUp(self):
        self.company = make_company()

    def test_impairment_is_carrying_minus_recoverable(self):
        asset = make_asset(self.company, cost="10000.00", acc_dep="4000.00")

        preview = preview_assets(self.company, PERIOD_END, {str(asset.pk): "5000.00"})

        self.assertEqual(preview.summary.count, 1)
        self.assertEqual(preview.items[0].carrying_amount, Decimal("6000.00"))
        self.assertEqual(preview.items[0].impairment_loss, Decimal("1000.00"))
        self.assertEqual(preview.total, Decimal("1000.00"))

    def test_assets_without_estimate_or_not_impaired_are_skipped(self):
        no_estimate = make_asset(self.company, cost="500.00", description="Laptop")
        above = make_asset(self.company, cost="500.00", description="Desk")
        zero = make_asset(self.company, cost="500.00", description="Chair")
        disposed = make_asset(
            self.company, cost="500.00", status=FixedAsset.STATUS_DISPOSED, description="Old van"
        )

        preview = preview_assets(
            self.company,
            PERIOD_END,
            {
                str(above.pk): "600.00",
                str(zero.pk): "0",
                str(disposed.pk): "100.00",
            },
        )

        self.assertEqual(preview.items, [])
        self.assertEqual(preview.summary.count, 0)
        self.assertEqual(preview.total, Decimal("0.00"))
        self.assertIsNotNone(no_estimate.pk)

    def test_negative_recoverable_is_rejected(self):
        asset = make_asset(self.company, cost="500.00")

        with self.assertRaises(ValidationFailure):
            preview_assets(self.company, PERIOD_END, {str(asset.pk): "-1"})


class InventoryPreviewTests(TestCase):
    def setUp(self):
        self.company = make_company()

    def test_write_down_to_nrv(self):
        """qty 10 @ cost 20, NRV 15 -> 50.00 write-down."""
        item = make_item(self.company, qty=10, cost="20.00")

        preview = preview_inventory(self.company, PERIOD_END, {str(item.pk): "15.00"})

        self.assertEqual(preview.summary.count, 1)
        row = preview.items[0]
        self.assertEqual(row.carrying_amount, Decimal("200.00"))
        self.assertEqual(row.nrv_total, Decimal("150.00"))
        self.assertEqual(row.write_down, Decimal("50.00"))
        self.assertEqual(preview.total, Decimal("50.00"))

    def test_missing_nrv_defaults_to_cost(self):
        make_item(self.company, qty=10, cost="20.00")

        preview = preview_inventory(self.company, PERIOD_END, {})

        self.assertEqual(preview.items, [])
        self.assertEqual(preview.total, Decimal("0.00"))

    def test_zero_nrv_writes_down_fully(self):
        item = make_item(self.company, qty=4, cost="12.50")

        preview = preview_inventory(self.company, PERIOD_END, {str(item.pk): "0"})

        self.assertEqual(preview.total, Decimal("50.00"))

    def test_services_and_other_companies_are_ignored(self):
        service = make_item(self.company, qty=1, cost="100.00", item_type=Item.TYPE_SERVICE)
        foreign = make_item(make_company(name="Other Co"), qty=10, cost="20.00")

        preview = preview_inventory(
            self.company,
            PERIOD_END,
            {str(service.pk): "1.00", str(foreign.pk): "1.00"},
        )

        self.assertEqual(preview.items, [])

    def test_fractional_quantity_rounds_only_the_write_down(self):
        """qty 1.005 @ cost 1.00, NRV 0.99 -> round2(1.005 - 0.99495) = 0.01."""
        item = make_item(self.company, qty="1.005", cost="1.00")

        preview = preview_inventory(self.company, PERIOD_END, {str(item.pk): "0.99"})

        self.assertEqual(preview.summary.count, 1)
        self.assertEqual(preview.items[0].write_down, Decimal("0.01"))
        self.assertEqual(preview.total, Decimal("0.01"))
