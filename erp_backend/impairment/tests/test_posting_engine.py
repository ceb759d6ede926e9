# impairment/tests/test_posting_engine.py

"""
Posting engine guarantees:
- every produced transaction balances
- a (company, calc_type, period_end) posts at most once
- locked periods reject posts
- zero-impact previews write nothing
- a failure leaves no partial rows behind
"""

from datetime import date
from decimal import Decimal
from unittest import mock

from django.db.models import Sum
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.models.transaction import Transaction, TransactionEntry
from accounting.services.exceptions import AccountResolutionError, TransactionCreationError
from accounting.services.transaction_service import post_balanced_transaction
from accounting.tests.helpers import make_account
from impairment.models import ImpairmentCalculation, ImpairmentPosting
from impairment.services import posting_engine
from impairment.services.calculators import (
    preview_assets,
    preview_inventory,
    preview_receivables,
)
from impairment.services.exceptions import (
    AccountResolutionFailure,
    AlreadyPosted,
    PeriodLocked,
    PostingFailure,
    ValidationFailure,
)
from impairment.services.period_lock import set_lock
from impairment.tests.helpers import (
    PERIOD_END,
    make_asset,
    make_company,
    make_invoice,
    make_item,
    make_user,
)


class PostingEngineTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.user = make_user(self.company)

    def _assert_balanced(self, txn_id, total):
        txn = Transaction.objects.get(pk=txn_id)
        self.assertEqual(txn.status, Transaction.STATUS_POSTED)
        self.assertEqual(txn.total_amount, total)
        self.assertEqual(txn.transaction_date, PERIOD_END)

        entries = TransactionEntry.objects.filter(transaction=txn)
        self.assertEqual(entries.count(), 2)
        e_totals = entries.aggregate(d=Sum("debit"), c=Sum("credit"))
        self.assertEqual(e_totals["d"], total)
        self.assertEqual(e_totals["c"], total)

        ledger = LedgerEntry.objects.filter(transaction=txn)
        self.assertEqual(ledger.count(), 2)
        l_totals = ledger.aggregate(d=Sum("debit"), c=Sum("credit"))
        self.assertEqual(l_totals["d"], total)
        self.assertEqual(l_totals["c"], total)
        return txn

    def test_receivables_post_is_balanced_and_recorded(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        result = posting_engine.post(self.company, "receivables", PERIOD_END, preview, user=self.user)

        self.assertTrue(result.posted)
        self.assertEqual(result.total, Decimal("50.00"))
        txn = self._assert_balanced(result.transaction_id, Decimal("50.00"))
        self.assertEqual(txn.reference_number, "IMP-AR-2024-12-31")
        self.assertEqual(txn.transaction_type, "impairment_receivables")

        debit = TransactionEntry.objects.get(transaction=txn, debit__gt=0)
        credit = TransactionEntry.objects.get(transaction=txn, credit__gt=0)
        self.assertEqual(debit.account.code, "6150")
        self.assertEqual(credit.account.code, "1290")
        self.assertEqual(credit.account.normal_balance, Account.CREDIT)

        calc = ImpairmentCalculation.objects.get(company=self.company)
        self.assertEqual(calc.status, ImpairmentCalculation.STATUS_POSTED)
        self.assertEqual(calc.result["summary"]["total_expected_loss"], "50.00")
        self.assertEqual(calc.created_by, self.user)
        self.assertEqual(ImpairmentPosting.objects.get(calculation=calc).transaction, txn)

    def test_assets_post_is_balanced(self):
        asset = make_asset(self.company, cost="10000.00", acc_dep="4000.00")
        preview = preview_assets(self.company, PERIOD_END, {str(asset.pk): "5000.00"})

        result = posting_engine.post(self.company, "assets", PERIOD_END, preview)

        txn = self._assert_balanced(result.transaction_id, Decimal("1000.00"))
        self.assertEqual(txn.reference_number, "IMP-AS-2024-12-31")
        codes = set(txn.entries.values_list("account__code", flat=True))
        self.assertEqual(codes, {"6160", "1550"})

    def test_inventory_post_is_balanced(self):
        item = make_item(self.company, qty=10, cost="20.00")
        preview = preview_inventory(self.company, PERIOD_END, {str(item.pk): "15.00"})

        result = posting_engine.post(self.company, "inventory", PERIOD_END, preview)

        txn = self._assert_balanced(result.transaction_id, Decimal("50.00"))
        self.assertEqual(txn.reference_number, "IMP-INV-2024-12-31")
        codes = set(txn.entries.values_list("account__code", flat=True))
        self.assertEqual(codes, {"5110", "1300"})

    def test_existing_accounts_are_reused(self):
        existing = Account.objects.create(
            company=self.company,
            code="1200",
            name="Stock on Hand",
            account_type=Account.ASSET,
        )
        item = make_item(self.company, qty=10, cost="20.00")
        preview = preview_inventory(self.company, PERIOD_END, {str(item.pk): "15.00"})

        result = posting_engine.post(self.company, "inventory", PERIOD_END, preview)

        credit = TransactionEntry.objects.get(transaction_id=result.transaction_id, credit__gt=0)
        self.assertEqual(credit.account, existing)
        self.assertFalse(Account.objects.filter(company=self.company, code="1300").exists())

    def test_second_post_for_same_period_is_rejected(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)
        posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        with self.assertRaises(AlreadyPosted):
            posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertEqual(Transaction.objects.count(), 1)
        self.assertEqual(LedgerEntry.objects.count(), 2)
        self.assertEqual(ImpairmentCalculation.objects.count(), 1)

    def test_other_periods_and_types_post_independently(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        posting_engine.post(
            self.company, "receivables", PERIOD_END, preview_receivables(self.company, PERIOD_END)
        )

        next_period = date(2025, 1, 31)
        result = posting_engine.post(
            self.company, "receivables", next_period, preview_receivables(self.company, next_period)
        )

        self.assertTrue(result.posted)
        self.assertEqual(ImpairmentCalculation.objects.count(), 2)

    def test_locked_period_rejects_post_until_unlocked(self):
        asset = make_asset(self.company, cost="1000.00")
        preview = preview_assets(self.company, PERIOD_END, {str(asset.pk): "400.00"})
        set_lock(self.company, "assets", PERIOD_END, True)

        with self.assertRaises(PeriodLocked):
            posting_engine.post(self.company, "assets", PERIOD_END, preview)

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(ImpairmentCalculation.objects.exists())

        set_lock(self.company, "assets", PERIOD_END, False)
        result = posting_engine.post(self.company, "assets", PERIOD_END, preview)

        self.assertTrue(result.posted)
        self.assertEqual(result.total, Decimal("600.00"))

    def test_zero_impact_is_a_no_op(self):
        preview = preview_receivables(self.company, PERIOD_END)

        result = posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertFalse(result.posted)
        self.assertEqual(result.total, Decimal("0.00"))
        self.assertEqual(result.to_dict(), {"posted": False, "total": "0.00"})
        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(ImpairmentCalculation.objects.exists())
        self.assertFalse(Account.objects.exists())

    def test_preview_type_must_match_calc_type(self):
        preview = preview_receivables(self.company, PERIOD_END)

        with self.assertRaises(ValidationFailure):
            posting_engine.post(self.company, "assets", PERIOD_END, preview)

    def test_account_failure_rolls_back_everything(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        with mock.patch(
            "impairment.services.posting_engine.resolve_rule",
            side_effect=AccountResolutionError("chart is broken"),
        ):
            with self.assertRaises(AccountResolutionFailure):
                posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(ImpairmentCalculation.objects.exists())

    def test_calculation_insert_failure_leaves_no_transaction(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        with mock.patch(
            "impairment.services.posting_engine.ImpairmentPosting.objects.create",
            side_effect=RuntimeError("boom"),
        ):
            with self.assertRaises(RuntimeError):
                posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(LedgerEntry.objects.exists())
        self.assertFalse(ImpairmentCalculation.objects.exists())

    def test_duplicate_reference_on_insert_is_already_posted(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)
        posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        # Get past the pre-check so the transaction insert hits the reference.
        with mock.patch("impairment.services.posting_engine.is_posted", return_value=False):
            with self.assertRaises(AlreadyPosted):
                posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertEqual(Transaction.objects.count(), 1)
        self.assertEqual(LedgerEntry.objects.count(), 2)
        self.assertEqual(ImpairmentCalculation.objects.count(), 1)

    def test_foreign_transaction_with_same_reference_blocks_post(self):
        cash = make_account(self.company, "1000", "Cash", Account.ASSET)
        sales = make_account(self.company, "4000", "Sales", Account.REVENUE)
        post_balanced_transaction(
            company=self.company,
            transaction_date=PERIOD_END,
            description="Manual entry",
            transaction_type="manual",
            reference_number="IMP-AR-2024-12-31",
            lines=[
                {"account": cash, "debit": Decimal("10.00")},
                {"account": sales, "credit": Decimal("10.00")},
            ],
        )
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        with self.assertRaises(AlreadyPosted):
            posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertEqual(Transaction.objects.count(), 1)
        self.assertEqual(LedgerEntry.objects.count(), 2)
        self.assertFalse(ImpairmentCalculation.objects.exists())

    def test_duplicate_calculation_row_on_insert_rolls_back_transaction(self):
        ImpairmentCalculation.objects.create(
            company=self.company,
            calc_type="receivables",
            period_end=PERIOD_END,
            status=ImpairmentCalculation.STATUS_POSTED,
        )
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        with mock.patch("impairment.services.posting_engine.is_posted", return_value=False):
            with self.assertRaises(AlreadyPosted):
                posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(LedgerEntry.objects.exists())
        self.assertFalse(ImpairmentPosting.objects.exists())
        self.assertEqual(ImpairmentCalculation.objects.count(), 1)

    def test_transaction_write_failure_is_posting_failure(self):
        make_invoice(self.company, "1000.00", days_before_period_end=45)
        preview = preview_receivables(self.company, PERIOD_END)

        with mock.patch(
            "impairment.services.posting_engine.post_balanced_transaction",
            side_effect=TransactionCreationError("does not balance"),
        ):
            with self.assertRaises(PostingFailure) as ctx:
                posting_engine.post(self.company, "receivables", PERIOD_END, preview)

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertFalse(ImpairmentCalculation.objects.exists())
