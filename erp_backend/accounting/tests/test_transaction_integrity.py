# accounting/tests/test_transaction_integrity.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.models.transaction import Transaction, TransactionEntry
from accounting.services.exceptions import IdempotencyError, TransactionCreationError
from accounting.services.transaction_service import post_balanced_transaction
from accounting.tests.helpers import make_account, make_company


class TransactionServiceTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.cash = make_account(self.company, "1000", "Cash", Account.ASSET)
        self.sales = make_account(self.company, "4000", "Sales Revenue", Account.REVENUE)

    def _post(self, debit="100.00", credit="100.00", reference="TEST-1"):
        return post_balanced_transaction(
            company=self.company,
            transaction_date=date(2024, 12, 31),
            description="Test sale",
            transaction_type="test",
            reference_number=reference,
            lines=[
                {"account": self.cash, "debit": debit},
                {"account": self.sales, "credit": credit},
            ],
        )

    def test_balanced_transaction_is_posted_with_mirrored_ledger(self):
        txn = self._post()

        self.assertEqual(txn.status, Transaction.STATUS_POSTED)
        self.assertIsNotNone(txn.posted_at)
        self.assertEqual(txn.total_amount, Decimal("100.00"))

        entries = TransactionEntry.objects.filter(transaction=txn)
        ledger = LedgerEntry.objects.filter(transaction=txn)
        self.assertEqual(entries.count(), 2)
        self.assertEqual(ledger.count(), 2)

        totals = ledger.aggregate(d=Sum("debit"), c=Sum("credit"))
        self.assertEqual(totals["d"], Decimal("100.00"))
        self.assertEqual(totals["c"], Decimal("100.00"))
        self.assertTrue(all(row.entry_date == date(2024, 12, 31) for row in ledger))

    def test_unbalanced_raises_and_writes_nothing(self):
        with self.assertRaises(TransactionCreationError):
            self._post(debit="100.00", credit="90.00")

        self.assertFalse(Transaction.objects.exists())
        self.assertFalse(LedgerEntry.objects.exists())

    def test_duplicate_reference_is_rejected(self):
        self._post(reference="IMP-AR-2024-12-31")

        with self.assertRaises(IdempotencyError):
            self._post(reference="IMP-AR-2024-12-31")

        self.assertEqual(Transaction.objects.count(), 1)

    def test_same_reference_allowed_for_another_company(self):
        self._post(reference="SHARED-REF")

        other = make_company(name="Other Co")
        cash = make_account(other, "1000", "Cash", Account.ASSET)
        sales = make_account(other, "4000", "Sales Revenue", Account.REVENUE)

        txn = post_balanced_transaction(
            company=other,
            transaction_date=date(2024, 12, 31),
            description="Other sale",
            transaction_type="test",
            reference_number="SHARED-REF",
            lines=[
                {"account": cash, "debit": "10.00"},
                {"account": sales, "credit": "10.00"},
            ],
        )
        self.assertEqual(txn.company, other)

    def test_account_from_another_company_is_rejected(self):
        other = make_company(name="Other Co")
        foreign = make_account(other, "4000", "Sales Revenue", Account.REVENUE)

        with self.assertRaises(TransactionCreationError):
            post_balanced_transaction(
                company=self.company,
                transaction_date=date(2024, 12, 31),
                description="Cross-company",
                transaction_type="test",
                lines=[
                    {"account": self.cash, "debit": "5.00"},
                    {"account": foreign, "credit": "5.00"},
                ],
            )

    def test_line_with_both_sides_is_rejected(self):
        with self.assertRaises(TransactionCreationError):
            post_balanced_transaction(
                company=self.company,
                transaction_date=date(2024, 12, 31),
                description="Bad line",
                transaction_type="test",
                lines=[
                    {"account": self.cash, "debit": "5.00", "credit": "5.00"},
                    {"account": self.sales, "credit": "0.00"},
                ],
            )


class ImmutabilityTests(TestCase):
    def setUp(self):
        self.company = make_company()
        cash = make_account(self.company, "1000", "Cash", Account.ASSET)
        sales = make_account(self.company, "4000", "Sales Revenue", Account.REVENUE)
        self.txn = post_balanced_transaction(
            company=self.company,
            transaction_date=date(2024, 12, 31),
            description="Immutable",
            transaction_type="test",
            lines=[
                {"account": cash, "debit": "20.00"},
                {"account": sales, "credit": "20.00"},
            ],
        )

    def test_posted_transaction_cannot_be_modified(self):
        self.txn.description = "Changed"
        with self.assertRaises(ValidationError):
            self.txn.save()

    def test_transaction_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.txn.delete()

    def test_ledger_rows_cannot_be_modified_or_deleted(self):
        row = LedgerEntry.objects.filter(transaction=self.txn).first()

        row.description = "Changed"
        with self.assertRaises(ValidationError):
            row.save()
        with self.assertRaises(ValidationError):
            row.delete()
