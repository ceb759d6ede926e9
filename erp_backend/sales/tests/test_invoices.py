# sales/tests/test_invoices.py

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from sales.models.invoice import Invoice
from users.models import Company


class InvoiceModelTests(TestCase):
    """
    GUARANTEES:
    - Outstanding balance never goes negative
    - Invoice numbers are unique per company
    """

    def setUp(self):
        self.company = Company.objects.create(name="Acme Trading Ltd")

    def _invoice(self, number="INV-1", total="100.00", paid="0.00", company=None):
        return Invoice.objects.create(
            company=company or self.company,
            invoice_number=number,
            invoice_date=date(2024, 11, 1),
            due_date=date(2024, 11, 30),
            total_amount=Decimal(total),
            amount_paid=Decimal(paid),
            status=Invoice.STATUS_SENT,
        )

    def test_outstanding_amount(self):
        self.assertEqual(self._invoice(paid="40.00").outstanding_amount, Decimal("60.00"))

    def test_overpaid_invoice_has_nothing_outstanding(self):
        self.assertEqual(self._invoice(paid="120.00").outstanding_amount, Decimal("0.00"))

    def test_invoice_number_unique_per_company(self):
        self._invoice(number="INV-9")
        self._invoice(number="INV-9", company=Company.objects.create(name="Other Co"))

        with self.assertRaises(IntegrityError):
            self._invoice(number="INV-9")

    def test_due_date_before_invoice_date_is_invalid(self):
        invoice = Invoice(
            company=self.company,
            invoice_number="INV-2",
            invoice_date=date(2024, 11, 30),
            due_date=date(2024, 11, 1),
        )

        with self.assertRaises(ValidationError):
            invoice.full_clean()
