# impairment/tests/helpers.py

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from fixed_assets.models.asset import FixedAsset
from products.models.item import Item
from sales.models.invoice import Invoice
from users.models import Company, User

PERIOD_END = date(2024, 12, 31)


def make_company(name: str = "Acme Trading Ltd") -> Company:
    return Company.objects.create(name=name)


def make_user(company, role: str = User.ROLE_ACCOUNTANT, email: str | None = None) -> User:
    return User.objects.create_user(
        email=email or f"{role}@{str(company.pk)[:8]}.example.com",
        password="pass-1234",
        company=company,
        role=role,
    )


_invoice_seq = {"n": 0}


def make_invoice(
    company,
    total,
    *,
    paid="0.00",
    days_before_period_end: int = 0,
    due: bool = True,
    status: str = Invoice.STATUS_SENT,
    period_end: date = PERIOD_END,
) -> Invoice:
    """
    days_before_period_end sets the aging date (due date, or invoice date
    when due=False).
    """
    _invoice_seq["n"] += 1
    aging_date = period_end - timedelta(days=days_before_period_end)
    return Invoice.objects.create(
        company=company,
        invoice_number=f"INV-{_invoice_seq['n']:05d}",
        invoice_date=aging_date - timedelta(days=30) if due else aging_date,
        due_date=aging_date if due else None,
        total_amount=Decimal(str(total)),
        amount_paid=Decimal(str(paid)),
        status=status,
    )


def make_asset(company, cost, acc_dep="0.00", status=FixedAsset.STATUS_ACTIVE, description="Delivery van"):
    return FixedAsset.objects.create(
        company=company,
        description=description,
        cost=Decimal(str(cost)),
        accumulated_depreciation=Decimal(str(acc_dep)),
        status=status,
    )


def make_item(company, qty, cost, item_type=Item.TYPE_PRODUCT, name="Widget", sku="WID-1"):
    return Item.objects.create(
        company=company,
        name=name,
        sku=sku,
        item_type=item_type,
        quantity_on_hand=Decimal(str(qty)),
        cost_price=Decimal(str(cost)),
        selling_price=Decimal(str(cost)),
    )
