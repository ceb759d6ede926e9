# impairment/services/calculators.py

"""
======================================================
PATH: impairment/services/calculators.py
======================================================
IMPAIRMENT CALCULATORS (READ-ONLY)

- preview_receivables(): expected credit loss by aging bucket
- preview_assets():      carrying amount vs recoverable amount
- preview_inventory():   carrying amount vs net realizable value

Rules:
- Money is Decimal, rounded to 2 places (ROUND_HALF_UP) per item,
  before summation
- Nothing here writes to the database
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from fixed_assets.models.asset import FixedAsset
from impairment.services.exceptions import ValidationFailure
from impairment.services.previews import (
    BUCKET_0_30,
    BUCKET_31_60,
    BUCKET_61_90,
    BUCKET_90_PLUS,
    BUCKETS,
    CALC_ASSETS,
    CALC_INVENTORY,
    CALC_RECEIVABLES,
    AssetItem,
    AssetsPreview,
    AssetsSummary,
    InventoryItem,
    InventoryPreview,
    InventorySummary,
    Preview,
    ReceivableItem,
    ReceivablesPreview,
    ReceivablesSummary,
)
from impairment.services.settings_store import (
    get_settings,
    rate_for_bucket,
    settings_to_dict,
)
from products.models.item import Item
from sales.models.invoice import Invoice

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValidationFailure(f"Invalid money value: {value!r}") from exc

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _amount(name: str, value) -> Decimal:
    """Caller-supplied amount: must be a finite, non-negative number."""
    if isinstance(value, bool):
        raise ValidationFailure(f"{name} must be a number")
    try:
        amt = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationFailure(f"{name} must be a number") from exc
    if not amt.is_finite() or amt < 0:
        raise ValidationFailure(f"{name} must be a non-negative number")
    return amt


def bucket_for(days_overdue: int) -> str:
    if days_overdue <= 30:
        return BUCKET_0_30
    if days_overdue <= 60:
        return BUCKET_31_60
    if days_overdue <= 90:
        return BUCKET_61_90
    return BUCKET_90_PLUS


def days_overdue(period_end: date, aging_date: date) -> int:
    return max(0, (period_end - aging_date).days)


# ------------------------------------------------------------
# RECEIVABLES
# ------------------------------------------------------------


def preview_receivables(company, period_end: date, settings_obj=None) -> ReceivablesPreview:
    settings_obj = settings_obj or get_settings(company)

    invoices = (
        Invoice.objects.filter(company=company)
        .exclude(status__in=Invoice.NON_RECEIVABLE_STATUSES)
        .order_by("invoice_date", "invoice_number")
    )

    items: list[ReceivableItem] = []
    total_outstanding = ZERO
    bucket_sums = {bucket: ZERO for bucket in BUCKETS}

    for invoice in invoices:
        outstanding = _money(invoice.outstanding_amount)
        if outstanding <= 0:
            continue

        aging_date = invoice.due_date or invoice.invoice_date
        days = days_overdue(period_end, aging_date)
        bucket = bucket_for(days)
        rate = rate_for_bucket(settings_obj, bucket)
        expected_loss = _money(outstanding * rate)

        items.append(
            ReceivableItem(
                invoice_id=str(invoice.pk),
                invoice_number=invoice.invoice_number,
                aging_date=aging_date,
                outstanding=outstanding,
                days_overdue=days,
                bucket=bucket,
                rate=rate,
                expected_loss=expected_loss,
            )
        )
        total_outstanding += outstanding
        bucket_sums[bucket] += expected_loss

    summary = ReceivablesSummary(
        total_outstanding=total_outstanding,
        total_expected_loss=sum(bucket_sums.values(), ZERO),
        sum_0_30=bucket_sums[BUCKET_0_30],
        sum_31_60=bucket_sums[BUCKET_31_60],
        sum_61_90=bucket_sums[BUCKET_61_90],
        sum_90_plus=bucket_sums[BUCKET_90_PLUS],
    )
    return ReceivablesPreview(
        period_end=period_end,
        rates=settings_to_dict(settings_obj),
        items=items,
        summary=summary,
    )


# ------------------------------------------------------------
# FIXED ASSETS
# ------------------------------------------------------------


def preview_assets(company, period_end: date, recoverables: Optional[dict] = None) -> AssetsPreview:
    """
    recoverables: {asset_id: recoverable_amount}. Assets without an
    entry, or with a recoverable of 0, are not assessed.
    """
    recoverables = {
        str(asset_id): _amount("recoverable_amount", value)
        for asset_id, value in (recoverables or {}).items()
    }

    assets = (
        FixedAsset.objects.filter(company=company)
        .exclude(status=FixedAsset.STATUS_DISPOSED)
        .order_by("description", "id")
    )

    items: list[AssetItem] = []
    total = ZERO

    for asset in assets:
        recoverable = recoverables.get(str(asset.pk))
        if recoverable is None:
            continue

        carrying = _money(asset.carrying_amount)
        recoverable = _money(recoverable)
        if not (ZERO < recoverable < carrying):
            continue

        loss = _money(carrying - recoverable)
        items.append(
            AssetItem(
                asset_id=str(asset.pk),
                description=asset.description,
                carrying_amount=carrying,
                recoverable_amount=recoverable,
                impairment_loss=loss,
            )
        )
        total += loss

    return AssetsPreview(
        period_end=period_end,
        items=items,
        summary=AssetsSummary(total_impairment=total, count=len(items)),
    )


# ------------------------------------------------------------
# INVENTORY
# ------------------------------------------------------------


def preview_inventory(company, period_end: date, nrv: Optional[dict] = None) -> InventoryPreview:
    """
    nrv: {item_id: nrv_per_unit}. Items without an entry are valued at
    cost (no write-down). A supplied 0 is a real NRV of zero.
    """
    nrv = {str(item_id): _amount("nrv_per_unit", value) for item_id, value in (nrv or {}).items()}

    stock = Item.objects.filter(company=company, item_type=Item.TYPE_PRODUCT).order_by("name", "id")

    items: list[InventoryItem] = []
    total = ZERO

    for item in stock:
        quantity = item.quantity_on_hand or Decimal("0")
        cost = item.cost_price or ZERO
        per_unit = nrv.get(str(item.pk), cost)

        # Compare and subtract unrounded; only the write-down is rounded.
        carrying = quantity * cost
        nrv_total = quantity * per_unit
        if not nrv_total < carrying:
            continue

        write_down = _money(carrying - nrv_total)
        items.append(
            InventoryItem(
                item_id=str(item.pk),
                name=item.name,
                sku=item.sku,
                quantity=quantity,
                cost_price=cost,
                carrying_amount=_money(carrying),
                nrv_per_unit=per_unit,
                nrv_total=_money(nrv_total),
                write_down=write_down,
            )
        )
        total += write_down

    return InventoryPreview(
        period_end=period_end,
        items=items,
        summary=InventorySummary(total_write_down=total, count=len(items)),
    )


def compute_preview(company, calc_type: str, period_end: date, params: Optional[dict] = None) -> Preview:
    """
    Dispatch on calc_type.

    params:
      assets:    {"recoverables": {asset_id: amount}}
      inventory: {"nrv": {item_id: nrv_per_unit}}
    """
    params = params or {}
    if calc_type == CALC_RECEIVABLES:
        return preview_receivables(company, period_end)
    if calc_type == CALC_ASSETS:
        return preview_assets(company, period_end, params.get("recoverables"))
    if calc_type == CALC_INVENTORY:
        return preview_inventory(company, period_end, params.get("nrv"))
    raise ValidationFailure(f"Unknown calculation type: {calc_type!r}")
