# impairment/services/previews.py

"""
======================================================
PATH: impairment/services/previews.py
======================================================
TYPED PREVIEWS

One preview type per calculation:

    ReceivablesPreview | AssetsPreview | InventoryPreview

Each carries a calc_type tag, its items, its summary, and a `total`
accessor (the amount a posting would book). to_dict() renders a
JSON-safe snapshot: money and rates as strings, dates as ISO strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import Optional, Union

CALC_RECEIVABLES = "receivables"
CALC_ASSETS = "assets"
CALC_INVENTORY = "inventory"

CALC_TYPES = (CALC_RECEIVABLES, CALC_ASSETS, CALC_INVENTORY)

BUCKET_0_30 = "0_30"
BUCKET_31_60 = "31_60"
BUCKET_61_90 = "61_90"
BUCKET_90_PLUS = "90_plus"

BUCKETS = (BUCKET_0_30, BUCKET_31_60, BUCKET_61_90, BUCKET_90_PLUS)


def _jsonable(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _jsonable(getattr(value, f.name)) for f in fields(value)}
    return value


# ------------------------------------------------------------
# RECEIVABLES
# ------------------------------------------------------------


@dataclass(frozen=True)
class ReceivableItem:
    invoice_id: str
    invoice_number: str
    aging_date: date
    outstanding: Decimal
    days_overdue: int
    bucket: str
    rate: Decimal
    expected_loss: Decimal


@dataclass(frozen=True)
class ReceivablesSummary:
    total_outstanding: Decimal
    total_expected_loss: Decimal
    sum_0_30: Decimal
    sum_31_60: Decimal
    sum_61_90: Decimal
    sum_90_plus: Decimal


@dataclass(frozen=True)
class ReceivablesPreview:
    period_end: date
    rates: dict
    items: list[ReceivableItem]
    summary: ReceivablesSummary
    calc_type: str = field(default=CALC_RECEIVABLES, init=False)

    @property
    def total(self) -> Decimal:
        return self.summary.total_expected_loss

    def to_dict(self) -> dict:
        return _jsonable(self)


# ------------------------------------------------------------
# FIXED ASSETS
# ------------------------------------------------------------


@dataclass(frozen=True)
class AssetItem:
    asset_id: str
    description: str
    carrying_amount: Decimal
    recoverable_amount: Decimal
    impairment_loss: Decimal


@dataclass(frozen=True)
class AssetsSummary:
    total_impairment: Decimal
    count: int


@dataclass(frozen=True)
class AssetsPreview:
    period_end: date
    items: list[AssetItem]
    summary: AssetsSummary
    calc_type: str = field(default=CALC_ASSETS, init=False)

    @property
    def total(self) -> Decimal:
        return self.summary.total_impairment

    def to_dict(self) -> dict:
        return _jsonable(self)


# ------------------------------------------------------------
# INVENTORY
# ------------------------------------------------------------


@dataclass(frozen=True)
class InventoryItem:
    item_id: str
    name: str
    sku: str
    quantity: Decimal
    cost_price: Decimal
    carrying_amount: Decimal
    nrv_per_unit: Decimal
    nrv_total: Decimal
    write_down: Decimal


@dataclass(frozen=True)
class InventorySummary:
    total_write_down: Decimal
    count: int


@dataclass(frozen=True)
class InventoryPreview:
    period_end: date
    items: list[InventoryItem]
    summary: InventorySummary
    calc_type: str = field(default=CALC_INVENTORY, init=False)

    @property
    def total(self) -> Decimal:
        return self.summary.total_write_down

    def to_dict(self) -> dict:
        return _jsonable(self)


Preview = Union[ReceivablesPreview, AssetsPreview, InventoryPreview]


def preview_type_for(calc_type: str) -> Optional[type]:
    return {
        CALC_RECEIVABLES: ReceivablesPreview,
        CALC_ASSETS: AssetsPreview,
        CALC_INVENTORY: InventoryPreview,
    }.get(calc_type)
