# impairment/services/posting_engine.py

"""
======================================================
PATH: impairment/services/posting_engine.py
======================================================
IMPAIRMENT POSTING ENGINE

post() turns a preview into exactly one balanced ledger transaction:

    DR expense account        total
    CR contra / asset account total

Order of operations (ONE atomic block, company row locked):
1) idempotency guard   (already posted -> AlreadyPosted)
2) period lock guard   (locked -> PeriodLocked)
3) zero-impact no-op   (total <= 0 -> posted=False, nothing written)
4) account resolution  (both accounts, provisioned if missing)
5-7) transaction header + 2 entries + 2 ledger rows, flipped to posted
8) ImpairmentCalculation + ImpairmentPosting rows
9) result

Concurrency:
- Posts for one company serialize on the company row lock.
- The unique posted (company, calc_type, period_end) constraint is the
  final word: an IntegrityError there becomes AlreadyPosted and the whole
  block rolls back, so no half-posted transaction is ever visible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction

from accounting.services.account_resolver import resolve_rule
from accounting.services.exceptions import (
    AccountResolutionError,
    IdempotencyError,
    TransactionCreationError,
)
from accounting.services.transaction_service import post_balanced_transaction
from impairment.models.calculation import ImpairmentCalculation, ImpairmentPosting
from impairment.services.account_rules import (
    DESCRIPTIONS,
    POSTING_RULES,
    REFERENCE_PREFIXES,
)
from impairment.services.exceptions import (
    AccountResolutionFailure,
    AlreadyPosted,
    PeriodLocked,
    PostingFailure,
    ValidationFailure,
)
from impairment.services.period_lock import assert_period_unlocked
from impairment.services.previews import CALC_TYPES, Preview, preview_type_for
from users.models.company import Company

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PostingResult:
    posted: bool
    total: Decimal
    transaction_id: Optional[int] = None
    calculation_id: Optional[int] = None

    def to_dict(self) -> dict:
        data = {"posted": self.posted, "total": str(self.total)}
        if self.transaction_id is not None:
            data["transaction_id"] = str(self.transaction_id)
        if self.calculation_id is not None:
            data["calculation_id"] = self.calculation_id
        return data


def reference_for(calc_type: str, period_end: date) -> str:
    return f"{REFERENCE_PREFIXES[calc_type]}-{period_end.isoformat()}"


def is_posted(company, calc_type: str, period_end: date) -> bool:
    return ImpairmentCalculation.objects.filter(
        company=company,
        calc_type=calc_type,
        period_end=period_end,
        status=ImpairmentCalculation.STATUS_POSTED,
    ).exists()


def _already_posted(calc_type: str, period_end: date) -> AlreadyPosted:
    return AlreadyPosted(f"{calc_type} impairment already posted for {period_end}")


def _resolve_accounts(company, calc_type: str):
    debit_rule, credit_rule = POSTING_RULES[calc_type]
    try:
        return resolve_rule(company, debit_rule), resolve_rule(company, credit_rule)
    except AccountResolutionError as exc:
        raise AccountResolutionFailure(str(exc)) from exc


@transaction.atomic
def post(
    company,
    calc_type: str,
    period_end: date,
    preview: Preview,
    user=None,
    params: Optional[dict] = None,
) -> PostingResult:
    if calc_type not in CALC_TYPES:
        raise ValidationFailure(f"Unknown calculation type: {calc_type!r}")

    expected_type = preview_type_for(calc_type)
    if not isinstance(preview, expected_type) or preview.calc_type != calc_type:
        raise ValidationFailure(f"Preview does not match calculation type {calc_type}")

    # Serialize posts per company.
    Company.objects.select_for_update().get(pk=company.pk)

    if is_posted(company, calc_type, period_end):
        logger.info(
            "Impairment post rejected (already posted) company=%s type=%s period_end=%s",
            company.pk,
            calc_type,
            period_end,
        )
        raise _already_posted(calc_type, period_end)

    try:
        assert_period_unlocked(company, calc_type, period_end)
    except PeriodLocked:
        logger.info(
            "Impairment post rejected (period locked) company=%s type=%s period_end=%s",
            company.pk,
            calc_type,
            period_end,
        )
        raise

    total = preview.total
    if not total > ZERO:
        logger.info(
            "Impairment post skipped (zero impact) company=%s type=%s period_end=%s",
            company.pk,
            calc_type,
            period_end,
        )
        return PostingResult(posted=False, total=ZERO)

    debit_account, credit_account = _resolve_accounts(company, calc_type)

    description = f"{DESCRIPTIONS[calc_type]} for period ending {period_end.isoformat()}"

    try:
        txn = post_balanced_transaction(
            company=company,
            transaction_date=period_end,
            description=description,
            transaction_type=f"impairment_{calc_type}",
            reference_number=reference_for(calc_type, period_end),
            created_by=user,
            lines=[
                {"account": debit_account, "debit": total, "description": description},
                {"account": credit_account, "credit": total, "description": description},
            ],
        )
    except IdempotencyError as exc:
        raise _already_posted(calc_type, period_end) from exc
    except TransactionCreationError as exc:
        raise PostingFailure(str(exc)) from exc

    try:
        with transaction.atomic():
            calculation = ImpairmentCalculation.objects.create(
                company=company,
                calc_type=calc_type,
                period_end=period_end,
                params=params or {},
                result=preview.to_dict(),
                status=ImpairmentCalculation.STATUS_POSTED,
                created_by=user,
            )
    except IntegrityError as exc:
        raise _already_posted(calc_type, period_end) from exc

    ImpairmentPosting.objects.create(
        company=company,
        calculation=calculation,
        transaction=txn,
        posted_by=user,
    )

    logger.info(
        "Impairment posted company=%s type=%s period_end=%s total=%s transaction=%s",
        company.pk,
        calc_type,
        period_end,
        total,
        txn.pk,
    )
    return PostingResult(
        posted=True,
        total=total,
        transaction_id=txn.pk,
        calculation_id=calculation.pk,
    )
