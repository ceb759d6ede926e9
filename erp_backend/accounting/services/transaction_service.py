# accounting/services/transaction_service.py

"""
======================================================
PATH: accounting/services/transaction_service.py
======================================================
TRANSACTION SERVICE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create Transaction / TransactionEntry
- Create LedgerEntry
- Enforce debit == credit
- Enforce idempotency via reference_number (prevents double-posting)

Lifecycle inside one atomic block:
    pending header -> entries -> ledger rows -> posted

Callers that need period locks or other business guards apply them
before calling in, inside their own atomic block.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone

from accounting.models.ledger import LedgerEntry
from accounting.models.transaction import Transaction, TransactionEntry
from accounting.services.exceptions import (
    IdempotencyError,
    TransactionCreationError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
MIN_LINE_AMOUNT = Decimal("0.01")


def _money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise TransactionCreationError(f"Invalid money value: {value!r}") from exc

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _normalize_lines(company, lines: list) -> tuple[list[dict], Decimal]:
    total_debits = Decimal("0.00")
    total_credits = Decimal("0.00")
    normalized: list[dict] = []

    for line in lines:
        if not isinstance(line, dict):
            raise TransactionCreationError("Each line must be an object/dict")

        account = line.get("account")
        if account is None:
            raise TransactionCreationError("Line missing account")

        if account.company_id != company.pk:
            raise TransactionCreationError(
                f"Account {account.code} does not belong to company {company.pk}"
            )

        if not account.is_active:
            raise TransactionCreationError(f"Account {account.code} is inactive")

        debit = _money(line.get("debit"))
        credit = _money(line.get("credit"))

        if debit < 0 or credit < 0:
            raise TransactionCreationError("Debit or credit cannot be negative")

        if debit > 0 and credit > 0:
            raise TransactionCreationError("A line cannot have both debit and credit")

        if debit == 0 and credit == 0:
            raise TransactionCreationError("A line must have either debit or credit")

        if 0 < debit < MIN_LINE_AMOUNT or 0 < credit < MIN_LINE_AMOUNT:
            raise TransactionCreationError("Line amount too small")

        total_debits += debit
        total_credits += credit

        normalized.append(
            {
                "account": account,
                "debit": debit,
                "credit": credit,
                "description": (line.get("description") or "").strip(),
            }
        )

    if total_debits != total_credits:
        raise TransactionCreationError(
            f"Transaction not balanced: debits={total_debits} credits={total_credits}"
        )

    return normalized, total_debits


@transaction.atomic
def post_balanced_transaction(
    *,
    company,
    transaction_date: date,
    description: str,
    lines: list,
    transaction_type: str,
    reference_number: str | None = None,
    created_by=None,
) -> Transaction:
    """
    Create a fully posted, balanced transaction with mirrored ledger rows.

    Each line: {"account", "debit", "credit", "description"?}
    """
    if company is None:
        raise TransactionCreationError("company is required")

    if not lines or len(lines) < 2:
        raise TransactionCreationError("A transaction needs at least two lines")

    description = (description or "").strip()
    if not description:
        raise TransactionCreationError("Transaction description is required")

    reference_number = (reference_number or "").strip() or None

    normalized, total = _normalize_lines(company, lines)

    if (
        reference_number
        and Transaction.objects.filter(
            company=company, reference_number=reference_number
        ).exists()
    ):
        raise IdempotencyError(
            f"Transaction already exists for reference {reference_number}"
        )

    try:
        with transaction.atomic():
            txn = Transaction.objects.create(
                company=company,
                transaction_date=transaction_date,
                description=description,
                reference_number=reference_number,
                total_amount=total,
                transaction_type=transaction_type,
                status=Transaction.STATUS_PENDING,
                created_by=created_by,
            )
    except IntegrityError as exc:
        if (
            reference_number
            and Transaction.objects.filter(
                company=company, reference_number=reference_number
            ).exists()
        ):
            raise IdempotencyError(
                f"Transaction already exists for reference {reference_number}"
            ) from exc
        raise TransactionCreationError(f"Failed to create transaction: {exc}") from exc

    for line in normalized:
        TransactionEntry.objects.create(
            transaction=txn,
            account=line["account"],
            debit=line["debit"],
            credit=line["credit"],
            description=line["description"],
            status=TransactionEntry.STATUS_APPROVED,
        )
        LedgerEntry.objects.create(
            company=company,
            transaction=txn,
            account=line["account"],
            debit=line["debit"],
            credit=line["credit"],
            entry_date=transaction_date,
            description=line["description"] or description,
        )

    txn.status = Transaction.STATUS_POSTED
    txn.posted_at = timezone.now()
    txn.save(update_fields=["status", "posted_at"])

    logger.info(
        "Posted transaction id=%s company=%s ref=%s total=%s",
        txn.pk,
        company.pk,
        reference_number,
        total,
    )
    return txn
