# PATH: accounting/services/account_resolver.py

"""
PATH: accounting/services/account_resolver.py

ACCOUNT RESOLVER (AUTHORITATIVE)

This module answers ONE question:
"Which of this company's accounts should be used for this purpose?"

Charts differ between companies: one may keep bad debts under 6150,
another under 6400 named "Doubtful Debts". Resolution therefore runs in
three stages, all restricted to ACTIVE accounts of the requested type:

1) code allow-list   (first active account whose code is a candidate)
2) name heuristics   (first active account whose name contains a candidate,
                      case-insensitive)
3) provisioning      (create desired_code / desired_name)

Concurrency:
- Provisioning runs in a savepoint. If another request wins the
  (company, code) unique race, we re-read the winner instead of failing.
- If the desired code is already taken by an account that cannot be used
  (inactive or wrong type), resolution hard-fails rather than posting to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from django.db import IntegrityError, transaction

from accounting.models.account import Account
from accounting.services.exceptions import AccountResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRule:
    """
    Declarative description of one account a posting needs.

    candidate_codes / candidate_names are tried in order.
    """

    desired_code: str
    desired_name: str
    account_type: str
    normal_balance: Optional[str] = None
    candidate_codes: tuple[str, ...] = ()
    candidate_names: tuple[str, ...] = ()


def _norm(s: str) -> str:
    if s is None:
        return ""
    return " ".join(str(s).strip().lower().split())


# ------------------------------------------------------------
# LOOKUP STAGES
# ------------------------------------------------------------


def _active_of_type(company, account_type: str):
    return Account.objects.filter(
        company=company,
        account_type=account_type,
        is_active=True,
    ).order_by("code", "id")


def find_by_codes(company, account_type: str, codes: Iterable[str]) -> Optional[Account]:
    codes = [str(c).strip() for c in codes if c and str(c).strip()]
    if not codes:
        return None

    by_code = {a.code: a for a in _active_of_type(company, account_type).filter(code__in=codes)}
    for code in codes:
        if code in by_code:
            return by_code[code]
    return None


def find_by_names(company, account_type: str, names: Iterable[str]) -> Optional[Account]:
    needles = [_norm(n) for n in names if _norm(n)]
    if not needles:
        return None

    accounts = list(_active_of_type(company, account_type))
    for needle in needles:
        for account in accounts:
            if needle in _norm(account.name):
                return account
    return None


def find_account(
    company,
    *,
    account_type: str,
    candidate_codes: Iterable[str] = (),
    candidate_names: Iterable[str] = (),
) -> Optional[Account]:
    """Stages 1 + 2 only. Returns None when nothing matches."""
    return find_by_codes(company, account_type, candidate_codes) or find_by_names(
        company, account_type, candidate_names
    )


# ------------------------------------------------------------
# PROVISIONING
# ------------------------------------------------------------


def _usable(account: Account, account_type: str) -> bool:
    return account.is_active and account.account_type == account_type


def _create_account(
    company,
    *,
    code: str,
    name: str,
    account_type: str,
    normal_balance: Optional[str],
) -> Account:
    existing = Account.objects.filter(company=company, code=code).first()
    if existing is not None:
        if _usable(existing, account_type):
            return existing
        raise AccountResolutionError(
            f"Account code {code} already exists for company {company.pk} "
            f"but is inactive or not of type '{account_type}'."
        )

    try:
        with transaction.atomic():
            account = Account.objects.create(
                company=company,
                code=code,
                name=name,
                account_type=account_type,
                normal_balance=normal_balance,
                is_active=True,
            )
    except IntegrityError as exc:
        # Lost the (company, code) race: use whatever the winner created.
        winner = Account.objects.filter(company=company, code=code).first()
        if winner is not None and _usable(winner, account_type):
            return winner
        raise AccountResolutionError(
            f"Failed to provision account {code} ({name}) for company {company.pk}"
        ) from exc

    logger.info(
        "Provisioned account company=%s code=%s name=%s type=%s",
        company.pk,
        code,
        name,
        account_type,
    )
    return account


# ------------------------------------------------------------
# PUBLIC RESOLVERS
# ------------------------------------------------------------


def resolve_or_create(
    company,
    *,
    desired_code: str,
    desired_name: str,
    account_type: str,
    normal_balance: Optional[str] = None,
    candidate_codes: Iterable[str] = (),
    candidate_names: Iterable[str] = (),
) -> Account:
    if company is None:
        raise AccountResolutionError("company is required")

    desired_code = (desired_code or "").strip()
    desired_name = (desired_name or "").strip()
    if not desired_code or not desired_name:
        raise AccountResolutionError("desired_code and desired_name are required")

    if account_type not in {value for value, _label in Account.ACCOUNT_TYPES}:
        raise AccountResolutionError(f"Unknown account type: {account_type!r}")

    account = find_account(
        company,
        account_type=account_type,
        candidate_codes=candidate_codes,
        candidate_names=candidate_names,
    )
    if account is not None:
        return account

    return _create_account(
        company,
        code=desired_code,
        name=desired_name,
        account_type=account_type,
        normal_balance=normal_balance,
    )


def resolve_rule(company, rule: AccountRule) -> Account:
    return resolve_or_create(
        company,
        desired_code=rule.desired_code,
        desired_name=rule.desired_name,
        account_type=rule.account_type,
        normal_balance=rule.normal_balance,
        candidate_codes=rule.candidate_codes,
        candidate_names=rule.candidate_names,
    )
