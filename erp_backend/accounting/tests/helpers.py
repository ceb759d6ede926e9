# accounting/tests/helpers.py

from __future__ import annotations

from accounting.models.account import Account
from users.models.company import Company


def make_company(name: str = "Acme Trading Ltd", code: str | None = None) -> Company:
    return Company.objects.create(name=name, code=code)


def make_account(company, code: str, name: str, account_type: str, **extra) -> Account:
    return Account.objects.create(
        company=company,
        code=code,
        name=name,
        account_type=account_type,
        **extra,
    )
