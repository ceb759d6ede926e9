# impairment/tests/test_commands.py

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from accounting.models.account import Account
from users.models import Company


class EnsureImpairmentAccountsCommandTests(TestCase):
    def test_provisions_all_six_accounts_idempotently(self):
        company = Company.objects.create(name="Acme Trading Ltd", code="ACME")

        call_command("ensure_impairment_accounts", company="ACME", stdout=StringIO())
        call_command("ensure_impairment_accounts", company=str(company.pk), stdout=StringIO())

        codes = set(Account.objects.filter(company=company).values_list("code", flat=True))
        self.assertEqual(codes, {"6150", "1290", "6160", "1550", "5110", "1300"})

    def test_unknown_company_fails(self):
        with self.assertRaises(CommandError):
            call_command("ensure_impairment_accounts", company="nope", stdout=StringIO())
