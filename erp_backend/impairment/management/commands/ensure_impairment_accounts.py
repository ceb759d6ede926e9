# impairment/management/commands/ensure_impairment_accounts.py

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounting.services.account_resolver import resolve_rule
from accounting.services.exceptions import AccountResolutionError
from impairment.services.account_rules import POSTING_RULES
from users.models.company import Company


class Command(BaseCommand):
    help = "Resolve (or provision) the ledger accounts impairment postings use for one company"

    def add_arguments(self, parser):
        parser.add_argument("--company", required=True, help="Company id or code")

    @transaction.atomic
    def handle(self, *args, **options):
        company = self._get_company(options["company"])

        self.stdout.write(f"Ensuring impairment accounts for {company.name}...")

        for calc_type, rules in POSTING_RULES.items():
            for rule in rules:
                try:
                    account = resolve_rule(company, rule)
                except AccountResolutionError as exc:
                    raise CommandError(str(exc)) from exc

                self.stdout.write(f"  {calc_type:<12} {account.code} {account.name}")

        self.stdout.write(self.style.SUCCESS("Impairment accounts ready."))

    def _get_company(self, value: str) -> Company:
        value = (value or "").strip()
        company = Company.objects.filter(code=value).first()
        if company is None:
            try:
                company = Company.objects.filter(pk=value).first()
            except ValidationError as exc:
                raise CommandError(f"Company not found: {value}") from exc
        if company is None:
            raise CommandError(f"Company not found: {value}")
        return company
