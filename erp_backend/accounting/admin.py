# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.models.transaction import Transaction, TransactionEntry


class ReadOnlyAdminMixin:
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "account_type",
        "normal_balance",
        "company",
        "is_active",
    )
    list_filter = ("account_type", "is_active", "company")
    search_fields = ("code", "name")
    ordering = ("company", "code")
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("company", "code", "name", "account_type", "normal_balance"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active",),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# TRANSACTION (READ-ONLY)
# ============================================================


class TransactionEntryInline(admin.TabularInline):
    model = TransactionEntry
    extra = 0
    can_delete = False
    readonly_fields = ("account", "debit", "credit", "description", "status")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "company",
        "transaction_date",
        "reference_number",
        "transaction_type",
        "total_amount",
        "status",
    )
    list_filter = ("status", "transaction_type", "transaction_date")
    search_fields = ("description", "reference_number")
    ordering = ("-transaction_date",)
    inlines = [TransactionEntryInline]


# ============================================================
# LEDGER ENTRY (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "entry_date",
        "transaction",
        "account",
        "debit",
        "credit",
    )
    list_filter = ("account__account_type",)
    search_fields = ("transaction__reference_number", "account__code")
    ordering = ("entry_date", "id")
