# impairment/admin.py

from django.contrib import admin

from impairment.models import (
    ImpairmentCalculation,
    ImpairmentPosting,
    ImpairmentSettings,
    PeriodLock,
)


class ReadOnlyAdminMixin:
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ImpairmentSettings)
class ImpairmentSettingsAdmin(admin.ModelAdmin):
    list_display = (
        "company",
        "ecl_rate_0_30",
        "ecl_rate_31_60",
        "ecl_rate_61_90",
        "ecl_rate_90_plus",
        "updated_at",
    )
    readonly_fields = ("created_at", "updated_at")


@admin.register(PeriodLock)
class PeriodLockAdmin(admin.ModelAdmin):
    list_display = ("company", "module", "period_end", "locked", "updated_at")
    list_filter = ("module", "locked", "company")
    ordering = ("-period_end",)


@admin.register(ImpairmentCalculation)
class ImpairmentCalculationAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "calc_type", "period_end", "status", "created_by", "created_at")
    list_filter = ("calc_type", "status", "company")
    ordering = ("-period_end",)


@admin.register(ImpairmentPosting)
class ImpairmentPostingAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "calculation", "transaction", "posted_by", "posted_at")
    list_filter = ("company",)
    ordering = ("-posted_at",)
