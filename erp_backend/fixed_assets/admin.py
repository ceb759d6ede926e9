# fixed_assets/admin.py

from django.contrib import admin

from fixed_assets.models.asset import FixedAsset


@admin.register(FixedAsset)
class FixedAssetAdmin(admin.ModelAdmin):
    list_display = (
        "description",
        "company",
        "purchase_date",
        "cost",
        "accumulated_depreciation",
        "status",
    )
    search_fields = ("description",)
    list_filter = ("status", "company")
    readonly_fields = ("created_at", "updated_at")
