# products/admin.py

from django.contrib import admin

from products.models.item import Item


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "sku",
        "company",
        "item_type",
        "quantity_on_hand",
        "cost_price",
        "selling_price",
        "is_active",
    )
    search_fields = ("name", "sku")
    list_filter = ("item_type", "is_active", "company")
    readonly_fields = ("created_at", "updated_at")
