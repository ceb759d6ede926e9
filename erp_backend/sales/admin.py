# sales/admin.py

from django.contrib import admin

from sales.models.invoice import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "company",
        "customer_name",
        "invoice_date",
        "due_date",
        "total_amount",
        "amount_paid",
        "status",
    )
    search_fields = ("invoice_number", "customer_name")
    list_filter = ("status", "company")
    readonly_fields = ("created_at", "updated_at")
