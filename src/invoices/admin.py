from django.contrib import admin

from invoices.models import InvoiceImage


@admin.register(InvoiceImage)
class InvoiceImageAdmin(admin.ModelAdmin):
    list_display = ("original_name", "status", "extracted_total", "campaign", "product", "created_at")
    list_filter = ("status",)
    search_fields = ("original_name", "image")
    readonly_fields = ("id", "status", "status_timeline", "ocr_data", "created_at", "updated_at")
