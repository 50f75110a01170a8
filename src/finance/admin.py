from django.contrib import admin

from finance.models import FinancialDocument


@admin.register(FinancialDocument)
class FinancialDocumentAdmin(admin.ModelAdmin):
    list_display = ("document_number", "type", "amount", "status", "issue_date", "due_date", "campaign")
    list_filter = ("type", "status")
    search_fields = ("document_number", "description")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "issue_date"
