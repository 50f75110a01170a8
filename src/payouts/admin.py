from django.contrib import admin

from payouts.models import DocumentLink, Payout


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("type", "amount", "currency", "status", "influencer", "campaign", "requested_at")
    list_filter = ("status", "type", "currency")
    search_fields = ("invoice_id", "po_id", "influencer__name", "campaign__name")
    readonly_fields = (
        "id", "status_history", "requested_at", "approved_at", "processed_at",
        "paid_at", "failed_at", "created_at", "updated_at",
    )


@admin.register(DocumentLink)
class DocumentLinkAdmin(admin.ModelAdmin):
    list_display = ("primary_document_type", "primary_document_id", "linked_document_type", "linked_document_id", "relationship")
    list_filter = ("primary_document_type", "linked_document_type")
    search_fields = ("primary_document_id", "linked_document_id", "relationship")
