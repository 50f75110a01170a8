"""Django admin configuration for the stores app."""
from django.contrib import admin

from stores.models import AuditLog, Firm, Store


@admin.register(Firm)
class FirmAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "phone", "city", "is_active", "created_at")
    list_filter = ("is_active", "city")
    search_fields = ("name", "email", "phone")
    readonly_fields = ("id", "created_at", "updated_at")
    list_per_page = 50


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("name", "firm", "city", "country", "is_active", "created_at")
    list_filter = ("is_active", "firm", "country")
    search_fields = ("name", "firm__name", "email", "phone", "address")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("firm",)
    list_per_page = 50


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "entity_type", "entity_id", "actor", "firm")
    list_filter = ("action", "entity_type")
    search_fields = ("entity_id", "actor__email")
    readonly_fields = [f.name for f in AuditLog._meta.fields]
