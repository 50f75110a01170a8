from django.contrib import admin

from shipments.models import CourierShipment


@admin.register(CourierShipment)
class CourierShipmentAdmin(admin.ModelAdmin):
    list_display = ("tracking_number", "courier_name", "status", "influencer", "campaign", "created_at")
    list_filter = ("status", "courier_name")
    search_fields = ("tracking_number", "courier_name", "influencer__name")
    readonly_fields = ("id", "status", "status_timeline", "created_at", "updated_at")
    list_select_related = ("influencer", "campaign")
