from django.contrib import admin

from influencers.models import Influencer


@admin.register(Influencer)
class InfluencerAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "platform", "followers", "status", "created_at")
    list_filter = ("status", "platform")
    search_fields = ("name", "email", "phone")
    readonly_fields = ("id", "created_at", "updated_at")
