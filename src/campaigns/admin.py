from django.contrib import admin

from campaigns.models import Campaign, CampaignProduct, InfluencerCampaignLink


class InfluencerCampaignLinkInline(admin.TabularInline):
    model = InfluencerCampaignLink
    extra = 0
    autocomplete_fields = ("influencer",)


class CampaignProductInline(admin.TabularInline):
    model = CampaignProduct
    extra = 0


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ("name", "store", "status", "type", "budget", "budget_spent", "start_date", "end_date")
    list_filter = ("status", "type", "store__firm")
    search_fields = ("name", "description", "store__name")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("store",)
    inlines = [InfluencerCampaignLinkInline, CampaignProductInline]
