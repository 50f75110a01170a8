from django.contrib import admin

from catalog.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "as_code", "category", "price", "stock", "created_at")
    list_filter = ("category",)
    search_fields = ("name", "sku", "as_code", "description")
    readonly_fields = ("id", "created_at", "updated_at")
    list_per_page = 50
