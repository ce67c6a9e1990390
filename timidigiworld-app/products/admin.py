from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'owner_type', 'seller', 'price', 'product_type', 'is_active', 'date')
    list_filter = ('owner_type', 'product_type', 'is_active')
    list_display_links = ('id', 'title')
    list_editable = ('is_active',)
    search_fields = ('title', 'seller__username')
    readonly_fields = ('date', 'date_update')
    list_per_page = 20
    fieldsets = (
        ('Produit', {
            'fields': ('title', 'description', 'price', 'product_type', 'file', 'is_active')
        }),
        ('Propriétaire', {
            'fields': ('owner_type', 'seller')
        }),
        ('Dates', {
            'fields': ('date', 'date_update')
        }),
    )
