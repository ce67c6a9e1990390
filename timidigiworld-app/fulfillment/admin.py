from django.contrib import admin
from .models import DownloadToken


@admin.register(DownloadToken)
class DownloadTokenAdmin(admin.ModelAdmin):
    list_display = ('id', 'masked_token', 'order', 'user', 'email', 'expires_at', 'used_at', 'created_at')
    list_filter = ('created_at', )
    search_fields = ('order__gateway_reference', 'user__username', 'email')
    readonly_fields = ('token', 'order', 'user', 'email', 'expires_at', 'used_at', 'created_at')
    list_per_page = 25
    date_hierarchy = 'created_at'
