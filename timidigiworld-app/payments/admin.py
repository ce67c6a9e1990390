from django.contrib import admin
from .models import PlatformSettings, PaymentSplit, PaystackWebhookLog


@admin.register(PlatformSettings)
class PlatformSettingsAdmin(admin.ModelAdmin):
    list_display = ('id', 'commission_rate', 'is_active', 'updated_at')
    list_editable = ('commission_rate', 'is_active')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(PaymentSplit)
class PaymentSplitAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'order', 'product', 'total_amount', 'platform_amount', 'seller_amount',
        'platform_paid', 'seller_paid', 'payout_attempts', 'created_at'
    )
    list_filter = ('platform_paid', 'seller_paid', 'payment_gateway', 'created_at')
    search_fields = (
        'order__gateway_reference', 'seller_reference', 'transfer_reference',
        'product__title', 'product__seller__username'
    )
    readonly_fields = (
        'order', 'buyer', 'product', 'total_amount', 'platform_amount', 'seller_amount',
        'platform_reference', 'seller_reference', 'payout_attempts', 'payout_error',
        'transfer_reference', 'transfer_status',
        'seller_paid_at', 'created_at', 'updated_at'
    )
    fieldsets = (
        ('Commande', {
            'fields': ('order', 'buyer', 'product', 'payment_gateway')
        }),
        ('Répartition', {
            'fields': ('total_amount', 'platform_amount', 'seller_amount')
        }),
        ('Plateforme', {
            'fields': ('platform_paid', 'platform_reference')
        }),
        ('Vendeur', {
            'fields': ('seller_paid', 'seller_reference', 'seller_paid_at', 'payout_attempts', 'payout_error',
                       'transfer_reference', 'transfer_status')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at')
        }),
    )
    list_per_page = 25
    date_hierarchy = 'created_at'


@admin.register(PaystackWebhookLog)
class PaystackWebhookLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'event', 'reference', 'order', 'is_valid', 'processed', 'created_at')
    list_filter = ('event', 'is_valid', 'processed', 'created_at')
    search_fields = ('reference', 'error_message')
    readonly_fields = ('order', 'event', 'reference', 'payload', 'signature', 'is_valid', 'created_at')
    fieldsets = (
        ('Webhook', {
            'fields': ('event', 'reference', 'order', 'payload', 'signature')
        }),
        ('Statut', {
            'fields': ('is_valid', 'processed', 'error_message')
        }),
        ('Date', {
            'fields': ('created_at',)
        }),
    )
    list_per_page = 25
