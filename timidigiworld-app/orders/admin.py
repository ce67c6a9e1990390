from django.contrib import admin, messages

from payments.exceptions import StateConflict
from .models import Order, OrderNotification
from .services import OrderStatusService


class Inline_OrderNotification(admin.TabularInline):
    model = OrderNotification
    extra = 0
    readonly_fields = ('user', 'notification_type', 'title', 'message', 'is_read', 'created_at')
    can_delete = False


def _transition_action(new_status, description):
    def action(modeladmin, request, queryset):
        done = 0
        for order in queryset.select_related('product'):
            try:
                OrderStatusService.transition(order, new_status)
                done += 1
            except StateConflict as e:
                modeladmin.message_user(request, f"Commande #{order.id} : {e.message}", level=messages.WARNING)
        if done:
            modeladmin.message_user(request, f"{done} commande(s) passée(s) au statut « {new_status} »")
    action.__name__ = f"mark_{new_status}"
    action.short_description = description
    return action


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    inlines = [Inline_OrderNotification]
    list_display = ('id', 'gateway_reference', 'product', 'buyer', 'amount', 'currency',
                    'commission_amount', 'seller_amount', 'status', 'email_sent', 'created_at')
    list_filter = ('status', 'payment_gateway', 'email_sent', 'currency')
    list_display_links = ("id", "gateway_reference", )
    list_per_page = 10
    search_fields = ('gateway_reference', 'tracking_number', 'buyer__username', 'delivery_email')
    # Le statut ne change que via la machine à états (actions ci-dessous)
    readonly_fields = (
        'status', 'gateway_reference', 'gateway_amount', 'exchange_rate', 'commission_rate',
        'commission_amount', 'seller_amount', 'paid_at', 'shipped_at', 'delivered_at',
        'email_sent', 'created_at', 'updated_at'
    )
    actions = [
        _transition_action(Order.SHIPPED, "Marquer comme expédiée"),
        _transition_action(Order.DELIVERED, "Marquer comme livrée"),
        _transition_action(Order.CANCELLED, "Annuler la commande"),
    ]


@admin.register(OrderNotification)
class OrderNotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'order', 'user', 'notification_type', 'title', 'is_read', 'created_at')
    list_filter = ('notification_type', 'is_read')
    search_fields = ('title', 'user__username')
    list_per_page = 25
