import logging

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from accounts.decorators import api_login_required
from payments.exceptions import MarketplaceError, NotFoundError
from payments.responses import error_response, parse_json_body, server_error_response
from .models import Order, OrderNotification
from .services import OrderStatusService

logger = logging.getLogger(__name__)


@api_login_required
@require_http_methods(["POST"])
def update_order_status(request, order_id):
    """
    Change le statut d'une commande (staff ou vendeur du produit)
    """
    try:
        order = Order.objects.select_related('product').filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Commande introuvable")

        data = parse_json_body(request)
        order = OrderStatusService.update_status(
            order,
            request.user,
            (data.get('status') or '').strip(),
            tracking_number=(data.get('tracking_number') or '').strip() or None,
        )
        return JsonResponse({
            'success': True,
            'order': {
                'id': order.id,
                'status': order.status,
                'tracking_number': order.tracking_number,
                'shipped_at': order.shipped_at.isoformat() if order.shipped_at else None,
                'delivered_at': order.delivered_at.isoformat() if order.delivered_at else None,
            },
        })

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans update_order_status: {str(e)}")
        return server_error_response()


@api_login_required
@require_http_methods(["GET"])
def notifications(request):
    """
    Notifications de l'utilisateur, non lues en premier
    """
    queryset = OrderNotification.objects.filter(user=request.user).order_by('is_read', '-created_at')[:50]
    notifications_data = []
    for notification in queryset:
        notifications_data.append({
            'id': notification.id,
            'order_id': notification.order_id,
            'type': notification.notification_type,
            'title': notification.title,
            'message': notification.message,
            'is_read': notification.is_read,
            'created_at': notification.created_at.isoformat(),
        })

    return JsonResponse({
        'success': True,
        'notifications': notifications_data,
        'total_unread': OrderNotification.objects.filter(user=request.user, is_read=False).count(),
        'timestamp': timezone.now().isoformat(),
    })


@api_login_required
@require_http_methods(["POST"])
def mark_notification_read(request, notification_id):
    updated = OrderNotification.objects.filter(pk=notification_id, user=request.user).update(is_read=True)
    if not updated:
        return error_response(NotFoundError("Notification introuvable"))
    return JsonResponse({'success': True})
