"""
Machine à états des commandes et livraison physique
Chaque changement de statut est un compare-and-set sur le statut courant
"""
import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from payments.exceptions import AccessDenied, InvalidTransition, StateConflict, ValidationError
from .models import Order, OrderNotification
from .utils import generate_tracking_number

logger = logging.getLogger(__name__)


class OrderStatusService:
    """Service pour faire avancer les commandes dans leur cycle de vie"""

    # Statuts modifiables à la main (staff ou vendeur), 'paid' reste réservé à la vérification
    MANUAL_STATUSES = (
        Order.PROCESSING, Order.SHIPPED, Order.DELIVERED, Order.COMPLETED, Order.CANCELLED,
    )

    NOTIFIED_STATUSES = (Order.SHIPPED, Order.DELIVERED, Order.CANCELLED)

    @staticmethod
    def transition(order: Order, new_status: str, **fields) -> Order:
        """
        Fait passer la commande au statut `new_status`

        Args:
            order: Commande dans l'état lu par l'appelant
            new_status: Statut cible
            fields: Champs supplémentaires à écrire dans la même mise à jour

        Returns:
            La commande mise à jour

        Raises:
            InvalidTransition: transition interdite depuis le statut courant
            StateConflict: la commande a changé de statut entre la lecture et l'écriture
        """
        if not order.can_transition_to(new_status):
            raise InvalidTransition(
                f"Impossible de passer la commande de « {order.status} » à « {new_status} »",
                order_id=order.id, status=order.status,
            )

        now = timezone.now()
        updates = {'status': new_status, 'updated_at': now}
        if new_status == Order.PAID:
            updates['paid_at'] = now
        elif new_status == Order.SHIPPED:
            updates['shipped_at'] = now
        elif new_status == Order.DELIVERED:
            updates['delivered_at'] = now
        updates.update(fields)

        with transaction.atomic():
            updated = Order.objects.filter(pk=order.pk, status=order.status).update(**updates)
            if not updated:
                logger.warning(f"Commande #{order.id} modifiée en concurrence, transition vers {new_status} ignorée")
                raise StateConflict(order_id=order.id)

            previous_status = order.status
            for field, value in updates.items():
                setattr(order, field, value)

            if new_status in OrderStatusService.NOTIFIED_STATUSES:
                OrderStatusService._notify_status_change(order)

        logger.info(f"Commande #{order.id} : {previous_status} -> {new_status}")
        return order

    @staticmethod
    def _notify_status_change(order: Order) -> OrderNotification:
        title = order.product.title
        if order.status == Order.SHIPPED:
            notification_title = "Order Shipped"
            tracking = f" with tracking number: {order.tracking_number}" if order.tracking_number else ""
            message = f'Your order "{title}" has been shipped{tracking}.'
        elif order.status == Order.DELIVERED:
            notification_title = "Order Delivered"
            message = f'Your order "{title}" has been delivered!'
        else:
            notification_title = "Order Cancelled"
            message = f'Your order "{title}" has been cancelled.'

        return OrderNotification.objects.create(
            order=order,
            user=order.buyer,
            notification_type=order.status,
            title=notification_title,
            message=message,
        )

    @staticmethod
    def start_physical_fulfillment(order: Order) -> Order:
        """
        Commande physique payée : numéro de suivi, statut 'processing' et notification acheteur
        """
        tracking_number = order.tracking_number or generate_tracking_number()
        order = OrderStatusService.transition(order, Order.PROCESSING, tracking_number=tracking_number)

        OrderNotification.objects.create(
            order=order,
            user=order.buyer,
            notification_type=OrderNotification.PAID,
            title="Payment Confirmed",
            message=f"Your order has been confirmed. Tracking number: {tracking_number}",
        )
        logger.info(f"Numéro de suivi {tracking_number} attribué à la commande #{order.id}")
        return order

    @staticmethod
    def update_status(order: Order, user, new_status: str, tracking_number: Optional[str] = None) -> Order:
        """
        Changement de statut demandé par le staff ou par le vendeur du produit
        """
        if not (user.is_staff or (order.product.seller_id and order.product.seller_id == user.id)):
            raise AccessDenied("Vous ne pouvez pas modifier cette commande")

        if new_status not in OrderStatusService.MANUAL_STATUSES:
            raise ValidationError(f"Statut invalide : {new_status}")

        fields = {}
        if tracking_number and new_status == Order.SHIPPED:
            fields['tracking_number'] = tracking_number

        return OrderStatusService.transition(order, new_status, **fields)
