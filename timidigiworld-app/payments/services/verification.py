"""
Vérification d'un paiement Paystack et déclenchement de la livraison et du règlement
"""
import logging
from typing import Dict

from fulfillment.services import DigitalFulfillmentService
from orders.models import Order
from orders.services import OrderStatusService
from ..exceptions import (
    AlreadyProcessed, GatewayError, MarketplaceError, OrderNotFound, PaymentNotConfirmed, StateConflict,
    ValidationError,
)
from .paystack import paystack_service
from .settlement import SettlementService

logger = logging.getLogger(__name__)


class PaymentVerificationService:
    """Service pour confirmer un paiement à partir de sa référence"""

    @staticmethod
    def verify_payment(reference: str) -> Dict:
        """
        Confirme le paiement, livre la commande puis règle le vendeur

        Seul l'appel qui fait passer la commande de 'pending' à 'paid' livre :
        les appels suivants pour la même référence lèvent AlreadyProcessed.

        Raises:
            ValidationError: référence absente
            OrderNotFound: aucune commande pour cette référence
            AlreadyProcessed: commande déjà traitée
            GatewayError: Paystack injoignable
            PaymentNotConfirmed: Paystack ne confirme pas le paiement
        """
        reference = (reference or '').strip()
        if not reference:
            raise ValidationError("Référence de paiement manquante")

        order = Order.objects.select_related('product', 'product__seller', 'buyer').filter(
            gateway_reference=reference).first()
        if order is None:
            logger.warning(f"Vérification d'une référence inconnue : {reference}")
            raise OrderNotFound(reference=reference)

        if order.status != Order.PENDING:
            raise AlreadyProcessed(order_id=order.id, status=order.status)

        success, data = paystack_service.verify_transaction(reference)
        if not success:
            logger.error(f"Vérification Paystack impossible pour {reference}: {data.get('error')}")
            raise GatewayError()

        if data.get('status') != 'success':
            logger.info(f"Paiement non confirmé pour {reference} (statut Paystack : {data.get('status')})")
            raise PaymentNotConfirmed(order_id=order.id)

        if data.get('amount') is not None and int(data['amount']) != order.gateway_amount:
            logger.error(
                f"Montant Paystack {data['amount']} différent du montant attendu "
                f"{order.gateway_amount} pour la commande {order.id}"
            )
            raise PaymentNotConfirmed("Le montant payé ne correspond pas à la commande", order_id=order.id)

        try:
            order = OrderStatusService.transition(order, Order.PAID)
        except StateConflict:
            raise AlreadyProcessed(order_id=order.id)

        logger.info(f"Paiement confirmé pour la commande {order.id} ({reference})")
        result = {
            'order_id': order.id,
            'reference': reference,
            'product_type': order.product.product_type,
        }

        try:
            if order.product.is_digital:
                order = DigitalFulfillmentService.fulfill(order)
            else:
                order = OrderStatusService.start_physical_fulfillment(order)
        except MarketplaceError as e:
            logger.error(f"Livraison incomplète pour la commande {order.id}: {e.message}")
            result['fulfillment_error'] = e.message

        try:
            split = SettlementService.process_order(order)
            result['seller_paid'] = split.seller_paid
        except Exception as e:
            logger.exception(f"Erreur lors du règlement de la commande {order.id}: {str(e)}")
            result['seller_paid'] = False

        result.update({
            'status': order.status,
            'tracking_number': order.tracking_number,
            'email_sent': order.email_sent,
        })
        return result
