"""
Initialisation d'un paiement : commande 'pending' + transaction Paystack
"""
import logging
from typing import Dict, Optional

from django.conf import settings

from accounts.services import PayoutProfileService, resolve_contact_email
from currencies.services import get_exchange_rate
from orders.models import Order
from orders.utils import generate_reference
from products.models import Product
from ..commission import CommissionCalculator, to_minor_units
from ..exceptions import GatewayInitError, ProductNotFound, ValidationError
from .paystack import paystack_service

logger = logging.getLogger(__name__)


class PaymentInitiationService:
    """Service pour démarrer un achat"""

    @staticmethod
    def initiate_payment(
        product_id,
        buyer=None,
        delivery_email: Optional[str] = None,
        payment_method: str = 'card',
        currency: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> Dict:
        """
        Crée une commande en attente et retourne l'URL de paiement Paystack

        Le montant facturé est toujours le prix du produit en base.
        Chaque appel crée une nouvelle commande.

        Args:
            product_id: Produit acheté
            buyer: Utilisateur connecté, None pour un invité
            delivery_email: Email de livraison (obligatoire pour un invité)
            payment_method: Méthode choisie par l'acheteur
            currency: Devise de paiement (devise Paystack par défaut)
            callback_url: URL de retour après paiement

        Returns:
            Dictionnaire authorization_url / reference / order_id

        Raises:
            ProductNotFound, ValidationError, GatewayInitError
        """
        product = Product.objects.select_related('seller').filter(pk=product_id, is_active=True).first()
        if product is None:
            raise ProductNotFound(product_id=product_id)

        email = resolve_contact_email(buyer, delivery_email)
        if not email:
            raise ValidationError("Un email de livraison est obligatoire pour un achat sans compte")

        currency = (currency or getattr(settings, 'PAYSTACK_DEFAULT_CURRENCY', 'NGN')).upper()
        exchange_rate = get_exchange_rate(currency)
        split = CommissionCalculator.calculate_for_product(product)
        gateway_amount = to_minor_units(product.price, exchange_rate)

        # Partage direct si le vendeur possède un sous-compte Paystack
        subaccount = None
        transaction_charge = None
        if not product.is_platform_owned:
            bank_account = PayoutProfileService.get_for_seller(product.seller)
            if bank_account and bank_account.subaccount_code:
                subaccount = bank_account.subaccount_code
                transaction_charge = to_minor_units(split['commission_amount'], exchange_rate)

        reference = generate_reference()
        order = Order.objects.create(
            product=product,
            buyer=buyer,
            amount=product.price,
            currency=currency,
            exchange_rate=exchange_rate,
            gateway_amount=gateway_amount,
            payment_method=payment_method,
            payment_gateway=Order.PAYSTACK,
            gateway_reference=reference,
            gateway_subaccount=subaccount,
            delivery_email=delivery_email or None,
            commission_rate=split['commission_rate'],
            commission_amount=split['commission_amount'],
            seller_amount=split['seller_amount'],
            status=Order.PENDING,
        )

        if not callback_url:
            site_url = getattr(settings, 'MARKETPLACE_SITE_URL', '').rstrip('/')
            callback_url = f"{site_url}/payment-success?reference={reference}"

        metadata = {
            'order_id': order.id,
            'product_id': product.id,
            'user_id': buyer.id if buyer else None,
            'is_platform_product': product.is_platform_owned,
            'commission_amount': str(split['commission_amount']),
            'seller_amount': str(split['seller_amount']),
        }

        success, response = paystack_service.initialize_transaction(
            email=email,
            amount=gateway_amount,
            reference=reference,
            currency=currency,
            callback_url=callback_url,
            metadata=metadata,
            subaccount=subaccount,
            transaction_charge=transaction_charge,
        )

        if not success:
            logger.error(f"Erreur Paystack initialize pour la commande {order.id}: {response.get('error')}")
            raise GatewayInitError(order_id=order.id)

        logger.info(
            f"Paiement initialisé : commande {order.id}, référence {reference}, "
            f"{gateway_amount} {currency} (taux {exchange_rate})"
        )
        return {
            'authorization_url': response['authorization_url'],
            'reference': reference,
            'order_id': order.id,
        }
