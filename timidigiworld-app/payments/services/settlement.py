"""
Service de règlement : répartition plateforme / vendeur et versement au vendeur
Un échec de versement n'annule jamais la part de la plateforme, il est retenté plus tard
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from accounts.models import BankAccount
from accounts.services import PayoutProfileService
from orders.models import Order, OrderNotification
from ..commission import calculate_commission, to_minor_units
from ..exceptions import OrderNotFound, PayoutDeferred, StateConflict
from ..models import PaymentSplit
from .paystack import paystack_service

logger = logging.getLogger(__name__)


class SettlementService:
    """Service pour enregistrer la répartition et payer les vendeurs"""

    SETTLEABLE_STATUSES = (
        Order.PAID, Order.PROCESSING, Order.SHIPPED, Order.DELIVERED, Order.COMPLETED,
    )
    # Statuts Paystack pour lesquels aucun argent ne partira : un nouveau virement est permis
    FAILED_TRANSFER_STATUSES = ('failed', 'reversed', 'abandoned', 'rejected', 'blocked')

    @staticmethod
    def process_order(order) -> PaymentSplit:
        """
        Enregistre (ou met à jour) la répartition d'une commande payée et tente le versement vendeur

        Args:
            order: Commande ou identifiant de commande

        Returns:
            La répartition, seller_paid indique si le vendeur a été payé

        Raises:
            OrderNotFound: commande inexistante
            StateConflict: commande non payée
        """
        if not isinstance(order, Order):
            order = Order.objects.select_related('product', 'product__seller').filter(pk=order).first()
            if order is None:
                raise OrderNotFound("Commande introuvable")

        if order.status not in SettlementService.SETTLEABLE_STATUSES:
            raise StateConflict(f"La commande #{order.id} n'est pas payée (statut : {order.status})")

        product = order.product
        expected = calculate_commission(order.amount, product.is_platform_owned, order.commission_rate)
        if (expected['commission_amount'] != order.commission_amount
                or expected['seller_amount'] != order.seller_amount):
            logger.error(
                f"Écart de commission sur la commande {order.id} : enregistré "
                f"{order.commission_amount}/{order.seller_amount}, recalculé "
                f"{expected['commission_amount']}/{expected['seller_amount']}"
            )

        with transaction.atomic():
            split, created = PaymentSplit.objects.select_for_update().get_or_create(
                order=order,
                defaults={
                    'buyer': order.buyer,
                    'product': product,
                    'total_amount': order.amount,
                    'platform_amount': expected['commission_amount'],
                    'seller_amount': expected['seller_amount'],
                    'payment_gateway': order.payment_gateway,
                },
            )

            if split.seller_paid:
                logger.info(f"Répartition de la commande {order.id} déjà réglée")
                return split

            # La plateforme reçoit les fonds directement de Paystack
            split.platform_paid = True
            split.platform_reference = order.gateway_reference

            if product.is_platform_owned:
                split.seller_paid = True
                split.seller_reference = 'PLATFORM_OWNED'
                split.seller_paid_at = timezone.now()
                split.save()
                return split

            if order.gateway_subaccount:
                # Paystack a déjà partagé le paiement avec le sous-compte du vendeur
                split.seller_paid = True
                split.seller_reference = f"PAYSTACK_SPLIT_{order.id}"
                split.seller_paid_at = timezone.now()
                split.payout_error = None
                split.save()
                SettlementService._notify_seller_paid(order, split)
                return split

            if split.transfer_reference:
                # Un virement a déjà été créé : on suit son statut, jamais de second virement en parallèle
                status = SettlementService._refresh_transfer_status(split)
                if status == 'success':
                    SettlementService._mark_seller_paid(order, split, split.transfer_reference)
                    return split
                if status not in SettlementService.FAILED_TRANSFER_STATUSES:
                    split.payout_error = SettlementService._pending_transfer_message(split)
                    split.save()
                    return split
                logger.warning(f"Virement {split.transfer_reference} en échec ({status}), nouveau virement pour la commande {order.id}")
                split.transfer_reference = None
                split.transfer_status = None

            bank_account = PayoutProfileService.get_for_seller(product.seller)
            if bank_account is None or not bank_account.is_complete():
                split.seller_paid = False
                split.payout_error = "Coordonnées bancaires du vendeur manquantes"
                split.save()
                if created:
                    SettlementService._notify_seller_missing_details(order, split)
                logger.warning(f"Versement différé pour la commande {order.id} : coordonnées bancaires manquantes")
                return split

            split.payout_attempts += 1
            try:
                transfer = SettlementService._pay_seller(order, split, bank_account)
            except PayoutDeferred as e:
                split.seller_paid = False
                split.payout_error = e.message
                split.save()
                logger.warning(f"Versement différé pour la commande {order.id} : {e.message}")
                return split

            split.transfer_reference = transfer['reference']
            split.transfer_status = transfer['status']
            if transfer['status'] != 'success':
                split.seller_paid = False
                split.payout_error = SettlementService._pending_transfer_message(split)
                split.save()
                logger.warning(f"Versement en attente pour la commande {order.id} : {split.payout_error}")
                return split

            SettlementService._mark_seller_paid(order, split, transfer['reference'])

        return split

    @staticmethod
    def _pay_seller(order: Order, split: PaymentSplit, bank_account: BankAccount) -> Dict:
        """
        Versement en trois étapes : vérification du compte, destinataire, virement

        Returns:
            Dictionnaire reference / status / transfer_code du virement créé

        Raises:
            PayoutDeferred: une des étapes a échoué, aucun virement n'est en cours
        """
        success, response = paystack_service.resolve_account(bank_account.account_number, bank_account.bank_code)
        if not success:
            raise PayoutDeferred(f"Compte bancaire invalide : {response.get('error')}")
        if response['account_name'] != bank_account.account_name:
            # Le nom retourné par la banque fait foi
            bank_account.account_name = response['account_name']
            bank_account.recipient_code = None
            bank_account.save(update_fields=['account_name', 'recipient_code', 'date_update'])

        recipient_code = bank_account.recipient_code
        if not recipient_code:
            success, response = paystack_service.create_transfer_recipient(
                name=bank_account.account_name,
                account_number=bank_account.account_number,
                bank_code=bank_account.bank_code,
                currency=getattr(settings, 'PAYSTACK_DEFAULT_CURRENCY', 'NGN'),
            )
            if not success:
                raise PayoutDeferred(f"Création du destinataire impossible : {response.get('error')}")
            recipient_code = response['recipient_code']
            bank_account.recipient_code = recipient_code
            bank_account.save(update_fields=['recipient_code', 'date_update'])

        # Paystack refuse une référence déjà utilisée : chaque nouveau virement a la sienne
        reference = f"SELLER_{split.id}" if split.payout_attempts <= 1 else f"SELLER_{split.id}_{split.payout_attempts}"
        success, response = paystack_service.initiate_transfer(
            amount=to_minor_units(split.seller_amount, order.exchange_rate),
            recipient_code=recipient_code,
            reference=reference,
            reason=f"Payment for order {order.id}",
        )
        if not success:
            raise PayoutDeferred(f"Virement refusé : {response.get('error')}")
        return {
            'reference': response.get('reference') or reference,
            'status': response.get('status'),
            'transfer_code': response.get('transfer_code'),
        }

    @staticmethod
    def _refresh_transfer_status(split: PaymentSplit) -> str:
        """Interroge Paystack ; sans réponse, le dernier statut connu est conservé"""
        success, response = paystack_service.verify_transfer(split.transfer_reference)
        if success and response.get('status'):
            split.transfer_status = response['status']
        else:
            logger.warning(f"Statut du virement {split.transfer_reference} indisponible : {response.get('error')}")
        split.transfer_status = split.transfer_status or 'pending'
        return split.transfer_status

    @staticmethod
    def _pending_transfer_message(split: PaymentSplit) -> str:
        if split.transfer_status == 'otp':
            return f"Virement {split.transfer_reference} bloqué : validation OTP requise sur le tableau de bord Paystack"
        return f"Virement {split.transfer_reference} en attente (statut Paystack : {split.transfer_status})"

    @staticmethod
    def _mark_seller_paid(order: Order, split: PaymentSplit, reference: str) -> None:
        split.seller_paid = True
        split.seller_reference = reference
        split.seller_paid_at = timezone.now()
        split.transfer_status = 'success'
        split.payout_error = None
        split.save()
        SettlementService._notify_seller_paid(order, split)
        logger.info(f"Vendeur payé pour la commande {order.id} : {split.seller_amount} (réf. {reference})")

    @staticmethod
    def apply_transfer_event(reference: str, status: str) -> Optional[PaymentSplit]:
        """
        Applique un événement transfer.* du webhook Paystack

        Args:
            reference: Référence du virement (SELLER_...)
            status: success, failed ou reversed

        Returns:
            La répartition concernée, ou None si aucun virement ne porte cette référence
        """
        with transaction.atomic():
            split = (
                PaymentSplit.objects.select_for_update()
                .select_related('order', 'order__product')
                .filter(transfer_reference=reference)
                .first()
            )
            if split is None:
                logger.warning(f"Événement de virement pour une référence inconnue : {reference}")
                return None
            if split.seller_paid:
                return split

            if status == 'success':
                SettlementService._mark_seller_paid(split.order, split, reference)
            elif status in SettlementService.FAILED_TRANSFER_STATUSES:
                split.transfer_reference = None
                split.transfer_status = status
                split.payout_error = f"Virement {reference} en échec ({status}), il sera relancé"
                split.save()
                logger.warning(f"Virement {reference} en échec ({status}) pour la commande {split.order_id}")
            else:
                split.transfer_status = status
                split.payout_error = SettlementService._pending_transfer_message(split)
                split.save()
        return split

    @staticmethod
    def _notify_seller_paid(order: Order, split: PaymentSplit) -> OrderNotification:
        return OrderNotification.objects.create(
            order=order,
            user=order.product.seller,
            notification_type=OrderNotification.PAYMENT_SPLIT,
            title="Payment Received",
            message=(
                f'You\'ve received {split.seller_amount} for your sale of "{order.product.title}". '
                f"Reference: {split.seller_reference}"
            ),
        )

    @staticmethod
    def _notify_seller_missing_details(order: Order, split: PaymentSplit) -> OrderNotification:
        return OrderNotification.objects.create(
            order=order,
            user=order.product.seller,
            notification_type=OrderNotification.PAYMENT_SPLIT,
            title="Payment Pending",
            message=(
                f'Payment of {split.seller_amount} for "{order.product.title}" is ready. '
                f"Update your bank details to receive payment."
            ),
        )

    @staticmethod
    def retry_pending_payouts(seller=None) -> List[PaymentSplit]:
        """
        Relance les versements en attente, pour un vendeur ou pour tous
        """
        splits = PaymentSplit.objects.filter(seller_paid=False).select_related('order', 'order__product')
        if seller is not None:
            splits = splits.filter(product__seller=seller)

        results = []
        for split in splits:
            try:
                results.append(SettlementService.process_order(split.order))
            except StateConflict as e:
                logger.warning(f"Relance ignorée pour la commande {split.order_id} : {e.message}")
        paid = sum(1 for s in results if s.seller_paid)
        logger.info(f"Relance des versements : {paid}/{len(results)} versement(s) effectué(s)")
        return results

    @staticmethod
    def pending_payout_total(seller) -> dict:
        splits = PaymentSplit.objects.filter(product__seller=seller, seller_paid=False)
        total = splits.aggregate(total=Sum('seller_amount'))['total']
        return {
            'count': splits.count(),
            'amount': total if total is not None else Decimal('0.00'),
        }
