"""
Vues pour les paiements Paystack et le règlement vendeur
"""
import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from accounts.decorators import staff_required
from orders.models import Order
from .exceptions import GatewayError, MarketplaceError, ValidationError
from .models import PaystackWebhookLog
from .responses import error_response, parse_json_body, server_error_response
from .services.initiation import PaymentInitiationService
from .services.paystack import paystack_service
from .services.settlement import SettlementService
from .services.verification import PaymentVerificationService

logger = logging.getLogger(__name__)

TRANSFER_EVENTS = ('transfer.success', 'transfer.failed', 'transfer.reversed')


@require_http_methods(["POST"])
def initiate_payment(request):
    """
    Initialise un paiement Paystack pour un produit
    Acheteur connecté, ou invité avec un email de livraison
    """
    try:
        data = parse_json_body(request)
        product_id = data.get('product_id')
        if not product_id:
            raise ValidationError("Produit manquant")

        result = PaymentInitiationService.initiate_payment(
            product_id=product_id,
            buyer=request.user if request.user.is_authenticated else None,
            delivery_email=data.get('delivery_email'),
            payment_method=data.get('payment_method') or 'card',
            currency=data.get('currency'),
            callback_url=data.get('callback_url'),
        )
        return JsonResponse({'success': True, **result})

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans initiate_payment: {str(e)}")
        return server_error_response()


@require_http_methods(["POST"])
def verify_payment(request):
    """
    Vérifie un paiement à partir de la référence renvoyée par Paystack
    """
    try:
        data = parse_json_body(request)
        result = PaymentVerificationService.verify_payment(data.get('reference'))
        return JsonResponse({'success': True, **result})

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans verify_payment: {str(e)}")
        return server_error_response()


@csrf_exempt
@require_http_methods(["POST"])
def paystack_webhook(request):
    """
    Webhook Paystack, signé par HMAC-SHA512 dans l'en-tête x-paystack-signature
    """
    signature = request.headers.get('X-Paystack-Signature', '')
    is_valid = paystack_service.verify_webhook_signature(request.body, signature)

    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except (ValueError, UnicodeDecodeError):
        logger.error("Payload webhook Paystack illisible")
        return HttpResponse(status=400)
    if not isinstance(payload, dict):
        logger.error("Payload webhook Paystack inattendu : objet JSON attendu")
        return HttpResponse(status=400)

    event = payload.get('event')
    data = payload.get('data')
    reference = data.get('reference') if isinstance(data, dict) else None
    webhook_log = PaystackWebhookLog.objects.create(
        order=Order.objects.filter(gateway_reference=reference).first() if reference else None,
        event=event,
        reference=reference,
        payload=payload,
        signature=signature,
        is_valid=is_valid,
    )

    if not is_valid:
        logger.warning(f"Signature invalide pour le webhook Paystack {event} ({reference})")
        webhook_log.error_message = 'Signature invalide'
        webhook_log.save(update_fields=['error_message'])
        return HttpResponse(status=401)

    if event in TRANSFER_EVENTS and reference:
        SettlementService.apply_transfer_event(reference, event.split('.', 1)[1])
        webhook_log.processed = True
        webhook_log.save(update_fields=['processed'])
        return HttpResponse(status=200)

    if event != 'charge.success' or not reference:
        webhook_log.processed = True
        webhook_log.save(update_fields=['processed'])
        return HttpResponse(status=200)

    try:
        PaymentVerificationService.verify_payment(reference)
    except GatewayError as e:
        # Paystack relivrera le webhook
        webhook_log.error_message = e.message
        webhook_log.save(update_fields=['error_message'])
        return HttpResponse(status=502)
    except MarketplaceError as e:
        if not getattr(e, 'soft', False):
            logger.warning(f"Webhook Paystack {reference} non appliqué: {e.message}")
            webhook_log.error_message = e.message
    except Exception as e:
        logger.exception(f"Erreur dans paystack_webhook: {str(e)}")
        webhook_log.error_message = str(e)
        webhook_log.save(update_fields=['error_message'])
        return HttpResponse(status=500)

    webhook_log.processed = True
    webhook_log.save(update_fields=['processed', 'error_message'])
    return HttpResponse(status=200)


@staff_required
@require_http_methods(["POST"])
def process_settlement(request):
    """
    Lance (ou relance) le règlement d'une commande payée, réservé au staff
    """
    try:
        data = parse_json_body(request)
        order_id = data.get('order_id')
        if not order_id:
            raise ValidationError("Commande manquante")

        split = SettlementService.process_order(order_id)
        return JsonResponse({
            'success': True,
            'payment_split': {
                'id': split.id,
                'order_id': split.order_id,
                'total_amount': str(split.total_amount),
                'platform_amount': str(split.platform_amount),
                'seller_amount': str(split.seller_amount),
                'platform_paid': split.platform_paid,
                'seller_paid': split.seller_paid,
                'platform_reference': split.platform_reference,
                'seller_reference': split.seller_reference,
                'payout_error': split.payout_error,
            },
        })

    except MarketplaceError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Erreur dans process_settlement: {str(e)}")
        return server_error_response()
