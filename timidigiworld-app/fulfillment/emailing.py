"""
Emails de livraison des produits numériques
"""
import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.urls import reverse

from payments.exceptions import GatewayError

logger = logging.getLogger(__name__)


def download_url(download_token) -> str:
    """URL absolue du lien de téléchargement, l'email est lu hors de toute requête"""
    site_url = getattr(settings, 'MARKETPLACE_SITE_URL', '').rstrip('/')
    return f"{site_url}{reverse('fulfillment:redeem', args=[download_token.token])}"


def send_digital_delivery_email(order, recipient: str, download_token) -> None:
    """
    Envoie l'email de livraison (texte + HTML) avec le lien du jeton de téléchargement

    Raises:
        GatewayError: le fournisseur d'email a refusé l'envoi
    """
    buyer_name = 'Customer'
    if order.buyer:
        buyer_name = order.buyer.get_full_name() or order.buyer.username

    context = {
        'order': order,
        'product': order.product,
        'buyer_name': buyer_name,
        'download_url': download_url(download_token),
        'expires_at': download_token.expires_at,
        'requires_sign_in': not download_token.is_guest,
        'currency': getattr(settings, 'MARKETPLACE_BASE_CURRENCY', 'USD'),
    }
    subject = f"Your Digital Product: {order.product.title}"
    text_body = render_to_string('fulfillment/emails/digital_delivery.txt', context)
    html_body = render_to_string('fulfillment/emails/digital_delivery.html', context)

    message = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    message.attach_alternative(html_body, 'text/html')

    try:
        message.send(fail_silently=False)
    except (SMTPException, OSError) as e:
        logger.error(f"Échec de l'envoi de l'email de livraison pour la commande {order.id}: {e}")
        raise GatewayError("L'email de livraison n'a pas pu être envoyé, veuillez réessayer")

    logger.info(f"Email de livraison envoyé pour la commande {order.id}")
