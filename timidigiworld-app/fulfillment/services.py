"""
Livraison des produits numériques et passerelle de téléchargement sécurisée
"""
import logging
import re
from datetime import timedelta
from typing import Dict, Optional

from django.conf import settings
from django.http import FileResponse
from django.urls import reverse
from django.utils import timezone

from accounts.services import resolve_contact_email
from orders.models import Order, OrderNotification
from orders.services import OrderStatusService
from payments.exceptions import (
    AccessDenied, AuthError, FileUnavailable, GatewayError, InvalidToken, NoDeliveryAddress, OrderNotFound, WrongProductType,
)
from .emailing import send_digital_delivery_email
from .models import DownloadToken

logger = logging.getLogger(__name__)


CONTENT_TYPES = {
    'pdf': 'application/pdf',
    'doc': 'application/msword',
    'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'txt': 'text/plain',
    'mp4': 'video/mp4',
    'mov': 'video/quicktime',
    'avi': 'video/x-msvideo',
    'zip': 'application/zip',
    'rar': 'application/x-rar-compressed',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'mp3': 'audio/mpeg',
    'wav': 'audio/wav',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def content_type_for(extension: str) -> str:
    return CONTENT_TYPES.get((extension or '').lower(), DEFAULT_CONTENT_TYPE)


def download_filename(title: str, extension: str) -> str:
    """Nom de fichier proposé au navigateur : titre du produit + extension réelle"""
    name = re.sub(r'[\\/:*?"<>|\r\n\t]+', ' ', title or '').strip() or 'download'
    return f"{name}.{extension}" if extension else name


class DigitalFulfillmentService:
    """Service pour livrer un produit numérique après paiement"""

    @staticmethod
    def fulfill(order: Order, delivery_email: Optional[str] = None) -> Order:
        """
        Envoie l'email de livraison puis passe la commande à 'completed'

        Un nouvel appel renvoie l'email : l'appelant doit éviter les doublons.

        Raises:
            WrongProductType: le produit n'est pas numérique
            NoDeliveryAddress: aucun email utilisable
            GatewayError: échec du fournisseur d'email
        """
        product = order.product
        if not product.is_digital:
            raise WrongProductType(order_id=order.id)

        recipient = resolve_contact_email(order.buyer, delivery_email or order.delivery_email)
        if not recipient:
            logger.error(f"Aucun email de livraison pour la commande {order.id}")
            raise NoDeliveryAddress(order_id=order.id)

        download_token = DownloadToken.objects.create(
            order=order,
            user=order.buyer,
            email=recipient,
            expires_at=timezone.now() + SecureDownloadService.email_token_ttl(),
        )
        try:
            send_digital_delivery_email(order, recipient, download_token)
        except GatewayError:
            download_token.delete()
            raise

        order = OrderStatusService.transition(order, Order.COMPLETED, email_sent=True)
        OrderNotification.objects.create(
            order=order,
            user=order.buyer,
            notification_type=OrderNotification.DELIVERED,
            title="Digital Product Delivered",
            message=f'Your digital product "{product.title}" has been sent to your email.',
        )
        logger.info(f"Produit numérique livré pour la commande {order.id}")
        return order


class SecureDownloadService:
    """Émission et utilisation des jetons de téléchargement"""

    @staticmethod
    def token_ttl() -> timedelta:
        return timedelta(seconds=getattr(settings, 'DOWNLOAD_TOKEN_TTL_SECONDS', 3600))

    @staticmethod
    def email_token_ttl() -> timedelta:
        return timedelta(seconds=getattr(settings, 'DOWNLOAD_EMAIL_TOKEN_TTL_SECONDS', 259200))

    @staticmethod
    def issue(user, order_id) -> Dict:
        """
        Émet un nouveau jeton pour une commande payée de l'utilisateur

        Returns:
            Dictionnaire download_path / expires_at

        Raises:
            OrderNotFound: commande inexistante
            AccessDenied: commande d'un autre utilisateur ou non payée
        """
        order = Order.objects.select_related('product').filter(pk=order_id).first()
        if order is None:
            raise OrderNotFound("Commande introuvable")
        if order.buyer_id != user.id:
            logger.warning(f"Utilisateur {user.id} a demandé un jeton pour la commande {order.id} d'un autre acheteur")
            raise AccessDenied("Cette commande ne vous appartient pas")
        if order.status not in Order.PAID_STATUSES:
            raise AccessDenied("Cette commande n'est pas payée")
        if not order.product.is_digital:
            raise AccessDenied("Ce produit n'est pas téléchargeable")

        download_token = DownloadToken.objects.create(
            order=order,
            user=user,
            expires_at=timezone.now() + SecureDownloadService.token_ttl(),
        )
        logger.info(f"Jeton {download_token.masked_token} émis pour la commande {order.id}")
        return {
            'download_path': reverse('fulfillment:redeem', args=[download_token.token]),
            'expires_at': download_token.expires_at,
        }

    @staticmethod
    def redeem(user, token: str) -> FileResponse:
        """
        Valide le jeton et renvoie le fichier en pièce jointe
        Un jeton d'invité (envoyé par email, sans utilisateur) se suffit à lui-même

        Raises:
            AuthError: jeton d'un acheteur inscrit utilisé sans session
            InvalidToken: jeton inconnu, expiré, déjà utilisé ou d'un autre utilisateur
            AccessDenied: la commande n'est plus dans un statut payé
            FileUnavailable: fichier absent du stockage
        """
        download_token = DownloadToken.objects.select_related('order', 'order__product').filter(token=token).first()
        if download_token is None:
            raise InvalidToken()
        if download_token.used_at is not None:
            raise InvalidToken("Ce lien de téléchargement a déjà été utilisé")
        if download_token.is_expired():
            raise InvalidToken("Ce lien de téléchargement a expiré")
        if not download_token.is_guest:
            # Le lien d'un acheteur inscrit ne vaut qu'avec sa session
            if not user.is_authenticated:
                raise AuthError("Connectez-vous pour télécharger ce fichier")
            if download_token.user_id != user.id:
                logger.warning(f"Utilisateur {user.id} a tenté d'utiliser le jeton {download_token.masked_token} d'un autre acheteur")
                raise InvalidToken()

        order = download_token.order
        if order.status not in Order.PAID_STATUSES:
            raise AccessDenied("Cette commande n'est pas payée")

        product = order.product
        if not product.file or not product.file.storage.exists(product.file.name):
            logger.error(f"Fichier manquant pour le produit {product.id} (commande {order.id})")
            raise FileUnavailable()

        try:
            file_handle = product.file.storage.open(product.file.name, 'rb')
        except OSError as e:
            logger.error(f"Lecture impossible du fichier du produit {product.id}: {e}")
            raise FileUnavailable()

        consumed = DownloadToken.objects.filter(pk=download_token.pk, used_at__isnull=True).update(
            used_at=timezone.now())
        if not consumed:
            file_handle.close()
            raise InvalidToken("Ce lien de téléchargement a déjà été utilisé")

        extension = product.file_extension
        response = FileResponse(
            file_handle,
            as_attachment=True,
            filename=download_filename(product.title, extension),
            content_type=content_type_for(extension),
        )
        response['Cache-Control'] = 'no-store, no-cache, must-revalidate'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        logger.info(f"Téléchargement du produit {product.id} pour la commande {order.id}")
        return response
