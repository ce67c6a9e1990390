import secrets

from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orders.models import Order


def generate_download_token():
    return secrets.token_urlsafe(32)


class DownloadToken(models.Model):
    """
    Jeton court et à usage unique donnant accès au fichier d'une commande
    L'emplacement du fichier n'est jamais stocké ici
    """
    token = models.CharField(
        max_length=64, unique=True, default=generate_download_token, editable=False, verbose_name=_("Jeton"))
    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='download_tokens', verbose_name=_("Commande"))
    # Sans utilisateur, le jeton a été envoyé à l'adresse email d'un invité
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, blank=True, null=True, related_name='download_tokens',
        verbose_name=_("Utilisateur"))
    email = models.EmailField(blank=True, null=True, verbose_name=_("Email de livraison"))
    expires_at = models.DateTimeField(verbose_name=_("Date d'expiration"))
    used_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date d'utilisation"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Jeton de téléchargement")
        verbose_name_plural = _("Jetons de téléchargement")
        indexes = [
            models.Index(fields=['order', 'user'], name='downloadtoken_order_user_idx'),
        ]

    def __str__(self):
        return f"Jeton commande #{self.order_id} - expire {self.expires_at:%d/%m/%Y %H:%M}"

    def is_expired(self) -> bool:
        """Vérifie si le jeton a expiré"""
        return timezone.now() >= self.expires_at

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def masked_token(self):
        return f"{self.token[:6]}…"
