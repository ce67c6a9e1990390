"""
Modèles pour les paiements Paystack et le règlement vendeur
"""
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from orders.models import Order
from products.models import Product


class PlatformSettings(models.Model):
    """
    Paramètres de la plateforme configurables depuis l'admin
    Le taux s'applique aux produits vendeurs, jamais aux produits de la plateforme
    """
    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=4, default=Decimal('0.25'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('1'))],
        verbose_name=_("Taux de commission"),
        help_text=_("Fraction du prix conservée par la plateforme (0.25 = 25 %)")
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))
    is_active = models.BooleanField(default=True, verbose_name=_("Actif"))

    class Meta:
        verbose_name = _("Paramètres de la plateforme")
        verbose_name_plural = _("Paramètres de la plateforme")
        ordering = ('-updated_at',)

    def __str__(self):
        return f"Paramètres plateforme (commission : {self.commission_percent}%)"

    @property
    def commission_percent(self) -> Decimal:
        return (self.commission_rate * 100).quantize(Decimal('0.01'))

    @classmethod
    def get_active_settings(cls):
        """Retourne les paramètres actifs de la plateforme"""
        return cls.objects.filter(is_active=True).first() or cls.objects.create(
            commission_rate=getattr(settings, 'PLATFORM_COMMISSION_RATE', Decimal('0.25')))


class PaymentSplit(models.Model):
    """
    Répartition d'une commande payée entre la plateforme et le vendeur
    Une seule ligne par commande, mise à jour en place à chaque tentative de versement
    """
    order = models.OneToOneField(
        Order, on_delete=models.PROTECT, related_name='payment_split', verbose_name=_("Commande"))
    buyer = models.ForeignKey(
        User, on_delete=models.SET_NULL, blank=True, null=True, related_name='+', verbose_name=_("Acheteur"))
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name='payment_splits', verbose_name=_("Produit"))

    total_amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Montant total"))
    platform_amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Part plateforme"))
    seller_amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Part vendeur"))

    platform_paid = models.BooleanField(default=False, verbose_name=_("Plateforme payée"))
    seller_paid = models.BooleanField(default=False, verbose_name=_("Vendeur payé"))
    platform_reference = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Référence plateforme"))
    seller_reference = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Référence versement vendeur"))
    payment_gateway = models.CharField(max_length=30, default=Order.PAYSTACK, verbose_name=_("Passerelle"))

    payout_attempts = models.PositiveIntegerField(default=0, verbose_name=_("Tentatives de versement"))
    payout_error = models.TextField(blank=True, null=True, verbose_name=_("Dernière erreur de versement"))
    transfer_reference = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Référence du virement en cours"))
    transfer_status = models.CharField(
        max_length=20, blank=True, null=True, verbose_name=_("Statut Paystack du virement"))
    seller_paid_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date du versement"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Répartition de paiement")
        verbose_name_plural = _("Répartitions de paiement")
        indexes = [
            models.Index(fields=['seller_paid'], name='paymentsplit_seller_paid_idx'),
        ]

    def __str__(self):
        return f"Répartition commande #{self.order_id} - {self.platform_amount} / {self.seller_amount}"

    @property
    def is_balanced(self) -> bool:
        return self.platform_amount + self.seller_amount == self.total_amount


class PaystackWebhookLog(models.Model):
    """
    Log des webhooks Paystack reçus
    """
    order = models.ForeignKey(
        Order, on_delete=models.SET_NULL, blank=True, null=True, related_name='webhook_logs',
        verbose_name=_("Commande"))
    event = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Événement"))
    reference = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("Référence"))
    payload = models.JSONField(default=dict, verbose_name=_("Payload reçu"))
    signature = models.CharField(max_length=200, blank=True, verbose_name=_("Signature"))
    is_valid = models.BooleanField(default=False, verbose_name=_("Signature valide"))
    processed = models.BooleanField(default=False, verbose_name=_("Traité"))
    error_message = models.TextField(blank=True, null=True, verbose_name=_("Message d'erreur"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de réception"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Log Webhook Paystack")
        verbose_name_plural = _("Logs Webhooks Paystack")

    def __str__(self):
        return f"Webhook {self.event or '?'} - {self.reference or '-'} - {'Valide' if self.is_valid else 'Invalide'}"
