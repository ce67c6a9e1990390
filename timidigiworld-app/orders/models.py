from decimal import Decimal

from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _

from products.models import Product


class Order(models.Model):
    """
    Une tentative d'achat d'un produit
    Les statuts n'avancent que vers l'avant, voir ALLOWED_TRANSITIONS
    """
    PENDING = 'pending'
    PAID = 'paid'
    PROCESSING = 'processing'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (PENDING, _('En attente de paiement')),
        (PAID, _('Payée')),
        (PROCESSING, _('En préparation')),
        (SHIPPED, _('Expédiée')),
        (DELIVERED, _('Livrée')),
        (COMPLETED, _('Terminée')),
        (CANCELLED, _('Annulée')),
    ]

    ALLOWED_TRANSITIONS = {
        PENDING: (PAID, CANCELLED),
        PAID: (PROCESSING, COMPLETED, CANCELLED),
        PROCESSING: (SHIPPED, CANCELLED),
        SHIPPED: (DELIVERED, CANCELLED),
        DELIVERED: (),
        COMPLETED: (),
        CANCELLED: (),
    }

    TERMINAL_STATUSES = (COMPLETED, DELIVERED, CANCELLED)
    # Statuts donnant accès au fichier numérique
    PAID_STATUSES = (PAID, COMPLETED, DELIVERED)

    PAYSTACK = 'paystack'
    GATEWAY_CHOICES = [
        (PAYSTACK, 'Paystack'),
    ]

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name='orders', verbose_name=_("Produit"))
    buyer = models.ForeignKey(
        User, on_delete=models.SET_NULL, related_name='orders', blank=True, null=True,
        verbose_name=_("Acheteur"))
    amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Montant"))

    # Conversion vers la devise de la passerelle
    currency = models.CharField(max_length=3, default='NGN', verbose_name=_("Devise de paiement"))
    exchange_rate = models.DecimalField(
        max_digits=14, decimal_places=6, default=Decimal('1'), verbose_name=_("Taux de change"))
    gateway_amount = models.PositiveBigIntegerField(
        default=0, verbose_name=_("Montant passerelle (unités mineures)"))

    payment_method = models.CharField(max_length=50, blank=True, null=True, verbose_name=_("Méthode de paiement"))
    payment_gateway = models.CharField(
        max_length=30, choices=GATEWAY_CHOICES, default=PAYSTACK, verbose_name=_("Passerelle"))
    gateway_reference = models.CharField(
        max_length=100, unique=True, verbose_name=_("Référence de paiement"))
    gateway_subaccount = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Sous-compte utilisé"))
    delivery_email = models.EmailField(blank=True, null=True, verbose_name=_("Email de livraison"))

    # Répartition plateforme / vendeur
    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=4, default=Decimal('0'), verbose_name=_("Taux de commission"))
    commission_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0'), verbose_name=_("Commission plateforme"))
    seller_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0'), verbose_name=_("Montant vendeur"))

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=PENDING, verbose_name=_("Statut"))
    tracking_number = models.CharField(
        max_length=50, blank=True, null=True, unique=True, verbose_name=_("Numéro de suivi"))
    email_sent = models.BooleanField(default=False, verbose_name=_("Email envoyé"))
    paid_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date de paiement"))
    shipped_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date d'expédition"))
    delivered_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date de livraison"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Commande")
        verbose_name_plural = _("Commandes")
        indexes = [
            models.Index(fields=['status'], name='order_status_idx'),
            models.Index(fields=['buyer'], name='order_buyer_idx'),
        ]

    def __str__(self):
        return f"Commande #{self.pk} - {self.gateway_reference} - {self.get_status_display()}"

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, ())

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    @property
    def is_paid(self) -> bool:
        return self.status in self.PAID_STATUSES


class OrderNotification(models.Model):
    """Notification affichée à l'acheteur ou au vendeur"""
    PAID = 'paid'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'
    PAYMENT_SPLIT = 'payment_split'

    TYPE_CHOICES = [
        (PAID, _('Paiement confirmé')),
        (SHIPPED, _('Commande expédiée')),
        (DELIVERED, _('Commande livrée')),
        (CANCELLED, _('Commande annulée')),
        (PAYMENT_SPLIT, _('Versement vendeur')),
    ]

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='notifications', verbose_name=_("Commande"))
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='order_notifications', blank=True, null=True,
        verbose_name=_("Destinataire"))
    notification_type = models.CharField(max_length=20, choices=TYPE_CHOICES, verbose_name=_("Type"))
    title = models.CharField(max_length=200, verbose_name=_("Titre"))
    message = models.TextField(verbose_name=_("Message"))
    is_read = models.BooleanField(default=False, verbose_name=_("Lue"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Date de création"))

    class Meta:
        ordering = ('-created_at',)
        verbose_name = _("Notification de commande")
        verbose_name_plural = _("Notifications de commande")
        indexes = [
            models.Index(fields=['user', 'is_read'], name='ordernotif_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} - commande #{self.order_id}"
