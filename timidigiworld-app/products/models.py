"""
Catalogue minimal utilisé par le pipeline de paiement
Un seul modèle pour les produits vendeurs et les produits de la plateforme
"""
import os
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    # Propriétaire du produit
    SELLER = 'seller'
    PLATFORM = 'platform'

    OWNER_TYPE_CHOICES = [
        (SELLER, _('Vendeur')),
        (PLATFORM, _('Plateforme')),
    ]

    # Type de produit
    DIGITAL = 'digital'
    PHYSICAL = 'physical'

    PRODUCT_TYPE_CHOICES = [
        (DIGITAL, _('Numérique')),
        (PHYSICAL, _('Physique')),
    ]

    owner_type = models.CharField(
        max_length=10, choices=OWNER_TYPE_CHOICES, default=SELLER, verbose_name=_("Propriétaire"))
    seller = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name='products', blank=True, null=True,
        verbose_name=_("Vendeur"))
    title = models.CharField(max_length=255, verbose_name=_("Titre"))
    description = models.TextField(blank=True, null=True, verbose_name=_("Description"))
    price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_("Prix"))
    product_type = models.CharField(
        max_length=10, choices=PRODUCT_TYPE_CHOICES, default=DIGITAL, verbose_name=_("Type de produit"))
    file = models.FileField(
        upload_to='digital_products/', blank=True, null=True, verbose_name=_("Fichier numérique"),
        help_text=_("Jamais exposé directement : téléchargement uniquement via un jeton"))
    is_active = models.BooleanField(default=True, verbose_name=_("Actif"))
    date = models.DateTimeField(auto_now_add=True, blank=True, null=True)
    date_update = models.DateTimeField(auto_now=True, blank=True, null=True)

    class Meta:
        ordering = ('-date',)
        verbose_name = _("Produit")
        verbose_name_plural = _("Produits")
        indexes = [
            models.Index(fields=['owner_type'], name='product_owner_type_idx'),
            models.Index(fields=['seller'], name='product_seller_idx'),
        ]

    def __str__(self):
        return self.title

    def clean(self):
        if self.owner_type == self.SELLER and not self.seller_id:
            raise ValidationError({'seller': _("Un produit vendeur doit avoir un vendeur")})
        if self.owner_type == self.PLATFORM and self.seller_id:
            raise ValidationError({'seller': _("Un produit de la plateforme n'a pas de vendeur")})

    @property
    def is_platform_owned(self) -> bool:
        return self.owner_type == self.PLATFORM

    @property
    def is_digital(self) -> bool:
        return self.product_type == self.DIGITAL

    @property
    def file_extension(self) -> str:
        """Extension du fichier stocké, en minuscules et sans le point"""
        if not self.file:
            return ''
        return os.path.splitext(self.file.name)[1].lstrip('.').lower()
