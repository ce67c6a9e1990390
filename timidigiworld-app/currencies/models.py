from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
from django.utils.translation import gettext_lazy as _


class CurrencyRate(models.Model):
    """
    Taux de change depuis la devise de base du catalogue (USD par défaut)
    Exemple : target_currency='NGN', rate=1600 signifie 1 USD = 1600 NGN
    """
    target_currency = models.CharField(max_length=3, unique=True, verbose_name=_("Devise cible"))
    rate = models.DecimalField(
        max_digits=14, decimal_places=6, validators=[MinValueValidator(Decimal('0.000001'))],
        verbose_name=_("Taux"))
    date_update = models.DateTimeField(auto_now=True, verbose_name=_("Date de mise à jour"))

    class Meta:
        ordering = ('target_currency',)
        verbose_name = _("Taux de change")
        verbose_name_plural = _("Taux de change")

    def __str__(self):
        return f"1 → {self.rate} {self.target_currency}"

    def save(self, *args, **kwargs):
        self.target_currency = self.target_currency.upper()
        super().save(*args, **kwargs)
