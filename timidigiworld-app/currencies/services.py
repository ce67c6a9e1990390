"""
Conversion des montants vers la devise de règlement de la passerelle
"""
import logging
from decimal import Decimal

from django.conf import settings

from .models import CurrencyRate

logger = logging.getLogger(__name__)


def get_base_currency() -> str:
    return getattr(settings, 'MARKETPLACE_BASE_CURRENCY', 'USD').upper()


def get_exchange_rate(currency: str) -> Decimal:
    """
    Retourne le taux de la devise de base vers `currency`
    Sans taux enregistré, le taux vaut 1 et un avertissement est journalisé
    """
    currency = (currency or '').upper()
    if not currency or currency == get_base_currency():
        return Decimal('1')

    rate = CurrencyRate.objects.filter(target_currency=currency).values_list('rate', flat=True).first()
    if rate is None:
        logger.warning(f"Aucun taux de change enregistré pour {currency}, taux 1 appliqué")
        return Decimal('1')
    return Decimal(rate)
