"""
Calcul de la répartition plateforme / vendeur
"""
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP, InvalidOperation
from typing import Dict

from .exceptions import ValidationError

CENT = Decimal('0.01')


def calculate_commission(amount, platform_owned: bool, rate) -> Dict[str, Decimal]:
    """
    Calcule la commission pour un montant donné

    La commission est arrondie au centime inférieur, le reste revient au vendeur,
    de sorte que commission_amount + seller_amount == amount.

    Args:
        amount: Montant de la commande (strictement positif)
        platform_owned: Produit appartenant à la plateforme (commission nulle)
        rate: Taux de commission appliqué aux produits vendeurs (0.25 = 25 %)

    Returns:
        Dictionnaire commission_rate / commission_amount / seller_amount
    """
    try:
        amount = Decimal(str(amount)).quantize(CENT)
        rate = Decimal(str(rate))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Montant ou taux de commission invalide")

    if amount <= 0:
        raise ValidationError("Le montant doit être strictement positif")
    if not Decimal('0') <= rate <= Decimal('1'):
        raise ValidationError("Le taux de commission doit être compris entre 0 et 1")

    if platform_owned:
        rate = Decimal('0')

    commission_amount = (amount * rate).quantize(CENT, rounding=ROUND_DOWN)
    return {
        'commission_rate': rate,
        'commission_amount': commission_amount,
        'seller_amount': amount - commission_amount,
    }


class CommissionCalculator:
    """Service pour calculer les commissions avec le taux configuré dans l'admin"""

    @staticmethod
    def current_rate() -> Decimal:
        from .models import PlatformSettings
        return PlatformSettings.get_active_settings().commission_rate

    @staticmethod
    def calculate_for_product(product, amount=None):
        """
        Calcule la répartition pour un produit au taux actuel
        """
        return calculate_commission(
            product.price if amount is None else amount,
            product.is_platform_owned,
            CommissionCalculator.current_rate(),
        )


def to_minor_units(amount, exchange_rate=1) -> int:
    """Convertit un montant en unités mineures (kobo, cents) de la devise de paiement"""
    value = Decimal(str(amount)) * Decimal(str(exchange_rate)) * 100
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
