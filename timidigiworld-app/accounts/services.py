"""
Services du compte : email de contact et coordonnées de versement vendeur
"""
import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone

from payments.exceptions import GatewayError, ValidationError
from payments.services.paystack import paystack_service
from .models import Profile, BankAccount

logger = logging.getLogger(__name__)


def resolve_contact_email(user=None, explicit_email: Optional[str] = None) -> Optional[str]:
    """
    Email à utiliser pour un acheteur
    Priorité : email de livraison explicite > email du compte > email du profil
    """
    if explicit_email:
        return explicit_email.strip()
    if user is None:
        return None
    if user.email:
        return user.email
    profile = Profile.objects.filter(user=user).only('email').first()
    if profile and profile.email:
        return profile.email
    return None


class PayoutProfileService:
    """Enregistrement et suppression des coordonnées bancaires d'un vendeur"""

    @staticmethod
    def verify_and_save(user, bank_name: str, bank_code: str, account_number: str,
                        create_subaccount: bool = False) -> BankAccount:
        """
        Vérifie le compte auprès de Paystack puis l'enregistre

        Le nom du titulaire est celui retourné par Paystack, jamais celui saisi.

        Raises:
            ValidationError: données manquantes ou compte introuvable
            GatewayError: Paystack indisponible
        """
        bank_code = (bank_code or '').strip()
        account_number = (account_number or '').strip()
        if not bank_code or not account_number:
            raise ValidationError("Le code banque et le numéro de compte sont obligatoires")
        if not account_number.isdigit() or len(account_number) != 10:
            raise ValidationError("Le numéro de compte doit contenir 10 chiffres")

        success, response = paystack_service.resolve_account(account_number, bank_code)
        if not success:
            logger.warning(f"Vérification du compte ****{account_number[-4:]} échouée pour user {user.id}: {response.get('error')}")
            if response.get('status_code') in (None, 500, 502, 503, 504):
                raise GatewayError("Impossible de vérifier le compte pour le moment, veuillez réessayer")
            raise ValidationError("Compte bancaire introuvable, vérifiez le numéro et la banque")

        account_name = response['account_name']
        subaccount_code = None
        if create_subaccount:
            from payments.commission import CommissionCalculator
            percentage = CommissionCalculator.current_rate() * 100
            ok, sub_response = paystack_service.create_subaccount(
                business_name=account_name,
                bank_code=bank_code,
                account_number=account_number,
                percentage_charge=percentage,
            )
            if not ok:
                raise GatewayError(sub_response.get('error') or "Création du sous-compte impossible")
            subaccount_code = sub_response['subaccount_code']

        with transaction.atomic():
            profile, _ = Profile.objects.get_or_create(user=user)
            if profile.status != Profile.vendor:
                profile.status = Profile.vendor
                profile.save(update_fields=['status', 'date_update'])
            bank_account, _ = BankAccount.objects.update_or_create(
                vendor_profile=profile,
                defaults={
                    'bank_name': bank_name,
                    'bank_code': bank_code,
                    'account_number': account_number,
                    'account_name': account_name,
                    'subaccount_code': subaccount_code,
                    'recipient_code': None,
                    'verified_at': timezone.now(),
                },
            )

        logger.info(f"Compte bancaire ****{account_number[-4:]} vérifié pour le vendeur {user.id}")
        return bank_account

    @staticmethod
    def clear(user) -> bool:
        """Efface toutes les coordonnées bancaires en une seule mise à jour"""
        cleared = BankAccount.objects.filter(vendor_profile__user=user).update(
            bank_name=None,
            bank_code=None,
            account_number=None,
            account_name=None,
            subaccount_code=None,
            recipient_code=None,
            verified_at=None,
            date_update=timezone.now(),
        )
        if cleared:
            logger.info(f"Coordonnées bancaires supprimées pour le vendeur {user.id}")
        return bool(cleared)

    @staticmethod
    def get_for_seller(seller) -> Optional[BankAccount]:
        if seller is None:
            return None
        return BankAccount.objects.filter(vendor_profile__user=seller).first()
