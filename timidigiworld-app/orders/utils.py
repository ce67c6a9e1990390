import secrets
import string
import time

from django.conf import settings

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference(prefix=None, suffix_length=5):
    """
    Référence lisible et unique : préfixe + horodatage en ms + suffixe aléatoire
    Exemple : TDW1718000000000K3F9Q
    """
    if prefix is None:
        prefix = getattr(settings, 'MARKETPLACE_PAYMENT_PREFIX', 'TDW')
    suffix = ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(suffix_length))
    return f"{prefix}{int(time.time() * 1000)}{suffix}"


def generate_tracking_number():
    return generate_reference()
