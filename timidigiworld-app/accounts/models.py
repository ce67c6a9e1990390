from django.db import models
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _


class Profile(models.Model):
    user = models.OneToOneField(
        User, on_delete=models.CASCADE, related_name='profile', blank=True, null=True, )
    display_name = models.CharField(max_length=100, blank=True, null=True, )
    email = models.EmailField(blank=True, null=True, verbose_name=_("Email de contact"))
    mobile_number = models.CharField(max_length=100, blank=True, null=True, )

    customer = 'customer'
    vendor = 'vendor'
    account_select = [
        (customer, 'customer'),
        (vendor, 'vendor'),
    ]
    status = models.CharField(
        max_length=13,
        choices=account_select,
        default=customer,
        blank=True, null=True,
    )
    date = models.DateTimeField(auto_now_add=True, blank=True, null=True)
    date_update = models.DateTimeField(auto_now=True, blank=True, null=True)

    def __str__(self):
        return self.display_name or (self.user.username if self.user else f"Profil #{self.pk}")


class BankAccount(models.Model):
    """
    Coordonnées bancaires vérifiées d'un vendeur pour les versements
    Le nom du titulaire provient toujours de la résolution de compte Paystack
    """
    vendor_profile = models.OneToOneField(
        Profile, on_delete=models.CASCADE, related_name='bank_account', verbose_name=_("Vendeur"))
    bank_name = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("Banque"))
    bank_code = models.CharField(max_length=20, blank=True, null=True, verbose_name=_("Code banque"))
    account_number = models.CharField(max_length=20, blank=True, null=True, verbose_name=_("Numéro de compte"))
    account_name = models.CharField(
        max_length=200, blank=True, null=True, verbose_name=_("Titulaire du compte"),
        help_text=_("Renseigné par Paystack lors de la vérification, jamais saisi par le vendeur"))
    subaccount_code = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Sous-compte Paystack"))
    recipient_code = models.CharField(
        max_length=100, blank=True, null=True, verbose_name=_("Destinataire de virement Paystack"))
    verified_at = models.DateTimeField(blank=True, null=True, verbose_name=_("Date de vérification"))
    date = models.DateTimeField(auto_now_add=True, blank=True, null=True)
    date_update = models.DateTimeField(auto_now=True, blank=True, null=True)

    class Meta:
        verbose_name = _("Compte bancaire vendeur")
        verbose_name_plural = _("Comptes bancaires vendeurs")

    def __str__(self):
        return f"{self.bank_name or '-'} ****{(self.account_number or '')[-4:]}"

    def is_complete(self) -> bool:
        """Vérifie que les coordonnées permettent un virement"""
        return all([self.bank_code, self.account_number, self.account_name])

    @property
    def masked_account_number(self):
        if not self.account_number:
            return ''
        return f"****{self.account_number[-4:]}"
