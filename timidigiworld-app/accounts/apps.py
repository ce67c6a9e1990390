from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Comptes et vendeurs'

    def ready(self):
        """Connecter les signaux quand l'application est prête"""
        import accounts.signals  # noqa
