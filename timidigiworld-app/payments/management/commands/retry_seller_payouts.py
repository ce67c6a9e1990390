from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from payments.services.settlement import SettlementService


class Command(BaseCommand):
    help = 'Relance les versements vendeurs en attente'

    def add_arguments(self, parser):
        parser.add_argument('--seller', help="Nom d'utilisateur du vendeur (tous les vendeurs par défaut)")

    def handle(self, *args, **options):
        seller = None
        if options.get('seller'):
            seller = User.objects.filter(username=options['seller']).first()
            if seller is None:
                raise CommandError(f"Vendeur introuvable : {options['seller']}")

        splits = SettlementService.retry_pending_payouts(seller=seller)
        if not splits:
            self.stdout.write(self.style.WARNING('Aucun versement en attente'))
            return

        for split in splits:
            if split.seller_paid:
                self.stdout.write(self.style.SUCCESS(
                    f"✓ Commande #{split.order_id} : {split.seller_amount} versé ({split.seller_reference})"))
            else:
                self.stdout.write(self.style.ERROR(
                    f"✗ Commande #{split.order_id} : {split.payout_error}"))
