# Generated manually for Paystack integration
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PlatformSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('commission_rate', models.DecimalField(decimal_places=4, default=Decimal('0.25'), help_text='Fraction du prix conservée par la plateforme (0.25 = 25 %)', max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('1'))], verbose_name='Taux de commission')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('is_active', models.BooleanField(default=True, verbose_name='Actif')),
            ],
            options={
                'verbose_name': 'Paramètres de la plateforme',
                'verbose_name_plural': 'Paramètres de la plateforme',
                'ordering': ('-updated_at',),
            },
        ),
        migrations.CreateModel(
            name='PaymentSplit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Montant total')),
                ('platform_amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Part plateforme')),
                ('seller_amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Part vendeur')),
                ('platform_paid', models.BooleanField(default=False, verbose_name='Plateforme payée')),
                ('seller_paid', models.BooleanField(default=False, verbose_name='Vendeur payé')),
                ('platform_reference', models.CharField(blank=True, max_length=100, null=True, verbose_name='Référence plateforme')),
                ('seller_reference', models.CharField(blank=True, max_length=100, null=True, verbose_name='Référence versement vendeur')),
                ('payment_gateway', models.CharField(default='paystack', max_length=30, verbose_name='Passerelle')),
                ('payout_attempts', models.PositiveIntegerField(default=0, verbose_name='Tentatives de versement')),
                ('payout_error', models.TextField(blank=True, null=True, verbose_name='Dernière erreur de versement')),
                ('seller_paid_at', models.DateTimeField(blank=True, null=True, verbose_name='Date du versement')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('buyer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Acheteur')),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='payment_split', to='orders.order', verbose_name='Commande')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payment_splits', to='products.product', verbose_name='Produit')),
            ],
            options={
                'verbose_name': 'Répartition de paiement',
                'verbose_name_plural': 'Répartitions de paiement',
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='PaystackWebhookLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event', models.CharField(blank=True, max_length=100, null=True, verbose_name='Événement')),
                ('reference', models.CharField(blank=True, max_length=100, null=True, verbose_name='Référence')),
                ('payload', models.JSONField(default=dict, verbose_name='Payload reçu')),
                ('signature', models.CharField(blank=True, max_length=200, verbose_name='Signature')),
                ('is_valid', models.BooleanField(default=False, verbose_name='Signature valide')),
                ('processed', models.BooleanField(default=False, verbose_name='Traité')),
                ('error_message', models.TextField(blank=True, null=True, verbose_name="Message d'erreur")),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de réception')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='webhook_logs', to='orders.order', verbose_name='Commande')),
            ],
            options={
                'verbose_name': 'Log Webhook Paystack',
                'verbose_name_plural': 'Logs Webhooks Paystack',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddIndex(
            model_name='paymentsplit',
            index=models.Index(fields=['seller_paid'], name='paymentsplit_seller_paid_idx'),
        ),
    ]
