# Generated manually for TimiDigiWorld orders
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Montant')),
                ('currency', models.CharField(default='NGN', max_length=3, verbose_name='Devise de paiement')),
                ('exchange_rate', models.DecimalField(decimal_places=6, default=Decimal('1'), max_digits=14, verbose_name='Taux de change')),
                ('gateway_amount', models.PositiveBigIntegerField(default=0, verbose_name='Montant passerelle (unités mineures)')),
                ('payment_method', models.CharField(blank=True, max_length=50, null=True, verbose_name='Méthode de paiement')),
                ('payment_gateway', models.CharField(choices=[('paystack', 'Paystack')], default='paystack', max_length=30, verbose_name='Passerelle')),
                ('gateway_reference', models.CharField(max_length=100, unique=True, verbose_name='Référence de paiement')),
                ('gateway_subaccount', models.CharField(blank=True, max_length=100, null=True, verbose_name='Sous-compte utilisé')),
                ('delivery_email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='Email de livraison')),
                ('commission_rate', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=5, verbose_name='Taux de commission')),
                ('commission_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Commission plateforme')),
                ('seller_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Montant vendeur')),
                ('status', models.CharField(choices=[('pending', 'En attente de paiement'), ('paid', 'Payée'), ('processing', 'En préparation'), ('shipped', 'Expédiée'), ('delivered', 'Livrée'), ('completed', 'Terminée'), ('cancelled', 'Annulée')], default='pending', max_length=20, verbose_name='Statut')),
                ('tracking_number', models.CharField(blank=True, max_length=50, null=True, unique=True, verbose_name='Numéro de suivi')),
                ('email_sent', models.BooleanField(default=False, verbose_name='Email envoyé')),
                ('paid_at', models.DateTimeField(blank=True, null=True, verbose_name='Date de paiement')),
                ('shipped_at', models.DateTimeField(blank=True, null=True, verbose_name="Date d'expédition")),
                ('delivered_at', models.DateTimeField(blank=True, null=True, verbose_name='Date de livraison')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Date de mise à jour')),
                ('buyer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL, verbose_name='Acheteur')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='products.product', verbose_name='Produit')),
            ],
            options={
                'verbose_name': 'Commande',
                'verbose_name_plural': 'Commandes',
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='OrderNotification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('notification_type', models.CharField(choices=[('paid', 'Paiement confirmé'), ('shipped', 'Commande expédiée'), ('delivered', 'Commande livrée'), ('cancelled', 'Commande annulée'), ('payment_split', 'Versement vendeur')], max_length=20, verbose_name='Type')),
                ('title', models.CharField(max_length=200, verbose_name='Titre')),
                ('message', models.TextField(verbose_name='Message')),
                ('is_read', models.BooleanField(default=False, verbose_name='Lue')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='orders.order', verbose_name='Commande')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='order_notifications', to=settings.AUTH_USER_MODEL, verbose_name='Destinataire')),
            ],
            options={
                'verbose_name': 'Notification de commande',
                'verbose_name_plural': 'Notifications de commande',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['status'], name='order_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['buyer'], name='order_buyer_idx'),
        ),
        migrations.AddIndex(
            model_name='ordernotification',
            index=models.Index(fields=['user', 'is_read'], name='ordernotif_user_read_idx'),
        ),
    ]
