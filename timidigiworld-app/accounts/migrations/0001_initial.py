# Generated manually for TimiDigiWorld payout profiles
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('display_name', models.CharField(blank=True, max_length=100, null=True)),
                ('email', models.EmailField(blank=True, max_length=254, null=True, verbose_name='Email de contact')),
                ('mobile_number', models.CharField(blank=True, max_length=100, null=True)),
                ('status', models.CharField(blank=True, choices=[('customer', 'customer'), ('vendor', 'vendor')], default='customer', max_length=13, null=True)),
                ('date', models.DateTimeField(auto_now_add=True, null=True)),
                ('date_update', models.DateTimeField(auto_now=True, null=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='BankAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bank_name', models.CharField(blank=True, max_length=200, null=True, verbose_name='Banque')),
                ('bank_code', models.CharField(blank=True, max_length=20, null=True, verbose_name='Code banque')),
                ('account_number', models.CharField(blank=True, max_length=20, null=True, verbose_name='Numéro de compte')),
                ('account_name', models.CharField(blank=True, help_text='Renseigné par Paystack lors de la vérification, jamais saisi par le vendeur', max_length=200, null=True, verbose_name='Titulaire du compte')),
                ('subaccount_code', models.CharField(blank=True, max_length=100, null=True, verbose_name='Sous-compte Paystack')),
                ('recipient_code', models.CharField(blank=True, max_length=100, null=True, verbose_name='Destinataire de virement Paystack')),
                ('verified_at', models.DateTimeField(blank=True, null=True, verbose_name='Date de vérification')),
                ('date', models.DateTimeField(auto_now_add=True, null=True)),
                ('date_update', models.DateTimeField(auto_now=True, null=True)),
                ('vendor_profile', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='bank_account', to='accounts.profile', verbose_name='Vendeur')),
            ],
            options={
                'verbose_name': 'Compte bancaire vendeur',
                'verbose_name_plural': 'Comptes bancaires vendeurs',
            },
        ),
    ]
