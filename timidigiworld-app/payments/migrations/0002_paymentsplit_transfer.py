# Generated manually for Paystack transfer tracking
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('payments', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='paymentsplit',
            name='transfer_reference',
            field=models.CharField(blank=True, max_length=100, null=True, verbose_name='Référence du virement en cours'),
        ),
        migrations.AddField(
            model_name='paymentsplit',
            name='transfer_status',
            field=models.CharField(blank=True, max_length=20, null=True, verbose_name='Statut Paystack du virement'),
        ),
    ]
