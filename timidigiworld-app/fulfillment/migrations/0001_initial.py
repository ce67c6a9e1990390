# Generated manually for secure downloads
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import fulfillment.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DownloadToken',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('token', models.CharField(default=fulfillment.models.generate_download_token, editable=False, max_length=64, unique=True, verbose_name='Jeton')),
                ('expires_at', models.DateTimeField(verbose_name="Date d'expiration")),
                ('used_at', models.DateTimeField(blank=True, null=True, verbose_name="Date d'utilisation")),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Date de création')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='download_tokens', to='orders.order', verbose_name='Commande')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='download_tokens', to=settings.AUTH_USER_MODEL, verbose_name='Utilisateur')),
            ],
            options={
                'verbose_name': 'Jeton de téléchargement',
                'verbose_name_plural': 'Jetons de téléchargement',
                'ordering': ('-created_at',),
            },
        ),
        migrations.AddIndex(
            model_name='downloadtoken',
            index=models.Index(fields=['order', 'user'], name='downloadtoken_order_user_idx'),
        ),
    ]
