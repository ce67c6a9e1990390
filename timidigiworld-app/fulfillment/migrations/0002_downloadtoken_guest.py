# Generated manually for guest download links
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('fulfillment', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='downloadtoken',
            name='user',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='download_tokens', to=settings.AUTH_USER_MODEL, verbose_name='Utilisateur'),
        ),
        migrations.AddField(
            model_name='downloadtoken',
            name='email',
            field=models.EmailField(blank=True, max_length=254, null=True, verbose_name='Email de livraison'),
        ),
    ]
