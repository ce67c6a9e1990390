# Generated manually for TimiDigiWorld products
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('owner_type', models.CharField(choices=[('seller', 'Vendeur'), ('platform', 'Plateforme')], default='seller', max_length=10, verbose_name='Propriétaire')),
                ('title', models.CharField(max_length=255, verbose_name='Titre')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Description')),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Prix')),
                ('product_type', models.CharField(choices=[('digital', 'Numérique'), ('physical', 'Physique')], default='digital', max_length=10, verbose_name='Type de produit')),
                ('file', models.FileField(blank=True, help_text='Jamais exposé directement : téléchargement uniquement via un jeton', null=True, upload_to='digital_products/', verbose_name='Fichier numérique')),
                ('is_active', models.BooleanField(default=True, verbose_name='Actif')),
                ('date', models.DateTimeField(auto_now_add=True, null=True)),
                ('date_update', models.DateTimeField(auto_now=True, null=True)),
                ('seller', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='products', to=settings.AUTH_USER_MODEL, verbose_name='Vendeur')),
            ],
            options={
                'verbose_name': 'Produit',
                'verbose_name_plural': 'Produits',
                'ordering': ('-date',),
            },
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['owner_type'], name='product_owner_type_idx'),
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['seller'], name='product_seller_idx'),
        ),
    ]
