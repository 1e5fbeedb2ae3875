# Generated manually for snacks app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SnackMenu',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('ordering', 'Ordering'), ('settled', 'Settled'), ('cancelled', 'Cancelled')], default='ordering', max_length=20)),
                ('kind', models.CharField(choices=[('free_form', 'Free form'), ('catalog', 'Catalog')], default='free_form', max_length=20)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='snack_menus', to=settings.AUTH_USER_MODEL)),
                ('settled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='settled_snack_menus', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'snack_menus',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'created_at'], name='snack_menu_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='SnackItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('item_name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, max_digits=14, validators=[MinValueValidator(Decimal('0.01'))])),
                ('quantity', models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('menu', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='snacks.snackmenu')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='snack_items', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'snack_items',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['menu', 'user'], name='snack_item_user_idx')],
            },
        ),
        migrations.CreateModel(
            name='SnackCatalogItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, max_digits=14, validators=[MinValueValidator(Decimal('0.01'))])),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('menu', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='catalog', to='snacks.snackmenu')),
            ],
            options={
                'db_table': 'snack_catalog_items',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='SnackOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('catalog_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='snacks.snackcatalogitem')),
                ('menu', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='snacks.snackmenu')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='snack_orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'snack_orders',
                'ordering': ['created_at', 'id'],
                'constraints': [models.UniqueConstraint(fields=('menu', 'user', 'catalog_item'), name='unique_snack_order_line')],
            },
        ),
    ]
