# Generated manually for lunch app

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
            name='LunchSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('session_date', models.DateField(unique=True)),
                ('status', models.CharField(choices=[('ordering', 'Ordering'), ('buyers_selected', 'Buyers selected'), ('buying', 'Buying'), ('settled', 'Settled'), ('cancelled', 'Cancelled')], default='ordering', max_length=20)),
                ('buyer_ids', models.JSONField(blank=True, default=list)),
                ('total_participants', models.PositiveIntegerField(blank=True, null=True)),
                ('selected_at', models.DateTimeField(blank=True, null=True)),
                ('total_bill', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
                ('amount_per_person', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('receipt_ref', models.CharField(blank=True, max_length=500)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('payer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='paid_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'lunch_sessions',
                'ordering': ['-session_date'],
                'indexes': [models.Index(fields=['status', 'session_date'], name='lunch_sess_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='LunchOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], default='confirmed', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='lunch.lunchsession')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lunch_orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'lunch_orders',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['session', 'status'], name='lunch_order_status_idx')],
                'unique_together': {('session', 'user')},
            },
        ),
    ]
