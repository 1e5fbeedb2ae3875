# Generated manually for reimbursements app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('lunch', '0001_initial'),
        ('snacks', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReimbursementRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('lunch', 'Lunch'), ('snack', 'Snack')], max_length=20)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('admin_transferred', 'Transferred by admin'), ('user_confirmed', 'Confirmed by user'), ('user_disputed', 'Disputed by user')], default='pending', max_length=20)),
                ('admin_note', models.TextField(blank=True)),
                ('admin_transferred_at', models.DateTimeField(blank=True, null=True)),
                ('user_response', models.CharField(blank=True, choices=[('received', 'Received'), ('not_received', 'Not received')], max_length=20)),
                ('user_confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admin', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='handled_reimbursements', to=settings.AUTH_USER_MODEL)),
                ('session', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='reimbursement', to='lunch.lunchsession')),
                ('settler', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reimbursements', to=settings.AUTH_USER_MODEL)),
                ('snack_menu', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='reimbursement', to='snacks.snackmenu')),
            ],
            options={
                'db_table': 'reimbursement_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='reimb_status_idx'),
                    models.Index(fields=['settler', 'created_at'], name='reimb_settler_idx'),
                ],
            },
        ),
    ]
