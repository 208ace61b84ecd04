import uuid
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
            name='Complaint',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('target_type', models.CharField(choices=[('field', 'Field'), ('order', 'Order'), ('user', 'User'), ('payment', 'Payment'), ('delivery', 'Delivery'), ('service', 'Service'), ('quality', 'Quality'), ('refund', 'Refund')], max_length=20)),
                ('target_id', models.UUIDField(default=uuid.UUID('00000000-0000-0000-0000-000000000000'))),
                ('category', models.CharField(blank=True, max_length=50)),
                ('description', models.TextField()),
                ('status', models.CharField(choices=[('open', 'Open'), ('in_review', 'In review'), ('resolved', 'Resolved')], default='open', max_length=20)),
                ('admin_remarks', models.TextField(blank=True)),
                ('refund_coins', models.PositiveIntegerField(blank=True, null=True)),
                ('refunded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='complaints', to=settings.AUTH_USER_MODEL)),
                ('complained_against_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='complaints_against', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'complaints',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_by', '-created_at'], name='complaints_author_idx'),
                    models.Index(fields=['status', '-updated_at'], name='complaints_status_idx'),
                    models.Index(fields=['complained_against_user'], name='complaints_against_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ComplaintProof',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('file_name', models.CharField(default='file', max_length=255)),
                ('file_url', models.TextField()),
                ('file_type', models.CharField(blank=True, max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('complaint', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='proofs', to='complaints.complaint')),
            ],
            options={
                'db_table': 'complaint_proofs',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='ComplaintRemark',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('message', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('complaint', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='remarks', to='complaints.complaint')),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='complaint_remarks', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'complaint_remarks',
                'ordering': ['created_at'],
            },
        ),
    ]
