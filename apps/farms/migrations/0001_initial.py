import uuid
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
            name='Farm',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('farm_name', models.CharField(max_length=200)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('farm_icon', models.CharField(blank=True, max_length=100)),
                ('coordinates', models.JSONField(blank=True, null=True)),
                ('webcam_url', models.CharField(blank=True, max_length=500)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(default='Active', max_length=30)),
                ('crop_type', models.CharField(blank=True, max_length=100)),
                ('irrigation_type', models.CharField(blank=True, max_length=100)),
                ('soil_type', models.CharField(blank=True, max_length=100)),
                ('area', models.CharField(blank=True, max_length=100)),
                ('area_value', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('area_unit', models.CharField(default='acres', max_length=20)),
                ('planting_date', models.DateField(blank=True, null=True)),
                ('harvest_date', models.DateField(blank=True, null=True)),
                ('monthly_revenue', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('progress', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(100)])),
                ('image', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='farms', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'farms',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner'], name='farms_owner_idx')],
            },
        ),
        migrations.CreateModel(
            name='Field',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('coordinates', models.JSONField(blank=True, null=True)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('image', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('subcategory', models.CharField(blank=True, max_length=100)),
                ('farmer_name', models.CharField(blank=True, max_length=150)),
                ('weather', models.CharField(blank=True, max_length=100)),
                ('has_webcam', models.BooleanField(default=False)),
                ('is_own_field', models.BooleanField(default=True)),
                ('field_size', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('field_size_unit', models.CharField(blank=True, max_length=20)),
                ('area_m2', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('available_area', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('total_area', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('price_per_m2', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('unit', models.CharField(blank=True, max_length=20)),
                ('quantity', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('available', models.BooleanField(default=True)),
                ('available_for_buy', models.BooleanField(default=True)),
                ('production_rate', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('production_rate_unit', models.CharField(blank=True, max_length=30)),
                ('harvest_dates', models.JSONField(blank=True, default=list)),
                ('shipping_option', models.CharField(blank=True, max_length=50)),
                ('shipping_scope', models.CharField(blank=True, max_length=50)),
                ('delivery_charges', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('available_for_rent', models.BooleanField(default=False)),
                ('rent_price_per_month', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('rent_duration_monthly', models.BooleanField(default=False)),
                ('rent_duration_quarterly', models.BooleanField(default=False)),
                ('rent_duration_yearly', models.BooleanField(default=False)),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('5'))])),
                ('reviews', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('farm', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='fields', to='farms.farm')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='fields', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'fields',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['owner'], name='fields_owner_idx'),
                    models.Index(fields=['available_for_rent', 'available'], name='fields_rentable_idx'),
                ],
            },
        ),
    ]
