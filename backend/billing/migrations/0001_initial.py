import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import tenants.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


RECEIPT_VALIDATORS = [
    django.core.validators.FileExtensionValidator(allowed_extensions=['jpg', 'jpeg', 'png', 'webp', 'pdf']),
    tenants.models.validate_file_size,
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('properties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RentBill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveSmallIntegerField()),
                ('month', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('due_date', models.DateField()),
                ('payment_day', models.PositiveSmallIntegerField()),
                ('move_in', models.DateField()),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('status', models.CharField(choices=[('unpaid', 'Unpaid'), ('pending', 'Pending'), ('paid', 'Paid')], default='unpaid', max_length=10)),
                ('proof', models.FileField(blank=True, max_length=255, upload_to='receipts/rent/', validators=RECEIPT_VALIDATORS)),
                ('submitted_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('action', models.CharField(choices=[('none', 'None'), ('verify', 'Verify'), ('send_back', 'Send Back'), ('remind', 'Remind')], default='none', max_length=10)),
                ('action_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='owned_rent_bills', to=settings.AUTH_USER_MODEL)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='rent_bills', to='properties.property')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='rent_bills', to='properties.room')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='rent_bills', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['due_date', 'id'],
                'indexes': [
                    models.Index(fields=['tenant', 'status', 'due_date'], name='idx_rentbill_tenant_status'),
                    models.Index(fields=['owner', 'due_date'], name='idx_rentbill_owner_due'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'room', 'year', 'month'), name='uniq_rentbill_tenant_room_period'),
                    models.CheckConstraint(check=models.Q(('month__gte', 1), ('month__lte', 12)), name='rentbill_month_range'),
                    models.CheckConstraint(check=models.Q(('amount__gte', 0)), name='rentbill_amount_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UtilityBill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bill_type', models.CharField(help_text='e.g. electricity, water, internet', max_length=50)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('unpaid', 'Unpaid'), ('paid', 'Paid')], default='unpaid', max_length=10)),
                ('verification', models.CharField(choices=[('pending', 'Pending'), ('verified', 'Verified'), ('rejected', 'Rejected')], default='pending', max_length=10)),
                ('receipt', models.FileField(blank=True, max_length=255, upload_to='receipts/utility/', validators=RECEIPT_VALIDATORS)),
                ('year', models.PositiveSmallIntegerField()),
                ('month', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='owned_utility_bills', to=settings.AUTH_USER_MODEL)),
                ('property', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='utility_bills', to='properties.property')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='utility_bills', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['tenant', '-created_at'], name='idx_utilitybill_tenant'),
                    models.Index(fields=['owner', 'verification'], name='idx_utilitybill_owner_verif'),
                ],
                'constraints': [
                    models.CheckConstraint(check=models.Q(('amount__gte', 0)), name='utilitybill_amount_non_negative'),
                ],
            },
        ),
    ]
