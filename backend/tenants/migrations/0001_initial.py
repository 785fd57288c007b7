import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('properties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Tenancy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('move_in', models.DateField(help_text='Move-in date; billing starts with this month')),
                ('payment_day', models.PositiveSmallIntegerField(default=1, help_text="Day of month rent is due (clamped to the month's last day)", validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(31)])),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(app_label)s_%(class)s_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(app_label)s_%(class)s_updated', to=settings.AUTH_USER_MODEL)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tenancies', to='properties.room')),
                ('tenant', models.OneToOneField(limit_choices_to={'role': 'tenant'}, on_delete=django.db.models.deletion.CASCADE, related_name='tenancy', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'tenancies',
                'ordering': ['room', 'move_in'],
                'indexes': [models.Index(fields=['room'], name='idx_tenancy_room')],
                'constraints': [models.CheckConstraint(check=models.Q(('payment_day__gte', 1), ('payment_day__lte', 31)), name='tenancy_payment_day_range')],
            },
        ),
    ]
