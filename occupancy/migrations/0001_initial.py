import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('rooms', '0001_initial'),
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Tenancy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rent_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit_status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('partially_refunded', 'Partially Refunded'), ('refunded', 'Refunded'), ('forfeited', 'Forfeited')], default='pending', max_length=20)),
                ('deposit_date_paid', models.DateTimeField(blank=True, null=True)),
                ('deposit_date_refunded', models.DateTimeField(blank=True, null=True)),
                ('deposit_refund_amount', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit_notes', models.TextField(blank=True, max_length=500)),
                ('move_in_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('move_out_date', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tenancies', to='rooms.room')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tenancies', to='tenants.tenant')),
            ],
            options={
                'verbose_name': 'Tenancy',
                'verbose_name_plural': 'Tenancies',
                'ordering': ['-move_in_date', '-id'],
                'indexes': [
                    models.Index(fields=['room', 'is_active'], name='occupancy_t_room_id_3a91c2_idx'),
                    models.Index(fields=['tenant', 'is_active'], name='occupancy_t_tenant__b5d7e0_idx'),
                    models.Index(fields=['is_active', 'move_in_date'], name='occupancy_t_is_acti_6f2c18_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('tenant',), name='unique_active_tenancy_per_tenant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DepositDeduction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reason', models.CharField(max_length=200)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('tenancy', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='deductions', to='occupancy.tenancy')),
            ],
            options={
                'verbose_name': 'Deposit Deduction',
                'verbose_name_plural': 'Deposit Deductions',
                'ordering': ['date', 'id'],
            },
        ),
    ]
