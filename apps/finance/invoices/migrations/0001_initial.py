import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_number', models.PositiveIntegerField()),
                ('unit_name', models.CharField(max_length=255)),
                ('cnpj_cpf', models.CharField(blank=True, max_length=20)),
                ('exercise_month', models.PositiveSmallIntegerField()),
                ('exercise_year', models.PositiveSmallIntegerField()),
                ('document_type', models.CharField(default='Nota Fiscal', max_length=60)),
                ('invoice_number', models.CharField(blank=True, max_length=60)),
                ('issue_date', models.DateField(blank=True, null=True)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('net_value', models.DecimalField(decimal_places=2, max_digits=12)),
                ('payment_status', models.CharField(choices=[('PAGO', 'Pago'), ('EM ABERTO', 'Em aberto'), ('ATRASADO', 'Atrasado')], default='EM ABERTO', max_length=10)),
                ('payment_date', models.DateField(blank=True, null=True)),
                ('paid_value', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invoices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['item_number', 'id'],
                'constraints': [
                    models.UniqueConstraint(fields=('owner', 'item_number'), name='unique_invoice_item_number_per_owner'),
                ],
                'indexes': [
                    models.Index(fields=['owner', 'payment_status'], name='invoices_owner_status_idx'),
                ],
            },
        ),
    ]
