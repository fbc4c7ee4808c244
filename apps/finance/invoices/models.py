from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.utils.managers import OwnerManager, OwnerQuerySet


class InvoiceQuerySet(OwnerQuerySet):
    def active(self):
        return self.filter(deleted_at__isnull=True)


class InvoiceManager(OwnerManager):
    def get_queryset(self):
        return InvoiceQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()


class Invoice(models.Model):
    STATUS_PAID = 'PAGO'
    STATUS_OPEN = 'EM ABERTO'
    STATUS_OVERDUE = 'ATRASADO'
    STATUS_CHOICES = (
        (STATUS_PAID, 'Pago'),
        (STATUS_OPEN, 'Em aberto'),
        (STATUS_OVERDUE, 'Atrasado'),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='invoices',
    )
    objects = InvoiceManager()

    item_number = models.PositiveIntegerField()
    unit_name = models.CharField(max_length=255)
    cnpj_cpf = models.CharField(max_length=20, blank=True)
    exercise_month = models.PositiveSmallIntegerField()
    exercise_year = models.PositiveSmallIntegerField()
    document_type = models.CharField(max_length=60, default='Nota Fiscal')
    invoice_number = models.CharField(max_length=60, blank=True)
    issue_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    net_value = models.DecimalField(max_digits=12, decimal_places=2)
    payment_status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)
    payment_date = models.DateField(null=True, blank=True)
    paid_value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['item_number', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['owner', 'item_number'],
                name='unique_invoice_item_number_per_owner',
            ),
        ]
        indexes = [
            models.Index(fields=['owner', 'payment_status'], name='invoices_owner_status_idx'),
        ]

    def clean(self):
        super().clean()
        if self.exercise_month is not None and not 1 <= self.exercise_month <= 12:
            raise ValidationError({'exercise_month': 'O mês de exercício deve estar entre 1 e 12.'})
        if self.net_value is not None and self.net_value < Decimal('0'):
            raise ValidationError({'net_value': 'O valor líquido não pode ser negativo.'})
        if self.paid_value is not None and self.paid_value < Decimal('0'):
            raise ValidationError({'paid_value': 'O valor pago não pode ser negativo.'})
        if self.issue_date and self.due_date and self.due_date < self.issue_date:
            raise ValidationError({'due_date': 'O vencimento não pode ser anterior à emissão.'})
        if self.payment_status != self.STATUS_PAID:
            self.payment_date = None
            self.paid_value = None

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @property
    def exercise_label(self):
        return f'{self.exercise_month:02d}/{self.exercise_year}'

    def __str__(self):
        return f"#{self.item_number} {self.unit_name} ({self.payment_status})"
