from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.core.utils.managers import OwnerManager


METHOD_PIX = 'pix'
METHOD_TRANSFER = 'transferencia'
METHOD_CASH = 'dinheiro'
METHOD_BOLETO = 'boleto'

METHOD_CHOICES = (
    (METHOD_PIX, 'PIX'),
    (METHOD_TRANSFER, 'Transferência'),
    (METHOD_CASH, 'Dinheiro'),
    (METHOD_BOLETO, 'Boleto'),
)

INCOME_METHODS = (METHOD_PIX, METHOD_TRANSFER, METHOD_CASH)
EXPENSE_METHODS = (METHOD_BOLETO, METHOD_PIX, METHOD_TRANSFER)


class Transaction(models.Model):
    TYPE_INCOME = 'income'
    TYPE_EXPENSE = 'expense'
    TYPE_CHOICES = (
        (TYPE_INCOME, 'Entrada'),
        (TYPE_EXPENSE, 'Saída'),
    )

    CATEGORY_FIXED = 'despesas_fixas'
    CATEGORY_VARIABLE = 'despesas_variaveis'
    CATEGORY_CHOICES = (
        (CATEGORY_FIXED, 'Despesas Fixas'),
        (CATEGORY_VARIABLE, 'Despesas Variáveis'),
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='cash_transactions',
    )
    objects = OwnerManager()

    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default=METHOD_PIX)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES, blank=True)
    description = models.CharField(max_length=255, blank=True)
    transaction_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-transaction_date', '-id']
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name='cash_transaction_amount_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['owner', 'transaction_date'], name='cashflow_tx_owner_date_idx'),
        ]

    def clean(self):
        super().clean()
        if self.amount is not None and self.amount <= Decimal('0'):
            raise ValidationError({'amount': 'O valor deve ser maior que zero.'})

        if self.type == self.TYPE_INCOME:
            self.category = ''
            if self.method not in INCOME_METHODS:
                raise ValidationError({'method': 'Forma de recebimento inválida para entradas.'})
        elif self.type == self.TYPE_EXPENSE:
            if not self.category:
                raise ValidationError({'category': 'Informe a categoria da despesa.'})
            if self.method not in EXPENSE_METHODS:
                raise ValidationError({'method': 'Forma de pagamento inválida para saídas.'})

    @property
    def is_income(self):
        return self.type == self.TYPE_INCOME

    def __str__(self):
        return f"{self.get_type_display()} - {self.amount} ({self.transaction_date})"


class FixedExpense(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='fixed_expenses',
    )
    objects = OwnerManager()

    name = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default=METHOD_BOLETO)
    description = models.CharField(max_length=255, blank=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name', 'id']

    def clean(self):
        super().clean()
        if self.amount is not None and self.amount <= Decimal('0'):
            raise ValidationError({'amount': 'O valor deve ser maior que zero.'})

    def __str__(self):
        return f"{self.name} - {self.amount}"
