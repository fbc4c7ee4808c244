from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.utils.money import quantize_amount, sum_amount

from .models import FixedExpense, Transaction
from .services import (
    active_fixed_expenses_total,
    month_bounds,
    monthly_summary,
    parse_month,
    toggle_fixed_expense,
)


class MonthHelperTests(SimpleTestCase):
    def test_month_bounds(self):
        self.assertEqual(month_bounds(2024, 2), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(month_bounds(2025, 12), (date(2025, 12, 1), date(2025, 12, 31)))

        with self.assertRaises(ValidationError):
            month_bounds(2025, 13)

    def test_parse_month_falls_back_to_default(self):
        default = date(2025, 7, 15)

        self.assertEqual(parse_month('2025-03', default), (2025, 3))
        self.assertEqual(parse_month('', default), (2025, 7))
        self.assertEqual(parse_month('2025-14', default), (2025, 7))
        self.assertEqual(parse_month('março', default), (2025, 7))

    def test_parse_month_rejects_out_of_range_years(self):
        default = date(2025, 7, 15)

        self.assertEqual(parse_month('0000-05', default), (2025, 7))
        self.assertEqual(parse_month('10000-01', default), (2025, 7))
        self.assertEqual(parse_month('9999-12', default), (9999, 12))


class MoneyHelperTests(TestCase):
    def test_quantize_amount_rounds_half_up(self):
        self.assertEqual(quantize_amount('10.005'), Decimal('10.01'))
        self.assertEqual(quantize_amount(None), Decimal('0.00'))

    def test_sum_amount_of_empty_queryset_is_zero(self):
        self.assertEqual(sum_amount(Transaction.objects.none()), Decimal('0.00'))


class CashflowServiceTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )
        self.other_owner = self.user_model.objects.create_user(
            username='outro',
            password='pass12345',
            role='financial',
        )

        Transaction.objects.create(
            owner=self.owner,
            type=Transaction.TYPE_INCOME,
            amount=Decimal('1500.00'),
            method='pix',
            transaction_date=date(2025, 3, 5),
        )
        Transaction.objects.create(
            owner=self.owner,
            type=Transaction.TYPE_EXPENSE,
            amount=Decimal('400.50'),
            method='boleto',
            category=Transaction.CATEGORY_FIXED,
            transaction_date=date(2025, 3, 10),
        )
        Transaction.objects.create(
            owner=self.owner,
            type=Transaction.TYPE_INCOME,
            amount=Decimal('999.00'),
            method='dinheiro',
            transaction_date=date(2025, 4, 1),
        )
        Transaction.objects.create(
            owner=self.other_owner,
            type=Transaction.TYPE_INCOME,
            amount=Decimal('50.00'),
            method='pix',
            transaction_date=date(2025, 3, 5),
        )

    def test_monthly_summary(self):
        summary = monthly_summary(owner=self.owner, year=2025, month=3)

        self.assertEqual(summary.income, Decimal('1500.00'))
        self.assertEqual(summary.expense, Decimal('400.50'))
        self.assertEqual(summary.balance, Decimal('1099.50'))
        self.assertEqual(len(summary.transactions), 2)

    def test_empty_month_totals_zero(self):
        summary = monthly_summary(owner=self.owner, year=2025, month=1)

        self.assertEqual(summary.income, Decimal('0.00'))
        self.assertEqual(summary.balance, Decimal('0.00'))
        self.assertEqual(summary.transactions, [])

    def test_expense_requires_category(self):
        entry = Transaction(
            owner=self.owner,
            type=Transaction.TYPE_EXPENSE,
            amount=Decimal('10.00'),
            method='pix',
        )
        with self.assertRaises(ValidationError):
            entry.full_clean()

    def test_income_rejects_boleto_and_clears_category(self):
        entry = Transaction(
            owner=self.owner,
            type=Transaction.TYPE_INCOME,
            amount=Decimal('10.00'),
            method='boleto',
        )
        with self.assertRaises(ValidationError):
            entry.full_clean()

        entry.method = 'pix'
        entry.category = Transaction.CATEGORY_VARIABLE
        entry.full_clean()
        self.assertEqual(entry.category, '')

    def test_amount_must_be_positive(self):
        entry = Transaction(owner=self.owner, type=Transaction.TYPE_INCOME, amount=Decimal('0'), method='pix')
        with self.assertRaises(ValidationError):
            entry.full_clean()

    def test_fixed_expense_toggle_and_total(self):
        rent = FixedExpense.objects.create(owner=self.owner, name='Aluguel', amount=Decimal('2000.00'))
        FixedExpense.objects.create(owner=self.owner, name='Internet', amount=Decimal('150.00'))

        self.assertEqual(active_fixed_expenses_total(owner=self.owner), Decimal('2150.00'))

        toggle_fixed_expense(expense=rent)
        rent.refresh_from_db()
        self.assertFalse(rent.active)
        self.assertEqual(active_fixed_expenses_total(owner=self.owner), Decimal('150.00'))


class CashflowViewTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )
        self.academic = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )

    def test_create_transaction_redirects_to_its_month(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.post(reverse('cashflow_list'), {
            'type': 'expense',
            'amount': '320.00',
            'method': 'transferencia',
            'category': 'despesas_variaveis',
            'description': 'Material de escritório',
            'transaction_date': '2025-05-20',
        })

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].endswith('?month=2025-05'))
        entry = Transaction.objects.get(owner=self.owner)
        self.assertEqual(entry.amount, Decimal('320.00'))

    def test_invalid_transaction_is_not_saved(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.post(reverse('cashflow_list'), {
            'type': 'expense',
            'amount': '320.00',
            'method': 'dinheiro',
            'category': 'despesas_variaveis',
            'transaction_date': '2025-05-20',
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Transaction.objects.exists())

    def test_fixed_expense_create_and_toggle(self):
        self.client.login(username='financeiro', password='pass12345')
        self.client.post(reverse('fixed_expense_create'), {
            'name': 'Aluguel',
            'amount': '2000.00',
            'method': 'boleto',
        })
        expense = FixedExpense.objects.get(owner=self.owner)

        response = self.client.post(reverse('fixed_expense_toggle', args=[expense.id]))

        self.assertEqual(response.status_code, 302)
        expense.refresh_from_db()
        self.assertFalse(expense.active)

    def test_dashboard_renders_for_financial_user(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.get(reverse('financial_dashboard'))

        self.assertEqual(response.status_code, 200)

    def test_academic_user_is_forbidden(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('cashflow_list'))

        self.assertEqual(response.status_code, 403)

    def test_out_of_range_month_filter_falls_back_to_current_month(self):
        self.client.login(username='financeiro', password='pass12345')

        for value in ('0000-05', '10000-01'):
            response = self.client.get(reverse('cashflow_list'), {'month': value})
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.context['selected_month'], f'{timezone.localdate():%Y-%m}')
