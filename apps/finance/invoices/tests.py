from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from .models import Invoice
from .services import create_invoice, invoice_totals, next_item_number, soft_delete_invoice


class InvoiceServiceTests(TestCase):
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

    def _create(self, owner=None, **overrides):
        fields = {
            'unit_name': 'Unidade Centro',
            'exercise_month': 3,
            'exercise_year': 2025,
            'net_value': Decimal('1000.00'),
        }
        fields.update(overrides)
        return create_invoice(owner=owner or self.owner, **fields)

    def test_item_numbers_are_sequential_per_owner(self):
        first = self._create()
        second = self._create()
        foreign = self._create(owner=self.other_owner)

        self.assertEqual((first.item_number, second.item_number), (1, 2))
        self.assertEqual(foreign.item_number, 1)

    def test_soft_deleted_numbers_are_not_reused(self):
        first = self._create()
        soft_delete_invoice(invoice=first)

        self.assertEqual(next_item_number(self.owner), 2)
        self.assertFalse(Invoice.objects.for_owner(self.owner).active().exists())
        self.assertTrue(Invoice.objects.filter(pk=first.pk).exists())

    def test_soft_delete_twice_is_rejected(self):
        invoice = self._create()
        soft_delete_invoice(invoice=invoice)

        with self.assertRaises(ValidationError):
            soft_delete_invoice(invoice=invoice)

    def test_payment_fields_cleared_unless_paid(self):
        invoice = self._create(
            payment_status=Invoice.STATUS_OPEN,
            payment_date=date(2025, 3, 20),
            paid_value=Decimal('1000.00'),
        )

        self.assertIsNone(invoice.payment_date)
        self.assertIsNone(invoice.paid_value)

    def test_due_date_before_issue_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            self._create(issue_date=date(2025, 3, 10), due_date=date(2025, 3, 1))

    def test_exercise_month_range(self):
        with self.assertRaises(ValidationError):
            self._create(exercise_month=13)

    def test_totals_ignore_deleted_rows(self):
        self._create(payment_status=Invoice.STATUS_PAID, paid_value=Decimal('950.00'), payment_date=date(2025, 3, 5))
        self._create(payment_status=Invoice.STATUS_OPEN, net_value=Decimal('300.00'))
        self._create(payment_status=Invoice.STATUS_OVERDUE, net_value=Decimal('200.00'))
        deleted = self._create(payment_status=Invoice.STATUS_OVERDUE, net_value=Decimal('5000.00'))
        soft_delete_invoice(invoice=deleted)

        totals = invoice_totals(self.owner)

        self.assertEqual(totals['paid'], Decimal('950.00'))
        self.assertEqual(totals['open'], Decimal('300.00'))
        self.assertEqual(totals['overdue'], Decimal('200.00'))


class InvoiceViewTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )
        self.intruder = self.user_model.objects.create_user(
            username='intruso',
            password='pass12345',
            role='financial',
        )

    def test_create_invoice_assigns_item_number(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.post(reverse('invoice_list'), {
            'unit_name': 'Unidade Centro',
            'cnpj_cpf': '12.345.678/0001-90',
            'exercise_month': 4,
            'exercise_year': 2025,
            'document_type': 'Nota Fiscal',
            'invoice_number': 'NF-100',
            'net_value': '1200.00',
            'payment_status': 'PAGO',
            'payment_date': '2025-04-10',
            'paid_value': '1200.00',
        })

        self.assertEqual(response.status_code, 302)
        invoice = Invoice.objects.get(owner=self.owner)
        self.assertEqual(invoice.item_number, 1)
        self.assertEqual(invoice.paid_value, Decimal('1200.00'))

    def test_delete_hides_invoice_from_list(self):
        invoice = create_invoice(
            owner=self.owner,
            unit_name='Unidade Centro',
            exercise_month=4,
            exercise_year=2025,
            net_value=Decimal('100.00'),
        )
        self.client.login(username='financeiro', password='pass12345')
        self.client.post(reverse('invoice_delete', args=[invoice.id]))

        invoice.refresh_from_db()
        self.assertTrue(invoice.is_deleted)
        response = self.client.get(reverse('invoice_list'))
        self.assertNotIn(invoice, response.context['invoices'])

    def test_other_owner_cannot_edit(self):
        invoice = create_invoice(
            owner=self.owner,
            unit_name='Unidade Centro',
            exercise_month=4,
            exercise_year=2025,
            net_value=Decimal('100.00'),
        )
        self.client.login(username='intruso', password='pass12345')
        response = self.client.get(reverse('invoice_update', args=[invoice.id]))

        self.assertEqual(response.status_code, 404)
