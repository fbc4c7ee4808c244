import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from apps.core.utils.money import sum_amount

from .models import Invoice

logger = logging.getLogger(__name__)


def next_item_number(owner) -> int:
    # Soft-deleted rows keep their number, so numbers are never reused.
    current = Invoice.objects.for_owner(owner).aggregate(top=Max('item_number'))['top']
    return (current or 0) + 1


@transaction.atomic
def create_invoice(*, owner, **fields) -> Invoice:
    invoice = Invoice(owner=owner, item_number=next_item_number(owner), **fields)
    invoice.full_clean()
    invoice.save()
    logger.info('Created invoice %s (item %s) for owner %s', invoice.pk, invoice.item_number, owner.pk)
    return invoice


@transaction.atomic
def soft_delete_invoice(*, invoice: Invoice) -> Invoice:
    if invoice.is_deleted:
        raise ValidationError('Este lançamento já foi excluído.')
    invoice.deleted_at = timezone.now()
    invoice.save(update_fields=['deleted_at', 'updated_at'])
    logger.info('Soft-deleted invoice %s', invoice.pk)
    return invoice


def invoice_totals(owner):
    invoices = Invoice.objects.for_owner(owner).active()
    return {
        'paid': sum_amount(invoices.filter(payment_status=Invoice.STATUS_PAID), 'paid_value'),
        'open': sum_amount(invoices.filter(payment_status=Invoice.STATUS_OPEN), 'net_value'),
        'overdue': sum_amount(invoices.filter(payment_status=Invoice.STATUS_OVERDUE), 'net_value'),
    }
