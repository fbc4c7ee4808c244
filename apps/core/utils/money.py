from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum

CENT = Decimal('0.01')


def to_decimal(value) -> Decimal:
    return Decimal(str(value or '0'))


def quantize_amount(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_amount(queryset, field_name='amount') -> Decimal:
    """Sum a decimal column, treating an empty queryset as zero."""
    value = queryset.aggregate(total=Sum(field_name)).get('total')
    return quantize_amount(value)
