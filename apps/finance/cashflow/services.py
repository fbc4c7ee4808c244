import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.utils.money import quantize_amount, sum_amount

from .models import FixedExpense, Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    income: Decimal
    expense: Decimal
    balance: Decimal
    transactions: list


def month_bounds(year: int, month: int):
    if not 1 <= int(month) <= 12:
        raise ValidationError('Mês inválido.')
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def parse_month(value, default: date):
    """Parse a ``YYYY-MM`` filter value, falling back to ``default``'s month."""
    if value:
        try:
            year_text, month_text = str(value).split('-', 1)
            year, month = int(year_text), int(month_text)
            if date.min.year <= year <= date.max.year and 1 <= month <= 12:
                return year, month
        except ValueError:
            pass
    return default.year, default.month


def monthly_summary(*, owner, year: int, month: int) -> MonthlySummary:
    start, end = month_bounds(year, month)
    transactions = Transaction.objects.for_owner(owner).filter(
        transaction_date__gte=start,
        transaction_date__lte=end,
    ).order_by('-transaction_date', '-id')

    income = sum_amount(transactions.filter(type=Transaction.TYPE_INCOME))
    expense = sum_amount(transactions.filter(type=Transaction.TYPE_EXPENSE))
    return MonthlySummary(
        year=int(year),
        month=int(month),
        income=income,
        expense=expense,
        balance=quantize_amount(income - expense),
        transactions=list(transactions),
    )


@transaction.atomic
def toggle_fixed_expense(*, expense: FixedExpense) -> FixedExpense:
    expense.active = not expense.active
    expense.save(update_fields=['active'])
    logger.info('Fixed expense %s active=%s', expense.pk, expense.active)
    return expense


def active_fixed_expenses_total(*, owner) -> Decimal:
    return sum_amount(FixedExpense.objects.for_owner(owner).filter(active=True))
