from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required
from apps.finance.invoices.services import invoice_totals

from .forms import FixedExpenseForm, MonthFilterForm, TransactionForm
from .models import FixedExpense
from .services import active_fixed_expenses_total, monthly_summary, parse_month, toggle_fixed_expense


def _selected_month(request):
    form = MonthFilterForm(request.GET or None)
    value = form.cleaned_data.get('month') if form.is_valid() else None
    year, month = parse_month(value, timezone.localdate())
    return form, year, month


@login_required
@role_required('financial')
def financial_dashboard(request):
    owner = request.user
    _, year, month = _selected_month(request)
    return render(request, 'cashflow/dashboard.html', {
        'summary': monthly_summary(owner=owner, year=year, month=month),
        'invoice_totals': invoice_totals(owner),
        'fixed_expenses_total': active_fixed_expenses_total(owner=owner),
    })


@login_required
@role_required('financial')
def cashflow_list(request):
    owner = request.user
    filter_form, year, month = _selected_month(request)

    if request.method == 'POST':
        form = TransactionForm(request.POST, owner=owner)
        if form.is_valid():
            entry = form.save()
            log_audit_event(
                request=request,
                action='cashflow.transaction_created',
                target=entry,
                details=f"Type={entry.type}, Amount={entry.amount}, Date={entry.transaction_date}",
            )
            messages.success(request, 'Transação registrada com sucesso.')
            return redirect(f"{request.path}?month={entry.transaction_date:%Y-%m}")
    else:
        form = TransactionForm(owner=owner)

    return render(request, 'cashflow/cashflow_list.html', {
        'summary': monthly_summary(owner=owner, year=year, month=month),
        'form': form,
        'filter_form': filter_form,
        'selected_month': f'{year:04d}-{month:02d}',
        'fixed_expenses': FixedExpense.objects.for_owner(owner),
        'fixed_expense_form': FixedExpenseForm(owner=owner),
        'fixed_expense_action': reverse('fixed_expense_create'),
    })


@login_required
@role_required('financial')
@require_POST
def fixed_expense_create(request):
    form = FixedExpenseForm(request.POST, owner=request.user)
    if form.is_valid():
        expense = form.save()
        log_audit_event(
            request=request,
            action='cashflow.fixed_expense_created',
            target=expense,
            details=f"Name={expense.name}, Amount={expense.amount}",
        )
        messages.success(request, 'Despesa fixa cadastrada.')
    else:
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
    return redirect('cashflow_list')


@login_required
@role_required('financial')
@require_POST
def fixed_expense_toggle(request, pk):
    expense = get_object_or_404(FixedExpense, pk=pk, owner=request.user)
    expense = toggle_fixed_expense(expense=expense)
    log_audit_event(
        request=request,
        action='cashflow.fixed_expense_toggled',
        target=expense,
        details=f"Active={expense.active}",
    )
    return redirect('cashflow_list')
