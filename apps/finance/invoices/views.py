from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import InvoiceForm
from .models import Invoice
from .services import create_invoice, invoice_totals, soft_delete_invoice


@login_required
@role_required('financial')
def invoice_list(request):
    owner = request.user

    if request.method == 'POST':
        form = InvoiceForm(request.POST, owner=owner)
        if form.is_valid():
            try:
                invoice = create_invoice(owner=owner, **form.cleaned_data)
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='invoices.created',
                    target=invoice,
                    details=f"Item={invoice.item_number}, Net={invoice.net_value}, Status={invoice.payment_status}",
                )
                messages.success(request, 'Lançamento cadastrado com sucesso.')
                return redirect('invoice_list')
    else:
        form = InvoiceForm(owner=owner)

    invoices = Invoice.objects.for_owner(owner).active()
    status = request.GET.get('status')
    if status:
        invoices = invoices.filter(payment_status=status)

    return render(request, 'invoices/invoice_list.html', {
        'invoices': invoices,
        'form': form,
        'totals': invoice_totals(owner),
        'selected_status': status,
    })


@login_required
@role_required('financial')
def invoice_update(request, pk):
    invoice = get_object_or_404(Invoice.objects.active(), pk=pk, owner=request.user)

    if request.method == 'POST':
        form = InvoiceForm(request.POST, instance=invoice, owner=request.user)
        if form.is_valid():
            invoice = form.save()
            log_audit_event(
                request=request,
                action='invoices.updated',
                target=invoice,
                details=f"Item={invoice.item_number}, Status={invoice.payment_status}",
            )
            messages.success(request, 'Lançamento atualizado com sucesso.')
            return redirect('invoice_list')
    else:
        form = InvoiceForm(instance=invoice, owner=request.user)

    return render(request, 'invoices/invoice_form.html', {
        'form': form,
        'invoice': invoice,
    })


@login_required
@role_required('financial')
@require_POST
def invoice_delete(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk, owner=request.user)
    try:
        soft_delete_invoice(invoice=invoice)
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
    else:
        log_audit_event(
            request=request,
            action='invoices.deleted',
            target=invoice,
            details=f"Item={invoice.item_number}",
        )
        messages.success(request, 'Lançamento excluído.')
    return redirect('invoice_list')
