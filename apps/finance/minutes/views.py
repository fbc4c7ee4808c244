from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import MeetingMinuteForm
from .models import MeetingMinute


@login_required
@role_required('financial')
def minute_list(request):
    owner = request.user

    if request.method == 'POST':
        form = MeetingMinuteForm(request.POST, owner=owner)
        if form.is_valid():
            minute = form.save()
            log_audit_event(
                request=request,
                action='minutes.created',
                target=minute,
                details=f"Title={minute.title}, Date={minute.meeting_date}",
            )
            messages.success(request, 'Ata cadastrada com sucesso.')
            return redirect('minute_list')
    else:
        form = MeetingMinuteForm(owner=owner)

    return render(request, 'minutes/minute_list.html', {
        'minutes': MeetingMinute.objects.for_owner(owner),
        'form': form,
    })


@login_required
@role_required('financial')
def minute_update(request, pk):
    minute = get_object_or_404(MeetingMinute, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = MeetingMinuteForm(request.POST, instance=minute, owner=request.user)
        if form.is_valid():
            minute = form.save()
            log_audit_event(
                request=request,
                action='minutes.updated',
                target=minute,
                details=f"Title={minute.title}",
            )
            messages.success(request, 'Ata atualizada com sucesso.')
            return redirect('minute_list')
    else:
        form = MeetingMinuteForm(instance=minute, owner=request.user)

    return render(request, 'minutes/minute_form.html', {
        'form': form,
        'minute': minute,
    })


@login_required
@role_required('financial')
@require_POST
def minute_delete(request, pk):
    minute = get_object_or_404(MeetingMinute, pk=pk, owner=request.user)
    minute.delete()
    log_audit_event(
        request=request,
        action='minutes.deleted',
        details=f"Minute={pk}",
    )
    messages.success(request, 'Ata excluída.')
    return redirect('minute_list')


@login_required
@role_required('financial')
def minute_print(request, pk):
    minute = get_object_or_404(MeetingMinute, pk=pk, owner=request.user)
    return render(request, 'minutes/minute_print.html', {
        'minute': minute,
    })
