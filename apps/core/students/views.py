from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import StudentForm, StudentSearchForm, UnitForm
from .models import Student, Unit


@login_required
@role_required('academic')
def unit_list(request):
    owner = request.user

    if request.method == 'POST':
        form = UnitForm(request.POST, owner=owner)
        if form.is_valid():
            unit = form.save()
            log_audit_event(
                request=request,
                action='students.unit_created',
                target=unit,
                details=f"Name={unit.name}",
            )
            messages.success(request, 'Unidade cadastrada com sucesso.')
            return redirect('unit_list')
    else:
        form = UnitForm(owner=owner)

    units = Unit.objects.for_owner(owner).order_by('name')
    return render(request, 'students/unit_list.html', {
        'units': units,
        'form': form,
    })


@login_required
@role_required('academic')
def unit_update(request, pk):
    unit = get_object_or_404(Unit, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = UnitForm(request.POST, instance=unit, owner=request.user)
        if form.is_valid():
            unit = form.save()
            log_audit_event(
                request=request,
                action='students.unit_updated',
                target=unit,
                details=f"Name={unit.name}",
            )
            messages.success(request, 'Unidade atualizada com sucesso.')
            return redirect('unit_list')
    else:
        form = UnitForm(instance=unit, owner=request.user)

    return render(request, 'students/unit_form.html', {
        'form': form,
        'unit': unit,
    })


@login_required
@role_required('academic')
@require_POST
def unit_deactivate(request, pk):
    unit = get_object_or_404(Unit, pk=pk, owner=request.user)
    try:
        unit.delete()
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
        return redirect('unit_list')

    log_audit_event(
        request=request,
        action='students.unit_deactivated',
        target=unit,
        details=f"Name={unit.name}",
    )
    messages.success(request, 'Unidade desativada.')
    return redirect('unit_list')


@login_required
@role_required('academic')
def student_list(request):
    owner = request.user

    if request.method == 'POST':
        form = StudentForm(request.POST, owner=owner)
        if form.is_valid():
            student = form.save()
            log_audit_event(
                request=request,
                action='students.student_created',
                target=student,
                details=f"Name={student.full_name}",
            )
            messages.success(request, 'Aluno cadastrado com sucesso.')
            return redirect('student_list')
    else:
        form = StudentForm(owner=owner)

    search_form = StudentSearchForm(request.GET or None)
    students = Student.objects.for_owner(owner).select_related('unit')
    if search_form.is_valid() and search_form.cleaned_data.get('q'):
        term = search_form.cleaned_data['q'].strip()
        students = students.filter(
            Q(full_name__icontains=term) | Q(cpf__icontains=term) | Q(email__icontains=term)
        )

    return render(request, 'students/student_list.html', {
        'students': students.order_by('full_name'),
        'form': form,
        'search_form': search_form,
    })


@login_required
@role_required('academic')
def student_update(request, pk):
    student = get_object_or_404(Student, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = StudentForm(request.POST, instance=student, owner=request.user)
        if form.is_valid():
            student = form.save()
            log_audit_event(
                request=request,
                action='students.student_updated',
                target=student,
                details=f"Name={student.full_name}",
            )
            messages.success(request, 'Aluno atualizado com sucesso.')
            return redirect('student_list')
    else:
        form = StudentForm(instance=student, owner=request.user)

    return render(request, 'students/student_form.html', {
        'form': form,
        'student': student,
    })
