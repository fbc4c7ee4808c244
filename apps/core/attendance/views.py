from itertools import groupby

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.core.academics.models import CourseClass
from apps.core.students.models import Student
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import AttendanceEntryForm, AttendanceReportForm, ClassSessionForm, EadAccessForm
from .models import AttendanceEntry
from .services import (
    attendance_report,
    delete_attendance_entry,
    record_class_attendance,
    report_summary,
    report_table,
    rows_to_csv_bytes,
    save_ead_access,
    table_pdf_bytes,
    update_attendance_entry,
)


def _response_for_export(*, title, headers, rows, filename_base, export_type, footer=''):
    if export_type == 'csv':
        content = rows_to_csv_bytes(headers, rows)
        response = HttpResponse(content, content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename_base}.csv"'
        return response

    if export_type == 'pdf':
        content = table_pdf_bytes(title=title, headers=headers, rows=rows, footer=footer)
        response = HttpResponse(content, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{filename_base}.pdf"'
        return response

    return None


def _presence_from_post(request, enrollments):
    return {
        enrollment.student_id: request.POST.get(f'present_{enrollment.student_id}') == 'on'
        for enrollment in enrollments
    }


@login_required
@role_required('academic')
def class_attendance(request, pk):
    course_class = get_object_or_404(
        CourseClass.objects.select_related('course'),
        pk=pk,
        owner=request.user,
    )
    if not course_class.is_videoconference:
        messages.error(request, 'Turmas EAD registram acessos, não presença por aula.')
        return redirect('class_detail', pk=course_class.pk)

    enrollments = list(course_class.enrollments.select_related('student').order_by('student__full_name'))

    if request.method == 'POST':
        form = ClassSessionForm(request.POST, course_class=course_class)
        if form.is_valid():
            try:
                saved = record_class_attendance(
                    course_class=course_class,
                    class_number=form.cleaned_data['class_number'],
                    class_date=form.cleaned_data['class_date'],
                    presence_by_student_id=_presence_from_post(request, enrollments),
                )
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                present_count = sum(1 for entry in saved if entry.present)
                log_audit_event(
                    request=request,
                    action='attendance.class_recorded',
                    target=course_class,
                    details=(
                        f"ClassNumber={form.cleaned_data['class_number']}, "
                        f"Date={form.cleaned_data['class_date']}, Present={present_count}/{len(saved)}"
                    ),
                )
                messages.success(request, 'Frequência registrada com sucesso.')
                return redirect('class_attendance', pk=course_class.pk)
    else:
        next_number = (
            course_class.attendance_entries.order_by('-class_number').values_list('class_number', flat=True).first()
            or 0
        ) + 1
        form = ClassSessionForm(
            course_class=course_class,
            initial={'class_number': min(next_number, course_class.total_classes)},
        )

    entries = course_class.attendance_entries.select_related('student').order_by('class_number', 'student__full_name')
    sessions = [
        {'class_number': number, 'entries': list(group)}
        for number, group in groupby(entries, key=lambda entry: entry.class_number)
    ]

    return render(request, 'attendance/class_attendance.html', {
        'course_class': course_class,
        'enrollments': enrollments,
        'form': form,
        'sessions': sessions,
    })


@login_required
@role_required('academic')
def attendance_entry_update(request, pk):
    entry = get_object_or_404(
        AttendanceEntry.objects.select_related('course_class', 'student'),
        pk=pk,
        course_class__owner=request.user,
    )

    if request.method == 'POST':
        form = AttendanceEntryForm(request.POST, instance=entry)
        if form.is_valid():
            try:
                entry = update_attendance_entry(
                    entry=entry,
                    class_number=form.cleaned_data['class_number'],
                    class_date=form.cleaned_data['class_date'],
                    present=form.cleaned_data['present'],
                )
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='attendance.entry_updated',
                    target=entry,
                    details=f"ClassNumber={entry.class_number}, Present={entry.present}",
                )
                messages.success(request, 'Registro de frequência atualizado.')
                return redirect('class_attendance', pk=entry.course_class_id)
    else:
        form = AttendanceEntryForm(instance=entry)

    return render(request, 'attendance/entry_form.html', {
        'form': form,
        'entry': entry,
    })


@login_required
@role_required('academic')
@require_POST
def attendance_entry_delete(request, pk):
    entry = get_object_or_404(AttendanceEntry, pk=pk, course_class__owner=request.user)
    class_id = entry.course_class_id
    try:
        delete_attendance_entry(entry=entry)
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
    else:
        log_audit_event(
            request=request,
            action='attendance.entry_deleted',
            details=f"Class={class_id}, Entry={pk}",
        )
        messages.success(request, 'Registro de frequência excluído.')
    return redirect('class_attendance', pk=class_id)


@login_required
@role_required('academic')
@require_POST
def ead_access_update(request, pk, student_id):
    course_class = get_object_or_404(CourseClass, pk=pk, owner=request.user)
    student = get_object_or_404(Student, pk=student_id, owner=request.user)

    form = EadAccessForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Datas de acesso inválidas.')
        return redirect('class_detail', pk=course_class.pk)

    try:
        access = save_ead_access(
            course_class=course_class,
            student=student,
            access_date_1=form.cleaned_data.get('access_date_1'),
            access_date_2=form.cleaned_data.get('access_date_2'),
            access_date_3=form.cleaned_data.get('access_date_3'),
        )
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
    else:
        log_audit_event(
            request=request,
            action='attendance.ead_access_saved',
            target=access,
            details=f"Student={student.id}",
        )
        messages.success(request, 'Acessos EAD salvos.')
    return redirect('class_detail', pk=course_class.pk)


@login_required
@role_required('academic')
def attendance_report_view(request):
    form = AttendanceReportForm(request.GET or None, owner=request.user)
    rows = []
    summary = None

    if form.is_valid():
        rows = attendance_report(
            owner=request.user,
            cycle=form.cleaned_data.get('cycle'),
            course_class=form.cleaned_data.get('course_class'),
            modality=form.cleaned_data.get('modality'),
            unit=form.cleaned_data.get('unit'),
            student_name=form.cleaned_data.get('student_name') or '',
            date_from=form.cleaned_data.get('date_from'),
            date_to=form.cleaned_data.get('date_to'),
        )
        summary = report_summary(rows)

        export_type = request.GET.get('export')
        if export_type:
            headers, table = report_table(rows)
            today = timezone.localdate()
            response = _response_for_export(
                title='Relatório de Frequência',
                headers=headers,
                rows=table,
                filename_base=f'relatorio_{today:%Y-%m-%d}',
                export_type=export_type,
                footer=(
                    f"Gerado em {today:%d/%m/%Y}. Alunos: {summary['total_students']}, "
                    f"frequentes: {summary['present_count']}, ausentes: {summary['absent_count']}."
                ),
            )
            if response:
                return response

    return render(request, 'attendance/report.html', {
        'form': form,
        'rows': rows,
        'summary': summary,
    })
