from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.academics.models import Enrollment
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .models import Certificate
from .services import (
    assemble_certificate_data,
    certificate_filename,
    format_date_br,
    generate_certificate_pdf,
    issue_certificate,
    workload_in_words,
)


@login_required
@role_required('academic')
def certificate_list(request):
    certificates = Certificate.objects.filter(
        course_class__owner=request.user,
    ).select_related('student', 'course_class', 'course_class__course')
    return render(request, 'certificates/certificate_list.html', {
        'certificates': certificates,
    })


@login_required
@role_required('academic')
@require_POST
def certificate_issue(request, enrollment_id):
    enrollment = get_object_or_404(
        Enrollment.objects.select_related('student', 'course_class'),
        pk=enrollment_id,
        course_class__owner=request.user,
    )
    try:
        certificate = issue_certificate(enrollment=enrollment)
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
        return redirect('class_detail', pk=enrollment.course_class_id)

    log_audit_event(
        request=request,
        action='certificates.issued',
        target=certificate,
        details=f"Student={enrollment.student_id}, Percentage={certificate.attendance_percentage}",
    )
    messages.success(request, 'Certificado emitido.')
    return redirect('certificate_detail', pk=certificate.pk)


@login_required
@role_required('academic')
def certificate_detail(request, pk):
    certificate = get_object_or_404(
        Certificate.objects.select_related('student', 'course_class', 'course_class__course'),
        pk=pk,
        course_class__owner=request.user,
    )
    data = assemble_certificate_data(student=certificate.student, course_class=certificate.course_class)
    return render(request, 'certificates/certificate_detail.html', {
        'certificate': certificate,
        'data': data,
        'period': f'{format_date_br(data.start_date)} a {format_date_br(data.end_date)}',
        'workload_words': workload_in_words(data.workload_hours),
    })


@login_required
@role_required('academic')
def certificate_pdf(request, pk):
    certificate = get_object_or_404(
        Certificate.objects.select_related('student', 'course_class', 'course_class__course'),
        pk=pk,
        course_class__owner=request.user,
    )
    data = assemble_certificate_data(student=certificate.student, course_class=certificate.course_class)
    content = generate_certificate_pdf(data, issued_on=certificate.issue_date)

    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{certificate_filename(data.student_name)}"'
    return response
