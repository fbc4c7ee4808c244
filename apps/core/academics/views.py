from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Count, ProtectedError
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from apps.core.attendance.services import class_eligibility_rows
from apps.core.students.models import Student
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .forms import CourseClassForm, CourseForm, CycleForm, EnrollmentForm, StudentLookupForm
from .models import STATUS_ACTIVE, Course, CourseClass, Cycle
from .services import (
    available_students,
    close_class,
    close_cycle,
    create_course_with_modules,
    enroll_students,
    remove_student,
    replace_course_modules,
)


@login_required
@role_required('academic')
def academic_dashboard(request):
    owner = request.user
    return render(request, 'academics/dashboard.html', {
        'student_count': Student.objects.for_owner(owner).count(),
        'course_count': Course.objects.for_owner(owner).count(),
        'active_class_count': CourseClass.objects.for_owner(owner).filter(status=STATUS_ACTIVE).count(),
        'active_cycles': Cycle.objects.for_owner(owner).filter(status=STATUS_ACTIVE).annotate(
            class_count=Count('classes'),
        ),
    })


@login_required
@role_required('academic')
def course_list(request):
    owner = request.user

    if request.method == 'POST':
        form = CourseForm(request.POST, owner=owner)
        if form.is_valid():
            try:
                course = create_course_with_modules(
                    owner=owner,
                    name=form.cleaned_data['name'],
                    teacher_name=form.cleaned_data.get('teacher_name') or '',
                    workload=form.cleaned_data['workload'],
                    modality=form.cleaned_data['modality'],
                    module_names=form.module_names(),
                )
            except ValidationError as exc:
                form.add_error(None, exc)
            else:
                log_audit_event(
                    request=request,
                    action='academics.course_created',
                    target=course,
                    details=f"Name={course.name}, Modules={course.modules.count()}",
                )
                messages.success(request, 'Curso cadastrado com sucesso.')
                return redirect('course_list')
    else:
        form = CourseForm(owner=owner)

    courses = Course.objects.for_owner(owner).prefetch_related('modules').order_by('name')
    return render(request, 'academics/course_list.html', {
        'courses': courses,
        'form': form,
    })


@login_required
@role_required('academic')
def course_update(request, pk):
    course = get_object_or_404(Course, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = CourseForm(request.POST, instance=course, owner=request.user)
        if form.is_valid():
            course = form.save()
            replace_course_modules(course=course, module_names=form.module_names())
            log_audit_event(
                request=request,
                action='academics.course_updated',
                target=course,
                details=f"Name={course.name}, Modules={course.modules.count()}",
            )
            messages.success(request, 'Curso atualizado com sucesso.')
            return redirect('course_list')
    else:
        form = CourseForm(instance=course, owner=request.user)

    return render(request, 'academics/course_form.html', {
        'form': form,
        'course': course,
    })


@login_required
@role_required('academic')
@require_POST
def course_delete(request, pk):
    course = get_object_or_404(Course, pk=pk, owner=request.user)
    try:
        course.delete()
    except ProtectedError:
        messages.error(request, 'Não é possível excluir um curso que possui turmas.')
    else:
        log_audit_event(
            request=request,
            action='academics.course_deleted',
            details=f"Course={pk}",
        )
        messages.success(request, 'Curso excluído.')
    return redirect('course_list')


@login_required
@role_required('academic')
def cycle_list(request):
    owner = request.user

    if request.method == 'POST':
        form = CycleForm(request.POST, owner=owner)
        if form.is_valid():
            cycle = form.save()
            log_audit_event(
                request=request,
                action='academics.cycle_created',
                target=cycle,
                details=f"Name={cycle.name}, Start={cycle.start_date}, End={cycle.end_date}",
            )
            messages.success(request, 'Ciclo criado com sucesso.')
            return redirect('cycle_list')
    else:
        form = CycleForm(owner=owner)

    cycles = Cycle.objects.for_owner(owner).annotate(class_count=Count('classes'))
    return render(request, 'academics/cycle_list.html', {
        'cycles': cycles,
        'form': form,
    })


@login_required
@role_required('academic')
@require_POST
def cycle_close(request, pk):
    cycle = get_object_or_404(Cycle, pk=pk, owner=request.user)
    closed = close_cycle(cycle=cycle)
    log_audit_event(
        request=request,
        action='academics.cycle_closed',
        target=cycle,
        details=f"ClosedClasses={closed}",
    )
    messages.success(request, f'Ciclo encerrado. {closed} turma(s) encerrada(s).')
    return redirect('cycle_list')


@login_required
@role_required('academic')
def class_list(request):
    owner = request.user

    if request.method == 'POST':
        form = CourseClassForm(request.POST, owner=owner)
        if form.is_valid():
            course_class = form.save()
            log_audit_event(
                request=request,
                action='academics.class_created',
                target=course_class,
                details=f"Course={course_class.course_id}, Cycle={course_class.cycle_id}, Modality={course_class.modality}",
            )
            messages.success(request, 'Turma criada com sucesso.')
            return redirect('class_detail', pk=course_class.pk)
    else:
        form = CourseClassForm(owner=owner)

    classes = CourseClass.objects.for_owner(owner).select_related('course', 'cycle').annotate(
        student_count=Count('enrollments'),
    )
    cycle_id = request.GET.get('cycle')
    if cycle_id and str(cycle_id).isdigit():
        classes = classes.filter(cycle_id=int(cycle_id))
    status = request.GET.get('status')
    if status:
        classes = classes.filter(status=status)

    return render(request, 'academics/class_list.html', {
        'classes': classes,
        'cycles': Cycle.objects.for_owner(owner),
        'form': form,
        'selected_cycle': cycle_id,
        'selected_status': status,
    })


@login_required
@role_required('academic')
def class_update(request, pk):
    course_class = get_object_or_404(CourseClass, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = CourseClassForm(request.POST, instance=course_class, owner=request.user)
        if form.is_valid():
            course_class = form.save()
            log_audit_event(
                request=request,
                action='academics.class_updated',
                target=course_class,
                details=f"Name={course_class.name}",
            )
            messages.success(request, 'Turma atualizada com sucesso.')
            return redirect('class_detail', pk=course_class.pk)
    else:
        form = CourseClassForm(instance=course_class, owner=request.user)

    return render(request, 'academics/class_form.html', {
        'form': form,
        'course_class': course_class,
    })


@login_required
@role_required('academic')
def class_detail(request, pk):
    course_class = get_object_or_404(
        CourseClass.objects.select_related('course', 'cycle'),
        pk=pk,
        owner=request.user,
    )
    lookup_form = StudentLookupForm(request.GET or None)
    search = lookup_form.cleaned_data.get('q', '') if lookup_form.is_valid() else ''
    candidates = available_students(course_class=course_class, search=search)

    return render(request, 'academics/class_detail.html', {
        'course_class': course_class,
        'rows': class_eligibility_rows(course_class=course_class),
        'lookup_form': lookup_form,
        'enroll_form': EnrollmentForm(course_class=course_class, student_queryset=candidates),
    })


@login_required
@role_required('academic')
@require_POST
def class_enroll(request, pk):
    course_class = get_object_or_404(CourseClass, pk=pk, owner=request.user)
    form = EnrollmentForm(
        request.POST,
        course_class=course_class,
        student_queryset=available_students(course_class=course_class),
    )

    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect('class_detail', pk=course_class.pk)

    try:
        created = enroll_students(
            course_class=course_class,
            students=form.cleaned_data['students'],
            enrollment_type=form.cleaned_data['enrollment_type'],
            enrollment_date=form.cleaned_data.get('enrollment_date'),
        )
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
    else:
        log_audit_event(
            request=request,
            action='academics.students_enrolled',
            target=course_class,
            details=f"Count={len(created)}, Type={form.cleaned_data['enrollment_type']}",
        )
        messages.success(request, f'{len(created)} aluno(s) matriculado(s).')
    return redirect('class_detail', pk=course_class.pk)


@login_required
@role_required('academic')
@require_POST
def class_remove_student(request, pk, student_id):
    course_class = get_object_or_404(CourseClass, pk=pk, owner=request.user)
    student = get_object_or_404(Student, pk=student_id, owner=request.user)
    try:
        remove_student(course_class=course_class, student=student)
    except ValidationError as exc:
        messages.error(request, '; '.join(exc.messages))
    else:
        log_audit_event(
            request=request,
            action='academics.student_removed',
            target=course_class,
            details=f"Student={student.id}",
        )
        messages.success(request, 'Aluno removido da turma.')
    return redirect('class_detail', pk=course_class.pk)


@login_required
@role_required('academic')
@require_POST
def class_close(request, pk):
    course_class = get_object_or_404(CourseClass, pk=pk, owner=request.user)
    close_class(course_class=course_class)
    log_audit_event(
        request=request,
        action='academics.class_closed',
        target=course_class,
    )
    messages.success(request, 'Turma encerrada.')
    return redirect('class_detail', pk=course_class.pk)
