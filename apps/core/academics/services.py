from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .models import STATUS_ACTIVE, STATUS_CLOSED, Course, CourseClass, CourseModule, Cycle, Enrollment

logger = logging.getLogger(__name__)


def _clean_module_names(module_names):
    cleaned = []
    for name in module_names or []:
        name = (name or '').strip()
        if name:
            cleaned.append(name)
    return cleaned


@transaction.atomic
def replace_course_modules(*, course: Course, module_names):
    """Drop the current module list and store ``module_names`` in the given order."""
    course.modules.all().delete()
    modules = [
        CourseModule(course=course, name=name, order_number=index)
        for index, name in enumerate(_clean_module_names(module_names), start=1)
    ]
    return CourseModule.objects.bulk_create(modules)


@transaction.atomic
def create_course_with_modules(*, owner, name, workload, modality, teacher_name='', module_names=None):
    course = Course(
        owner=owner,
        name=name,
        teacher_name=teacher_name,
        workload=workload,
        modality=modality,
    )
    course.full_clean()
    course.save()
    replace_course_modules(course=course, module_names=module_names)
    return course


def _ensure_class_open(course_class: CourseClass):
    if course_class.is_closed:
        raise ValidationError('Turma encerrada: não é possível alterar matrículas ou frequência.')


@transaction.atomic
def enroll_students(*, course_class: CourseClass, students, enrollment_type=Enrollment.TYPE_REGULAR, enrollment_date=None):
    # Local import: attendance depends on academics models.
    from apps.core.attendance.models import EadAccess

    _ensure_class_open(course_class)

    students = list(students)
    if not students:
        raise ValidationError('Selecione pelo menos um aluno para matricular.')

    enrollment_date = enrollment_date or timezone.localdate()
    already_enrolled = set(
        Enrollment.objects.filter(
            course_class=course_class,
            student__in=students,
        ).values_list('student_id', flat=True)
    )
    if already_enrolled:
        raise ValidationError('Um ou mais alunos já estão matriculados nesta turma.')

    created = []
    for student in students:
        enrollment = Enrollment(
            course_class=course_class,
            student=student,
            enrollment_type=enrollment_type,
            enrollment_date=enrollment_date,
        )
        enrollment.full_clean()
        enrollment.save()
        created.append(enrollment)

        if course_class.is_ead:
            EadAccess.objects.get_or_create(course_class=course_class, student=student)

    logger.info(
        'Enrolled %s student(s) in class %s as %s',
        len(created),
        course_class.pk,
        enrollment_type,
    )
    return created


@transaction.atomic
def remove_student(*, course_class: CourseClass, student):
    _ensure_class_open(course_class)
    deleted, _ = Enrollment.objects.filter(course_class=course_class, student=student).delete()
    if not deleted:
        raise ValidationError('Aluno não está matriculado nesta turma.')
    return deleted


def available_students(*, course_class: CourseClass, search=''):
    from apps.core.students.models import Student

    students = Student.objects.for_owner(course_class.owner).exclude(
        enrollments__course_class=course_class,
    )
    if search:
        students = students.filter(full_name__icontains=search.strip())
    return students.order_by('full_name')


@transaction.atomic
def close_class(*, course_class: CourseClass):
    if course_class.is_closed:
        return course_class
    course_class.status = STATUS_CLOSED
    course_class.save(update_fields=['status'])
    logger.info('Closed class %s', course_class.pk)
    return course_class


@transaction.atomic
def close_cycle(*, cycle: Cycle):
    closed_classes = CourseClass.objects.filter(cycle=cycle, status=STATUS_ACTIVE).update(status=STATUS_CLOSED)
    if not cycle.is_closed:
        cycle.status = STATUS_CLOSED
        cycle.save(update_fields=['status', 'updated_at'])
    logger.info('Closed cycle %s with %s class(es)', cycle.pk, closed_classes)
    return closed_classes
