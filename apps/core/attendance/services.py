from __future__ import annotations

import csv
import logging
from decimal import Decimal
from io import BytesIO, StringIO

from PIL import Image, ImageDraw, ImageFont
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.academics.models import CourseClass, Enrollment

from . import eligibility
from .models import AttendanceEntry, EadAccess

logger = logging.getLogger(__name__)

STATUS_FREQUENT = 'Frequente'
STATUS_ABSENT = 'Ausente'


def attendance_threshold() -> Decimal:
    return Decimal(str(getattr(settings, 'CERTIFICATE_ATTENDANCE_THRESHOLD', eligibility.ATTENDANCE_THRESHOLD)))


def enrollment_record(enrollment: Enrollment) -> eligibility.EnrollmentRecord:
    return eligibility.EnrollmentRecord(
        student_id=enrollment.student_id,
        class_id=enrollment.course_class_id,
        enrollment_type=enrollment.enrollment_type,
        enrollment_date=enrollment.enrollment_date,
    )


def entry_records(entries):
    return [
        eligibility.AttendanceEntry(
            class_id=entry.course_class_id,
            student_id=entry.student_id,
            class_number=entry.class_number,
            class_date=entry.class_date,
            present=entry.present,
        )
        for entry in entries
    ]


def _ensure_videoconference_open(course_class: CourseClass):
    if course_class.is_closed:
        raise ValidationError('Turma encerrada: não é possível registrar frequência.')
    if not course_class.is_videoconference:
        raise ValidationError('Frequência por aula só se aplica a turmas de videoconferência.')


@transaction.atomic
def record_class_attendance(*, course_class: CourseClass, class_number, class_date, presence_by_student_id):
    """
    Upsert one attendance entry per enrolled student for a class session.

    Students missing from ``presence_by_student_id`` are stored as absent.
    Re-submitting the same class number overwrites the previous marks.
    """
    _ensure_videoconference_open(course_class)
    class_date = eligibility.to_date(class_date, 'class date')
    if class_date is None:
        raise ValidationError('Informe a data da aula.')

    enrolled_ids = set(course_class.enrollments.values_list('student_id', flat=True))
    presence = {}
    for student_id, present in (presence_by_student_id or {}).items():
        try:
            parsed_id = int(student_id)
        except (TypeError, ValueError):
            raise ValidationError(f'Identificador de aluno inválido: {student_id!r}.')
        if parsed_id not in enrolled_ids:
            raise ValidationError('Lista de presença contém aluno não matriculado nesta turma.')
        presence[parsed_id] = bool(present)

    saved = []
    for student_id in sorted(enrolled_ids):
        entry = AttendanceEntry.objects.filter(
            course_class=course_class,
            student_id=student_id,
            class_number=class_number,
        ).first()
        if entry is None:
            entry = AttendanceEntry(
                course_class=course_class,
                student_id=student_id,
                class_number=class_number,
            )
        entry.class_date = class_date
        entry.present = presence.get(student_id, False)
        entry.full_clean()
        entry.save()
        saved.append(entry)

    logger.info(
        'Recorded attendance for class %s, session %s (%s students)',
        course_class.pk,
        class_number,
        len(saved),
    )
    return saved


@transaction.atomic
def update_attendance_entry(*, entry: AttendanceEntry, class_number, class_date, present):
    _ensure_videoconference_open(entry.course_class)
    entry.class_number = class_number
    entry.class_date = eligibility.to_date(class_date, 'class date')
    entry.present = bool(present)
    entry.full_clean()
    entry.save()
    return entry


@transaction.atomic
def delete_attendance_entry(*, entry: AttendanceEntry):
    _ensure_videoconference_open(entry.course_class)
    entry.delete()


@transaction.atomic
def save_ead_access(*, course_class: CourseClass, student, access_date_1=None, access_date_2=None, access_date_3=None):
    if course_class.is_closed:
        raise ValidationError('Turma encerrada: não é possível registrar acessos.')
    if not Enrollment.objects.filter(course_class=course_class, student=student).exists():
        raise ValidationError('Aluno não está matriculado nesta turma.')

    access, _ = EadAccess.objects.get_or_create(course_class=course_class, student=student)
    access.access_date_1 = eligibility.to_date(access_date_1, 'access date 1')
    access.access_date_2 = eligibility.to_date(access_date_2, 'access date 2')
    access.access_date_3 = eligibility.to_date(access_date_3, 'access date 3')
    access.full_clean()
    access.save()
    return access


def class_session_dates(course_class: CourseClass, date_from=None, date_to=None):
    """Distinct dates on which the class held a session, for any student."""
    sessions = AttendanceEntry.objects.filter(course_class=course_class)
    if date_from:
        sessions = sessions.filter(class_date__gte=date_from)
    if date_to:
        sessions = sessions.filter(class_date__lte=date_to)
    return sorted(set(sessions.values_list('class_date', flat=True)))


def student_eligibility(*, enrollment: Enrollment) -> eligibility.EligibilityResult:
    course_class = enrollment.course_class

    if course_class.is_ead:
        access = EadAccess.objects.filter(course_class=course_class, student_id=enrollment.student_id).first()
        dates = access.access_dates if access else [None, None, None]
        return eligibility.evaluate_ead(*dates)

    entries = AttendanceEntry.objects.filter(
        course_class=course_class,
        student_id=enrollment.student_id,
    ).order_by('class_date', 'class_number')
    return eligibility.evaluate_videoconference(
        course_class.total_classes,
        enrollment_record(enrollment),
        entry_records(entries),
        threshold=attendance_threshold(),
        session_dates=class_session_dates(course_class),
    )


def class_eligibility_rows(*, course_class: CourseClass):
    enrollments = course_class.enrollments.select_related('student', 'course_class').order_by('student__full_name')
    accesses = {}
    if course_class.is_ead:
        accesses = {
            access.student_id: access
            for access in EadAccess.objects.filter(course_class=course_class)
        }

    rows = []
    for enrollment in enrollments:
        rows.append(
            {
                'enrollment': enrollment,
                'student': enrollment.student,
                'result': student_eligibility(enrollment=enrollment),
                'access': accesses.get(enrollment.student_id),
            }
        )
    return rows


def attendance_report(
    *,
    owner,
    cycle=None,
    course_class=None,
    modality=None,
    unit=None,
    student_name='',
    date_from=None,
    date_to=None,
):
    classes = CourseClass.objects.for_owner(owner).select_related('course', 'cycle')
    if cycle:
        classes = classes.filter(cycle=cycle)
    if course_class:
        classes = classes.filter(pk=course_class.pk)
    if modality:
        classes = classes.filter(modality=modality)

    date_from = eligibility.to_date(date_from, 'date from')
    date_to = eligibility.to_date(date_to, 'date to')
    threshold = attendance_threshold()

    rows = []
    for cls in classes.order_by('name', 'id'):
        enrollments = cls.enrollments.select_related('student', 'student__unit').order_by('student__full_name')
        if unit:
            enrollments = enrollments.filter(student__unit=unit)
        if student_name:
            enrollments = enrollments.filter(student__full_name__icontains=student_name.strip())
        session_dates = class_session_dates(cls, date_from, date_to) if cls.is_videoconference else []

        for enrollment in enrollments:
            student = enrollment.student
            row = {
                'unit_name': student.unit_name,
                'student_name': student.full_name,
                'course_name': cls.course.name,
                'class_name': cls.name,
                'modality': cls.modality,
                'classes_total': None,
                'classes_attended': None,
                'attendance_percentage': None,
                'accesses': [],
            }

            if cls.is_videoconference:
                entries = AttendanceEntry.objects.filter(course_class=cls, student=student)
                if date_from:
                    entries = entries.filter(class_date__gte=date_from)
                if date_to:
                    entries = entries.filter(class_date__lte=date_to)
                result = eligibility.evaluate_videoconference(
                    cls.total_classes,
                    enrollment_record(enrollment),
                    entry_records(entries),
                    threshold=threshold,
                    session_dates=session_dates,
                )
                row['classes_total'] = result.effective_total
                row['classes_attended'] = result.attended_count
                row['attendance_percentage'] = result.rounded_percentage
                row['status'] = STATUS_FREQUENT if result.is_eligible else STATUS_ABSENT
            else:
                access = EadAccess.objects.filter(course_class=cls, student=student).first()
                accesses = [value for value in (access.access_dates if access else []) if value]
                if date_from:
                    accesses = [value for value in accesses if value >= date_from]
                if date_to:
                    accesses = [value for value in accesses if value <= date_to]
                row['accesses'] = accesses
                row['status'] = STATUS_FREQUENT if accesses else STATUS_ABSENT

            rows.append(row)

    return rows


def report_summary(rows):
    total = len(rows)
    present = sum(1 for row in rows if row['status'] == STATUS_FREQUENT)
    absent = total - present
    present_percentage = Decimal('0.00')
    absent_percentage = Decimal('0.00')
    if total:
        present_percentage = (Decimal(present) / Decimal(total) * 100).quantize(Decimal('0.01'))
        absent_percentage = (Decimal(absent) / Decimal(total) * 100).quantize(Decimal('0.01'))
    return {
        'total_students': total,
        'present_count': present,
        'absent_count': absent,
        'present_percentage': present_percentage,
        'absent_percentage': absent_percentage,
    }


def report_table(rows):
    headers = ['Unidade', 'Nome do Aluno', 'Turma', 'Curso', 'Aulas', 'Frequência', 'Acessos', 'Status']
    table = []
    for row in rows:
        if row['modality'] == eligibility.MODALITY_VIDEOCONFERENCE:
            classes = f"{row['classes_attended']}/{row['classes_total']}"
            percentage = f"{row['attendance_percentage']}%"
        else:
            classes = '-'
            percentage = '-'
        accesses = ', '.join(value.strftime('%d/%m/%Y') for value in row['accesses']) or '-'
        table.append([
            row['unit_name'],
            row['student_name'],
            row['class_name'],
            row['course_name'],
            classes,
            percentage,
            accesses,
            row['status'],
        ])
    return headers, table


def rows_to_csv_bytes(headers, rows):
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    # BOM so spreadsheet apps detect UTF-8 (accented names).
    return output.getvalue().encode('utf-8-sig')


REPORT_PAGE_SIZE = (1754, 1240)
REPORT_ROWS_PER_PAGE = 22
# Relative widths for the report_table() columns; name columns get more room.
REPORT_COLUMN_WEIGHTS = (3, 5, 3, 4, 2, 2, 4, 2)


def _column_edges(column_count, left, right):
    weights = REPORT_COLUMN_WEIGHTS if column_count == len(REPORT_COLUMN_WEIGHTS) else (1,) * column_count
    total = sum(weights)
    edges = [left]
    for weight in weights:
        edges.append(edges[-1] + (right - left) * weight // total)
    edges[-1] = right
    return edges


def _fit(draw, text, font, max_width):
    if draw.textlength(text, font=font) <= max_width:
        return text
    while text and draw.textlength(text + '...', font=font) > max_width:
        text = text[:-1]
    return text + '...'


def _table_page(title, headers, rows, footer):
    width, height = REPORT_PAGE_SIZE
    image = Image.new('RGB', REPORT_PAGE_SIZE, 'white')
    draw = ImageDraw.Draw(image)
    title_font = ImageFont.load_default(size=34)
    cell_font = ImageFont.load_default(size=20)

    draw.text((40, 30), title, font=title_font, fill='black')

    edges = _column_edges(len(headers), 40, width - 40)
    y = 100
    row_height = 44
    for index, header in enumerate(headers):
        draw.rectangle((edges[index], y, edges[index + 1], y + row_height), fill=(226, 232, 240), outline='black')
        draw.text((edges[index] + 6, y + 11), _fit(draw, str(header), cell_font, edges[index + 1] - edges[index] - 12),
                  font=cell_font, fill='black')

    for row in rows:
        y += row_height
        for index, value in enumerate(row):
            draw.rectangle((edges[index], y, edges[index + 1], y + row_height), outline='black')
            text = _fit(draw, str(value), cell_font, edges[index + 1] - edges[index] - 12)
            draw.text((edges[index] + 6, y + 11), text, font=cell_font, fill='black')

    draw.text((40, height - 60), footer, font=cell_font, fill=(71, 85, 105))
    return image


def table_pdf_bytes(title, headers, rows, footer=''):
    """Render a report table as a landscape PDF, one page per REPORT_ROWS_PER_PAGE rows."""
    rows = list(rows)
    chunks = [rows[start:start + REPORT_ROWS_PER_PAGE] for start in range(0, len(rows), REPORT_ROWS_PER_PAGE)] or [[]]

    pages = []
    for number, chunk in enumerate(chunks, start=1):
        page_footer = f'Página {number}/{len(chunks)}'
        if footer:
            page_footer = f'{footer}    {page_footer}'
        pages.append(_table_page(title, headers, chunk, page_footer))

    output = BytesIO()
    pages[0].save(output, format='PDF', save_all=True, append_images=pages[1:])
    return output.getvalue()
