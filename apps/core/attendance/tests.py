import codecs
from datetime import date, time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from apps.core.academics.models import CourseClass, Cycle, Enrollment
from apps.core.academics.services import create_course_with_modules, enroll_students
from apps.core.certificates.models import Certificate
from apps.core.certificates.services import assemble_certificate_data
from apps.core.students.models import Student, Unit

from . import eligibility
from .eligibility import (
    AttendanceEntry as EntryRecord,
    EnrollmentRecord,
    InvalidEnrollment,
    InvalidInput,
    aggregate_attendance,
    decide,
    evaluate_ead,
    evaluate_videoconference,
    is_ead_eligible,
)
from .models import AttendanceEntry, EadAccess
from .services import (
    STATUS_ABSENT,
    STATUS_FREQUENT,
    attendance_report,
    class_eligibility_rows,
    delete_attendance_entry,
    record_class_attendance,
    report_summary,
    report_table,
    rows_to_csv_bytes,
    save_ead_access,
    student_eligibility,
    table_pdf_bytes,
    update_attendance_entry,
)


def _entries(student_id, marks, start_day=1, month=3):
    return [
        EntryRecord(
            class_id=1,
            student_id=student_id,
            class_number=index,
            class_date=date(2025, month, start_day + index - 1),
            present=present,
        )
        for index, present in enumerate(marks, start=1)
    ]


class VideoconferenceEligibilityTests(SimpleTestCase):
    def test_regular_enrollment_uses_cohort_total(self):
        enrollment = EnrollmentRecord(student_id=1, class_id=1)
        entries = _entries(1, [True] * 6 + [False] * 4)

        result = evaluate_videoconference(10, enrollment, entries)

        self.assertEqual(result.attended_count, 6)
        self.assertEqual(result.effective_total, 10)
        self.assertEqual(result.percentage, Decimal('60'))
        self.assertTrue(result.is_eligible)

    def test_threshold_is_inclusive_and_not_rounded_up(self):
        enrollment = EnrollmentRecord(student_id=1, class_id=1)

        # 179/300 = 59.666...% must not pass even though it rounds to 59.67.
        entries = [
            EntryRecord(class_id=1, student_id=1, class_number=n, class_date=date(2025, 1, 1), present=True)
            for n in range(1, 180)
        ]
        result = evaluate_videoconference(300, enrollment, entries)
        self.assertFalse(result.is_eligible)
        self.assertEqual(result.rounded_percentage, Decimal('59.67'))

    def test_absent_majority_is_not_eligible(self):
        enrollment = EnrollmentRecord(student_id=1, class_id=1)
        result = evaluate_videoconference(10, enrollment, _entries(1, [True] * 5 + [False] * 5))

        self.assertEqual(result.percentage, Decimal('50'))
        self.assertFalse(result.is_eligible)

    def test_exceptional_enrollment_counts_classes_from_enrollment_date(self):
        enrollment = EnrollmentRecord(
            student_id=1,
            class_id=1,
            enrollment_type=eligibility.ENROLLMENT_EXCEPTIONAL,
            enrollment_date=date(2025, 3, 6),
        )
        # Ten sessions on March 1..10; only 6..10 count, of which 3 attended.
        marks = [True] * 5 + [True, True, True, False, False]

        result = evaluate_videoconference(10, enrollment, _entries(1, marks))

        self.assertEqual(result.effective_total, 5)
        self.assertEqual(result.attended_count, 3)
        self.assertEqual(result.percentage, Decimal('60'))
        self.assertTrue(result.is_eligible)

    def test_exceptional_enrollment_counts_distinct_dates(self):
        enrollment = EnrollmentRecord(
            student_id=1,
            class_id=1,
            enrollment_type='exceptional',
            enrollment_date='2025-03-01',
        )
        entries = [
            EntryRecord(class_id=1, student_id=1, class_number=1, class_date=date(2025, 3, 2), present=True),
            EntryRecord(class_id=1, student_id=1, class_number=2, class_date=date(2025, 3, 2), present=False),
            EntryRecord(class_id=1, student_id=1, class_number=3, class_date=date(2025, 3, 9), present=True),
        ]

        aggregate = aggregate_attendance(10, enrollment, entries)

        self.assertEqual(aggregate.effective_total, 2)
        self.assertEqual(aggregate.attended_count, 2)

    def test_exceptional_enrollment_counts_class_sessions_without_own_rows(self):
        enrollment = EnrollmentRecord(
            student_id=1,
            class_id=1,
            enrollment_type='exceptional',
            enrollment_date=date(2025, 3, 5),
        )
        entries = [
            EntryRecord(class_id=1, student_id=1, class_number=3, class_date=date(2025, 3, 24), present=True),
        ]
        sessions = [date(2025, 3, 3), date(2025, 3, 10), '2025-03-17', date(2025, 3, 24)]

        aggregate = aggregate_attendance(10, enrollment, entries, session_dates=sessions)

        self.assertEqual(aggregate.effective_total, 3)
        self.assertEqual(aggregate.attended_count, 1)
        self.assertFalse(decide('videoconference', aggregate))

    def test_zero_denominator_yields_zero_percentage(self):
        regular = EnrollmentRecord(student_id=1, class_id=1)
        self.assertEqual(evaluate_videoconference(0, regular, []).percentage, Decimal('0'))

        exceptional = EnrollmentRecord(
            student_id=1,
            class_id=1,
            enrollment_type='exceptional',
            enrollment_date=date(2025, 12, 1),
        )
        result = evaluate_videoconference(10, exceptional, _entries(1, [True, True]))
        self.assertEqual(result.effective_total, 0)
        self.assertEqual(result.percentage, Decimal('0'))
        self.assertFalse(result.is_eligible)

    def test_custom_threshold(self):
        enrollment = EnrollmentRecord(student_id=1, class_id=1)
        result = evaluate_videoconference(10, enrollment, _entries(1, [True] * 7), threshold=Decimal('75'))
        self.assertFalse(result.is_eligible)

    def test_exceptional_enrollment_requires_date(self):
        with self.assertRaises(InvalidEnrollment):
            EnrollmentRecord(student_id=1, class_id=1, enrollment_type='exceptional')

    def test_unknown_enrollment_type_is_rejected(self):
        with self.assertRaises(InvalidEnrollment):
            EnrollmentRecord(student_id=1, class_id=1, enrollment_type='transfer')

    def test_invalid_date_string_is_rejected(self):
        with self.assertRaises(InvalidInput):
            EnrollmentRecord(
                student_id=1,
                class_id=1,
                enrollment_type='exceptional',
                enrollment_date='31/02/2025',
            )
        with self.assertRaises(InvalidInput):
            EntryRecord(class_id=1, student_id=1, class_number=1, class_date='2025-02-30', present=True)

    def test_unknown_modality_is_rejected(self):
        with self.assertRaises(InvalidInput):
            decide('hybrid', True)

    def test_invalid_input_is_a_validation_error(self):
        self.assertTrue(issubclass(InvalidInput, ValidationError))


class EadEligibilityTests(SimpleTestCase):
    def test_three_distinct_months_are_eligible(self):
        self.assertTrue(is_ead_eligible(date(2025, 1, 10), date(2025, 2, 10), date(2025, 3, 10)))

        result = evaluate_ead('2025-01-10', '2025-02-10', '2025-03-10')
        self.assertTrue(result.is_eligible)
        self.assertEqual(result.percentage, Decimal('100'))

    def test_repeated_month_is_not_eligible(self):
        result = evaluate_ead(date(2025, 1, 10), date(2025, 1, 25), date(2025, 3, 10))
        self.assertFalse(result.is_eligible)
        self.assertEqual(result.percentage, Decimal('0'))

    def test_same_month_in_different_years_counts_separately(self):
        self.assertTrue(is_ead_eligible(date(2024, 5, 1), date(2025, 5, 1), date(2026, 5, 1)))

    def test_missing_access_is_not_eligible(self):
        self.assertFalse(is_ead_eligible(date(2025, 1, 10), date(2025, 2, 10), None))
        self.assertFalse(is_ead_eligible(date(2025, 1, 10), '', date(2025, 3, 10)))

    def test_invalid_access_date_is_rejected(self):
        with self.assertRaises(InvalidInput):
            is_ead_eligible('2025-13-01', '2025-02-01', '2025-03-01')


class ReportExportTests(SimpleTestCase):
    def test_long_report_is_split_into_pages(self):
        headers = ['Unidade', 'Nome do Aluno', 'Turma', 'Curso', 'Aulas', 'Frequência', 'Acessos', 'Status']
        rows = [
            ['Centro', f'Aluno {index}', 'Turma A', 'Gestão Escolar', '6/10', '60.00%', '-', 'Frequente']
            for index in range(30)
        ]

        content = table_pdf_bytes('Relatório de Frequência', headers, rows, footer='Gerado em 01/04/2025.')

        self.assertTrue(content.startswith(b'%PDF'))
        self.assertIn(b'/Count 2', content)

    def test_csv_starts_with_bom(self):
        content = rows_to_csv_bytes(['Nome'], [['Ana']])
        self.assertTrue(content.startswith(codecs.BOM_UTF8))


class AttendanceServiceTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )
        self.other_owner = self.user_model.objects.create_user(
            username='outro',
            password='pass12345',
            role='academic',
        )

        self.unit = Unit.objects.create(owner=self.owner, name='Unidade Centro')
        self.student_a = Student.objects.create(owner=self.owner, unit=self.unit, full_name='Ana Souza')
        self.student_b = Student.objects.create(owner=self.owner, full_name='Bruno Lima')
        self.outsider = Student.objects.create(owner=self.owner, full_name='Carlos Dias')

        self.cycle = Cycle.objects.create(
            owner=self.owner,
            name='2025.1',
            start_date=date(2025, 3, 1),
            end_date=date(2025, 6, 30),
        )
        self.video_course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=40,
            modality='videoconference',
            module_names=['Planejamento', 'Avaliação'],
        )
        self.ead_course = create_course_with_modules(
            owner=self.owner,
            name='Libras Básico',
            workload=60,
            modality='ead',
        )
        self.video_class = CourseClass.objects.create(
            owner=self.owner,
            cycle=self.cycle,
            course=self.video_course,
            name='Turma A',
            modality='videoconference',
            days_of_week=['segunda'],
            class_time=time(19, 0),
            total_classes=5,
        )
        self.ead_class = CourseClass.objects.create(
            owner=self.owner,
            cycle=self.cycle,
            course=self.ead_course,
            name='Turma EAD',
            modality='ead',
        )

        enroll_students(
            course_class=self.video_class,
            students=[self.student_a, self.student_b],
            enrollment_date=date(2025, 3, 1),
        )
        enroll_students(
            course_class=self.ead_class,
            students=[self.student_a],
            enrollment_date=date(2025, 3, 1),
        )

    def _record(self, class_number, day, present_ids):
        return record_class_attendance(
            course_class=self.video_class,
            class_number=class_number,
            class_date=date(2025, 3, day),
            presence_by_student_id={student_id: True for student_id in present_ids},
        )

    def test_record_marks_missing_students_absent(self):
        saved = self._record(1, 3, [self.student_a.id])

        self.assertEqual(len(saved), 2)
        self.assertTrue(AttendanceEntry.objects.get(student=self.student_a, class_number=1).present)
        self.assertFalse(AttendanceEntry.objects.get(student=self.student_b, class_number=1).present)

    def test_record_same_class_number_overwrites(self):
        self._record(1, 3, [self.student_a.id])
        self._record(1, 4, [self.student_b.id])

        self.assertEqual(AttendanceEntry.objects.filter(course_class=self.video_class).count(), 2)
        entry = AttendanceEntry.objects.get(student=self.student_a, class_number=1)
        self.assertFalse(entry.present)
        self.assertEqual(entry.class_date, date(2025, 3, 4))

    def test_record_rejects_student_outside_class(self):
        with self.assertRaises(ValidationError):
            self._record(1, 3, [self.outsider.id])
        self.assertFalse(AttendanceEntry.objects.exists())

    def test_record_rejects_class_number_above_total(self):
        with self.assertRaises(ValidationError):
            self._record(6, 3, [self.student_a.id])

    def test_record_rejects_closed_class(self):
        self.video_class.status = 'closed'
        self.video_class.save(update_fields=['status'])

        with self.assertRaises(ValidationError):
            self._record(1, 3, [self.student_a.id])

    def test_record_rejects_ead_class(self):
        with self.assertRaises(ValidationError):
            record_class_attendance(
                course_class=self.ead_class,
                class_number=1,
                class_date=date(2025, 3, 3),
                presence_by_student_id={},
            )

    def test_update_and_delete_entry(self):
        self._record(1, 3, [])
        entry = AttendanceEntry.objects.get(student=self.student_a, class_number=1)

        update_attendance_entry(entry=entry, class_number=2, class_date='2025-03-10', present=True)
        entry.refresh_from_db()
        self.assertEqual(entry.class_number, 2)
        self.assertTrue(entry.present)

        delete_attendance_entry(entry=entry)
        self.assertFalse(AttendanceEntry.objects.filter(pk=entry.pk).exists())

    def test_student_eligibility_for_videoconference(self):
        for number in range(1, 4):
            self._record(number, number, [self.student_a.id])

        enrollment = Enrollment.objects.get(course_class=self.video_class, student=self.student_a)
        result = student_eligibility(enrollment=enrollment)

        self.assertEqual(result.attended_count, 3)
        self.assertEqual(result.effective_total, 5)
        self.assertTrue(result.is_eligible)

    @override_settings(CERTIFICATE_ATTENDANCE_THRESHOLD=Decimal('80'))
    def test_threshold_comes_from_settings(self):
        for number in range(1, 4):
            self._record(number, number, [self.student_a.id])

        enrollment = Enrollment.objects.get(course_class=self.video_class, student=self.student_a)
        self.assertFalse(student_eligibility(enrollment=enrollment).is_eligible)

    def test_exceptional_enrollment_rebases_denominator(self):
        late = Student.objects.create(owner=self.owner, full_name='Daniela Rocha')
        enroll_students(
            course_class=self.video_class,
            students=[late],
            enrollment_type='exceptional',
            enrollment_date=date(2025, 3, 3),
        )
        self._record(1, 1, [])
        self._record(2, 2, [])
        self._record(3, 3, [late.id])
        self._record(4, 4, [late.id])
        self._record(5, 5, [])

        enrollment = Enrollment.objects.get(course_class=self.video_class, student=late)
        result = student_eligibility(enrollment=enrollment)

        self.assertEqual(result.effective_total, 3)
        self.assertEqual(result.attended_count, 2)
        self.assertTrue(result.is_eligible)

    def test_backdated_exceptional_enrollment_counts_earlier_sessions(self):
        self._record(1, 10, [self.student_a.id])
        self._record(2, 17, [self.student_a.id])
        late = Student.objects.create(owner=self.owner, full_name='Daniela Rocha')
        enroll_students(
            course_class=self.video_class,
            students=[late],
            enrollment_type='exceptional',
            enrollment_date=date(2025, 3, 5),
        )
        self._record(3, 24, [late.id])

        enrollment = Enrollment.objects.get(course_class=self.video_class, student=late)
        result = student_eligibility(enrollment=enrollment)

        self.assertEqual(result.effective_total, 3)
        self.assertEqual(result.attended_count, 1)
        self.assertFalse(result.is_eligible)

        row = attendance_report(owner=self.owner, student_name='Daniela')[0]
        self.assertEqual(row['classes_total'], 3)
        self.assertEqual(row['status'], STATUS_ABSENT)

    def test_deleting_absence_keeps_exceptional_denominator(self):
        late = Student.objects.create(owner=self.owner, full_name='Daniela Rocha')
        enroll_students(
            course_class=self.video_class,
            students=[late],
            enrollment_type='exceptional',
            enrollment_date=date(2025, 3, 3),
        )
        self._record(1, 3, [late.id])
        self._record(2, 4, [self.student_a.id])
        enrollment = Enrollment.objects.get(course_class=self.video_class, student=late)
        self.assertEqual(student_eligibility(enrollment=enrollment).effective_total, 2)

        delete_attendance_entry(entry=AttendanceEntry.objects.get(student=late, class_number=2))
        result = student_eligibility(enrollment=enrollment)

        self.assertEqual(result.effective_total, 2)
        self.assertEqual(result.attended_count, 1)
        self.assertEqual(result.rounded_percentage, Decimal('50.00'))

    def test_record_rejects_non_numeric_student_key(self):
        with self.assertRaises(ValidationError):
            record_class_attendance(
                course_class=self.video_class,
                class_number=1,
                class_date=date(2025, 3, 3),
                presence_by_student_id={'abc': True},
            )
        self.assertFalse(AttendanceEntry.objects.exists())

    def test_ead_access_drives_eligibility(self):
        self.assertTrue(EadAccess.objects.filter(course_class=self.ead_class, student=self.student_a).exists())

        save_ead_access(
            course_class=self.ead_class,
            student=self.student_a,
            access_date_1='2025-03-05',
            access_date_2='2025-04-05',
            access_date_3='2025-05-05',
        )

        rows = class_eligibility_rows(course_class=self.ead_class)
        self.assertEqual(len(rows), 1)
        self.assertTrue(rows[0]['result'].is_eligible)
        self.assertEqual(rows[0]['access'].access_date_2, date(2025, 4, 5))

    def test_ead_access_requires_enrollment(self):
        with self.assertRaises(ValidationError):
            save_ead_access(course_class=self.ead_class, student=self.student_b, access_date_1='2025-03-05')

    def test_report_rows_and_summary(self):
        for number in range(1, 4):
            self._record(number, number, [self.student_a.id])
        save_ead_access(course_class=self.ead_class, student=self.student_a, access_date_1='2025-03-05')

        rows = attendance_report(owner=self.owner, cycle=self.cycle)

        self.assertEqual(len(rows), 3)
        video_rows = {row['student_name']: row for row in rows if row['modality'] == 'videoconference'}
        self.assertEqual(video_rows['Ana Souza']['status'], STATUS_FREQUENT)
        self.assertEqual(video_rows['Ana Souza']['attendance_percentage'], Decimal('60.00'))
        self.assertEqual(video_rows['Ana Souza']['unit_name'], 'Unidade Centro')
        self.assertEqual(video_rows['Bruno Lima']['status'], STATUS_ABSENT)
        self.assertEqual(video_rows['Bruno Lima']['unit_name'], 'Não informado')

        ead_row = next(row for row in rows if row['modality'] == 'ead')
        self.assertEqual(ead_row['accesses'], [date(2025, 3, 5)])
        self.assertEqual(ead_row['status'], STATUS_FREQUENT)

        summary = report_summary(rows)
        self.assertEqual(summary['total_students'], 3)
        self.assertEqual(summary['present_count'], 2)
        self.assertEqual(summary['absent_count'], 1)
        self.assertEqual(summary['present_percentage'], Decimal('66.67'))

    def test_report_filters(self):
        rows = attendance_report(owner=self.owner, modality='ead')
        self.assertEqual([row['class_name'] for row in rows], ['Turma EAD'])

        rows = attendance_report(owner=self.owner, student_name='bruno')
        self.assertEqual([row['student_name'] for row in rows], ['Bruno Lima'])

        rows = attendance_report(owner=self.owner, unit=self.unit)
        self.assertEqual({row['student_name'] for row in rows}, {'Ana Souza'})

        self.assertEqual(attendance_report(owner=self.other_owner), [])

    def test_report_date_range_limits_entries(self):
        self._record(1, 1, [self.student_a.id])
        self._record(2, 20, [self.student_a.id])

        rows = attendance_report(owner=self.owner, course_class=self.video_class, date_to=date(2025, 3, 10))
        row = next(row for row in rows if row['student_name'] == 'Ana Souza')
        self.assertEqual(row['classes_attended'], 1)

    def test_summary_of_empty_report(self):
        summary = report_summary([])
        self.assertEqual(summary['total_students'], 0)
        self.assertEqual(summary['present_percentage'], Decimal('0.00'))

    def test_table_and_csv_export(self):
        self._record(1, 1, [self.student_a.id])
        headers, table = report_table(attendance_report(owner=self.owner, course_class=self.video_class))

        self.assertEqual(headers[0], 'Unidade')
        self.assertEqual(table[0][4], '1/5')

        content = rows_to_csv_bytes(headers, table).decode('utf-8')
        self.assertIn('Nome do Aluno', content.splitlines()[0])
        self.assertIn('Ana Souza', content)


class AttendanceViewTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )
        self.intruder = self.user_model.objects.create_user(
            username='intruso',
            password='pass12345',
            role='academic',
        )
        self.financial = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )
        self.student = Student.objects.create(owner=self.owner, full_name='Ana Souza')
        course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=40,
            modality='videoconference',
            module_names=['Planejamento', 'Currículo', 'Avaliação'],
        )
        self.course_class = CourseClass.objects.create(
            owner=self.owner,
            course=course,
            name='Turma A',
            modality='videoconference',
            class_time=time(19, 0),
            total_classes=4,
        )
        enroll_students(course_class=self.course_class, students=[self.student])

    def test_post_attendance_records_session(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('class_attendance', args=[self.course_class.id]), {
            'class_number': 1,
            'class_date': '2025-03-03',
            f'present_{self.student.id}': 'on',
        })

        self.assertEqual(response.status_code, 302)
        self.assertTrue(AttendanceEntry.objects.get(student=self.student, class_number=1).present)

    def test_other_owner_gets_404(self):
        self.client.login(username='intruso', password='pass12345')
        response = self.client.get(reverse('class_attendance', args=[self.course_class.id]))
        self.assertEqual(response.status_code, 404)

    def test_financial_role_is_forbidden(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.get(reverse('attendance_report'))
        self.assertEqual(response.status_code, 403)

    def test_report_csv_export(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('attendance_report'), {'modality': 'videoconference', 'export': 'csv'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn(b'Ana Souza', response.content)

    def test_report_pdf_export(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('attendance_report'), {'export': 'pdf'})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b'%PDF'))

    def _post_session(self, class_number, class_date, present_students):
        data = {'class_number': class_number, 'class_date': class_date}
        for student in present_students:
            data[f'present_{student.id}'] = 'on'
        return self.client.post(reverse('class_attendance', args=[self.course_class.id]), data)

    def test_eligible_student_can_be_certified_after_recording_attendance(self):
        self.client.login(username='academico', password='pass12345')
        self._post_session(1, '2025-03-03', [self.student])
        self._post_session(2, '2025-03-10', [self.student])
        self._post_session(3, '2025-03-17', [self.student])

        response = self.client.get(reverse('class_detail', args=[self.course_class.id]))
        result = response.context['rows'][0]['result']
        self.assertEqual(result.rounded_percentage, Decimal('75.00'))
        self.assertTrue(result.is_eligible)

        enrollment = Enrollment.objects.get(course_class=self.course_class, student=self.student)
        response = self.client.post(reverse('certificate_issue', args=[enrollment.id]))

        certificate = Certificate.objects.get(student=self.student)
        self.assertRedirects(response, reverse('certificate_detail', args=[certificate.id]))
        self.assertEqual(certificate.attendance_percentage, Decimal('75.00'))
        data = assemble_certificate_data(student=self.student, course_class=self.course_class)
        self.assertEqual(data.module_names, ('Planejamento', 'Currículo', 'Avaliação'))
        self.assertEqual((data.start_date, data.end_date), (date(2025, 3, 3), date(2025, 3, 17)))

    def test_backdated_exceptional_enrollment_sees_earlier_sessions(self):
        self.client.login(username='academico', password='pass12345')
        self._post_session(1, '2025-03-10', [self.student])
        self._post_session(2, '2025-03-17', [self.student])

        late = Student.objects.create(owner=self.owner, full_name='Bruno Lima')
        self.client.post(reverse('class_enroll', args=[self.course_class.id]), {
            'students': [late.id],
            'enrollment_type': 'exceptional',
            'enrollment_date': '2025-03-05',
        })
        self._post_session(3, '2025-03-24', [self.student, late])

        response = self.client.get(reverse('class_detail', args=[self.course_class.id]))
        rows = {row['student'].id: row['result'] for row in response.context['rows']}
        self.assertEqual(rows[late.id].effective_total, 3)
        self.assertEqual(rows[late.id].attended_count, 1)
        self.assertFalse(rows[late.id].is_eligible)

        enrollment = Enrollment.objects.get(course_class=self.course_class, student=late)
        self.client.post(reverse('certificate_issue', args=[enrollment.id]))
        self.assertFalse(Certificate.objects.filter(student=late).exists())
