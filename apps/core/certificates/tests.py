from datetime import date, time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.academics.models import CourseClass, Enrollment
from apps.core.academics.services import create_course_with_modules, enroll_students
from apps.core.attendance.services import record_class_attendance, save_ead_access
from apps.core.students.models import Student

from .models import Certificate
from .services import (
    CertificateData,
    assemble_certificate_data,
    build_certificate_images,
    certificate_filename,
    format_date_br,
    format_long_date_br,
    generate_certificate_pdf,
    issue_certificate,
    number_in_words,
    workload_in_words,
)


class CertificateTextTests(SimpleTestCase):
    def test_number_in_words(self):
        self.assertEqual(number_in_words(0), 'zero')
        self.assertEqual(number_in_words(15), 'quinze')
        self.assertEqual(number_in_words(21), 'vinte e um')
        self.assertEqual(number_in_words(100), 'cem')
        self.assertEqual(number_in_words(101), 'cento e um')
        self.assertEqual(number_in_words(360), 'trezentos e sessenta')

    def test_workload_in_words(self):
        self.assertEqual(workload_in_words(120), 'Cento e vinte horas')
        self.assertEqual(workload_in_words(40), 'Quarenta horas')
        self.assertEqual(workload_in_words(0), 'Carga horária não especificada')

    def test_date_formats(self):
        self.assertEqual(format_date_br(date(2025, 3, 7)), '07/03/2025')
        self.assertEqual(format_long_date_br(date(2025, 3, 7)), '07 de março de 2025')

    def test_filename_replaces_spaces(self):
        self.assertEqual(certificate_filename(' Ana  Maria Souza '), 'Certificado_Ana_Maria_Souza.pdf')

    def test_pdf_has_front_and_back_pages(self):
        data = CertificateData(
            student_name='Ana Souza',
            course_name='Gestão Escolar',
            module_names=('Planejamento', 'Avaliação'),
            workload_hours=40,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 6, 30),
            modality='videoconference',
        )

        front, back = build_certificate_images(data, issued_on=date(2025, 7, 1))
        self.assertEqual(front.size, back.size)

        content = generate_certificate_pdf(data, issued_on=date(2025, 7, 1))
        self.assertTrue(content.startswith(b'%PDF'))


class CertificateServiceTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )
        self.student = Student.objects.create(owner=self.owner, full_name='Ana Souza')
        self.weak_student = Student.objects.create(owner=self.owner, full_name='Bruno Lima')

        self.course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=40,
            modality='videoconference',
            module_names=['Planejamento', 'Currículo', 'Avaliação'],
        )
        self.course_class = CourseClass.objects.create(
            owner=self.owner,
            course=self.course,
            name='Turma A',
            modality='videoconference',
            class_time=time(19, 0),
            total_classes=4,
        )
        enroll_students(course_class=self.course_class, students=[self.student, self.weak_student])

        sessions = [(1, 3, True), (2, 10, True), (3, 17, False), (4, 24, True)]
        for number, day, present in sessions:
            record_class_attendance(
                course_class=self.course_class,
                class_number=number,
                class_date=date(2025, 3, day),
                presence_by_student_id={self.student.id: present},
            )

        self.enrollment = Enrollment.objects.get(course_class=self.course_class, student=self.student)

    def test_assemble_data_keeps_module_order_and_period(self):
        data = assemble_certificate_data(student=self.student, course_class=self.course_class)

        self.assertEqual(data.student_name, 'Ana Souza')
        self.assertEqual(data.module_names, ('Planejamento', 'Currículo', 'Avaliação'))
        self.assertEqual(data.workload_hours, 40)
        self.assertEqual(data.start_date, date(2025, 3, 3))
        self.assertEqual(data.end_date, date(2025, 3, 24))

    def test_assemble_data_without_attendance_uses_today(self):
        other = Student.objects.create(owner=self.owner, full_name='Carla Melo')
        data = assemble_certificate_data(student=other, course_class=self.course_class)

        self.assertEqual(data.start_date, timezone.localdate())
        self.assertEqual(data.end_date, timezone.localdate())

    def test_issue_stores_rounded_percentage(self):
        certificate = issue_certificate(enrollment=self.enrollment, issue_date=date(2025, 4, 1))

        self.assertEqual(certificate.attendance_percentage, Decimal('75.00'))
        self.assertEqual(certificate.issue_date, date(2025, 4, 1))

    def test_reissue_updates_existing_certificate(self):
        issue_certificate(enrollment=self.enrollment, issue_date=date(2025, 4, 1))
        issue_certificate(enrollment=self.enrollment, issue_date=date(2025, 5, 1))

        certificates = Certificate.objects.filter(student=self.student)
        self.assertEqual(certificates.count(), 1)
        self.assertEqual(certificates.get().issue_date, date(2025, 5, 1))

    def test_ineligible_student_is_refused(self):
        enrollment = Enrollment.objects.get(course_class=self.course_class, student=self.weak_student)

        with self.assertRaises(ValidationError):
            issue_certificate(enrollment=enrollment)
        self.assertFalse(Certificate.objects.filter(student=self.weak_student).exists())

    def test_ead_certificate_stores_full_percentage(self):
        ead_course = create_course_with_modules(owner=self.owner, name='Libras', workload=60, modality='ead')
        ead_class = CourseClass.objects.create(owner=self.owner, course=ead_course, name='Turma EAD', modality='ead')
        enroll_students(course_class=ead_class, students=[self.student])
        save_ead_access(
            course_class=ead_class,
            student=self.student,
            access_date_1='2025-03-05',
            access_date_2='2025-04-05',
            access_date_3='2025-05-05',
        )

        enrollment = Enrollment.objects.get(course_class=ead_class, student=self.student)
        certificate = issue_certificate(enrollment=enrollment)

        self.assertEqual(certificate.attendance_percentage, Decimal('100'))


class CertificateViewTests(TestCase):
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
        self.student = Student.objects.create(owner=self.owner, full_name='Ana Maria Souza')
        course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=20,
            modality='videoconference',
            module_names=['Planejamento'],
        )
        self.course_class = CourseClass.objects.create(
            owner=self.owner,
            course=course,
            name='Turma A',
            modality='videoconference',
            class_time=time(19, 0),
            total_classes=2,
        )
        enroll_students(course_class=self.course_class, students=[self.student])
        for number in (1, 2):
            record_class_attendance(
                course_class=self.course_class,
                class_number=number,
                class_date=date(2025, 3, number),
                presence_by_student_id={self.student.id: True},
            )
        self.enrollment = Enrollment.objects.get(course_class=self.course_class, student=self.student)

    def test_issue_then_download_pdf(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('certificate_issue', args=[self.enrollment.id]))

        certificate = Certificate.objects.get(student=self.student)
        self.assertRedirects(response, reverse('certificate_detail', args=[certificate.id]))

        response = self.client.get(reverse('certificate_pdf', args=[certificate.id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('Certificado_Ana_Maria_Souza.pdf', response['Content-Disposition'])

    def test_other_owner_cannot_issue(self):
        self.client.login(username='intruso', password='pass12345')
        response = self.client.post(reverse('certificate_issue', args=[self.enrollment.id]))

        self.assertEqual(response.status_code, 404)
        self.assertFalse(Certificate.objects.exists())
