from datetime import date, time

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.attendance.models import EadAccess
from apps.core.students.models import Student

from .models import Course, CourseClass, CourseModule, Cycle, Enrollment
from .services import (
    available_students,
    close_class,
    close_cycle,
    create_course_with_modules,
    enroll_students,
    remove_student,
    replace_course_modules,
)


class AcademicServiceTests(TestCase):
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
        self.student_a = Student.objects.create(owner=self.owner, full_name='Ana Souza')
        self.student_b = Student.objects.create(owner=self.owner, full_name='Bruno Lima')
        self.foreign_student = Student.objects.create(owner=self.other_owner, full_name='Zeca Alves')

        self.cycle = Cycle.objects.create(
            owner=self.owner,
            name='2025.1',
            start_date=date(2025, 3, 1),
            end_date=date(2025, 6, 30),
        )
        self.course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=40,
            modality='videoconference',
            module_names=['Planejamento', '  ', 'Avaliação'],
        )
        self.course_class = CourseClass.objects.create(
            owner=self.owner,
            cycle=self.cycle,
            course=self.course,
            name='Turma A',
            modality='videoconference',
            class_time=time(19, 0),
            total_classes=10,
        )

    def test_course_modules_keep_order_and_skip_blanks(self):
        self.assertEqual(self.course.module_names, ['Planejamento', 'Avaliação'])
        self.assertEqual(
            list(self.course.modules.values_list('order_number', flat=True)),
            [1, 2],
        )

    def test_replace_course_modules(self):
        replace_course_modules(course=self.course, module_names=['Currículo', 'Planejamento', 'Gestão'])

        self.assertEqual(self.course.module_names, ['Currículo', 'Planejamento', 'Gestão'])
        self.assertEqual(CourseModule.objects.filter(course=self.course).count(), 3)

    def test_course_requires_positive_workload(self):
        with self.assertRaises(ValidationError):
            create_course_with_modules(owner=self.owner, name='Vazio', workload=0, modality='ead')

    def test_cycle_end_must_follow_start(self):
        cycle = Cycle(owner=self.owner, name='Inválido', start_date=date(2025, 6, 1), end_date=date(2025, 6, 1))
        with self.assertRaises(ValidationError):
            cycle.full_clean()

    def test_class_takes_modality_from_course(self):
        ead_course = create_course_with_modules(owner=self.owner, name='Libras', workload=60, modality='ead')
        course_class = CourseClass(
            owner=self.owner,
            course=ead_course,
            name='Turma EAD',
            days_of_week=['segunda'],
            class_time=time(19, 0),
            total_classes=8,
        )
        course_class.full_clean()

        self.assertEqual(course_class.modality, 'ead')
        self.assertEqual(course_class.days_of_week, [])
        self.assertIsNone(course_class.class_time)
        self.assertEqual(course_class.total_classes, 1)

    def test_videoconference_class_requires_schedule(self):
        course_class = CourseClass(owner=self.owner, course=self.course, name='Turma B', total_classes=5)
        with self.assertRaises(ValidationError):
            course_class.full_clean()

    def test_class_cannot_be_created_in_closed_cycle(self):
        close_cycle(cycle=self.cycle)
        course_class = CourseClass(
            owner=self.owner,
            cycle=self.cycle,
            course=self.course,
            name='Turma C',
            class_time=time(8, 0),
            total_classes=5,
        )
        with self.assertRaises(ValidationError):
            course_class.full_clean()

    def test_enroll_students(self):
        created = enroll_students(
            course_class=self.course_class,
            students=[self.student_a, self.student_b],
            enrollment_date=date(2025, 3, 1),
        )

        self.assertEqual(len(created), 2)
        self.assertEqual(self.course_class.enrollments.count(), 2)
        self.assertEqual(list(available_students(course_class=self.course_class)), [])

    def test_enroll_rejects_duplicates(self):
        enroll_students(course_class=self.course_class, students=[self.student_a])

        with self.assertRaises(ValidationError):
            enroll_students(course_class=self.course_class, students=[self.student_a, self.student_b])
        self.assertEqual(self.course_class.enrollments.count(), 1)

    def test_enroll_rejects_other_owner_student(self):
        with self.assertRaises(ValidationError):
            enroll_students(course_class=self.course_class, students=[self.foreign_student])

    def test_enroll_rejects_empty_selection(self):
        with self.assertRaises(ValidationError):
            enroll_students(course_class=self.course_class, students=[])

    def test_exceptional_enrollment_keeps_date(self):
        enroll_students(
            course_class=self.course_class,
            students=[self.student_a],
            enrollment_type=Enrollment.TYPE_EXCEPTIONAL,
            enrollment_date=date(2025, 4, 15),
        )
        enrollment = Enrollment.objects.get(course_class=self.course_class, student=self.student_a)

        self.assertTrue(enrollment.is_exceptional)
        self.assertEqual(enrollment.enrollment_date, date(2025, 4, 15))

    def test_ead_enrollment_creates_access_row(self):
        ead_course = create_course_with_modules(owner=self.owner, name='Libras', workload=60, modality='ead')
        ead_class = CourseClass.objects.create(owner=self.owner, course=ead_course, name='Turma EAD', modality='ead')

        enroll_students(course_class=ead_class, students=[self.student_a])

        self.assertTrue(EadAccess.objects.filter(course_class=ead_class, student=self.student_a).exists())

    def test_available_students_search(self):
        enroll_students(course_class=self.course_class, students=[self.student_a])

        self.assertEqual(list(available_students(course_class=self.course_class, search='bru')), [self.student_b])
        self.assertEqual(list(available_students(course_class=self.course_class, search='ana')), [])

    def test_remove_student(self):
        enroll_students(course_class=self.course_class, students=[self.student_a])
        remove_student(course_class=self.course_class, student=self.student_a)

        self.assertFalse(self.course_class.enrollments.exists())
        with self.assertRaises(ValidationError):
            remove_student(course_class=self.course_class, student=self.student_a)

    def test_closed_class_blocks_enrollment_changes(self):
        enroll_students(course_class=self.course_class, students=[self.student_a])
        close_class(course_class=self.course_class)

        with self.assertRaises(ValidationError):
            enroll_students(course_class=self.course_class, students=[self.student_b])
        with self.assertRaises(ValidationError):
            remove_student(course_class=self.course_class, student=self.student_a)

    def test_close_cycle_closes_its_classes(self):
        closed = close_cycle(cycle=self.cycle)

        self.cycle.refresh_from_db()
        self.course_class.refresh_from_db()
        self.assertEqual(closed, 1)
        self.assertTrue(self.cycle.is_closed)
        self.assertTrue(self.course_class.is_closed)


class AcademicViewTests(TestCase):
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
        self.cycle = Cycle.objects.create(
            owner=self.owner,
            name='2025.1',
            start_date=date(2025, 3, 1),
            end_date=date(2025, 6, 30),
        )
        self.course = create_course_with_modules(
            owner=self.owner,
            name='Gestão Escolar',
            workload=40,
            modality='videoconference',
        )
        self.student = Student.objects.create(owner=self.owner, full_name='Ana Souza')

    def test_create_course_with_modules(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('course_list'), {
            'name': 'Educação Inclusiva',
            'teacher_name': 'Profa. Marta',
            'workload': 120,
            'modality': 'ead',
            'modules': 'Fundamentos\nLegislação\n\nPráticas',
        })

        self.assertEqual(response.status_code, 302)
        course = Course.objects.get(name='Educação Inclusiva')
        self.assertEqual(course.owner, self.owner)
        self.assertEqual(course.module_names, ['Fundamentos', 'Legislação', 'Práticas'])

    def test_course_with_classes_cannot_be_deleted(self):
        CourseClass.objects.create(
            owner=self.owner,
            course=self.course,
            name='Turma A',
            class_time=time(19, 0),
            total_classes=10,
        )
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('course_delete', args=[self.course.id]))

        self.assertEqual(response.status_code, 302)
        self.assertTrue(Course.objects.filter(pk=self.course.pk).exists())

    def test_create_class_and_enroll(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('class_list'), {
            'cycle': self.cycle.id,
            'course': self.course.id,
            'name': 'Turma Noite',
            'days_of_week': ['segunda', 'quarta'],
            'class_time': '19:00',
            'total_classes': 12,
        })

        course_class = CourseClass.objects.get(name='Turma Noite')
        self.assertRedirects(response, reverse('class_detail', args=[course_class.id]))
        self.assertEqual(course_class.modality, 'videoconference')
        self.assertEqual(course_class.days_of_week, ['segunda', 'quarta'])

        response = self.client.post(reverse('class_enroll', args=[course_class.id]), {
            'students': [self.student.id],
            'enrollment_type': 'regular',
        })
        self.assertEqual(response.status_code, 302)
        self.assertTrue(Enrollment.objects.filter(course_class=course_class, student=self.student).exists())

    def test_exceptional_enrollment_without_date_is_rejected(self):
        course_class = CourseClass.objects.create(
            owner=self.owner,
            course=self.course,
            name='Turma A',
            class_time=time(19, 0),
            total_classes=10,
        )
        self.client.login(username='academico', password='pass12345')
        self.client.post(reverse('class_enroll', args=[course_class.id]), {
            'students': [self.student.id],
            'enrollment_type': 'exceptional',
        })

        self.assertFalse(Enrollment.objects.exists())

    def test_class_of_other_owner_is_not_visible(self):
        course_class = CourseClass.objects.create(
            owner=self.owner,
            course=self.course,
            name='Turma A',
            class_time=time(19, 0),
            total_classes=10,
        )
        self.client.login(username='intruso', password='pass12345')

        self.assertEqual(self.client.get(reverse('class_detail', args=[course_class.id])).status_code, 404)

    def test_close_cycle_view(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('cycle_close', args=[self.cycle.id]))

        self.assertEqual(response.status_code, 302)
        self.cycle.refresh_from_db()
        self.assertTrue(self.cycle.is_closed)

    def test_financial_user_cannot_open_academic_dashboard(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.get(reverse('academic_dashboard'))

        self.assertEqual(response.status_code, 403)
