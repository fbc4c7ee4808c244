from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from .models import Student, Unit


class StudentModelTests(TestCase):
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

    def test_cpf_is_normalized_to_digits(self):
        student = Student(owner=self.owner, full_name='  Ana   Souza ', cpf='123.456.789-09')
        student.full_clean()

        self.assertEqual(student.cpf, '12345678909')
        self.assertEqual(student.full_name, 'Ana Souza')

    def test_cpf_with_wrong_length_is_rejected(self):
        student = Student(owner=self.owner, full_name='Ana Souza', cpf='123')
        with self.assertRaises(ValidationError):
            student.full_clean()

    def test_unit_from_other_owner_is_rejected(self):
        foreign_unit = Unit.objects.create(owner=self.other_owner, name='Unidade Norte')
        student = Student(owner=self.owner, full_name='Ana Souza', unit=foreign_unit)

        with self.assertRaises(ValidationError):
            student.full_clean()

    def test_unit_name_fallback(self):
        student = Student.objects.create(owner=self.owner, full_name='Bruno Lima')
        self.assertEqual(student.unit_name, 'Não informado')

    def test_unit_with_students_cannot_be_removed(self):
        Student.objects.create(owner=self.owner, full_name='Ana Souza', unit=self.unit)

        with self.assertRaises(ValidationError):
            self.unit.delete()

    def test_empty_unit_is_deactivated_not_deleted(self):
        self.unit.delete()
        self.unit.refresh_from_db()

        self.assertFalse(self.unit.is_active)


class StudentViewTests(TestCase):
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

    def test_create_student(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('student_list'), {
            'full_name': 'Ana Souza',
            'cpf': '123.456.789-09',
            'email': 'ana@example.com',
            'unit': self.unit.id,
        })

        self.assertEqual(response.status_code, 302)
        student = Student.objects.get(owner=self.owner)
        self.assertEqual(student.unit, self.unit)

    def test_duplicate_unit_name_is_rejected(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('unit_list'), {
            'name': 'unidade centro',
            'is_active': 'on',
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(Unit.objects.for_owner(self.owner).count(), 1)

    def test_search_filters_by_name(self):
        Student.objects.create(owner=self.owner, full_name='Ana Souza')
        Student.objects.create(owner=self.owner, full_name='Bruno Lima')
        Student.objects.create(owner=self.other_owner, full_name='Ana Outra')

        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('student_list'), {'q': 'ana'})

        names = [student.full_name for student in response.context['students']]
        self.assertEqual(names, ['Ana Souza'])

    def test_other_owner_cannot_edit_student(self):
        student = Student.objects.create(owner=self.owner, full_name='Ana Souza')
        self.client.login(username='outro', password='pass12345')

        response = self.client.get(reverse('student_update', args=[student.id]))
        self.assertEqual(response.status_code, 404)

    def test_deactivate_unit_view(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.post(reverse('unit_deactivate', args=[self.unit.id]))

        self.assertEqual(response.status_code, 302)
        self.unit.refresh_from_db()
        self.assertFalse(self.unit.is_active)
