from django.contrib.auth import get_user_model
from django.http import HttpRequest
from django.test import RequestFactory, TestCase
from django.urls import reverse

from .audit import log_audit_event
from .models import AuditLog


class RoleAccessTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.academic = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )
        self.financial = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )

    def test_academic_user_redirects_to_academic_dashboard(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('role_redirect'))
        self.assertRedirects(response, reverse('academic_dashboard'))

    def test_financial_user_redirects_to_financial_dashboard(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.get(reverse('role_redirect'))
        self.assertRedirects(response, reverse('financial_dashboard'))

    def test_anonymous_user_is_sent_to_login(self):
        response = self.client.get(reverse('academic_dashboard'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response['Location'])

    def test_academic_user_cannot_open_financial_pages(self):
        self.client.login(username='academico', password='pass12345')
        response = self.client.get(reverse('financial_dashboard'))
        self.assertEqual(response.status_code, 403)

    def test_superuser_always_gets_superadmin_role(self):
        admin = self.user_model.objects.create_superuser(username='root', password='pass12345')
        self.assertEqual(admin.role, 'superadmin')

    def test_superadmin_can_open_both_areas(self):
        self.user_model.objects.create_superuser(username='root', password='pass12345')
        self.client.login(username='root', password='pass12345')

        self.assertEqual(self.client.get(reverse('academic_dashboard')).status_code, 200)
        self.assertEqual(self.client.get(reverse('financial_dashboard')).status_code, 200)


class AuditLogTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.user = self.user_model.objects.create_user(
            username='academico',
            password='pass12345',
            role='academic',
        )
        self.factory = RequestFactory()

    def test_audit_event_records_request_metadata(self):
        request = self.factory.post('/students/', HTTP_X_FORWARDED_FOR='10.0.0.7, 10.0.0.1')
        request.user = self.user

        log_audit_event(request=request, action='students.student_created', target=self.user, details='Name=Ana')

        entry = AuditLog.objects.get()
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.target_model, 'User')
        self.assertEqual(entry.target_id, str(self.user.pk))
        self.assertEqual(entry.method, 'POST')
        self.assertEqual(entry.ip_address, '10.0.0.7')

    def test_client_login_is_audited(self):
        self.assertTrue(self.client.login(username='academico', password='pass12345'))

        entry = AuditLog.objects.get(action='user.login')
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.method, '')
        self.assertIn('Role=academic', entry.details)

    def test_force_login_and_logout_are_audited(self):
        self.client.force_login(self.user)
        self.client.logout()

        self.assertTrue(AuditLog.objects.filter(action='user.login', user=self.user).exists())
        self.assertTrue(AuditLog.objects.filter(action='user.logout', user=self.user).exists())

    def test_audit_event_without_request_user_is_anonymous(self):
        request = HttpRequest()

        log_audit_event(request=request, action='user.system_check')

        entry = AuditLog.objects.get()
        self.assertIsNone(entry.user)
        self.assertEqual(entry.path, '')

    def test_failed_login_is_audited(self):
        response = self.client.post(reverse('login'), {'username': 'academico', 'password': 'errada'})

        self.assertEqual(response.status_code, 200)
        entry = AuditLog.objects.get(action='user.login_failed')
        self.assertIsNone(entry.user)
        self.assertIn('Username=academico', entry.details)

    def test_view_actions_are_audited(self):
        self.client.login(username='academico', password='pass12345')
        self.client.post(reverse('unit_list'), {'name': 'Unidade Sul', 'is_active': 'on'})

        self.assertTrue(AuditLog.objects.filter(action='students.unit_created', user=self.user).exists())
