from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from .models import DEFAULT_HEADER, MeetingMinute


class MeetingMinuteViewTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.owner = self.user_model.objects.create_user(
            username='financeiro',
            password='pass12345',
            role='financial',
        )
        self.intruder = self.user_model.objects.create_user(
            username='intruso',
            password='pass12345',
            role='financial',
        )

    def test_create_minute(self):
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.post(reverse('minute_list'), {
            'title': 'Reunião de março',
            'header_text': DEFAULT_HEADER,
            'meeting_date': '2025-03-28',
            'content': 'Aprovação do orçamento do trimestre.',
        })

        self.assertEqual(response.status_code, 302)
        minute = MeetingMinute.objects.get(owner=self.owner)
        self.assertEqual(minute.title, 'Reunião de março')

    def test_print_view_shows_header_and_content(self):
        minute = MeetingMinute.objects.create(
            owner=self.owner,
            title='Reunião de abril',
            content='Prestação de contas.',
        )
        self.client.login(username='financeiro', password='pass12345')
        response = self.client.get(reverse('minute_print', args=[minute.id]))

        self.assertContains(response, DEFAULT_HEADER)
        self.assertContains(response, 'Prestação de contas.')

    def test_update_and_delete(self):
        minute = MeetingMinute.objects.create(owner=self.owner, title='Rascunho', content='Texto')
        self.client.login(username='financeiro', password='pass12345')

        self.client.post(reverse('minute_update', args=[minute.id]), {
            'title': 'Ata final',
            'header_text': DEFAULT_HEADER,
            'meeting_date': '2025-04-30',
            'content': 'Texto revisado',
        })
        minute.refresh_from_db()
        self.assertEqual(minute.title, 'Ata final')

        self.client.post(reverse('minute_delete', args=[minute.id]))
        self.assertFalse(MeetingMinute.objects.filter(pk=minute.pk).exists())

    def test_other_owner_cannot_print(self):
        minute = MeetingMinute.objects.create(owner=self.owner, title='Privada', content='Texto')
        self.client.login(username='intruso', password='pass12345')

        self.assertEqual(self.client.get(reverse('minute_print', args=[minute.id])).status_code, 404)
