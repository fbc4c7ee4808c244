from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.utils.managers import OwnerManager

DEFAULT_HEADER = 'ATA DE SESSÃO ORDINÁRIA MENSAL DA DIRETORIA EXECUTIVA'


class MeetingMinute(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='meeting_minutes',
    )
    objects = OwnerManager()

    title = models.CharField(max_length=255)
    header_text = models.TextField(default=DEFAULT_HEADER)
    logo_url = models.URLField(blank=True)
    content = models.TextField()
    meeting_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-meeting_date', '-id']

    def __str__(self):
        return f"{self.title} ({self.meeting_date})"
