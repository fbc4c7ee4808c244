from django.contrib import admin

from .models import MeetingMinute


@admin.register(MeetingMinute)
class MeetingMinuteAdmin(admin.ModelAdmin):
    list_display = ('title', 'meeting_date', 'owner')
    search_fields = ('title', 'content')
