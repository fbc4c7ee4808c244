from django.contrib import admin

from .models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ('student', 'course_class', 'issue_date', 'attendance_percentage')
    list_filter = ('issue_date',)
    search_fields = ('student__full_name', 'course_class__name')
