from django.contrib import admin

from .models import AttendanceEntry, EadAccess


@admin.register(AttendanceEntry)
class AttendanceEntryAdmin(admin.ModelAdmin):
    list_display = ('student', 'course_class', 'class_number', 'class_date', 'present')
    list_filter = ('present', 'course_class')
    search_fields = ('student__full_name',)


@admin.register(EadAccess)
class EadAccessAdmin(admin.ModelAdmin):
    list_display = ('student', 'course_class', 'access_date_1', 'access_date_2', 'access_date_3')
    search_fields = ('student__full_name',)
