from django.contrib import admin

from .models import Course, CourseClass, CourseModule, Cycle, Enrollment


class CourseModuleInline(admin.TabularInline):
    model = CourseModule
    extra = 0


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ('name', 'modality', 'workload', 'teacher_name', 'owner')
    list_filter = ('modality', 'owner')
    search_fields = ('name', 'teacher_name')
    inlines = [CourseModuleInline]


@admin.register(Cycle)
class CycleAdmin(admin.ModelAdmin):
    list_display = ('name', 'start_date', 'end_date', 'status', 'owner')
    list_filter = ('status', 'owner')


@admin.register(CourseClass)
class CourseClassAdmin(admin.ModelAdmin):
    list_display = ('name', 'course', 'cycle', 'modality', 'total_classes', 'status')
    list_filter = ('modality', 'status', 'cycle')
    search_fields = ('name', 'course__name')


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ('student', 'course_class', 'enrollment_type', 'enrollment_date')
    list_filter = ('enrollment_type',)
    search_fields = ('student__full_name', 'course_class__name')
