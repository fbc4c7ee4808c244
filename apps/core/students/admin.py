from django.contrib import admin

from .models import Student, Unit


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ('name', 'owner', 'phone', 'is_active')
    list_filter = ('owner', 'is_active')
    search_fields = ('name',)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'cpf', 'email', 'unit', 'owner')
    list_filter = ('owner', 'unit')
    search_fields = ('full_name', 'cpf', 'email')
