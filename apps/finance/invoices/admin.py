from django.contrib import admin

from .models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('item_number', 'unit_name', 'exercise_label', 'net_value', 'payment_status', 'deleted_at', 'owner')
    list_filter = ('payment_status', 'exercise_year')
    search_fields = ('unit_name', 'cnpj_cpf', 'invoice_number')
