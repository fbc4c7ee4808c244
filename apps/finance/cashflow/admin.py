from django.contrib import admin

from .models import FixedExpense, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('transaction_date', 'type', 'amount', 'method', 'category', 'owner')
    list_filter = ('type', 'method', 'category')
    search_fields = ('description',)


@admin.register(FixedExpense)
class FixedExpenseAdmin(admin.ModelAdmin):
    list_display = ('name', 'amount', 'method', 'active', 'owner')
    list_filter = ('active',)
