from django.urls import path

from .views import cashflow_list, financial_dashboard, fixed_expense_create, fixed_expense_toggle

urlpatterns = [
    path('', financial_dashboard, name='financial_dashboard'),
    path('cashflow/', cashflow_list, name='cashflow_list'),
    path('fixed-expenses/add/', fixed_expense_create, name='fixed_expense_create'),
    path('fixed-expenses/<int:pk>/toggle/', fixed_expense_toggle, name='fixed_expense_toggle'),
]
