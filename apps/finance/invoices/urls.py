from django.urls import path

from .views import invoice_delete, invoice_list, invoice_update

urlpatterns = [
    path('', invoice_list, name='invoice_list'),
    path('<int:pk>/edit/', invoice_update, name='invoice_update'),
    path('<int:pk>/delete/', invoice_delete, name='invoice_delete'),
]
