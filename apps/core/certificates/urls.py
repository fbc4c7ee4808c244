from django.urls import path

from .views import certificate_detail, certificate_issue, certificate_list, certificate_pdf

urlpatterns = [
    path('', certificate_list, name='certificate_list'),
    path('issue/<int:enrollment_id>/', certificate_issue, name='certificate_issue'),
    path('<int:pk>/', certificate_detail, name='certificate_detail'),
    path('<int:pk>/pdf/', certificate_pdf, name='certificate_pdf'),
]
