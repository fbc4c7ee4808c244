from django.urls import path

from .views import (
    attendance_entry_delete,
    attendance_entry_update,
    attendance_report_view,
    class_attendance,
    ead_access_update,
)

urlpatterns = [
    path('classes/<int:pk>/', class_attendance, name='class_attendance'),
    path('classes/<int:pk>/ead/<int:student_id>/', ead_access_update, name='ead_access_update'),
    path('entries/<int:pk>/edit/', attendance_entry_update, name='attendance_entry_update'),
    path('entries/<int:pk>/delete/', attendance_entry_delete, name='attendance_entry_delete'),
    path('report/', attendance_report_view, name='attendance_report'),
]
