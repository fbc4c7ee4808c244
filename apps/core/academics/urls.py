from django.urls import path

from .views import (
    academic_dashboard,
    class_close,
    class_detail,
    class_enroll,
    class_list,
    class_remove_student,
    class_update,
    course_delete,
    course_list,
    course_update,
    cycle_close,
    cycle_list,
)

urlpatterns = [
    path('', academic_dashboard, name='academic_dashboard'),

    path('courses/', course_list, name='course_list'),
    path('courses/<int:pk>/edit/', course_update, name='course_update'),
    path('courses/<int:pk>/delete/', course_delete, name='course_delete'),

    path('cycles/', cycle_list, name='cycle_list'),
    path('cycles/<int:pk>/close/', cycle_close, name='cycle_close'),

    path('classes/', class_list, name='class_list'),
    path('classes/<int:pk>/', class_detail, name='class_detail'),
    path('classes/<int:pk>/edit/', class_update, name='class_update'),
    path('classes/<int:pk>/enroll/', class_enroll, name='class_enroll'),
    path('classes/<int:pk>/students/<int:student_id>/remove/', class_remove_student, name='class_remove_student'),
    path('classes/<int:pk>/close/', class_close, name='class_close'),
]
