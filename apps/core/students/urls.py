from django.urls import path

from .views import (
    student_list,
    student_update,
    unit_deactivate,
    unit_list,
    unit_update,
)

urlpatterns = [
    path('units/', unit_list, name='unit_list'),
    path('units/<int:pk>/edit/', unit_update, name='unit_update'),
    path('units/<int:pk>/deactivate/', unit_deactivate, name='unit_deactivate'),

    path('', student_list, name='student_list'),
    path('<int:pk>/edit/', student_update, name='student_update'),
]
