from django.urls import path

from .views import minute_delete, minute_list, minute_print, minute_update

urlpatterns = [
    path('', minute_list, name='minute_list'),
    path('<int:pk>/edit/', minute_update, name='minute_update'),
    path('<int:pk>/delete/', minute_delete, name='minute_delete'),
    path('<int:pk>/print/', minute_print, name='minute_print'),
]
