from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', auth_views.LoginView.as_view(template_name='registration/login.html'), name='home'),
    path('login/', auth_views.LoginView.as_view(template_name='registration/login.html'), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),

    path('', include('apps.core.users.urls')),
    path('students/', include('apps.core.students.urls')),
    path('academics/', include('apps.core.academics.urls')),
    path('attendance/', include('apps.core.attendance.urls')),
    path('certificates/', include('apps.core.certificates.urls')),
    path('finance/', include('apps.finance.cashflow.urls')),
    path('finance/invoices/', include('apps.finance.invoices.urls')),
    path('finance/minutes/', include('apps.finance.minutes.urls')),
]
