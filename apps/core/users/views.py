from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect


@login_required
def role_redirect(request):

    role = request.user.role

    if role == 'superadmin':
        return redirect('admin:index')

    elif role == 'academic':
        return redirect('academic_dashboard')

    elif role == 'financial':
        return redirect('financial_dashboard')

    else:
        return redirect('/login/')
