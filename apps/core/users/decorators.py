import logging
from functools import wraps

from django.shortcuts import redirect, render

from apps.core.users.models import User

logger = logging.getLogger(__name__)


def _normalize_roles(allowed_roles):
    if isinstance(allowed_roles, str):
        allowed_roles = {allowed_roles}
    roles = set(allowed_roles)
    unknown = roles - {choice[0] for choice in User.ROLE_CHOICES}
    if unknown:
        raise ValueError(f'Unknown role(s): {", ".join(sorted(unknown))}')
    # Superadmins manage both areas of the institute.
    roles.add(User.ROLE_SUPERADMIN)
    return roles


def role_required(allowed_roles):
    normalized_roles = _normalize_roles(allowed_roles)

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return redirect('login')

            if request.user.role not in normalized_roles:
                logger.warning(
                    'Denied %s (%s) access to %s',
                    request.user.username,
                    request.user.role,
                    request.path,
                )
                return render(request, 'forbidden.html', status=403)

            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
