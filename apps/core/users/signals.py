from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.dispatch import receiver

from apps.core.users.audit import log_audit_event


def _session_details(user):
    details = f"Role={user.role}"
    if user.institution_name:
        details = f"{details}, Institution={user.institution_name}"
    return details


@receiver(user_logged_in)
def log_login(sender, request, user, **kwargs):
    log_audit_event(
        request=request,
        action='user.login',
        target=user,
        user=user,
        details=_session_details(user),
    )


@receiver(user_logged_out)
def log_logout(sender, request, user, **kwargs):
    if user is None:
        return

    log_audit_event(
        request=request,
        action='user.logout',
        target=user,
        user=user,
        details=_session_details(user),
    )


@receiver(user_login_failed)
def log_login_failed(sender, credentials, request=None, **kwargs):
    # Test client and shell logins carry no request.
    if request is None:
        return

    log_audit_event(
        request=request,
        action='user.login_failed',
        details=f"Username={credentials.get('username', '')}",
    )
