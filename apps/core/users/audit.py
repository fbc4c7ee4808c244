import logging

from django.db import DatabaseError, transaction

from apps.core.users.models import AuditLog

logger = logging.getLogger(__name__)

MAX_DETAILS_LENGTH = 2000


def _extract_ip(request):
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def _describe_target(target):
    if target is None:
        return '', ''
    return target.__class__.__name__, str(getattr(target, 'pk', '') or '')


def _acting_user(request, user):
    if user is None:
        # Requests built by auth.login() may not carry .user yet.
        user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return user


def log_audit_event(request, action, target=None, details='', user=None):
    """
    Record a business action (``<app>.<verb>``) for the requesting user.

    ``user`` overrides ``request.user``; the auth signals pass it explicitly.
    The row is written in its own savepoint. A database failure is logged and
    the action itself carries on.
    """
    target_model, target_id = _describe_target(target)
    user = _acting_user(request, user)
    details = (details or '')[:MAX_DETAILS_LENGTH]

    logger.info(
        'audit %s by %s on %s#%s',
        action,
        user.username if user else 'anonymous',
        target_model or '-',
        target_id or '-',
    )

    try:
        with transaction.atomic():
            AuditLog.objects.create(
                user=user,
                action=action,
                target_model=target_model,
                target_id=target_id,
                details=details,
                method=getattr(request, 'method', None) or '',
                path=(getattr(request, 'path', '') or '')[:255],
                ip_address=_extract_ip(request),
            )
    except DatabaseError:
        logger.exception('Failed to write audit event %s', action)
