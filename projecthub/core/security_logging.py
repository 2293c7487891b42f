"""Signal handlers that persist security-sensitive audit events."""

from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth.signals import (
    user_logged_in,
    user_logged_out,
    user_login_failed,
)
from django.dispatch import receiver

from projecthub.accounts.signals import (
    two_factor_code_expired,
    two_factor_enabled_by_role,
    two_factor_locked_out,
    two_factor_verified,
)

from .models import SecurityLog

logger = logging.getLogger(__name__)


def _get_client_ip(request) -> Optional[str]:
    """Extract the client IP address from the request object."""

    if request is None:
        return None

    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        # The left-most address is the original client in standard proxy setups.
        return x_forwarded_for.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


def _get_user_agent(request) -> str:
    """Return the User-Agent header if one was supplied."""

    if request is None:
        return ""
    return request.META.get("HTTP_USER_AGENT", "")


def _record(event_type, *, user=None, request=None, description="", metadata=None):
    return SecurityLog.objects.create(
        actor=user,
        target_user=user,
        event_type=event_type,
        ip_address=_get_client_ip(request),
        user_agent=_get_user_agent(request),
        description=description,
        metadata=metadata or {"path": getattr(request, "path", "")},
    )


@receiver(user_logged_in)
def log_login_success(sender, request, user, **kwargs):
    """Persist a record whenever a user signs in successfully."""

    _record(
        SecurityLog.EventType.LOGIN_SUCCESS,
        user=user,
        request=request,
        description=f"{user.get_username()} signed in successfully.",
    )


@receiver(user_logged_out)
def log_logout(sender, request, user, **kwargs):
    """Record when a user signs out of the system."""

    authenticated = getattr(user, "is_authenticated", False)
    _record(
        SecurityLog.EventType.LOGOUT,
        user=user if authenticated else None,
        request=request,
        description=(
            f"{user.get_username()} signed out."
            if authenticated
            else "Anonymous session ended."
        ),
    )


@receiver(user_login_failed)
def log_login_failure(sender, credentials, request=None, **kwargs):
    """Capture failed authentication attempts for administrators to review."""

    username = (credentials or {}).get("username", "unknown")
    _record(
        SecurityLog.EventType.LOGIN_FAILURE,
        request=request,
        description=f"Failed login attempt for '{username}'.",
        metadata={
            "username": username,
            "path": getattr(request, "path", "") if request is not None else "",
        },
    )


@receiver(two_factor_enabled_by_role)
def log_two_factor_enabled(sender, user, **kwargs):
    _record(
        SecurityLog.EventType.TWO_FACTOR_ENABLED,
        user=user,
        description=f"Two factor authentication enabled for {user.get_username()} by role.",
        metadata={"user_id": user.pk},
    )


@receiver(two_factor_verified)
def log_two_factor_verified(sender, user, request=None, **kwargs):
    _record(
        SecurityLog.EventType.TWO_FACTOR_VERIFIED,
        user=user,
        request=request,
        description=f"{user.get_username()} confirmed a two factor code.",
    )


@receiver(two_factor_code_expired)
def log_two_factor_expired(sender, user, request=None, **kwargs):
    logger.info("Two factor code of user %s expired", user.pk)
    _record(
        SecurityLog.EventType.TWO_FACTOR_EXPIRED,
        user=user,
        request=request,
        description=f"Two factor code of {user.get_username()} expired; session ended.",
    )


@receiver(two_factor_locked_out)
def log_two_factor_lockout(sender, user, request=None, **kwargs):
    logger.warning("User %s locked out after failed two factor attempts", user.pk)
    _record(
        SecurityLog.EventType.TWO_FACTOR_LOCKOUT,
        user=user,
        request=request,
        description=f"{user.get_username()} was locked out after too many failed codes.",
    )
