"""Account services: role assignment and two factor code delivery."""

from __future__ import annotations

import logging
from typing import Iterable

from django.conf import settings
from django.contrib.auth.models import Group
from django.core.mail import send_mail
from django.db import transaction
from django.template.loader import render_to_string

from .models import Profile

logger = logging.getLogger(__name__)

ROLE_NAMES = ("Super Admin", "Admin", "Manager", "Employee")


@transaction.atomic
def sync_roles(user, role_names: Iterable[str]) -> None:
    """Replace the groups of ``user`` with ``role_names``.

    Unknown roles are created on the fly. The membership change emits
    ``role_updated`` through the ``m2m_changed`` bridge in ``signals``.
    """

    groups = [Group.objects.get_or_create(name=name)[0] for name in role_names]
    user.groups.set(groups)


def assign_role(user, role_name: str) -> None:
    group, _ = Group.objects.get_or_create(name=role_name)
    user.groups.add(group)


def send_two_factor_code(profile: Profile) -> None:
    """Mail the pending code of ``profile`` to its owner."""

    user = profile.user
    context = {
        "user": user,
        "code": profile.two_factor_code,
        "expires_at": profile.two_factor_expires_at,
        "site_name": getattr(settings, "SITE_NAME", "Project Hub"),
    }
    send_mail(
        subject=f"Your {context['site_name']} verification code",
        message=render_to_string("accounts/emails/two_factor_code.txt", context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
        fail_silently=False,
    )
    logger.info("Sent two factor code to user %s", user.pk)


def issue_two_factor_code(profile: Profile) -> str:
    """Generate a fresh code for ``profile`` and mail it."""

    code = profile.generate_two_factor_code()
    send_two_factor_code(profile)
    return code
