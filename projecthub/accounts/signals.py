"""Account signals and the role driven two factor rule."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db.models.signals import m2m_changed
from django.dispatch import Signal, receiver

from .models import Profile
from .utils import has_privileged_role

logger = logging.getLogger(__name__)

UserModel = get_user_model()

# Sent with ``user`` whenever the groups (roles) of a user changed.
role_updated = Signal()

# Sent with ``user`` by the rule below after it switched two factor on.
two_factor_enabled_by_role = Signal()

# Sent with ``user`` and ``request`` from the verification flow.
two_factor_code_expired = Signal()
two_factor_verified = Signal()
two_factor_locked_out = Signal()


@receiver(m2m_changed, sender=UserModel.groups.through)
def announce_role_change(sender, instance, action, reverse, model, pk_set, **kwargs):
    """Translate group membership changes into ``role_updated``."""

    if action not in {"post_add", "post_remove", "post_clear"}:
        return

    if not reverse:
        role_updated.send(sender=UserModel, user=instance)
        return

    # ``group.user_set`` changes: ``pk_set`` holds user keys (None on clear).
    if not pk_set:
        return
    for user in UserModel.objects.filter(pk__in=pk_set):
        role_updated.send(sender=UserModel, user=user)


@receiver(role_updated)
def enable_two_factor_for_privileged_roles(sender, user, **kwargs):
    """Switch two factor on for admins without touching ``updated_at``.

    Removing a privileged role never switches it off again.
    """

    if not has_privileged_role(user):
        return

    profile, _ = Profile.objects.get_or_create(user=user)
    if profile.two_factor_enabled:
        return

    profile.two_factor_enabled = True
    profile.save_silent(["two_factor_enabled"])
    logger.info("Enabled two factor authentication for user %s", user.pk)
    two_factor_enabled_by_role.send(sender=Profile, user=user)
