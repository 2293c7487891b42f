"""Profile models and signal handlers for project hub users."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from django.conf import settings
from django.db import DatabaseError, models
from django.db.models import F
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone

from .exceptions import PersistenceError
from .utils import generate_digit_code

logger = logging.getLogger(__name__)


class Profile(models.Model):
    """Security state that augments the built-in user model."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        related_name="profile",
        on_delete=models.CASCADE,
    )
    # 2FA
    two_factor_enabled = models.BooleanField(
        default=False,
        help_text="True when a code has to be confirmed after every sign in.",
    )
    two_factor_code = models.CharField(max_length=6, blank=True, null=True)
    two_factor_expires_at = models.DateTimeField(blank=True, null=True)
    two_factor_attempts = models.PositiveSmallIntegerField(default=0)
    last_attempt_at = models.DateTimeField(blank=True, null=True)
    locked_until = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["user"], name="profile_user_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representational helper
        return f"Profile<{self.user_id}>"

    @classmethod
    def for_user(cls, user) -> "Profile":
        """Return the profile of ``user``, creating it for legacy accounts."""
        try:
            return user.profile
        except cls.DoesNotExist:
            profile, _ = cls.objects.get_or_create(user=user)
            return profile

    @property
    def email(self) -> str:
        return getattr(self.user, "email", "")

    # ------------------------------------------------------------ persistence
    def save_with_audit(self, update_fields: Optional[Iterable[str]] = None) -> None:
        """Persist the profile and bump ``updated_at``."""
        fields = None
        if update_fields is not None:
            fields = list(dict.fromkeys([*update_fields, "updated_at"]))
        try:
            self.save(update_fields=fields)
        except DatabaseError as exc:
            raise PersistenceError(f"Could not save profile {self.pk}") from exc

    def save_silent(self, update_fields: Iterable[str]) -> None:
        """Write ``update_fields`` without touching ``updated_at``.

        ``QuerySet.update`` skips ``auto_now`` and only writes the named
        columns.
        """
        values = {field: getattr(self, field) for field in update_fields}
        try:
            type(self).objects.filter(pk=self.pk).update(**values)
        except DatabaseError as exc:
            raise PersistenceError(f"Could not save profile {self.pk}") from exc

    # -------------------------------------------------------------- 2FA state
    @property
    def has_pending_code(self) -> bool:
        return bool(self.two_factor_code)

    def generate_two_factor_code(self) -> str:
        ttl = int(getattr(settings, "TWO_FACTOR_CODE_TTL", 60 * 5))
        self.two_factor_code = generate_digit_code()
        self.two_factor_expires_at = timezone.now() + timedelta(seconds=ttl)
        self.save_silent(["two_factor_code", "two_factor_expires_at"])
        return self.two_factor_code

    def reset_two_factor_code(self) -> None:
        self.two_factor_code = None
        self.two_factor_expires_at = None
        self.save_silent(["two_factor_code", "two_factor_expires_at"])

    def register_failed_attempt(self) -> int:
        # Incremented in the database so parallel failures are all counted.
        self.last_attempt_at = timezone.now()
        try:
            type(self).objects.filter(pk=self.pk).update(
                two_factor_attempts=F("two_factor_attempts") + 1,
                last_attempt_at=self.last_attempt_at,
            )
            self.refresh_from_db(fields=["two_factor_attempts"])
        except DatabaseError as exc:
            raise PersistenceError(f"Could not save profile {self.pk}") from exc
        return self.two_factor_attempts

    def clear_attempts(self) -> None:
        self.two_factor_attempts = 0
        self.last_attempt_at = None
        self.save_silent(["two_factor_attempts", "last_attempt_at"])

    # ---------------------------------------------------------------- lockout
    def is_locked(self, now: Optional[datetime] = None) -> bool:
        return self.locked_until is not None and (now or timezone.now()) < self.locked_until

    def lock(self) -> None:
        minutes = int(getattr(settings, "TWO_FACTOR_LOCKOUT_MINUTES", 10))
        self.locked_until = timezone.now() + timedelta(minutes=minutes)
        self.two_factor_code = None
        self.two_factor_expires_at = None
        self.two_factor_attempts = 0
        self.last_attempt_at = None
        self.save_silent(
            [
                "locked_until",
                "two_factor_code",
                "two_factor_expires_at",
                "two_factor_attempts",
                "last_attempt_at",
            ]
        )
        logger.info("Locked profile %s until %s", self.pk, self.locked_until)

    def release_expired_lock(self, now: Optional[datetime] = None) -> None:
        """Drop a lock whose period already ended."""
        if self.locked_until is not None and (now or timezone.now()) > self.locked_until:
            self.locked_until = None
            self.save_silent(["locked_until"])


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def ensure_profile(sender, instance, created, **kwargs):
    """Guarantee every user has an attached profile row."""
    if created:
        Profile.objects.create(user=instance)
