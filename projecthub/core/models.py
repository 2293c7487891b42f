from django.conf import settings
from django.db import models
from django.utils import timezone


class SecurityLog(models.Model):
    """Capture authentication and two factor related security events."""

    class EventType(models.TextChoices):
        """Enumerate the security-sensitive activities we monitor."""

        LOGIN_SUCCESS = "LOGIN_SUCCESS", "Login success"
        LOGIN_FAILURE = "LOGIN_FAILURE", "Login failure"
        LOGOUT = "LOGOUT", "Logout"
        TWO_FACTOR_ENABLED = "TWO_FACTOR_ENABLED", "Two factor enabled"
        TWO_FACTOR_VERIFIED = "TWO_FACTOR_VERIFIED", "Two factor verified"
        TWO_FACTOR_EXPIRED = "TWO_FACTOR_EXPIRED", "Two factor code expired"
        TWO_FACTOR_LOCKOUT = "TWO_FACTOR_LOCKOUT", "Two factor lockout"

    timestamp = models.DateTimeField(
        default=timezone.now,
        help_text="When the security event occurred.",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="security_events",
        blank=True,
        null=True,
        help_text="Authenticated user who triggered the event (if known).",
    )
    target_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="security_events_target",
        blank=True,
        null=True,
        help_text="Account affected by the change (can differ from actor).",
    )
    event_type = models.CharField(
        max_length=32,
        choices=EventType.choices,
        help_text="Type of security event (login, two factor, etc.).",
    )
    ip_address = models.GenericIPAddressField(
        blank=True,
        null=True,
        help_text="Best-effort IP address captured with the event.",
    )
    user_agent = models.TextField(
        blank=True,
        help_text="Recorded User-Agent string for additional context.",
    )
    description = models.TextField(
        blank=True,
        help_text="Human readable explanation of what occurred.",
    )
    metadata = models.JSONField(
        blank=True,
        null=True,
        help_text="Optional structured payload for downstream analysis.",
    )

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["timestamp"], name="securitylog_ts_idx"),
            models.Index(
                fields=["event_type", "timestamp"],
                name="securitylog_event_ts_idx",
            ),
        ]
        verbose_name = "Security log entry"
        verbose_name_plural = "Security log entries"

    def __str__(self) -> str:
        actor = self.actor.get_username() if self.actor else "system"
        target = self.target_user.get_username() if self.target_user else "unknown"
        return f"{self.get_event_type_display()} by {actor} on {target}"
