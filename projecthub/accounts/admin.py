from django.contrib import admin

from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Show the two factor state of every account."""

    list_display = ("user", "two_factor_enabled", "locked_until", "updated_at")
    list_filter = ("two_factor_enabled",)
    search_fields = ("user__username", "user__email")
    readonly_fields = (
        "two_factor_code",
        "two_factor_expires_at",
        "two_factor_attempts",
        "last_attempt_at",
        "created_at",
        "updated_at",
    )
