# core/context_processors.py
from projecthub.accounts.models import Profile


def two_factor_status(request):
    """Expose whether the signed in user has two factor authentication enabled.

    Anonymous visitors always get ``False`` so templates can render the
    account menu without extra checks.
    """

    user = getattr(request, "user", None)
    enabled = False
    if user and user.is_authenticated:
        enabled = Profile.for_user(user).two_factor_enabled
    return {"two_factor_enabled": enabled}
