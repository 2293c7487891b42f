"""Views for confirming the mailed two factor code.

Access rules (pending code present, not expired) are enforced by
:class:`projecthub.core.middleware.TwoFactorMiddleware` before these views run.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.crypto import constant_time_compare
from django.views.decorators.http import require_POST

from .forms import TwoFactorForm
from .models import Profile
from .services import issue_two_factor_code
from .signals import two_factor_locked_out, two_factor_verified
from .utils import mask_email

logger = logging.getLogger(__name__)

CODE_MISMATCH_MESSAGE = "The two factor code you have entered does not match."


def _lockout_message() -> str:
    minutes = int(getattr(settings, "TWO_FACTOR_LOCKOUT_MINUTES", 10))
    return (
        "Too many failed attempts. This account will now be locked for a period "
        f"of {minutes} minutes."
    )


@login_required
def verify_create(request: HttpRequest, form: TwoFactorForm | None = None) -> HttpResponse:
    return render(
        request,
        "accounts/two_factor.html",
        {
            "email": mask_email(request.user.email),
            "form": form or TwoFactorForm(),
        },
    )


@login_required
@require_POST
def verify_store(request: HttpRequest) -> HttpResponse:
    form = TwoFactorForm(request.POST)
    if not form.is_valid():
        return verify_create(request, form=form)

    profile = Profile.for_user(request.user)
    if not constant_time_compare(form.cleaned_data["two_factor_code"], profile.two_factor_code or ""):
        attempts = profile.register_failed_attempt()
        max_attempts = int(getattr(settings, "TWO_FACTOR_MAX_ATTEMPTS", 5))
        if attempts >= max_attempts:
            user = request.user
            profile.lock()
            logout(request)
            two_factor_locked_out.send(sender=Profile, user=user, request=request)
            messages.error(request, _lockout_message())
            return redirect("login")

        form.add_error("two_factor_code", CODE_MISMATCH_MESSAGE)
        return verify_create(request, form=form)

    profile.reset_two_factor_code()
    profile.clear_attempts()
    two_factor_verified.send(sender=Profile, user=request.user, request=request)
    return redirect("home")


@login_required
def verify_resend(request: HttpRequest) -> HttpResponse:
    profile = Profile.for_user(request.user)
    issue_two_factor_code(profile)
    messages.success(request, "A new code has been sent to your email.")
    return redirect("verify.create")
