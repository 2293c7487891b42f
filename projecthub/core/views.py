"""Core views: sign in, sign out, home and the profile screen."""

from __future__ import annotations

import logging

from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from projecthub.accounts.forms import TwoFactorSettingsForm
from projecthub.accounts.models import Profile
from projecthub.accounts.services import issue_two_factor_code
from projecthub.accounts.utils import has_privileged_role

from .forms import LoginForm

logger = logging.getLogger(__name__)

User = get_user_model()

ACCOUNT_LOCKED_MESSAGE = (
    "This account has been temporarily locked. Please try again at a later moment."
)


def _find_user_by_email(email: str):
    return User.objects.filter(email__iexact=email).order_by("pk").first()


def login_view(request: HttpRequest) -> HttpResponse:
    if request.user.is_authenticated:
        return redirect("home")

    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            candidate = _find_user_by_email(form.cleaned_data["email"])
            if candidate is not None:
                profile = Profile.for_user(candidate)
                profile.release_expired_lock()
                if profile.is_locked():
                    messages.error(request, ACCOUNT_LOCKED_MESSAGE)
                    return render(request, "login.html", {"form": form})

            user = authenticate(
                request,
                username=candidate.get_username() if candidate else form.cleaned_data["email"],
                password=form.cleaned_data["password"],
            )
            if user:
                login(request, user)
                if not form.cleaned_data.get("remember_me"):
                    request.session.set_expiry(0)
                profile = Profile.for_user(user)
                if profile.two_factor_enabled:
                    issue_two_factor_code(profile)
                return redirect("home")
            messages.error(request, "Invalid credentials.")
    else:
        form = LoginForm()
    return render(request, "login.html", {"form": form})


def logout_view(request: HttpRequest) -> HttpResponse:
    if request.user.is_authenticated:
        profile = Profile.for_user(request.user)
        if profile.has_pending_code:
            profile.reset_two_factor_code()
    logout(request)
    return redirect("login")


@login_required
def home(request: HttpRequest) -> HttpResponse:
    return render(request, "home.html")


@login_required
def profile_view(request: HttpRequest) -> HttpResponse:
    profile = Profile.for_user(request.user)
    form = TwoFactorSettingsForm(initial={"two_factor_enabled": profile.two_factor_enabled})
    return render(
        request,
        "profile.html",
        {
            "profile": profile,
            "form": form,
            "two_factor_required": has_privileged_role(request.user),
        },
    )


@login_required
@require_POST
def two_factor_settings(request: HttpRequest) -> HttpResponse:
    """Switch two factor authentication on or off for the current user."""

    form = TwoFactorSettingsForm(request.POST)
    enable = form.is_valid() and form.cleaned_data["two_factor_enabled"]

    if not enable and has_privileged_role(request.user):
        messages.error(request, "You cannot disable the two factor authentication")
        return redirect("profile")

    profile = Profile.for_user(request.user)
    profile.two_factor_enabled = enable
    profile.save_with_audit(update_fields=["two_factor_enabled"])

    if enable:
        logout(request)
        messages.success(
            request, "Two factor authentication has been enabled. Please sign in again."
        )
        return redirect("login")

    messages.success(request, "The two factor authentication has been disabled.")
    return redirect("profile")
