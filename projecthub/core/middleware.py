from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from django.conf import settings
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect

from projecthub.accounts.signals import two_factor_code_expired
from projecthub.accounts.two_factor import (
    DjangoAuthSession,
    GateOutcome,
    RouteCategory,
    TwoFactorGate,
)


@dataclass
class TwoFactorMiddleware:
    """Hold users with a pending two factor code on the verification pages."""

    get_response: Callable[[HttpRequest], HttpResponse]
    gate: TwoFactorGate = field(default_factory=TwoFactorGate)

    def __post_init__(self) -> None:
        self.exempt_url_names = frozenset(
            getattr(settings, "TWO_FACTOR_EXEMPT_URL_NAMES", ["login", "logout"])
        )

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_view(self, request: HttpRequest, view_func, view_args, view_kwargs):
        route = self.route_category(request)
        if route is RouteCategory.EXEMPT:
            return None

        user = request.user
        decision = self.gate.evaluate(DjangoAuthSession(request), route)
        if not decision.is_redirect:
            return None

        if decision.outcome is GateOutcome.REDIRECT_TO_LOGIN:
            two_factor_code_expired.send(sender=self.__class__, user=user, request=request)
        if decision.message:
            messages.error(request, decision.message)
        return redirect(decision.route_name)

    def route_category(self, request: HttpRequest) -> RouteCategory:
        match = getattr(request, "resolver_match", None)
        url_name = match.view_name if match is not None else None
        return RouteCategory.for_url_name(url_name, self.exempt_url_names)
