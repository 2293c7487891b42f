"""Request-time two factor gate.

The gate decides, for every request of an authenticated user, whether the
request may continue or has to be redirected to the verification page, the
login page or the home page. It never looks up the current user itself: the
request layer hands it an :class:`AuthSession` and a :class:`RouteCategory`
resolved once per request.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol

from django.contrib.auth import logout
from django.http import HttpRequest
from django.utils import timezone

from .models import Profile

logger = logging.getLogger(__name__)

VERIFY_ROUTE_PREFIX = "verify"

CODE_EXPIRED_MESSAGE = "The two factor code has expired. Please login in again."
NOT_ENABLED_MESSAGE = (
    "Could not verify your two factor because you have not enabled two factor "
    "authentication or you have no two factor code."
)


class RouteCategory(enum.Enum):
    """Classification of the route a request resolved to."""

    VERIFY = "verify"
    GENERAL = "general"
    # Routes that must stay reachable while a code is pending (login, logout).
    EXEMPT = "exempt"

    @classmethod
    def for_url_name(cls, url_name: Optional[str], exempt: frozenset[str] = frozenset()) -> "RouteCategory":
        if url_name and url_name in exempt:
            return cls.EXEMPT
        if url_name and url_name.startswith(VERIFY_ROUTE_PREFIX):
            return cls.VERIFY
        return cls.GENERAL


class GateOutcome(enum.Enum):
    PROCEED = "proceed"
    REDIRECT_TO_VERIFY = "redirect_to_verify"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_HOME = "redirect_to_home"


@dataclass(frozen=True)
class GateDecision:
    """Result of :meth:`TwoFactorGate.evaluate`.

    ``route_name`` is the URL name to redirect to and ``message`` the error
    shown to the user after the redirect; both are empty for ``PROCEED``.
    """

    outcome: GateOutcome
    route_name: str = ""
    message: str = ""

    @property
    def is_redirect(self) -> bool:
        return self.outcome is not GateOutcome.PROCEED

    @classmethod
    def proceed(cls) -> "GateDecision":
        return cls(GateOutcome.PROCEED)

    @classmethod
    def redirect_to_verify(cls) -> "GateDecision":
        return cls(GateOutcome.REDIRECT_TO_VERIFY, "verify.create")

    @classmethod
    def redirect_to_login(cls, message: str) -> "GateDecision":
        return cls(GateOutcome.REDIRECT_TO_LOGIN, "login", message)

    @classmethod
    def redirect_to_home(cls, message: str) -> "GateDecision":
        return cls(GateOutcome.REDIRECT_TO_HOME, "home", message)


class UserSecurityState(Protocol):
    two_factor_enabled: bool
    two_factor_code: Optional[str]
    two_factor_expires_at: Optional[datetime]

    def reset_two_factor_code(self) -> None:
        ...


class AuthSession(Protocol):
    def is_authenticated(self) -> bool:
        ...

    def current_user(self) -> UserSecurityState:
        ...

    def logout(self) -> None:
        ...


class DjangoAuthSession:
    """:class:`AuthSession` backed by a Django request."""

    def __init__(self, request: HttpRequest) -> None:
        self.request = request

    def is_authenticated(self) -> bool:
        user = getattr(self.request, "user", None)
        return bool(user is not None and user.is_authenticated)

    def current_user(self):
        return Profile.for_user(self.request.user)

    def logout(self) -> None:
        logout(self.request)


class TwoFactorGate:
    """Decide whether a request may continue while a two factor code is pending."""

    def __init__(self, clock: Callable[[], datetime] = timezone.now) -> None:
        self.clock = clock

    def evaluate(self, session: AuthSession, route: RouteCategory) -> GateDecision:
        if not session.is_authenticated():
            return GateDecision.proceed()

        state = session.current_user()
        on_verify_route = route is RouteCategory.VERIFY

        if state.two_factor_enabled and state.two_factor_code:
            # Route check comes first: an expired code only ends the session
            # once the user is on a verify page.
            if not on_verify_route:
                return GateDecision.redirect_to_verify()

            if self._has_expired(state):
                state.reset_two_factor_code()
                session.logout()
                logger.info("Two factor code expired; session ended")
                return GateDecision.redirect_to_login(CODE_EXPIRED_MESSAGE)

            return GateDecision.proceed()

        if on_verify_route:
            return GateDecision.redirect_to_home(NOT_ENABLED_MESSAGE)

        return GateDecision.proceed()

    def _has_expired(self, state: UserSecurityState) -> bool:
        # A pending code without an expiry is treated as already expired.
        expires_at = state.two_factor_expires_at
        return expires_at is None or expires_at < self.clock()


__all__ = [
    "AuthSession",
    "CODE_EXPIRED_MESSAGE",
    "DjangoAuthSession",
    "GateDecision",
    "GateOutcome",
    "NOT_ENABLED_MESSAGE",
    "RouteCategory",
    "TwoFactorGate",
    "UserSecurityState",
]
