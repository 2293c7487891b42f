"""Django system checks for the core app.

These checks surface middleware misconfigurations that would silently turn
off the two factor gate.
"""

from __future__ import annotations

from django.conf import settings
from django.core import checks

TWO_FACTOR_MIDDLEWARE = "projecthub.core.middleware.TwoFactorMiddleware"
AUTH_MIDDLEWARE = "django.contrib.auth.middleware.AuthenticationMiddleware"
MESSAGE_MIDDLEWARE = "django.contrib.messages.middleware.MessageMiddleware"


@checks.register()
def two_factor_middleware_installed(app_configs, **kwargs):
    """Warn when the two factor middleware is missing or misplaced.

    The gate needs ``request.user`` and the messages framework, so it has to
    come after both middlewares.
    """

    messages: list[checks.CheckMessage] = []
    middleware = list(getattr(settings, "MIDDLEWARE", []))

    if TWO_FACTOR_MIDDLEWARE not in middleware:
        messages.append(
            checks.Warning(
                "The two factor middleware is not installed.",
                hint="Add %s to MIDDLEWARE." % TWO_FACTOR_MIDDLEWARE,
                id="projecthub.W001",
            )
        )
        return messages

    position = middleware.index(TWO_FACTOR_MIDDLEWARE)
    for required in (AUTH_MIDDLEWARE, MESSAGE_MIDDLEWARE):
        if required not in middleware or middleware.index(required) > position:
            messages.append(
                checks.Error(
                    "%s must be listed before the two factor middleware." % required,
                    hint="Move %s below %s in MIDDLEWARE." % (TWO_FACTOR_MIDDLEWARE, required),
                    id="projecthub.E001",
                )
            )

    return messages
