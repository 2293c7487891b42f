from django.conf import settings
from django.test import SimpleTestCase, override_settings

from projecthub.core.checks import (
    AUTH_MIDDLEWARE,
    TWO_FACTOR_MIDDLEWARE,
    two_factor_middleware_installed,
)


class TwoFactorMiddlewareCheckTests(SimpleTestCase):
    def test_default_settings_pass(self):
        self.assertEqual(two_factor_middleware_installed(None), [])

    def test_missing_middleware_is_reported(self):
        middleware = [m for m in settings.MIDDLEWARE if m != TWO_FACTOR_MIDDLEWARE]

        with override_settings(MIDDLEWARE=middleware):
            messages = two_factor_middleware_installed(None)

        self.assertEqual([m.id for m in messages], ["projecthub.W001"])

    def test_gate_before_authentication_is_an_error(self):
        middleware = [m for m in settings.MIDDLEWARE if m != TWO_FACTOR_MIDDLEWARE]
        middleware.insert(middleware.index(AUTH_MIDDLEWARE), TWO_FACTOR_MIDDLEWARE)

        with override_settings(MIDDLEWARE=middleware):
            messages = two_factor_middleware_installed(None)

        self.assertIn("projecthub.E001", [m.id for m in messages])
