import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'projecthub.core'

    def ready(self):
        """Register system checks and the security audit receivers."""
        from . import checks  # noqa: F401
        from . import security_logging  # noqa: F401
