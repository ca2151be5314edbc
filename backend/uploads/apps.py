# uploads/apps.py

import logging
from django.apps import AppConfig

logger = logging.getLogger(__name__)


class UploadsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "uploads"

    def ready(self):
        # Ensure models are registered
        import uploads.models  # noqa: F401
