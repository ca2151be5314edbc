"""
Root conftest for Django tests—minimal necessary settings.
"""

import os
import django
from django.conf import settings


def pytest_configure():
    if not settings.configured:
        settings.configure(
            # ── In-memory DB ─────────────────────────────────────
            DATABASES={
                "default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}
            },
            # ── Installed apps ──────────────────────────────────
            INSTALLED_APPS=[
                "django.contrib.auth",
                "django.contrib.contenttypes",
                "rest_framework",
                "uploads",  # your app under test
            ],
            # ── In-memory cache ────────────────────────────────
            CACHES={
                "default": {
                    "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
                }
            },
            # ── Simplified REST framework ──────────────────────
            REST_FRAMEWORK={
                "DEFAULT_PERMISSION_CLASSES": [],
                "DEFAULT_AUTHENTICATION_CLASSES": [],
                "EXCEPTION_HANDLER": "core.exceptions.custom_exception_handler",
            },
            # ── File uploads ───────────────────────────────────
            MEDIA_ROOT=os.path.join(os.getcwd(), "test_media"),
            MEDIA_URL="/media/",
            FILE_UPLOAD_MAX_MEMORY_SIZE=5 * 1024 * 1024,
            MAX_FILENAME_LENGTH=255,
            ALLOWED_FILE_EXTENSIONS=["txt", "pdf", "jpg", "jpeg", "png"],
            UPLOADS_CACHE_DIR="uploads/tmp",
            UPLOADS_STORE_DIR="uploads",
            UPLOADS_PREVIEW_MAX_SIZE=1024,
            # ── Other essentials ───────────────────────────────
            SECRET_KEY="test-secret-key",
            ROOT_URLCONF="core.urls",
            USE_TZ=True,
            TIME_ZONE="UTC",
        )
    django.setup()
