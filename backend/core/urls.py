from django.conf import settings
from django.conf.urls.static import static
from django.urls import include, path
from django.views.generic import RedirectView
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

# Swagger/OpenAPI setup
schema_view = get_schema_view(
    openapi.Info(
        title="Uploads API",
        default_version="v1",
        description="""
API for uploading files and serving their derived versions.

## Features
- Two-step uploads: cache a file, then store it by cache name
- Conditional versions (thumbnails, previews), nested versions
- Version url lookup by chained version names
- Version regeneration

## Authentication
No authentication required for API access.
        """,
        contact=openapi.Contact(email="support@uploads.local"),
        license=openapi.License(name="MIT License"),
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    # Prometheus metrics
    path("", include("django_prometheus.urls")),
    # Main API routes (uploads app)
    path("api/", include("uploads.urls")),
    # Swagger UI
    path("", RedirectView.as_view(url="/swagger/", permanent=False)),
    path(
        "swagger/",
        schema_view.with_ui("swagger", cache_timeout=0),
        name="schema-swagger-ui",
    ),
    path(
        "redoc/",
        schema_view.with_ui("redoc", cache_timeout=0),
        name="schema-redoc",
    ),
    # Health check
    path(
        "health/",
        (
            include("health.urls")
            if "health" in settings.INSTALLED_APPS
            else RedirectView.as_view(url="/", permanent=False)
        ),
    ),
]

# Serve media in debug; in production, let your web server handle it
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
