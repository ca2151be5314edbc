# uploads/views.py

import logging
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from uploads.exceptions import (
    InvalidCacheNameError,
    UnknownVersionError,
    UploadMissingError,
    UploadValidationError,
)
from uploads.models import Upload
from uploads.serializers import CacheFileSerializer, UploadSerializer
from uploads.services.upload_service import UploadManager

logger = logging.getLogger(__name__)


class UploadViewSet(
    mixins.ListModelMixin,      # GET  /api/uploads/
    mixins.CreateModelMixin,    # POST /api/uploads/
    mixins.RetrieveModelMixin,  # GET  /api/uploads/{id}/
    mixins.DestroyModelMixin,   # DELETE /api/uploads/{id}/
    viewsets.GenericViewSet,
):
    """
    Upload API:
      - list     → uploads with their version urls
      - create   → store a new file (or a cached one) with its versions
      - retrieve → metadata + version urls
      - destroy  → remove the file, all versions and the row
      - cache    → cache a file, returns a cache_name for a later create
      - url      → url of a (nested) version
      - recreate-versions → regenerate stored versions
    """
    queryset = Upload.objects.all().order_by("-uploaded_at")
    serializer_class = UploadSerializer
    lookup_field = "id"

    upload_manager = UploadManager()

    def _represent(self, upload, uploader=None):
        if uploader is None:
            uploader = self.upload_manager.uploader_for(upload)
        out = UploadSerializer(upload).data
        out.update(self.upload_manager.version_urls(uploader))
        return out

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response([self._represent(u) for u in page])
        return Response([self._represent(u) for u in queryset], status=status.HTTP_200_OK)

    def retrieve(self, request, *args, **kwargs):
        return Response(self._represent(self.get_object()), status=status.HTTP_200_OK)

    def create(self, request, *args, **kwargs):
        # 1) Validate input via serializer
        serializer = UploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        # 2) Store file + versions
        try:
            upload, uploader = self.upload_manager.upload_file(
                file_obj=data.get("file"), cache_name=data.get("cache_name")
            )
        except (InvalidCacheNameError, UploadValidationError) as e:
            raise ValidationError(str(e))

        return Response(self._represent(upload, uploader), status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        upload = self.get_object()
        try:
            self.upload_manager.delete_upload(upload.id)
        except UploadMissingError as e:
            raise NotFound(str(e))
        return Response({"status": "deleted"}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def cache(self, request):
        # POST /api/uploads/cache/
        serializer = CacheFileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cache_name, uploader = self.upload_manager.cache_file(
            serializer.validated_data["file"]
        )
        out = {"cache_name": cache_name}
        out.update(self.upload_manager.version_urls(uploader))
        return Response(out, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def url(self, request, id=None):
        # GET /api/uploads/{id}/url/?version=thumb&version=small
        upload = self.get_object()
        names = request.query_params.getlist("version")
        try:
            url = self.upload_manager.version_url(upload, names)
        except UnknownVersionError as e:
            raise NotFound(str(e))
        return Response({"url": url}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="recreate-versions")
    def recreate_versions(self, request, id=None):
        # POST /api/uploads/{id}/recreate-versions/
        upload = self.get_object()
        upload, uploader = self.upload_manager.recreate_versions(upload.id)
        return Response(self._represent(upload, uploader), status=status.HTTP_200_OK)
