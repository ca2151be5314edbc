import os
from django.conf import settings
from rest_framework import serializers
from .models import Upload


def validate_upload_file(file_obj):
    max_size = settings.FILE_UPLOAD_MAX_MEMORY_SIZE
    if file_obj.size > max_size:
        raise serializers.ValidationError(
            f"File too large ({file_obj.size} bytes; max {max_size})"
        )

    name = file_obj.name
    if any(sep in name for sep in ("..", "/", "\\")):
        raise serializers.ValidationError(
            "Invalid filename; contains path segments"
        )

    if len(name) > settings.MAX_FILENAME_LENGTH:
        raise serializers.ValidationError(
            f"Filename too long (max {settings.MAX_FILENAME_LENGTH} chars)"
        )

    ext = os.path.splitext(name)[1].lower().lstrip(".")
    allowed = getattr(settings, "ALLOWED_FILE_EXTENSIONS", None)
    if allowed and ext not in allowed:
        raise serializers.ValidationError(
            f"Extension '{ext}' not allowed: {allowed}"
        )

    return file_obj


class UploadSerializer(serializers.ModelSerializer):
    file = serializers.FileField(
        write_only=True, required=False, help_text="The file to upload"
    )
    cache_name = serializers.CharField(
        write_only=True, required=False, help_text="Name returned by the cache endpoint"
    )
    file_size = serializers.IntegerField(source="size", read_only=True)

    class Meta:
        model = Upload
        fields = [
            "id",
            "file",
            "cache_name",
            "original_filename",
            "content_type",
            "file_size",
            "uploaded_at",
        ]
        read_only_fields = [
            "id",
            "original_filename",
            "content_type",
            "file_size",
            "uploaded_at",
        ]

    def validate_file(self, file_obj):
        return validate_upload_file(file_obj)

    def validate(self, data):
        if ("file" in data) == ("cache_name" in data):
            raise serializers.ValidationError("Provide exactly one of file or cache_name")
        return data


class CacheFileSerializer(serializers.Serializer):
    file = serializers.FileField(help_text="The file to cache")

    def validate_file(self, file_obj):
        return validate_upload_file(file_obj)
