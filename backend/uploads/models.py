import uuid
import logging

from django.db import models

logger = logging.getLogger(__name__)


class Upload(models.Model):
    """
    An uploaded file. The bytes live in storage under the uploader's store
    dir; `identifier` is the stored filename shared by the root file and
    its versions (which prefix it with their version name).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    identifier = models.CharField(max_length=255, blank=True, default="")
    original_filename = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, blank=True, default="")
    size = models.BigIntegerField(default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-uploaded_at"]

    def __str__(self):
        return self.original_filename

    @property
    def is_stored(self) -> bool:
        return bool(self.identifier)
