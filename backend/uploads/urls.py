from rest_framework.routers import DefaultRouter
from uploads.views import UploadViewSet

router = DefaultRouter()
router.register(r"uploads", UploadViewSet, basename="upload")

urlpatterns = router.urls
