from rest_framework.routers import SimpleRouter

from .views import CertificateViewSet

router = SimpleRouter()
router.register(r"certificates", CertificateViewSet, basename="certificate")

urlpatterns = router.urls
