from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import CheckDuplicateView, ParticipantViewSet

router = SimpleRouter()
router.register(r"participants", ParticipantViewSet, basename="participant")

urlpatterns = [
    path("participants/check-duplicate/", CheckDuplicateView.as_view(), name="participant-check-duplicate"),
] + router.urls
