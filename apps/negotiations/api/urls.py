from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.negotiations.api.views import NegotiationViewSet

router = DefaultRouter()
router.register(r"negotiations", NegotiationViewSet, basename="negotiation")

urlpatterns = [
    path("", include(router.urls)),
]
