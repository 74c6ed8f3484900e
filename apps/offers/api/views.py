import logging

from django.utils import timezone
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import APIException

from apps.core.permissions import IsBusinessOwner
from apps.core.views import BaseViewSet
from apps.negotiations.principal import principal_from_user
from apps.offers.api.schema import OFFER_VIEWSET_SCHEMA
from apps.offers.api.serializers import OfferListSerializer, OfferSerializer
from apps.offers.models import Offer
from apps.offers.services import OfferService
from apps.offers.utils.filters import OfferFilter
from apps.offers.utils.rate_limiting import OfferRateThrottle, OfferWriteRateThrottle

logger = logging.getLogger("offers_performance")


@extend_schema_view(**OFFER_VIEWSET_SCHEMA)
class OfferViewSet(BaseViewSet):
    """
    Owner-side offer catalogue. Writes go through OfferService, which locks
    the row and refuses to touch closed or deleted offers.
    """

    serializer_class = OfferSerializer
    permission_classes = [IsBusinessOwner]
    filterset_class = OfferFilter
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Offer.all_objects.none()
        # soft-deleted offers stay visible to their owner (is_deleted filter)
        return (
            Offer.all_objects.filter(
                business_owner__user=self.request.user,
            )
            .select_related("business_owner")
            .order_by("-created_at")
        )

    def get_serializer_class(self):
        if self.action == "list":
            return OfferListSerializer
        return OfferSerializer

    def get_throttles(self):
        if self.action in ["create", "partial_update", "destroy", "close", "reopen"]:
            return [OfferWriteRateThrottle()]
        return [OfferRateThrottle()]

    def perform_create(self, serializer):
        principal = principal_from_user(self.request.user)
        serializer.instance = OfferService.create_offer(
            principal, dict(serializer.validated_data)
        )

    def partial_update(self, request, *args, **kwargs):
        start_time = timezone.now()
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        if not serializer.is_valid():
            return self.error_response(
                message=serializer.errors, status_code=status.HTTP_400_BAD_REQUEST
            )

        try:
            offer = OfferService.update_offer(
                principal_from_user(request.user),
                instance.pk,
                dict(serializer.validated_data),
            )
        except APIException as e:
            return self.exception_response(e)

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"Offer update request served in {duration:.2f}ms")

        return self.success_response(
            data=OfferSerializer(offer).data,
            message="Offer updated successfully",
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            OfferService.delete_offer(principal_from_user(request.user), instance.pk)
        except APIException as e:
            return self.exception_response(e)

        return self.success_response(
            data={"offer_id": str(instance.pk)},
            message="Offer deleted successfully",
        )

    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request, pk=None):
        instance = self.get_object()
        try:
            offer = OfferService.close_offer(
                principal_from_user(request.user), instance.pk
            )
        except APIException as e:
            return self.exception_response(e)

        return self.success_response(
            data=OfferSerializer(offer).data, message="Offer closed successfully"
        )

    @action(detail=True, methods=["post"], url_path="open")
    def reopen(self, request, pk=None):
        instance = self.get_object()
        try:
            offer = OfferService.open_offer(
                principal_from_user(request.user), instance.pk
            )
        except APIException as e:
            return self.exception_response(e)

        return self.success_response(
            data=OfferSerializer(offer).data, message="Offer re-opened successfully"
        )

    def get_model_name(self) -> str:
        return "Offer"
