import logging
import uuid

from django.conf import settings
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import APIException

from apps.core.permissions import IsNegotiationParticipant
from apps.core.views import BaseResponseMixin
from apps.negotiations.api.schema import (
    ALL_NEGOTIATIONS,
    CLOSE_THREAD,
    LAST_NEGOTIATION,
    RESPOND_OFFER,
    SEND_OFFER,
)
from apps.negotiations.api.serializers import (
    DecisionSerializer,
    NegotiationHistorySerializer,
    RespondOfferSerializer,
    SendOfferSerializer,
    SendResultSerializer,
    ThreadSerializer,
)
from apps.negotiations.exceptions import ConcurrentNegotiationUpdate
from apps.negotiations.models import Thread, ThreadStatus
from apps.negotiations.principal import principal_from_user
from apps.negotiations.services import NegotiationService
from apps.negotiations.utils.rate_limiting import (
    NegotiationRateThrottle,
    NegotiationRespondRateThrottle,
    NegotiationSendRateThrottle,
)

logger = logging.getLogger("negotiation_performance")

UUID_PATTERN = r"[0-9a-fA-F-]{36}"


def run_with_conflict_retry(operation):
    """
    Re-run the whole operation when a concurrent writer won a unique
    constraint race. Each attempt re-reads state in a fresh transaction.
    """
    retries = settings.NEGOTIATION_SETTINGS.get("CONFLICT_RETRIES", 1)
    for attempt in range(retries + 1):
        try:
            return operation()
        except ConcurrentNegotiationUpdate:
            if attempt >= retries:
                raise
            logger.warning(f"Retrying negotiation after conflict (attempt {attempt + 1})")


class NegotiationViewSet(BaseResponseMixin, viewsets.GenericViewSet):
    """
    Offer negotiation endpoints: send/counter, accept/reject, history,
    listing and closing a negotiation with one buyer.
    """

    queryset = Thread.objects.none()
    serializer_class = ThreadSerializer
    permission_classes = [IsNegotiationParticipant]

    def get_throttles(self):
        if self.action == "send_offer":
            return [NegotiationSendRateThrottle()]
        if self.action == "respond_offer":
            return [NegotiationRespondRateThrottle()]
        return [NegotiationRateThrottle()]

    @SEND_OFFER
    @action(
        detail=False,
        methods=["post"],
        url_path=rf"send-offer/(?P<offer_id>{UUID_PATTERN})",
    )
    def send_offer(self, request, offer_id=None):
        start_time = timezone.now()
        serializer = SendOfferSerializer(data=request.data)
        if not serializer.is_valid():
            return self.error_response(
                message=serializer.errors, status_code=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data

        try:
            principal = principal_from_user(request.user)
            result = run_with_conflict_retry(
                lambda: NegotiationService.send(
                    offer_id,
                    data["buyer_ids"],
                    principal,
                    overrides=data.get("overrides"),
                )
            )
        except APIException as e:
            return self.exception_response(e)

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"send-offer served in {duration:.2f}ms")

        return self.success_response(
            data=SendResultSerializer(result).data,
            message="Offer sent successfully",
            status_code=status.HTTP_201_CREATED,
        )

    @RESPOND_OFFER
    @action(
        detail=False,
        methods=["post"],
        url_path=rf"respond-offer/(?P<offer_id>{UUID_PATTERN})",
    )
    def respond_offer(self, request, offer_id=None):
        start_time = timezone.now()
        serializer = RespondOfferSerializer(data=request.data)
        if not serializer.is_valid():
            return self.error_response(
                message=serializer.errors, status_code=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data

        try:
            principal = principal_from_user(request.user)
            decision = run_with_conflict_retry(
                lambda: NegotiationService.respond(
                    offer_id, data["buyer_id"], principal, data["action"]
                )
            )
        except APIException as e:
            return self.exception_response(e)

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"respond-offer served in {duration:.2f}ms")

        verb = "accepted" if decision.is_accepted else "rejected"
        return self.success_response(
            data=DecisionSerializer(decision).data,
            message=f"Offer {verb} successfully",
            status_code=status.HTTP_201_CREATED,
        )

    @LAST_NEGOTIATION
    @action(
        detail=False,
        methods=["get"],
        url_path=rf"last-negotiation/(?P<offer_id>{UUID_PATTERN})/(?P<buyer_id>{UUID_PATTERN})",
    )
    def last_negotiation(self, request, offer_id=None, buyer_id=None):
        up_to_version = request.query_params.get("up_to_version")
        if up_to_version is not None:
            try:
                up_to_version = int(up_to_version)
                if up_to_version < 1:
                    raise ValueError
            except ValueError:
                return self.error_response(
                    message="up_to_version must be a positive integer",
                    status_code=status.HTTP_400_BAD_REQUEST,
                )

        try:
            principal = principal_from_user(request.user)
            history = NegotiationService.negotiation_history(
                offer_id, buyer_id, principal, up_to_version=up_to_version
            )
        except APIException as e:
            return self.exception_response(e)

        return self.success_response(
            data=NegotiationHistorySerializer(history).data,
            message="Negotiation fetched successfully",
        )

    @ALL_NEGOTIATIONS
    @action(detail=False, methods=["get"], url_path="all-negotiations")
    def all_negotiations(self, request):
        start_time = timezone.now()
        status_filter = request.query_params.get("status")
        offer_filter = request.query_params.get("offer")

        if status_filter and status_filter not in ThreadStatus.values:
            return self.error_response(
                message=f"Invalid status '{status_filter}'",
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if offer_filter:
            try:
                offer_filter = uuid.UUID(offer_filter)
            except ValueError:
                return self.error_response(
                    message="offer must be a valid UUID",
                    status_code=status.HTTP_400_BAD_REQUEST,
                )

        try:
            principal = principal_from_user(request.user)
        except APIException as e:
            return self.exception_response(e)

        queryset = NegotiationService.recent_negotiations(
            principal, status=status_filter, offer_id=offer_filter
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ThreadSerializer(page, many=True)
            response = self.get_paginated_response(serializer.data)
        else:
            response = self.success_response(
                data=ThreadSerializer(queryset, many=True).data
            )

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"all-negotiations served in {duration:.2f}ms")
        return response

    @CLOSE_THREAD
    @action(
        detail=False,
        methods=["post"],
        url_path=rf"close-thread/(?P<offer_id>{UUID_PATTERN})/(?P<buyer_id>{UUID_PATTERN})",
    )
    def close_thread(self, request, offer_id=None, buyer_id=None):
        try:
            principal = principal_from_user(request.user)
            thread = NegotiationService.close_thread(offer_id, buyer_id, principal)
        except APIException as e:
            return self.exception_response(e)

        return self.success_response(
            data=ThreadSerializer(thread).data,
            message="Negotiation closed successfully",
        )
