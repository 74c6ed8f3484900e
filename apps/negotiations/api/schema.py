from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema

from apps.negotiations.api.serializers import (
    DecisionSerializer,
    NegotiationHistorySerializer,
    RespondOfferSerializer,
    SendOfferSerializer,
    SendResultSerializer,
    ThreadSerializer,
)

OFFER_ID = OpenApiParameter(
    name="offer_id",
    description="UUID of the Offer",
    required=True,
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.PATH,
)
BUYER_ID = OpenApiParameter(
    name="buyer_id",
    description="UUID of the Buyer",
    required=True,
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.PATH,
)

SEND_OFFER = extend_schema(
    summary="Send or counter an offer",
    description="Business owners send to any of their buyers; a buyer may only "
    "send (counter) on its own behalf. Appends one proposal per buyer, all or nothing.",
    parameters=[OFFER_ID],
    request=SendOfferSerializer,
    responses={201: SendResultSerializer},
    tags=["Negotiations"],
)

RESPOND_OFFER = extend_schema(
    summary="Accept or reject the latest proposal",
    parameters=[OFFER_ID],
    request=RespondOfferSerializer,
    responses={201: DecisionSerializer},
    tags=["Negotiations"],
)

LAST_NEGOTIATION = extend_schema(
    summary="Negotiation history for one buyer",
    parameters=[
        OFFER_ID,
        BUYER_ID,
        OpenApiParameter(
            name="up_to_version",
            description="Only include proposals up to and including this version",
            required=False,
            type=OpenApiTypes.INT,
            location=OpenApiParameter.QUERY,
        ),
    ],
    responses={200: NegotiationHistorySerializer},
    tags=["Negotiations"],
)

ALL_NEGOTIATIONS = extend_schema(
    summary="Negotiations visible to the current user",
    parameters=[
        OpenApiParameter(
            name="status",
            description="Filter on the negotiation status (open, accepted, rejected, countered, close)",
            required=False,
            type=OpenApiTypes.STR,
            location=OpenApiParameter.QUERY,
        ),
        OpenApiParameter(
            name="offer",
            description="Only threads of this offer",
            required=False,
            type=OpenApiTypes.UUID,
            location=OpenApiParameter.QUERY,
        ),
    ],
    responses={200: ThreadSerializer(many=True)},
    tags=["Negotiations"],
)

CLOSE_THREAD = extend_schema(
    summary="Close negotiation with one buyer",
    parameters=[OFFER_ID, BUYER_ID],
    request=None,
    responses={200: ThreadSerializer},
    tags=["Negotiations"],
)
