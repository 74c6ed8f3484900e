from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema

from apps.offers.api.serializers import OfferListSerializer, OfferSerializer

OFFER_ID = OpenApiParameter(
    name="id",
    description="UUID of the Offer",
    required=True,
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.PATH,
)

OFFER_VIEWSET_SCHEMA = {
    "list": extend_schema(
        summary="List and search offers",
        description="Offers owned by the current business owner, newest first. "
        "Supports `offer_id`, `offer_name` (contains), `status` and `is_deleted`.",
        responses={200: OfferListSerializer(many=True)},
        tags=["Offers"],
    ),
    "create": extend_schema(
        summary="Create an offer",
        request=OfferSerializer,
        responses={201: OfferSerializer},
        tags=["Offers"],
    ),
    "retrieve": extend_schema(
        summary="Retrieve an offer",
        parameters=[OFFER_ID],
        responses={200: OfferSerializer},
        tags=["Offers"],
    ),
    "partial_update": extend_schema(
        summary="Update an open offer",
        parameters=[OFFER_ID],
        request=OfferSerializer,
        responses={200: OfferSerializer},
        tags=["Offers"],
    ),
    "destroy": extend_schema(
        summary="Soft delete an offer",
        description="Marks the offer deleted and closes it. Deleted offers are terminal.",
        parameters=[OFFER_ID],
        tags=["Offers"],
    ),
    "close": extend_schema(
        summary="Close an offer",
        parameters=[OFFER_ID],
        request=None,
        responses={200: OfferSerializer},
        tags=["Offers"],
    ),
    "reopen": extend_schema(
        summary="Re-open a closed offer",
        parameters=[OFFER_ID],
        request=None,
        responses={200: OfferSerializer},
        tags=["Offers"],
    ),
}
