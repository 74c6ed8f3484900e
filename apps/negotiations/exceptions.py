from rest_framework import status
from rest_framework.exceptions import APIException


class NegotiationError(APIException):
    """Base exception for negotiation and offer-store failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Negotiation request failed."
    default_code = "negotiation_error"
    retryable = False


class OfferUnavailable(NegotiationError):
    default_detail = "Offer is closed, deleted or does not exist."
    default_code = "offer_unavailable"


class BuyerNotFound(NegotiationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Buyer not found."
    default_code = "buyer_not_found"


class ThreadNotFound(NegotiationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No negotiation exists for this offer and buyer."
    default_code = "thread_not_found"


class ThreadClosed(NegotiationError):
    default_detail = "Negotiation with this buyer has been closed."
    default_code = "thread_closed"


class OwnerInactive(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Business owner is not active."
    default_code = "owner_inactive"


class UnauthorizedBuyer(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Buyer does not belong to this business."
    default_code = "unauthorized_buyer"


class UnauthorizedSelf(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Buyers can only act on their own behalf."
    default_code = "unauthorized_self"


class ForbiddenSelfOnly(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Buyers can only respond to their own offers."
    default_code = "forbidden_self_only"


class ForbiddenNotOwner(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not own this resource."
    default_code = "forbidden_not_owner"


class DuplicateDecision(NegotiationError):
    default_detail = "This decision has already been recorded."
    default_code = "duplicate_decision"


class InvalidRole(NegotiationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only business owners and buyers can negotiate."
    default_code = "invalid_role"


class ConcurrentNegotiationUpdate(NegotiationError):
    """Raised when a unique constraint trips because of a concurrent write."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Negotiation was updated concurrently. Please retry."
    default_code = "concurrent_update"
    retryable = True
