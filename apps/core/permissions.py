import logging

from rest_framework import permissions

from apps.users.models import UserType

logger = logging.getLogger(__name__)


class IsBusinessOwner(permissions.BasePermission):
    """
    Only users registered as business owners (with an owner profile) may
    pass. Used by the offer catalogue endpoints.
    """

    message = "Only business owners can manage offers."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.user_type == UserType.BUSINESS_OWNER and hasattr(
            user, "business_owner_profile"
        )

    def has_object_permission(self, request, view, obj):
        return obj.business_owner_id == request.user.business_owner_profile.id


class IsNegotiationParticipant(permissions.BasePermission):
    """
    Authenticated users with a buyer or business owner role. Finer-grained
    checks happen in the negotiation guard.
    """

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.user_type in (UserType.BUSINESS_OWNER, UserType.BUYER)
