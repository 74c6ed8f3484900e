import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from django.conf import settings

from apps.negotiations.exceptions import InvalidRole
from apps.users.models import UserType


class Role(str, Enum):
    BUSINESS_OWNER = "business_owner"
    BUYER = "buyer"


@dataclass(frozen=True)
class Principal:
    """
    The acting party of a negotiation call: a role tag plus the id of the
    BusinessOwner or Buyer record the user acts through.
    """

    role: Role
    id: uuid.UUID
    profile: Any = field(compare=False, repr=False)

    @property
    def is_owner(self) -> bool:
        return self.role == Role.BUSINESS_OWNER

    @property
    def is_buyer(self) -> bool:
        return self.role == Role.BUYER

    @property
    def display_name(self) -> str:
        if self.is_owner:
            return self.profile.business_name
        return self.profile.buyers_company_name

    @property
    def label(self) -> str:
        return party_label(self.display_name, self.role)


def party_label(name: str, role: Role) -> str:
    """Format a `from_party`/`to_party` label such as "Acme / business_owner"."""
    fmt = settings.NEGOTIATION_SETTINGS.get("PARTY_LABEL_FORMAT", "{name} / {role}")
    return fmt.format(name=name, role=Role(role).value)


def principal_from_user(user) -> Principal:
    """
    Resolve the authenticated user into a Principal. Users without a
    recognised role or without the matching account profile cannot negotiate.
    """
    user_type = getattr(user, "user_type", None)

    if user_type == UserType.BUSINESS_OWNER:
        profile = getattr(user, "business_owner_profile", None)
        if profile is not None:
            return Principal(role=Role.BUSINESS_OWNER, id=profile.id, profile=profile)
    elif user_type == UserType.BUYER:
        profile = getattr(user, "buyer_profile", None)
        if profile is not None:
            return Principal(role=Role.BUYER, id=profile.id, profile=profile)

    raise InvalidRole()
