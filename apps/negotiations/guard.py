"""
Domain authorization for negotiation and offer-management calls.

`authorize` is a pure policy check over already-loaded rows: it never reads
the database and never caches, so ownership and active-status facts are
whatever the caller loaded for this request.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from apps.accounts.models import PartyStatus
from apps.negotiations.exceptions import (
    BuyerNotFound,
    ForbiddenNotOwner,
    ForbiddenSelfOnly,
    InvalidRole,
    NegotiationError,
    OwnerInactive,
    UnauthorizedBuyer,
    UnauthorizedSelf,
)
from apps.negotiations.principal import Principal, Role


class Action(str, Enum):
    SEND = "send"
    RESPOND = "respond"
    VIEW = "view"
    CLOSE_THREAD = "close_thread"
    MANAGE_OFFER = "manage_offer"


@dataclass(frozen=True)
class Target:
    """What the principal wants to act on."""

    offer: Optional[object] = None
    buyer: Optional[object] = None
    buyers: Sequence[object] = ()
    requested_buyer_ids: frozenset = field(default_factory=frozenset)


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    reason: Optional[NegotiationError] = None

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: NegotiationError) -> "Verdict":
        return cls(allowed=False, reason=reason)


def _owner_is_active(owner) -> bool:
    return owner is not None and owner.status == PartyStatus.ACTIVE


def _authorize_send(principal: Principal, target: Target) -> Verdict:
    offer = target.offer
    found = {b.id: b for b in target.buyers}

    if principal.role == Role.BUYER:
        foreign = target.requested_buyer_ids - {principal.id}
        if foreign or principal.id not in target.requested_buyer_ids:
            names = ", ".join(sorted(str(i) for i in foreign)) or "none"
            return Verdict.deny(
                UnauthorizedSelf(
                    f"Buyers can only send offers on their own behalf (got: {names})."
                )
            )
        buyer = found.get(principal.id)
        if buyer is None:
            return Verdict.deny(BuyerNotFound(f"Buyer {principal.id} not found."))
        if not _owner_is_active(buyer.owner):
            return Verdict.deny(
                OwnerInactive(
                    f"Business owner {buyer.owner.business_name} is not active."
                )
            )
        if buyer.owner_id != offer.business_owner_id:
            return Verdict.deny(
                UnauthorizedBuyer(
                    f"Buyer {buyer.buyers_company_name} does not belong to the "
                    f"owner of offer {offer.offer_name}."
                )
            )
        return Verdict.allow()

    # ids that resolve to no buyer at all are not the owner's buyers either
    missing = [str(i) for i in target.requested_buyer_ids if i not in found]
    if missing:
        return Verdict.deny(
            UnauthorizedBuyer(
                f"Unauthorized: Buyer {', '.join(sorted(missing))} does not "
                f"belong to your business."
            )
        )
    for buyer in target.buyers:
        if buyer.owner_id != principal.id:
            return Verdict.deny(
                UnauthorizedBuyer(
                    f"Unauthorized: Buyer {buyer.buyers_company_name} does not "
                    f"belong to your business."
                )
            )
    if not _owner_is_active(principal.profile):
        return Verdict.deny(
            OwnerInactive(
                f"Business owner {principal.profile.business_name} is not active."
            )
        )
    if offer.business_owner_id != principal.id:
        return Verdict.deny(
            ForbiddenNotOwner(f"Offer {offer.offer_name} does not belong to you.")
        )
    return Verdict.allow()


def _authorize_respond(principal: Principal, target: Target) -> Verdict:
    offer, buyer = target.offer, target.buyer

    if buyer is None:
        return Verdict.deny(BuyerNotFound())
    if not _owner_is_active(buyer.owner):
        return Verdict.deny(
            OwnerInactive(f"Business owner of buyer {buyer.buyers_company_name} is not active.")
        )

    if principal.role == Role.BUYER:
        if principal.id != buyer.id:
            return Verdict.deny(
                ForbiddenSelfOnly(
                    f"You can only respond as yourself, not as {buyer.buyers_company_name}."
                )
            )
    else:
        if buyer.owner_id != principal.id:
            return Verdict.deny(
                ForbiddenNotOwner(
                    f"Buyer {buyer.buyers_company_name} is not your buyer."
                )
            )
        if offer.business_owner_id != principal.id:
            return Verdict.deny(
                ForbiddenNotOwner(f"Offer {offer.offer_name} is not your offer.")
            )

    if buyer.owner_id != offer.business_owner_id:
        return Verdict.deny(
            UnauthorizedBuyer(
                f"Buyer {buyer.buyers_company_name} does not belong to the "
                f"owner of offer {offer.offer_name}."
            )
        )
    return Verdict.allow()


def _authorize_view(principal: Principal, target: Target) -> Verdict:
    offer, buyer = target.offer, target.buyer

    if principal.role == Role.BUYER:
        if buyer is None or buyer.id != principal.id:
            return Verdict.deny(
                ForbiddenSelfOnly("Buyers can only view their own negotiations.")
            )
        return Verdict.allow()

    if offer.business_owner_id != principal.id:
        return Verdict.deny(
            ForbiddenNotOwner(f"Offer {offer.offer_name} is not your offer.")
        )
    return Verdict.allow()


def _authorize_owner_only(principal: Principal, target: Target) -> Verdict:
    if principal.role != Role.BUSINESS_OWNER:
        return Verdict.deny(
            ForbiddenNotOwner("Only the business owner can perform this action.")
        )
    if not _owner_is_active(principal.profile):
        return Verdict.deny(
            OwnerInactive(
                f"Business owner {principal.profile.business_name} is not active."
            )
        )
    offer = target.offer
    if offer is not None and offer.business_owner_id != principal.id:
        return Verdict.deny(
            ForbiddenNotOwner(f"Offer {offer.offer_name} is not your offer.")
        )
    return Verdict.allow()


_RULES = {
    Action.SEND: _authorize_send,
    Action.RESPOND: _authorize_respond,
    Action.VIEW: _authorize_view,
    Action.CLOSE_THREAD: _authorize_owner_only,
    Action.MANAGE_OFFER: _authorize_owner_only,
}


def authorize(principal: Principal, action: Action, target: Target) -> Verdict:
    """Decide whether `principal` may perform `action` on `target`."""
    if principal is None or principal.role not in (Role.BUSINESS_OWNER, Role.BUYER):
        return Verdict.deny(InvalidRole())
    return _RULES[Action(action)](principal, target)


def enforce(principal: Principal, action: Action, target: Target) -> None:
    """Raise the denial reason when `authorize` refuses the call."""
    verdict = authorize(principal, action, target)
    if not verdict.allowed:
        raise verdict.reason
