"""
Read-side queries over the proposal ledger and thread registry. Every query
is scoped to a single thread or to the threads visible to one principal.
"""
from typing import Optional

from django.db.models import (
    Case,
    CharField,
    F,
    OuterRef,
    Q,
    QuerySet,
    Subquery,
    Value,
    When,
)

from apps.negotiations.models import Decision, Proposal, Thread, ThreadStatus
from apps.negotiations.principal import Principal
from apps.offers.models import OfferStatus


def latest_proposal(thread: Thread) -> Optional[Proposal]:
    return (
        Proposal.objects.filter(thread=thread).order_by("-version_no").first()
    )


def proposal_history(thread: Thread, up_to_version: Optional[int] = None) -> QuerySet:
    """All proposals of the thread in ascending version order, optionally bounded."""
    qs = Proposal.objects.filter(thread=thread)
    if up_to_version is not None:
        qs = qs.filter(version_no__lte=up_to_version)
    return qs.order_by("version_no")


def latest_decision(offer_id, buyer_id) -> Optional[Decision]:
    return (
        Decision.objects.filter(offer_id=offer_id, buyer_id=buyer_id)
        .order_by("-created_at", "-id")
        .first()
    )


def decision_history(thread: Thread) -> QuerySet:
    return (
        Decision.objects.filter(thread=thread)
        .select_related("proposal")
        .order_by("created_at", "id")
    )


def derive_thread_status(
    thread: Thread,
    last_proposal: Optional[Proposal] = None,
    last_decision: Optional[Decision] = None,
) -> str:
    """
    Status shown to clients. Decisions never write to the thread row, so
    accepted/rejected are computed from the ledger here.
    """
    offer = thread.offer
    if thread.is_closed or not offer.is_available:
        return ThreadStatus.CLOSE

    if last_proposal is None:
        last_proposal = latest_proposal(thread)
    if last_decision is None:
        last_decision = latest_decision(thread.offer_id, thread.buyer_id)

    if last_proposal is None:
        return ThreadStatus.OPEN
    if last_decision is not None and last_decision.proposal_id == last_proposal.id:
        return ThreadStatus.ACCEPTED if last_decision.is_accepted else ThreadStatus.REJECTED
    if last_proposal.version_no > 1:
        return ThreadStatus.COUNTERED
    return ThreadStatus.OPEN


def with_negotiation_status(qs: QuerySet) -> QuerySet:
    """
    Annotate `negotiation_status` with the same rules as derive_thread_status
    so listings can filter on accepted/rejected without touching each row.
    """
    last_proposal = Proposal.objects.filter(thread=OuterRef("pk")).order_by(
        "-version_no"
    )
    last_decision = Decision.objects.filter(
        offer_id=OuterRef("offer_id"), buyer_id=OuterRef("buyer_id")
    ).order_by("-created_at", "-id")

    qs = qs.annotate(
        last_version_no=Subquery(last_proposal.values("version_no")[:1]),
        last_proposal_id=Subquery(last_proposal.values("id")[:1]),
        last_decided_proposal_id=Subquery(last_decision.values("proposal_id")[:1]),
        last_decision_accepted=Subquery(last_decision.values("is_accepted")[:1]),
    )
    decided_latest = Q(last_decided_proposal_id=F("last_proposal_id"))
    return qs.annotate(
        negotiation_status=Case(
            When(
                Q(status=ThreadStatus.CLOSE)
                | Q(offer__status=OfferStatus.CLOSE)
                | Q(offer__deleted_at__isnull=False),
                then=Value(ThreadStatus.CLOSE.value),
            ),
            When(
                decided_latest & Q(last_decision_accepted=True),
                then=Value(ThreadStatus.ACCEPTED.value),
            ),
            When(decided_latest, then=Value(ThreadStatus.REJECTED.value)),
            When(last_version_no__gt=1, then=Value(ThreadStatus.COUNTERED.value)),
            default=Value(ThreadStatus.OPEN.value),
            output_field=CharField(),
        )
    )


def threads_for_principal(
    principal: Principal,
    status: Optional[str] = None,
    offer_id=None,
) -> QuerySet:
    """
    Threads the principal takes part in, most recently active first.
    `status` filters on the derived negotiation status.
    """
    qs = Thread.objects.select_related("offer", "buyer", "business_owner")
    if principal.is_owner:
        qs = qs.filter(business_owner_id=principal.id)
    else:
        qs = qs.filter(buyer_id=principal.id)

    if offer_id:
        qs = qs.filter(offer_id=offer_id)

    qs = with_negotiation_status(qs)
    if status:
        qs = qs.filter(negotiation_status=status)
    return qs.order_by("-updated_at")
