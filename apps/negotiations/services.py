import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from apps.accounts.models import Buyer
from apps.negotiations.exceptions import (
    BuyerNotFound,
    ConcurrentNegotiationUpdate,
    DuplicateDecision,
    OfferUnavailable,
    ThreadClosed,
    ThreadNotFound,
)
from apps.negotiations.guard import Action, Target, enforce
from apps.negotiations.models import (
    Decision,
    DecisionOutcome,
    Proposal,
    Thread,
    ThreadStatus,
)
from apps.negotiations.principal import Principal, Role, party_label
from apps.negotiations.selectors import (
    decision_history,
    derive_thread_status,
    latest_decision,
    latest_proposal,
    proposal_history,
    threads_for_principal,
)
from apps.negotiations.tasks import (
    send_decision_notification,
    send_proposal_notification,
)
from apps.offers.models import Offer, OfferTerms

logger = logging.getLogger("negotiation_performance")
audit_logger = logging.getLogger(__name__)


@dataclass
class ThreadOutcome:
    """Per-buyer result of a send."""

    thread_id: uuid.UUID
    buyer_id: uuid.UUID
    version_no: int
    status: str
    to_party: str


@dataclass
class SendResult:
    offer_id: uuid.UUID
    from_party: str
    to_party: str
    threads_affected: List[ThreadOutcome] = field(default_factory=list)


@dataclass
class NegotiationHistory:
    thread: Thread
    proposals: List[Proposal]
    decisions: List[Decision]
    status: str


def _negotiation_settings() -> Dict[str, Any]:
    return getattr(settings, "NEGOTIATION_SETTINGS", {})


def _load_available_offer(offer_id) -> Offer:
    """Open, non-deleted offers only; anything else is unavailable."""
    offer = (
        Offer.all_objects.select_related("business_owner", "business_owner__user")
        .filter(pk=offer_id)
        .first()
    )
    if offer is None:
        raise OfferUnavailable(f"Offer {offer_id} not found.")
    if not offer.is_available:
        raise OfferUnavailable(
            f"Offer {offer.offer_name} is closed or deleted and cannot be negotiated."
        )
    return offer


def _normalize_buyer_ids(buyer_ids: Iterable) -> List[uuid.UUID]:
    """De-duplicate while keeping the caller's order."""
    if not buyer_ids:
        raise ValidationError({"buyer_ids": "buyer_ids must be a non-empty array"})

    seen: List[uuid.UUID] = []
    for raw in buyer_ids:
        try:
            value = raw if isinstance(raw, uuid.UUID) else uuid.UUID(str(raw))
        except ValueError:
            raise ValidationError({"buyer_ids": f"'{raw}' is not a valid buyer id"})
        if value not in seen:
            seen.append(value)

    limit = _negotiation_settings().get("MAX_BUYERS_PER_SEND", 100)
    if len(seen) > limit:
        raise ValidationError(
            {"buyer_ids": f"An offer can be sent to at most {limit} buyers at once"}
        )
    return seen


def _clean_overrides(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Only term fields are overridable; None means keep the previous value."""
    if not overrides:
        return {}
    return {
        name: value
        for name, value in overrides.items()
        if name in OfferTerms.TERM_FIELDS and value is not None
    }


def _buyer_label(buyer: Buyer) -> str:
    name = buyer.buyers_company_name or _negotiation_settings().get(
        "UNKNOWN_BUYER_NAME", "Unknown Buyer"
    )
    return party_label(name, Role.BUYER)


def _owner_label(owner) -> str:
    name = owner.business_name or _negotiation_settings().get(
        "UNKNOWN_OWNER_NAME", "Unknown Owner"
    )
    return party_label(name, Role.BUSINESS_OWNER)


def _enqueue_after_commit(task, *args) -> None:
    """
    Notification delivery runs only once the negotiation is committed;
    a failure to enqueue is logged by on_commit and never rolls back.
    """
    transaction.on_commit(lambda: task.delay(*args), robust=True)


class NegotiationService:
    """Send and respond operations over offer threads."""

    @staticmethod
    def _get_or_create_thread(offer: Offer, buyer: Buyer):
        """Return (thread, created). Existing rows are locked for the version read."""
        thread = (
            Thread.objects.select_for_update()
            .filter(offer=offer, buyer=buyer)
            .first()
        )
        if thread is not None:
            return thread, False

        thread = Thread.objects.create(
            offer=offer,
            buyer=buyer,
            business_owner_id=offer.business_owner_id,
            status=ThreadStatus.OPEN,
        )
        return thread, True

    @staticmethod
    def send(
        offer_id,
        buyer_ids: Iterable,
        principal: Principal,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> SendResult:
        """
        Append a new proposal to the thread of every targeted buyer.

        All buyers are validated before anything is written and the whole
        batch commits or rolls back together. Threads closed by the owner
        are skipped.
        """
        start_time = timezone.now()
        requested = _normalize_buyer_ids(buyer_ids)
        changes = _clean_overrides(overrides)

        try:
            with transaction.atomic():
                offer = _load_available_offer(offer_id)
                buyers = list(
                    Buyer.objects.select_related("owner").filter(id__in=requested)
                )
                enforce(
                    principal,
                    Action.SEND,
                    Target(
                        offer=offer,
                        buyers=buyers,
                        requested_buyer_ids=frozenset(requested),
                    ),
                )
                buyers_by_id = {b.id: b for b in buyers}
                from_party = principal.label

                outcomes: List[ThreadOutcome] = []
                proposal_ids: List[int] = []
                for buyer_id in requested:
                    buyer = buyers_by_id[buyer_id]
                    thread, created = NegotiationService._get_or_create_thread(
                        offer, buyer
                    )
                    if thread.is_closed:
                        audit_logger.info(
                            f"Skipping closed thread {thread.id} for buyer {buyer.id}"
                        )
                        continue

                    prior = latest_proposal(thread)
                    version_no = (prior.version_no if prior else 0) + 1
                    terms = prior.terms_snapshot() if prior else offer.terms_snapshot()
                    terms.update(changes)

                    if principal.is_owner:
                        to_party = _buyer_label(buyer)
                    else:
                        to_party = _owner_label(buyer.owner)

                    proposal = Proposal.objects.create(
                        thread=thread,
                        version_no=version_no,
                        from_party=from_party,
                        to_party=to_party,
                        sender_role=principal.role.value,
                        offer_name=offer.offer_name,
                        **terms,
                    )

                    if not created and prior and prior.sender_role != principal.role.value:
                        thread.status = ThreadStatus.COUNTERED
                    # touch updated_at so recent listings reflect the activity
                    thread.save(update_fields=["status", "updated_at"])
                    proposal_ids.append(proposal.id)

                    outcomes.append(
                        ThreadOutcome(
                            thread_id=thread.id,
                            buyer_id=buyer.id,
                            version_no=version_no,
                            status=thread.status,
                            to_party=to_party,
                        )
                    )

                if _negotiation_settings().get("NOTIFY_ON_PROPOSAL", True):
                    for proposal_id in proposal_ids:
                        _enqueue_after_commit(send_proposal_notification, proposal_id)
        except IntegrityError as exc:
            audit_logger.warning(
                f"Concurrent send on offer {offer_id} for buyers {requested}: {exc}"
            )
            raise ConcurrentNegotiationUpdate() from exc

        labels = sorted({o.to_party for o in outcomes})
        result = SendResult(
            offer_id=offer.id,
            from_party=from_party,
            to_party=", ".join(labels),
            threads_affected=outcomes,
        )

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(
            f"Offer {offer.id} sent to {len(outcomes)} thread(s) by "
            f"{principal.role.value} {principal.id} in {duration:.2f}ms"
        )
        return result

    @staticmethod
    def respond(offer_id, buyer_id, principal: Principal, outcome: str) -> Decision:
        """
        Record an accept or reject against the thread's latest proposal.
        Never writes to Thread or Proposal rows.
        """
        start_time = timezone.now()
        try:
            outcome = DecisionOutcome(outcome)
        except ValueError:
            raise ValidationError({"action": "action must be 'accept' or 'reject'"})

        try:
            with transaction.atomic():
                offer = _load_available_offer(offer_id)
                buyer = (
                    Buyer.objects.select_related("owner", "owner__user")
                    .filter(pk=buyer_id)
                    .first()
                )
                if buyer is None:
                    raise BuyerNotFound(f"Buyer {buyer_id} not found.")

                enforce(principal, Action.RESPOND, Target(offer=offer, buyer=buyer))

                thread = (
                    Thread.objects.select_for_update()
                    .filter(offer=offer, buyer=buyer)
                    .first()
                )
                if thread is None:
                    raise ThreadNotFound(
                        f"No offer has been sent to buyer {buyer.buyers_company_name} yet."
                    )
                if thread.is_closed:
                    raise ThreadClosed(
                        f"Negotiation with buyer {buyer.buyers_company_name} is closed."
                    )

                decision = DecisionRecorder.record(thread, offer, buyer, principal, outcome)

                if _negotiation_settings().get("NOTIFY_ON_DECISION", True):
                    _enqueue_after_commit(send_decision_notification, decision.id)
        except IntegrityError as exc:
            audit_logger.warning(
                f"Concurrent respond on offer {offer_id} buyer {buyer_id}: {exc}"
            )
            raise ConcurrentNegotiationUpdate() from exc

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(
            f"Decision {outcome.value} on offer {offer_id} buyer {buyer_id} "
            f"recorded in {duration:.2f}ms"
        )
        return decision

    @staticmethod
    def negotiation_history(
        offer_id, buyer_id, principal: Principal, up_to_version: Optional[int] = None
    ) -> NegotiationHistory:
        """Thread, proposals and decisions for one (offer, buyer) pair."""
        start_time = timezone.now()

        offer = Offer.all_objects.filter(pk=offer_id).first()
        if offer is None:
            raise NotFound("Offer not found")
        buyer = Buyer.objects.select_related("owner").filter(pk=buyer_id).first()
        if buyer is None:
            raise BuyerNotFound(f"Buyer {buyer_id} not found.")

        enforce(principal, Action.VIEW, Target(offer=offer, buyer=buyer))

        thread = (
            Thread.objects.select_related("offer", "buyer", "business_owner")
            .filter(offer=offer, buyer=buyer)
            .first()
        )
        if thread is None:
            raise ThreadNotFound()

        proposals = list(proposal_history(thread, up_to_version))
        decisions = decision_history(thread)
        if up_to_version is not None:
            decisions = decisions.filter(proposal__version_no__lte=up_to_version)
        decisions = list(decisions)

        last_proposal = latest_proposal(thread)
        status = derive_thread_status(
            thread,
            last_proposal=last_proposal,
            last_decision=latest_decision(offer.id, buyer.id),
        )

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"Negotiation history for thread {thread.id} built in {duration:.2f}ms")
        return NegotiationHistory(
            thread=thread, proposals=proposals, decisions=decisions, status=status
        )

    @staticmethod
    def recent_negotiations(principal: Principal, status: Optional[str] = None, offer_id=None):
        return threads_for_principal(principal, status=status, offer_id=offer_id)

    @staticmethod
    def close_thread(offer_id, buyer_id, principal: Principal) -> Thread:
        """Owner ends negotiation with one buyer. Later sends skip the thread."""
        with transaction.atomic():
            offer = _load_available_offer(offer_id)
            enforce(principal, Action.CLOSE_THREAD, Target(offer=offer))

            thread = (
                Thread.objects.select_for_update()
                .filter(offer=offer, buyer_id=buyer_id)
                .first()
            )
            if thread is None:
                raise ThreadNotFound()
            if thread.is_closed:
                raise ThreadClosed("Negotiation with this buyer is already closed.")

            thread.status = ThreadStatus.CLOSE
            thread.save(update_fields=["status", "updated_at"])

        audit_logger.info(f"Thread {thread.id} closed by {principal.id}")
        return thread


class DecisionRecorder:
    """Writes Decision rows and enforces the duplicate-verdict rule."""

    @staticmethod
    def actor_description(principal: Principal, buyer: Buyer) -> str:
        if principal.is_buyer:
            return (
                f"{buyer.contact_name} / {buyer.buyers_company_name} / {Role.BUYER.value}"
            )
        owner = principal.profile
        return (
            f"{owner.owner_name} / {owner.business_name} / "
            f"{Role.BUSINESS_OWNER.value}"
        )

    @staticmethod
    def is_duplicate(
        prior: Optional[Decision],
        proposal: Proposal,
        principal: Principal,
        outcome: DecisionOutcome,
    ) -> bool:
        """Same verdict, same actor, and no new proposal since."""
        return (
            prior is not None
            and prior.outcome == outcome
            and prior.actor_role == principal.role.value
            and prior.actor_id == principal.id
            and prior.proposal_id == proposal.id
        )

    @staticmethod
    def record(
        thread: Thread,
        offer: Offer,
        buyer: Buyer,
        principal: Principal,
        outcome: DecisionOutcome,
    ) -> Decision:
        proposal = latest_proposal(thread)
        if proposal is None:
            raise ThreadNotFound("No proposal has been sent on this negotiation yet.")

        prior = latest_decision(offer.id, buyer.id)
        if DecisionRecorder.is_duplicate(prior, proposal, principal, outcome):
            verb = "accepted" if outcome == DecisionOutcome.ACCEPT else "rejected"
            raise DuplicateDecision(
                f"You have already {verb} version {proposal.version_no} of this offer."
            )

        actor = DecisionRecorder.actor_description(principal, buyer)
        owner = buyer.owner
        accepted = outcome == DecisionOutcome.ACCEPT

        decision = Decision.objects.create(
            proposal=proposal,
            thread=thread,
            offer=offer,
            business_owner=owner,
            buyer=buyer,
            is_accepted=accepted,
            is_rejected=not accepted,
            accepted_by=actor if accepted else "",
            rejected_by="" if accepted else actor,
            actor_role=principal.role.value,
            actor_id=principal.id,
            owner_name=owner.owner_name,
            owner_company_name=owner.business_name,
            buyer_name=buyer.contact_name,
            buyer_company_name=buyer.buyers_company_name,
            offer_name=offer.offer_name,
        )
        audit_logger.info(
            f"Decision {decision.id}: {outcome.value} of v{proposal.version_no} "
            f"on thread {thread.id} by {actor}"
        )
        return decision
