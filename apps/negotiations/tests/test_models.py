import pytest
from django.db import IntegrityError, transaction

from apps.negotiations.models import Decision, ImmutableRecordError, Proposal, Thread
from apps.negotiations.services import NegotiationService


@pytest.fixture
def thread(offer, owner_principal, buyer_one):
    NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
    return Thread.objects.get(offer=offer, buyer=buyer_one)


@pytest.mark.django_db
class TestLedgerIntegrity:
    def test_proposal_cannot_be_modified(self, thread):
        proposal = thread.proposals.get()
        proposal.remark = "edited"
        with pytest.raises(ImmutableRecordError):
            proposal.save()

    def test_proposal_cannot_be_deleted(self, thread):
        with pytest.raises(ImmutableRecordError):
            thread.proposals.get().delete()

    def test_version_collision_is_rejected(self, thread, offer):
        with pytest.raises(IntegrityError), transaction.atomic():
            Proposal.objects.create(
                thread=thread,
                version_no=1,
                from_party="x / business_owner",
                to_party="y / buyer",
                sender_role="business_owner",
                offer_name=offer.offer_name,
                **offer.terms_snapshot(),
            )

    def test_one_thread_per_offer_and_buyer(self, thread):
        with pytest.raises(IntegrityError), transaction.atomic():
            Thread.objects.create(
                offer=thread.offer,
                buyer=thread.buyer,
                business_owner=thread.business_owner,
            )

    def test_decision_is_accept_xor_reject(self, thread, buyer_one):
        with pytest.raises(IntegrityError), transaction.atomic():
            Decision.objects.create(
                proposal=thread.proposals.get(),
                thread=thread,
                offer=thread.offer,
                business_owner=thread.business_owner,
                buyer=buyer_one,
                is_accepted=True,
                is_rejected=True,
                actor_role="buyer",
                actor_id=buyer_one.id,
                offer_name=thread.offer.offer_name,
            )

    def test_decision_is_insert_only(self, thread, offer, buyer_one, buyer_one_principal):
        decision = NegotiationService.respond(offer.id, buyer_one.id, buyer_one_principal, "accept")
        decision.accepted_by = "someone else"
        with pytest.raises(ImmutableRecordError):
            decision.save()
        with pytest.raises(ImmutableRecordError):
            decision.delete()
